"""Basic simulation example."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from seeingblue.core.observer import SnapshotRecorder
from seeingblue.core.simulator import SeeingBlueSimulator
from seeingblue.utils.logger import setup_logger
from configs import load_default_config


def main():
    """Run the blue light sequence, then interrupt a second run halfway."""
    logger = setup_logger("BasicSimulation")

    logger.info("=== Seeing Blue ===")

    config = load_default_config()
    simulator = SeeingBlueSimulator(config)

    recorder = SnapshotRecorder()
    simulator.subscribe(recorder)

    # Full run on virtual time
    simulator.start()
    simulator.run_until_idle()

    final = simulator.snapshot()
    logger.info(f"Active processes: {', '.join(final.active_process_ids())}")
    logger.info(f"Active elements: {', '.join(final.active_element_ids())}")
    logger.info(f"Integrated Information (Φ): {final.main_complex.integration_score:.2f} bits")
    logger.info(f"Experience: {final.resulting_experience}")

    # Second run, reset before the signal reaches the main complex
    simulator.start()
    simulator.advance(1.2)
    simulator.reset()
    simulator.run_until_idle()
    logger.info(f"After reset: {simulator.snapshot().resulting_experience}")

    logger.info("\n=== Timeline ===")
    print(recorder.to_dataframe()[['sequence', 'time', 'status', 'retina', 'blue', 'motor_pathways']])


if __name__ == "__main__":
    main()
