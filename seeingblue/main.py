"""Main entry point for the SeeingBlue simulation."""

import argparse
import sys
from pathlib import Path

from seeingblue.core.observer import SnapshotRecorder
from seeingblue.core.simulator import SeeingBlueSimulator
from seeingblue.core.snapshot import SimulationSnapshot
from seeingblue.utils.io import save_json, save_yaml
from seeingblue.utils.logger import setup_logger, set_global_level
from configs import build_config


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="SeeingBlue: staged simulation of the IIT 'seeing blue' experiment"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file merged over the default configuration",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Wait out each delay on the wall clock",
    )
    parser.add_argument(
        "--time-scale",
        type=float,
        default=None,
        help="Wall-clock seconds per simulated second in realtime mode",
    )
    parser.add_argument(
        "--reset-at",
        type=float,
        default=None,
        help="Reset the simulation at this simulated time (virtual time only)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory to save the timeline and summary",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    if args.reset_at is not None and args.realtime:
        parser.error("--reset-at cannot be combined with --realtime")
    if args.reset_at is not None and args.reset_at < 0:
        parser.error("--reset-at must not be negative")
    if args.time_scale is not None and args.time_scale <= 0:
        parser.error("--time-scale must be positive")

    return args


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    log_level = "DEBUG" if args.verbose else "INFO"
    logger = setup_logger("SeeingBlue", level=log_level)

    logger.info("=== SeeingBlue: Information Integration demo ===")

    try:
        config = build_config(args.config)
        simulation = config.setdefault('simulation', {})
        if args.realtime:
            simulation['realtime'] = True
        if args.time_scale is not None:
            simulation['time_scale'] = args.time_scale

        simulator = SeeingBlueSimulator(config)
        if args.verbose:
            set_global_level(log_level)

        recorder = SnapshotRecorder()
        simulator.subscribe(recorder)

        def log_snapshot(snapshot: SimulationSnapshot) -> None:
            active = ", ".join(snapshot.active_process_ids() + snapshot.active_element_ids())
            logger.info(f"[{snapshot.sequence:02d}] t={snapshot.time:.2f}s "
                        f"{snapshot.status:<9} active: {active or '-'}")

        simulator.subscribe(log_snapshot)

        logger.info("Presenting blue light...")
        simulator.start()

        if args.reset_at is not None:
            simulator.advance(args.reset_at)
            logger.info(f"Resetting at t={simulator.current_time:.2f}s")
            simulator.reset()

        simulator.run()

        summary = simulator.summary()

        logger.info("\n=== Simulation Results ===")
        logger.info(f"Status: {summary['status']}")
        logger.info(f"Active processes: {', '.join(summary['active_processes'])}")
        logger.info(f"Active elements: {', '.join(summary['active_elements']) or '-'}")
        logger.info(f"Integrated Information (Φ): {summary['integration_score']:.2f} bits")
        logger.info(f"Resulting experience: {summary['resulting_experience']}")

        if args.output_dir:
            output_dir = Path(args.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

            save_json(recorder.timeline(), str(output_dir / "timeline.json"))
            recorder.to_dataframe().to_csv(output_dir / "timeline.csv", index=False)
            save_yaml(summary, str(output_dir / "summary.yaml"))
            logger.info(f"Results saved to {output_dir}")

        return 0

    except Exception as e:
        logger.error(f"Simulation failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
