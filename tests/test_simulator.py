"""Tests for the simulation controller."""

import dataclasses
import json
import unittest

from seeingblue.core.observer import SnapshotRecorder, StateObserver
from seeingblue.core.simulator import IDLE_EXPERIENCE, SeeingBlueSimulator, SimulationStatus
from seeingblue.models.main_complex import NOTHINGNESS_EXPERIENCE
from configs import load_default_config

BLUE_EXPERIENCE = (
    "A unified experience of 'Blue'. This specific quality is defined by its "
    "differentiation from the 4 other potential states within the complex "
    "(e.g., 'red', 'sound', etc.), creating a unique point in qualia space."
)

INSULATED = ["retina", "afferent_pathways", "motor_pathways", "subcortical_loops"]
ELEMENTS = ["blue", "red", "shape", "sound", "thought"]


class TestSimulator(unittest.TestCase):
    """Test cases for SeeingBlueSimulator."""

    def setUp(self):
        """Set up test fixtures."""
        self.simulator = SeeingBlueSimulator()
        self.recorder = SnapshotRecorder()
        self.simulator.subscribe(self.recorder)

    def assert_initial_state(self, snapshot):
        for process_id in INSULATED + ELEMENTS:
            self.assertFalse(snapshot.is_active(process_id), process_id)
        self.assertTrue(snapshot.is_active("cerebellum"))
        self.assertEqual(snapshot.resulting_experience, IDLE_EXPERIENCE)

    def test_simulator_initialization(self):
        """Test simulator starts idle with default entities."""
        snapshot = self.simulator.snapshot()

        self.assertEqual(self.simulator.status, SimulationStatus.IDLE)
        self.assertFalse(self.simulator.is_running)
        self.assert_initial_state(snapshot)
        self.assertEqual(snapshot.main_complex.integration_score, 5.0)
        self.assertEqual(snapshot.main_complex.experience_description, NOTHINGNESS_EXPERIENCE)
        self.assertEqual(len(self.recorder), 0)

    def test_full_run(self):
        """Test final state after the whole schedule elapses."""
        self.simulator.start()
        self.assertTrue(self.simulator.is_running)

        self.simulator.advance(2.0)
        snapshot = self.simulator.snapshot()

        for process_id in INSULATED + ["cerebellum", "blue"]:
            self.assertTrue(snapshot.is_active(process_id), process_id)
        for element_id in ELEMENTS[1:]:
            self.assertFalse(snapshot.is_active(element_id), element_id)
        self.assertEqual(snapshot.resulting_experience, BLUE_EXPERIENCE)
        self.assertEqual(self.simulator.status, SimulationStatus.COMPLETED)
        self.assertFalse(self.simulator.is_running)

    def test_stage_timing(self):
        """Test each stage activates at its delay."""
        self.simulator.start()

        self.simulator.advance(0.4)
        self.assertFalse(self.simulator.snapshot().is_active("retina"))

        self.simulator.advance(0.1)
        snapshot = self.simulator.snapshot()
        self.assertTrue(snapshot.is_active("retina"))
        self.assertFalse(snapshot.is_active("afferent_pathways"))

        self.simulator.advance(0.5)
        self.assertTrue(self.simulator.snapshot().is_active("afferent_pathways"))
        self.assertEqual(self.simulator.snapshot().resulting_experience, IDLE_EXPERIENCE)

        self.simulator.advance(0.5)
        snapshot = self.simulator.snapshot()
        self.assertTrue(snapshot.is_active("blue"))
        self.assertEqual(snapshot.resulting_experience, BLUE_EXPERIENCE)
        self.assertFalse(snapshot.is_active("motor_pathways"))

        self.simulator.advance(0.5)
        snapshot = self.simulator.snapshot()
        self.assertTrue(snapshot.is_active("motor_pathways"))
        self.assertTrue(snapshot.is_active("subcortical_loops"))

    def test_fixed_tick_stepping(self):
        """Test a host stepping in 0.1s ticks sees each stage on its tick."""
        self.simulator.start()

        for _ in range(10):
            self.simulator.advance(0.1)
        snapshot = self.simulator.snapshot()
        self.assertTrue(snapshot.is_active("afferent_pathways"))
        self.assertFalse(snapshot.is_active("blue"))

        for _ in range(5):
            self.simulator.advance(0.1)
        snapshot = self.simulator.snapshot()
        self.assertTrue(snapshot.is_active("blue"))
        self.assertEqual(snapshot.resulting_experience, BLUE_EXPERIENCE)

        for _ in range(5):
            self.simulator.advance(0.1)
        self.assertTrue(self.simulator.snapshot().is_active("motor_pathways"))
        self.assertEqual(self.simulator.status, SimulationStatus.COMPLETED)

    def test_experience_not_recomputed_after_output_stage(self):
        """Test the experience is the one specified at the complex stage."""
        self.simulator.start()
        self.simulator.run_until_idle()

        at_complex_stage = [s for s in self.recorder.snapshots if s.is_active("blue")][0]
        self.assertAlmostEqual(at_complex_stage.time, 1.5)
        self.assertEqual(self.recorder.latest.resulting_experience, at_complex_stage.resulting_experience)

    def test_publication_sequence(self):
        """Test one snapshot per change, in order."""
        self.simulator.start()
        self.simulator.run_until_idle()

        snapshots = self.recorder.snapshots
        self.assertEqual([s.sequence for s in snapshots], list(range(1, 8)))
        self.assertEqual(
            [s.status for s in snapshots],
            ["idle", "running", "running", "running", "running", "running", "completed"],
        )
        self.assertEqual([s.time for s in snapshots][2:6], [0.5, 1.0, 1.5, 2.0])
        self.assertEqual(self.simulator.publish_count, 7)

    def test_reset_mid_schedule(self):
        """Test reset cancels pending steps and restores defaults."""
        self.simulator.start()
        self.simulator.advance(1.6)
        self.assertTrue(self.simulator.snapshot().is_active("blue"))

        self.simulator.reset()
        self.assert_initial_state(self.simulator.snapshot())
        self.assertFalse(self.simulator.is_running)

        self.assertEqual(self.simulator.advance(5.0), 0)
        self.assert_initial_state(self.simulator.snapshot())
        self.assertEqual(self.simulator.status, SimulationStatus.IDLE)

    def test_reset_after_completion(self):
        """Test reset after the schedule has finished."""
        self.simulator.start()
        self.simulator.run_until_idle()
        self.simulator.reset()

        self.assert_initial_state(self.simulator.snapshot())
        self.assertEqual(self.simulator.status, SimulationStatus.IDLE)

    def test_reset_is_idempotent(self):
        """Test resetting twice matches resetting once."""
        self.simulator.start()
        self.simulator.advance(1.0)

        self.simulator.reset()
        once = self.simulator.snapshot()
        self.simulator.reset()
        twice = self.simulator.snapshot()

        self.assertEqual(once.state_key(), twice.state_key())

    def test_double_start(self):
        """Test a second start replaces the first run cleanly."""
        clean = SeeingBlueSimulator()
        clean.start()
        clean.run_until_idle()

        self.simulator.start()
        self.simulator.advance(0.7)
        self.simulator.start()

        # The first run's afferent step (t=1.0) must not fire
        self.simulator.advance(0.4)
        snapshot = self.simulator.snapshot()
        self.assertFalse(snapshot.is_active("afferent_pathways"))
        self.assertFalse(snapshot.is_active("retina"))

        self.simulator.run_until_idle()
        self.assertEqual(self.simulator.snapshot().state_key(), clean.snapshot().state_key())
        self.assertEqual(self.simulator.runs_started, 2)
        self.assertEqual(self.simulator.runs_completed, 1)
        self.assertEqual(self.simulator.scheduler.fired_count, 5)

    def test_start_from_observer(self):
        """Test an observer restarting mid-run keeps delivery ordered."""
        restarted = []

        def restart_on_retina(snapshot):
            if snapshot.is_active("retina") and not restarted:
                restarted.append(snapshot.sequence)
                self.simulator.start()

        self.simulator.subscribe(restart_on_retina)
        self.simulator.start()
        self.simulator.run_until_idle()

        sequences = [s.sequence for s in self.recorder.snapshots]
        self.assertEqual(sequences, sorted(sequences))
        self.assertEqual(len(sequences), len(set(sequences)))
        self.assertEqual(len(restarted), 1)

        clean = SeeingBlueSimulator()
        clean.start()
        clean.run_until_idle()
        self.assertEqual(self.simulator.snapshot().state_key(), clean.snapshot().state_key())
        self.assertAlmostEqual(self.simulator.current_time, 2.5)

    def test_unsubscribe(self):
        """Test unsubscribed observers receive nothing more."""
        received = []
        unsubscribe = self.simulator.subscribe(received.append)

        self.simulator.reset()
        unsubscribe()
        self.simulator.reset()

        self.assertEqual(len(received), 1)
        self.assertEqual(len(self.recorder), 2)
        self.assertFalse(self.simulator.unsubscribe(received.append))

    def test_failing_observer_does_not_drop_snapshots(self):
        """Test later observers still get a snapshot an earlier one failed on."""
        received = []

        def failing(snapshot):
            if snapshot.sequence == 1:
                raise RuntimeError("observer failed")

        self.simulator.subscribe(failing)
        self.simulator.subscribe(received.append)

        with self.assertLogs("seeingblue.SeeingBlueSimulator", level="ERROR"):
            with self.assertRaises(RuntimeError):
                self.simulator.reset()
        self.simulator.reset()

        self.assertEqual([s.sequence for s in received], [1, 2])
        self.assertEqual([s.sequence for s in self.recorder.snapshots], [1, 2])

    def test_entities_are_not_exposed(self):
        """Test live records are reachable only through snapshots."""
        self.assertFalse(hasattr(self.simulator, "processes"))
        self.assertFalse(hasattr(self.simulator, "main_complex"))
        self.assertIsInstance(self.simulator.snapshot().processes, tuple)

    def test_subscribe_rejects_non_observer(self):
        """Test subscribe validates its argument."""
        with self.assertRaises(TypeError):
            self.simulator.subscribe(42)

    def test_recorder_is_state_observer(self):
        """Test the recorder satisfies the observer protocol."""
        self.assertIsInstance(self.recorder, StateObserver)

    def test_snapshots_are_read_only(self):
        """Test snapshots are frozen and detached from live state."""
        self.simulator.start()
        before = self.simulator.snapshot()

        with self.assertRaises(dataclasses.FrozenInstanceError):
            before.resulting_experience = "tampered"

        self.simulator.run_until_idle()
        self.assertFalse(before.is_active("blue"))
        self.assertIsInstance(before.main_complex.elements, tuple)

    def test_snapshot_serialization(self):
        """Test snapshots convert to dictionaries and JSON."""
        self.simulator.start()
        self.simulator.run_until_idle()
        snapshot = self.simulator.snapshot()

        data = snapshot.to_dict()
        self.assertEqual(data['status'], 'completed')
        self.assertEqual(data['processes'][0]['id'], 'retina')
        self.assertEqual(data['main_complex']['elements'][0]['role'], 'complex_element')

        decoded = json.loads(snapshot.to_json())
        self.assertEqual(decoded['resulting_experience'], BLUE_EXPERIENCE)

    def test_recorder_dataframe(self):
        """Test the recorded timeline as a table."""
        self.simulator.start()
        self.simulator.run_until_idle()

        df = self.recorder.to_dataframe()

        self.assertEqual(len(df), 7)
        self.assertEqual(list(df['sequence']), list(range(1, 8)))
        self.assertFalse(df['blue'].iloc[3])
        self.assertTrue(df['blue'].iloc[4])
        self.assertTrue(df['cerebellum'].all())
        self.assertEqual(len(self.recorder.timeline()), 7)

        self.recorder.clear()
        self.assertIsNone(self.recorder.latest)

    def test_summary(self):
        """Test the run summary."""
        self.simulator.start()
        self.simulator.run_until_idle()

        summary = self.simulator.summary()

        self.assertEqual(summary['status'], 'completed')
        self.assertEqual(summary['active_elements'], ['blue'])
        self.assertEqual(
            summary['active_processes'],
            ["retina", "afferent_pathways", "motor_pathways", "subcortical_loops", "cerebellum"],
        )
        self.assertEqual(summary['integration_score'], 5.0)
        self.assertEqual(summary['snapshots_published'], 7)


class TestSimulatorConfiguration(unittest.TestCase):
    """Test cases for configured simulators."""

    def test_default_config_matches_builtin_defaults(self):
        """Test the bundled YAML describes the built-in repertoire."""
        configured = SeeingBlueSimulator(load_default_config())
        builtin = SeeingBlueSimulator()

        for simulator in (configured, builtin):
            simulator.start()
            simulator.run_until_idle()

        self.assertEqual(configured.snapshot().to_dict(), builtin.snapshot().to_dict())

    def test_custom_schedule(self):
        """Test stage delays come from config."""
        simulator = SeeingBlueSimulator({'schedule': {'main_complex': 3.0, 'output': 4.0}})
        simulator.start()

        simulator.advance(2.0)
        self.assertFalse(simulator.snapshot().is_active("blue"))
        simulator.advance(1.0)
        self.assertTrue(simulator.snapshot().is_active("blue"))
        simulator.run_until_idle()
        self.assertAlmostEqual(simulator.current_time, 4.0)

    def test_empty_config_sections_use_defaults(self):
        """Test sections left empty in YAML fall back to the defaults."""
        simulator = SeeingBlueSimulator({'schedule': None, 'simulation': None, 'logging': None})
        simulator.start()
        simulator.run_until_idle()

        self.assertEqual(simulator.status, SimulationStatus.COMPLETED)
        self.assertAlmostEqual(simulator.current_time, 2.0)
        self.assertFalse(simulator.realtime)

    def test_missing_element_is_skipped(self):
        """Test a repertoire without blue still completes its schedule."""
        simulator = SeeingBlueSimulator({
            'complex': {'elements': [{'id': 'red', 'name': 'Red Neurons'}]},
        })
        simulator.start()

        with self.assertLogs('seeingblue.SeeingBlueSimulator', level='WARNING'):
            simulator.run_until_idle()

        snapshot = simulator.snapshot()
        self.assertEqual(simulator.status, SimulationStatus.COMPLETED)
        self.assertEqual(snapshot.resulting_experience, IDLE_EXPERIENCE)
        self.assertTrue(snapshot.is_active("motor_pathways"))
        self.assertEqual(snapshot.main_complex.integration_score, 0.0)
        self.assertEqual(simulator.skipped_steps, 1)

    def test_missing_process_is_skipped(self):
        """Test a missing insulated process does not stop its step."""
        simulator = SeeingBlueSimulator({
            'processes': [
                {'id': 'retina', 'name': 'Retina'},
                {'id': 'motor_pathways', 'name': 'Motor Pathways'},
            ],
        })
        simulator.start()
        simulator.run_until_idle()

        snapshot = simulator.snapshot()
        self.assertTrue(snapshot.is_active("retina"))
        self.assertTrue(snapshot.is_active("motor_pathways"))
        self.assertTrue(snapshot.is_active("blue"))
        self.assertEqual(simulator.skipped_steps, 2)


if __name__ == '__main__':
    unittest.main()
