"""Tests for BatchRun state transitions and publication."""
import unittest

from core.exceptions import BatchAlreadyStartedError
from pipeline.batch_run import BatchRun
from pipeline.models import AgentState, AgentStatus, BatchState, ItemStatus
from tests.mocks.pipeline_mocks import make_documents, make_result

NAMES = ["Agent Alpha", "Agent Beta"]


class TestAgentStateProgress(unittest.TestCase):

    def test_progress_is_derived_from_counts(self):
        agent = AgentState(index=0, name="Agent Alpha", status=AgentStatus.WORKING,
                           total_assigned=4, processed_count=1)
        self.assertEqual(agent.progress, 25.0)

        agent.processed_count = 4
        self.assertEqual(agent.progress, 100.0)

    def test_progress_zero_when_nothing_assigned_and_idle(self):
        agent = AgentState(index=0, name="Agent Alpha")
        self.assertEqual(agent.progress, 0.0)

    def test_progress_full_when_empty_slot_completed(self):
        agent = AgentState(index=0, name="Agent Alpha", status=AgentStatus.COMPLETED)
        self.assertEqual(agent.progress, 100.0)

    def test_to_dict_includes_progress(self):
        agent = AgentState(index=1, name="Agent Beta", total_assigned=2, processed_count=1)
        data = agent.to_dict()
        self.assertEqual(data["progress"], 50.0)
        self.assertEqual(data["status"], "idle")


class TestBatchRun(unittest.TestCase):

    def setUp(self):
        self.batch = BatchRun(NAMES)

    def test_prepare_creates_pending_items(self):
        documents = make_documents(3)
        items = self.batch.prepare(documents, NAMES)

        self.assertEqual(self.batch.state, BatchState.RUNNING)
        self.assertEqual([i.id for i in items], [d.id for d in documents])
        self.assertTrue(all(i.status == ItemStatus.PENDING for i in items))

    def test_prepare_twice_raises(self):
        self.batch.prepare(make_documents(1), NAMES)
        with self.assertRaises(BatchAlreadyStartedError):
            self.batch.prepare(make_documents(1), NAMES)

    def test_item_lifecycle(self):
        item = self.batch.prepare(make_documents(1), NAMES)[0]
        self.batch.start_agent(0, 1)

        self.batch.begin_item(0, item)
        self.assertEqual(item.status, ItemStatus.PROCESSING)
        self.assertEqual(self.batch.agent(0).current_item_name, item.name)

        self.batch.record_result(0, item, make_result(match_status=True))
        self.assertEqual(item.status, ItemStatus.COMPLETED)
        self.assertEqual(self.batch.agent(0).processed_count, 1)
        self.assertEqual(self.batch.agent(0).success_count, 1)

        self.batch.finish_agent(0)
        self.assertEqual(self.batch.agent(0).status, AgentStatus.COMPLETED)
        self.assertIsNone(self.batch.agent(0).current_item_name)

    def test_error_result_is_not_a_success(self):
        item = self.batch.prepare(make_documents(1), NAMES)[0]
        self.batch.start_agent(0, 1)
        self.batch.begin_item(0, item)

        self.batch.record_result(0, item, make_result(match_status=True, is_error=True))

        self.assertEqual(self.batch.agent(0).success_count, 0)

    def test_processed_never_exceeds_assigned(self):
        item = self.batch.prepare(make_documents(1), NAMES)[0]
        self.batch.start_agent(0, 1)
        self.batch.record_result(0, item, make_result())
        self.batch.record_result(0, item, make_result())

        self.assertEqual(self.batch.agent(0).processed_count, 1)

    def test_agents_are_independent(self):
        items = self.batch.prepare(make_documents(2), NAMES)
        self.batch.start_agent(0, 1)
        self.batch.start_agent(1, 1)
        self.batch.record_result(1, items[1], make_result())

        self.assertEqual(self.batch.agent(0).processed_count, 0)
        self.assertEqual(self.batch.agent(1).processed_count, 1)

    def test_reset_while_running_raises(self):
        self.batch.prepare(make_documents(1), NAMES)
        with self.assertRaises(BatchAlreadyStartedError):
            self.batch.reset()

    def test_reset_after_finish(self):
        self.batch.prepare(make_documents(2), NAMES)
        self.batch.finish()

        self.batch.reset(["Solo"])

        self.assertEqual(self.batch.state, BatchState.IDLE)
        self.assertEqual(self.batch.items, [])
        snapshot = self.batch.snapshot()
        self.assertEqual([a.name for a in snapshot.agents], ["Solo"])
        self.assertEqual(snapshot.agents[0].status, AgentStatus.IDLE)

    def test_snapshot_is_detached(self):
        item = self.batch.prepare(make_documents(1), NAMES)[0]
        snapshot = self.batch.snapshot()

        self.batch.start_agent(0, 1)
        self.batch.begin_item(0, item)

        self.assertEqual(snapshot.items[0].status, ItemStatus.PENDING)
        self.assertEqual(snapshot.agents[0].status, AgentStatus.IDLE)

    def test_snapshot_results_are_copies(self):
        item = self.batch.prepare(make_documents(1), NAMES)[0]
        self.batch.start_agent(0, 1)
        self.batch.begin_item(0, item)
        self.batch.record_result(0, item, make_result(reason="Has Python."))

        snapshot = self.batch.snapshot()
        snapshot.items[0].result.reason = "edited by observer"
        snapshot.items[0].result.mandatory_skills_found.append("cobol")

        self.assertEqual(self.batch.items[0].result.reason, "Has Python.")
        self.assertEqual(self.batch.items[0].result.mandatory_skills_found, ["python"])
        self.assertIs(snapshot.items[0].document, self.batch.items[0].document)

    def test_publish_reaches_subscribers_until_unsubscribed(self):
        queue = self.batch.subscribe()
        self.batch.prepare(make_documents(1), NAMES)
        self.assertEqual(queue.qsize(), 1)

        self.batch.unsubscribe(queue)
        self.batch.start_agent(0, 1)
        self.assertEqual(queue.qsize(), 1)

    def test_full_subscriber_queue_drops_snapshots(self):
        queue = self.batch.subscribe(maxsize=1)
        self.batch.prepare(make_documents(1), NAMES)
        self.batch.start_agent(0, 1)

        self.assertEqual(queue.qsize(), 1)
        self.assertEqual(queue.get_nowait().state, BatchState.RUNNING)


if __name__ == '__main__':
    unittest.main()
