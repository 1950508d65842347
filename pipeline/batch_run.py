#!/usr/bin/env python3
"""
Batch run - the aggregate state of one screening batch.

Each agent writes only its own AgentState slot and the work items of its own
partition. Every mutation below completes without awaiting and then publishes,
so observers never see a half-updated agent.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from core.exceptions import BatchAlreadyStartedError
from core.llm.schema_models import AnalysisResult
from pipeline.models import (
    AgentState,
    AgentStatus,
    BatchSnapshot,
    BatchState,
    Document,
    ItemStatus,
    WorkItem,
)

logger = logging.getLogger(__name__)


class BatchRun:
    """Owns every AgentState and WorkItem for one batch and publishes snapshots."""

    def __init__(self, agent_names: Sequence[str]):
        self.state = BatchState.IDLE
        self._agents = self._fresh_agents(agent_names)
        self._items: List[WorkItem] = []
        self._subscribers: List[asyncio.Queue] = []

    @staticmethod
    def _fresh_agents(agent_names: Sequence[str]) -> List[AgentState]:
        return [AgentState(index=i, name=name) for i, name in enumerate(agent_names)]

    @property
    def items(self) -> List[WorkItem]:
        return list(self._items)

    def agent(self, index: int) -> AgentState:
        return self._agents[index]

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def snapshot(self) -> BatchSnapshot:
        return BatchSnapshot.capture(self.state, self._agents, self._items)

    def subscribe(self, maxsize: int = 0) -> asyncio.Queue:
        """
        Subscribe to snapshots published at every state change.

        Returns:
            asyncio.Queue receiving BatchSnapshot objects.
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def publish(self) -> None:
        if not self._subscribers:
            return
        snapshot = self.snapshot()
        for queue in self._subscribers:
            try:
                queue.put_nowait(snapshot)
            except asyncio.QueueFull:
                logger.debug("Subscriber queue full, dropping snapshot")

    # ------------------------------------------------------------------
    # Batch lifecycle
    # ------------------------------------------------------------------

    def prepare(self, documents: Sequence[Document], agent_names: Sequence[str]) -> List[WorkItem]:
        """Load documents as pending items and size the agent pool.

        Raises:
            BatchAlreadyStartedError: If this run has not been reset since its last start
        """
        if self.state != BatchState.IDLE:
            raise BatchAlreadyStartedError(
                f"Batch is {self.state.value}; reset it before starting another run"
            )
        self._agents = self._fresh_agents(agent_names)
        self._items = [WorkItem(document=doc) for doc in documents]
        self.state = BatchState.RUNNING
        self.publish()
        return list(self._items)

    def finish(self) -> None:
        self.state = BatchState.FINISHED
        self.publish()

    def reset(self, agent_names: Optional[Sequence[str]] = None) -> None:
        """Drop all items and return every agent to idle.

        Raises:
            BatchAlreadyStartedError: If the batch is still running
        """
        if self.state == BatchState.RUNNING:
            raise BatchAlreadyStartedError("Cannot reset a batch while it is running")
        names = agent_names if agent_names is not None else [a.name for a in self._agents]
        self._agents = self._fresh_agents(names)
        self._items = []
        self.state = BatchState.IDLE
        self.publish()

    # ------------------------------------------------------------------
    # Agent slot updates
    # ------------------------------------------------------------------

    def complete_empty_agent(self, index: int) -> None:
        """An agent with nothing assigned is done without ever working."""
        agent = self._agents[index]
        agent.status = AgentStatus.COMPLETED
        agent.total_assigned = 0
        agent.processed_count = 0
        agent.current_item_name = None
        self.publish()

    def start_agent(self, index: int, total_assigned: int) -> None:
        agent = self._agents[index]
        agent.status = AgentStatus.WORKING
        agent.total_assigned = total_assigned
        agent.processed_count = 0
        agent.success_count = 0
        self.publish()

    def begin_item(self, index: int, item: WorkItem) -> None:
        item.status = ItemStatus.PROCESSING
        self._agents[index].current_item_name = item.name
        self.publish()

    def record_result(self, index: int, item: WorkItem, result: AnalysisResult) -> None:
        agent = self._agents[index]
        item.result = result
        item.status = ItemStatus.COMPLETED
        agent.processed_count = min(agent.processed_count + 1, agent.total_assigned)
        if result.is_positive:
            agent.success_count += 1
        self.publish()

    def finish_agent(self, index: int) -> None:
        agent = self._agents[index]
        agent.status = AgentStatus.COMPLETED
        agent.current_item_name = None
        self.publish()
