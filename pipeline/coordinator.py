"""Batch coordinator - fans a document batch out to a fixed pool of agents."""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from core.config_loader import ScreeningConfig
from core.exceptions import BatchPreconditionError
from core.llm.interfaces import Scorer
from etl.extractor import DocumentExtractor
from pipeline.batch_run import BatchRun
from pipeline.models import BatchSnapshot, Document
from pipeline.partitioner import partition, validate_worker_count
from pipeline.worker import AgentWorker, Sleep

logger = logging.getLogger(__name__)


class BatchCoordinator:
    """Runs one batch at a time over a pool of concurrent agents.

    Observers read ``coordinator.batch`` (``snapshot()`` or ``subscribe()``)
    while ``run_batch`` is in progress. A finished batch must be ``reset()``
    before the next ``run_batch``.
    """

    def __init__(
        self,
        extractor: DocumentExtractor,
        scorer: Scorer,
        settings: Optional[ScreeningConfig] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.extractor = extractor
        self.scorer = scorer
        self.settings = settings or ScreeningConfig()
        self._sleep = sleep
        self.batch = BatchRun(self._agent_names(self.settings.worker_count))

    def _agent_names(self, worker_count: int) -> List[str]:
        return [self.settings.agent_name(i) for i in range(worker_count)]

    async def run_batch(
        self,
        documents: Sequence[Document],
        job_description: str,
        worker_count: Optional[int] = None,
        api_key: Optional[str] = None,
    ) -> BatchSnapshot:
        """Screen every document and wait for all agents to finish.

        Args:
            documents: Documents in submission order
            job_description: Job description every document is scored against
            worker_count: Size of the agent pool; defaults to the configured worker_count
            api_key: Optional scorer credential for this batch

        Returns:
            Final snapshot with every agent completed and every item recorded

        Raises:
            InvalidWorkerCountError: If worker_count is not positive
            BatchAlreadyStartedError: If the previous batch was not reset
            BatchPreconditionError: If the job description is blank
        """
        if worker_count is None:
            worker_count = self.settings.worker_count
        validate_worker_count(worker_count)
        if not job_description or not job_description.strip():
            raise BatchPreconditionError("A job description is required")

        items = self.batch.prepare(documents, self._agent_names(worker_count))
        partitions = partition(items, worker_count)

        start = time.time()
        logger.info("=" * 60)
        logger.info(f"STARTING BATCH: {len(items)} documents across {worker_count} agents")
        logger.info("=" * 60)

        runs = []
        for index, assigned in enumerate(partitions):
            if not assigned:
                logger.info(f"{self.batch.agent(index).name} has no documents assigned")
                self.batch.complete_empty_agent(index)
                continue
            worker = AgentWorker(index, self.batch, self.extractor, self.scorer, self.settings, sleep=self._sleep)
            runs.append(worker.run(assigned, job_description, api_key))

        try:
            await asyncio.gather(*runs)
        finally:
            self.batch.finish()

        logger.info(f"=== BATCH COMPLETE: {len(items)} documents in {time.time() - start:.2f}s ===")
        return self.batch.snapshot()

    def reset(self) -> None:
        """Return the batch to idle with the configured agent pool.

        Raises:
            BatchAlreadyStartedError: If a batch is running
        """
        self.batch.reset(self._agent_names(self.settings.worker_count))
