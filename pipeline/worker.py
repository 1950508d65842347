"""Agent worker - screens one partition of documents, one at a time."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.config_loader import ScreeningConfig
from core.exceptions import ExtractionError, RateLimitedError, ScoreError
from core.llm.interfaces import Scorer
from core.llm.schema_models import AnalysisResult
from etl.extractor import DocumentExtractor, ExtractedContent
from pipeline.batch_run import BatchRun
from pipeline.models import WorkItem

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each backoff sleep."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"Rate limit hit (attempt {retry_state.attempt_number}). "
        f"Waiting {wait:.1f}s before retry. Details: {exc}"
    )


class AgentWorker:
    """Processes its partition strictly in order and never raises per-item failures.

    Per item: mark processing, extract, wait the pacing delay, score with
    bounded retry on rate limits, then record the result (an error result on
    any failure).
    """

    def __init__(
        self,
        index: int,
        batch: BatchRun,
        extractor: DocumentExtractor,
        scorer: Scorer,
        settings: ScreeningConfig,
        sleep: Sleep = asyncio.sleep,
    ):
        self.index = index
        self.batch = batch
        self.extractor = extractor
        self.scorer = scorer
        self.settings = settings
        self._sleep = sleep

    @property
    def name(self) -> str:
        return self.batch.agent(self.index).name

    async def run(self, partition: List[WorkItem], job_description: str, api_key: Optional[str] = None) -> None:
        self.batch.start_agent(self.index, len(partition))
        logger.info(f"{self.name} started with {len(partition)} documents")

        for item in partition:
            await self.process_item(item, job_description, api_key)

        self.batch.finish_agent(self.index)
        agent = self.batch.agent(self.index)
        logger.info(
            f"{self.name} completed: {agent.processed_count}/{agent.total_assigned} processed, "
            f"{agent.success_count} candidates found"
        )

    async def process_item(self, item: WorkItem, job_description: str, api_key: Optional[str] = None) -> AnalysisResult:
        self.batch.begin_item(self.index, item)
        logger.info(f"{self.name} processing {item.name} ({item.id})")

        try:
            extracted = await self.extractor.extract(item.document)
            await self._sleep(self.settings.pacing_seconds)
            result = await self.score_with_retry(extracted, job_description, api_key)
        except ExtractionError as e:
            logger.warning(f"{self.name} could not extract {item.name}: {e}")
            result = AnalysisResult.error(str(e), kind="Extraction")
        except ScoreError as e:
            logger.warning(f"{self.name} could not score {item.name}: {e}")
            result = AnalysisResult.error(str(e))
        except Exception as e:
            logger.exception(f"{self.name} failed on {item.name}")
            result = AnalysisResult.error(str(e) or e.__class__.__name__)

        self.batch.record_result(self.index, item, result)
        return result

    async def score_with_retry(
        self,
        extracted: ExtractedContent,
        job_description: str,
        api_key: Optional[str] = None
    ) -> AnalysisResult:
        """Call the scorer, retrying only rate-limited attempts.

        At most ``1 + max_retries`` attempts are made, sleeping
        ``backoff_base_seconds * 2 ** n`` between them.

        Raises:
            RateLimitedError: If every attempt was rate limited
            ScoreError: On any other scorer failure, including a timeout
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(RateLimitedError),
            wait=wait_exponential(multiplier=self.settings.backoff_base_seconds, exp_base=2),
            stop=stop_after_attempt(1 + self.settings.max_retries),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                result = await self._score_once(extracted, job_description, api_key)
        return result

    async def _score_once(
        self,
        extracted: ExtractedContent,
        job_description: str,
        api_key: Optional[str]
    ) -> AnalysisResult:
        call = self.scorer.score(
            extracted.content,
            extracted.mime_type,
            extracted.is_plain_text,
            job_description,
            api_key,
        )
        timeout = self.settings.score_timeout_seconds
        if timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout)
        except asyncio.TimeoutError as e:
            raise ScoreError(f"Scorer call timed out after {timeout:.1f}s") from e
