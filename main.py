import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from core.app_context import AppContext
from core.config_loader import load_config
from core.exceptions import BatchPreconditionError
from etl.intake import load_documents
from pipeline.coordinator import BatchCoordinator
from pipeline.models import AgentStatus, BatchSnapshot
from pipeline.summary import summarize

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Screen a batch of resumes against a job description")
    parser.add_argument("paths", nargs="+", help="Resume files or directories of resumes")
    parser.add_argument("--config", default="config.yaml", help="Path to config file")
    jd = parser.add_mutually_exclusive_group(required=True)
    jd.add_argument("--jd", help="Path to a job description text file")
    jd.add_argument("--jd-text", help="Job description text")
    parser.add_argument("--workers", type=int, default=None, help="Number of agents (default: from config)")
    parser.add_argument("--api-key", default=None, help="API key for the scoring service")
    parser.add_argument("--output", default=None, help="Write the summary as JSON to this file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def read_job_description(args: argparse.Namespace) -> str:
    if args.jd_text is not None:
        return args.jd_text
    with open(args.jd, 'r', encoding='utf-8') as f:
        return f.read()


def log_progress(snapshot: BatchSnapshot) -> None:
    for agent in snapshot.agents:
        if agent.status == AgentStatus.WORKING:
            logger.info(
                f"[{agent.name}] {agent.processed_count}/{agent.total_assigned} "
                f"({agent.progress:.0f}%) scanning: {agent.current_item_name or '...'}"
            )


async def watch_progress(coordinator: BatchCoordinator, queue: asyncio.Queue) -> None:
    """Log agent progress from a subscription until the batch finishes."""
    try:
        while True:
            snapshot = await queue.get()
            log_progress(snapshot)
            if snapshot.is_finished:
                return
    finally:
        coordinator.batch.unsubscribe(queue)


async def run(ctx: AppContext, documents, job_description: str, workers: Optional[int], api_key: Optional[str]) -> BatchSnapshot:
    # Subscribe before starting so no snapshot is missed
    queue = ctx.coordinator.batch.subscribe()
    watcher = asyncio.create_task(watch_progress(ctx.coordinator, queue))
    try:
        snapshot = await ctx.coordinator.run_batch(documents, job_description, worker_count=workers, api_key=api_key)
        await watcher
    except BaseException:
        watcher.cancel()
        raise
    finally:
        await ctx.scorer.aclose()
    return snapshot


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)
    ctx = AppContext.build(config)

    documents = load_documents(args.paths)
    if not documents:
        logger.error("No documents found to screen")
        return 2

    job_description = read_job_description(args)

    try:
        snapshot = asyncio.run(run(ctx, documents, job_description, args.workers, args.api_key))
    except BatchPreconditionError as e:
        logger.error(f"Cannot start batch: {e}")
        return 2

    summary = summarize(snapshot.items)
    report = summary.to_dict()

    logger.info("=" * 60)
    logger.info(
        f"SCREENING COMPLETE: {summary.qualified} qualified, {summary.rejected} rejected "
        f"({summary.errors} errors), {summary.ai_detected} flagged as AI-generated"
    )
    for rank, entry in enumerate(report["shortlist"], start=1):
        logger.info(f"{rank}. {entry['candidate_name']} ({entry['file']}) - {entry['match_score']}")
    logger.info("=" * 60)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
        logger.info(f"Summary written to {args.output}")
    else:
        print(json.dumps(report, indent=2, ensure_ascii=False))

    return 0


if __name__ == "__main__":
    sys.exit(main())
