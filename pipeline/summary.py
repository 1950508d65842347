"""Aggregate the recorded results of a batch for reporting."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from pipeline.models import ItemStatus, WorkItem

SCORE_BUCKETS = ('0-49', '50-69', '70-89', '90-100')


def score_bucket(score: int) -> str:
    if score >= 90:
        return '90-100'
    if score >= 70:
        return '70-89'
    if score >= 50:
        return '50-69'
    return '0-49'


@dataclass
class BatchSummary:
    """Counts over completed items plus the ranked shortlist."""
    total: int = 0
    processed: int = 0
    qualified: int = 0
    rejected: int = 0
    errors: int = 0
    ai_detected: int = 0
    shortlist: List[WorkItem] = field(default_factory=list)
    score_distribution: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(SCORE_BUCKETS, 0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "processed": self.processed,
            "qualified": self.qualified,
            "rejected": self.rejected,
            "errors": self.errors,
            "ai_detected": self.ai_detected,
            "score_distribution": dict(self.score_distribution),
            "shortlist": [
                {
                    "id": item.id,
                    "file": item.name,
                    "candidate_name": item.result.candidate_name,
                    "match_score": item.result.match_score,
                    "reason": item.result.reason,
                }
                for item in self.shortlist
            ],
        }


def summarize(items: Sequence[WorkItem]) -> BatchSummary:
    """Summarize items; error results count as rejected and as errors."""
    summary = BatchSummary(total=len(items))
    processed = [i for i in items if i.status == ItemStatus.COMPLETED and i.result is not None]
    summary.processed = len(processed)

    for item in processed:
        result = item.result
        if result.is_positive:
            summary.shortlist.append(item)
        if result.is_error:
            summary.errors += 1
        if result.is_ai_generated:
            summary.ai_detected += 1
        summary.score_distribution[score_bucket(result.match_score)] += 1

    # sort is stable, so equal scores keep submission order
    summary.shortlist.sort(key=lambda i: i.result.match_score, reverse=True)
    summary.qualified = len(summary.shortlist)
    summary.rejected = summary.processed - summary.qualified
    return summary
