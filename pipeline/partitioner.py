"""Round-robin assignment of work items to agent slots."""

from typing import List, Sequence, TypeVar

from core.exceptions import InvalidWorkerCountError

T = TypeVar("T")


def validate_worker_count(worker_count: int) -> None:
    if isinstance(worker_count, bool) or not isinstance(worker_count, int) or worker_count <= 0:
        raise InvalidWorkerCountError(f"worker_count must be a positive integer, got {worker_count!r}")


def partition(items: Sequence[T], worker_count: int) -> List[List[T]]:
    """Split items into exactly worker_count ordered partitions.

    Item i goes to partition ``i % worker_count``, so sizes differ by at most
    one and the assignment is reproducible for a given input order. Empty
    input yields worker_count empty partitions.

    Raises:
        InvalidWorkerCountError: If worker_count is not a positive integer
    """
    validate_worker_count(worker_count)

    partitions: List[List[T]] = [[] for _ in range(worker_count)]
    for index, item in enumerate(items):
        partitions[index % worker_count].append(item)
    return partitions
