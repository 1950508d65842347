#!/usr/bin/env python3
"""
Pipeline Models - Documents, work items and per-agent progress state.
"""

import copy
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from core.llm.schema_models import AnalysisResult


def generate_document_id() -> str:
    """Short opaque id assigned to a document at intake."""
    return uuid.uuid4().hex[:8]


class ItemStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    # Reserved for items reloaded from elsewhere; a batch run finishes every
    # item as COMPLETED and marks failures on the result instead.
    ERROR = "error"


class AgentStatus(str, Enum):
    IDLE = "idle"
    WORKING = "working"
    COMPLETED = "completed"


class BatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass(frozen=True)
class Document:
    """A submitted file. Identity and content never change after intake."""
    name: str
    data: bytes = field(repr=False)
    mime_type: Optional[str] = None
    id: str = field(default_factory=generate_document_id)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class WorkItem:
    """A document plus its processing status within one batch."""
    document: Document
    status: ItemStatus = ItemStatus.PENDING
    result: Optional[AnalysisResult] = None

    @property
    def id(self) -> str:
        return self.document.id

    @property
    def name(self) -> str:
        return self.document.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.document.size,
            "status": self.status.value,
            "result": self.result.model_dump() if self.result else None,
        }


@dataclass
class AgentState:
    """Observable progress of one agent slot."""
    index: int
    name: str
    status: AgentStatus = AgentStatus.IDLE
    total_assigned: int = 0
    processed_count: int = 0
    success_count: int = 0
    current_item_name: Optional[str] = None

    @property
    def progress(self) -> float:
        """Percentage of assigned items processed; an empty finished slot is 100."""
        if self.total_assigned == 0:
            return 100.0 if self.status == AgentStatus.COMPLETED else 0.0
        return self.processed_count / self.total_assigned * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "status": self.status.value,
            "total_assigned": self.total_assigned,
            "processed_count": self.processed_count,
            "success_count": self.success_count,
            "progress": self.progress,
            "current_item_name": self.current_item_name,
        }


@dataclass
class BatchSnapshot:
    """Point-in-time copy of a batch, safe to hand to observers."""
    state: BatchState
    agents: List[AgentState]
    items: List[WorkItem]

    @property
    def is_finished(self) -> bool:
        return self.state == BatchState.FINISHED

    @classmethod
    def capture(cls, state: BatchState, agents: List[AgentState], items: List[WorkItem]) -> "BatchSnapshot":
        return cls(
            state=state,
            agents=[copy.copy(agent) for agent in agents],
            # documents are immutable; results are pydantic models and need their own copy
            items=[
                replace(item, result=item.result.model_copy(deep=True) if item.result else None)
                for item in items
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "agents": [agent.to_dict() for agent in self.agents],
            "items": [item.to_dict() for item in self.items],
        }
