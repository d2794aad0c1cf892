"""Task types handed to the execution subsystem."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class WriteTask:
    """
    An idempotent upsert of data at path.

    Attributes:
        path: Backend path to write
        description: Human readable label used in logs
        data: Request body
    """
    path: str
    description: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteTask:
    """A destructive removal of path; only run after operator confirmation."""
    path: str
    description: str
