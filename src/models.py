"""Data models for the terminal ToDo application.

Exposes the TaskState enum and the Task dataclass. State is persisted by
enum name ("New", "InProgress", "Done"); display labels live in theme.py.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping

from errors import ValidationError

MAX_DESCRIPTION_LENGTH = 255


class TaskState(Enum):
    NEW = "New"
    IN_PROGRESS = "InProgress"
    DONE = "Done"

    @classmethod
    def parse(cls, value: Any) -> "TaskState":
        """Accept an enum member, its stored name, or the legacy ordinal (0/1/2)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            members = list(cls)
            if 0 <= value < len(members):
                return members[value]
        elif isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise ValidationError(f"Unknown task state: {value!r}")


def validate_description(value: Any) -> str:
    """Return the trimmed description or raise ValidationError."""
    if not isinstance(value, str):
        raise ValidationError("Description must be text.")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError("Description cannot be empty or whitespace.")
    if len(trimmed) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters "
            f"(got {len(trimmed)})."
        )
    return trimmed


@dataclass
class Task:
    """A single to-do entry.

    Fields:
        description: Trimmed, 1..255 characters. Validated on every assignment.
        state: Lifecycle state; any TaskState may be assigned directly.
    """
    description: str
    state: TaskState = TaskState.NEW

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "description":
            value = validate_description(value)
        super().__setattr__(name, value)

    # -------------------- serialization --------------------
    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "state": self.state.value}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        state = raw.get("state")
        return cls(
            description=raw.get("description"),  # type: ignore[arg-type]
            state=TaskState.NEW if state is None else TaskState.parse(state),
        )
