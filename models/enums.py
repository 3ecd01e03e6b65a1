"""Closed enumerations stored on tasks and memberships."""

from enum import Enum


class TaskStatus(str, Enum):
    new = "new"
    in_progress = "in_progress"
    completed = "completed"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class ProjectRole(str, Enum):
    manager = "manager"
    developer = "developer"
    tester = "tester"


def coerce_enum(enum_cls, value, field: str):
    """Return ``value`` as a member of ``enum_cls`` or raise ValueError.

    Only exact member values are accepted; nothing is normalised.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Invalid {field} {value!r}; expected one of: {allowed}") from None


def enum_values(enum_cls) -> list[str]:
    """Values persisted for an enum column (member values, not names)."""
    return [member.value for member in enum_cls]
