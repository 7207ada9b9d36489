"""Data models for todoboard."""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum

UNCATEGORIZED = "Uncategorized"

# Fixed category set, in board column order. Values are rich color styles.
CATEGORIES: dict[str, str] = {
    "Work": "blue",
    "Personal": "green",
    "Shopping": "magenta",
    "Health": "bright_magenta",
    "Finance": "yellow",
    "Travel": "bright_blue",
    "Home": "dark_orange",
}


class TaskValidationError(ValueError):
    """Raised when task input fails validation."""

    pass


class Priority(Enum):
    """Task priority levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Higher number = higher priority for sorting."""
        return {
            Priority.HIGH: 3,
            Priority.MEDIUM: 2,
            Priority.LOW: 1,
        }[self]


class StatusFilter(Enum):
    """Completion states a status filter can select."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


class ViewMode(Enum):
    """Presentation mode."""

    LIST = "list"
    BOARD = "board"
    CALENDAR = "calendar"


def priority_rank(priority: "Priority | None") -> int:
    """Rank used for sorting; unset priority ranks lowest."""
    return priority.rank if priority else 0


def validate_text(text: str | None) -> str:
    """Return stripped task text, rejecting empty titles."""
    if text is None or not text.strip():
        raise TaskValidationError("Task text cannot be empty")
    return text.strip()


def validate_category(category: str | None) -> str | None:
    """Return the category if it belongs to CATEGORIES.

    Empty strings and the "Uncategorized" label both mean no category.
    """
    if not category or category == UNCATEGORIZED:
        return None
    if category not in CATEGORIES:
        valid = ", ".join(CATEGORIES)
        raise TaskValidationError(f"Unknown category: {category!r}. Valid: {valid}")
    return category


def parse_priority(value: str | None) -> "Priority | None":
    """Parse 'high'/'medium'/'low' (any case). 'none' or empty means unset."""
    if not value or value.lower() == "none":
        return None
    try:
        return Priority(value.lower())
    except ValueError:
        valid = ", ".join(p.value for p in Priority)
        raise TaskValidationError(f"Invalid priority: {value!r}. Valid: {valid}, none") from None


def parse_due_date(value: str | None) -> date | None:
    if not value or value.lower() == "none":
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise TaskValidationError(f"Invalid date: {value!r}. Use YYYY-MM-DD") from None


def parse_due_time(value: str | None) -> time | None:
    if not value or value.lower() == "none":
        return None
    try:
        return time.fromisoformat(value)
    except ValueError:
        raise TaskValidationError(f"Invalid time: {value!r}. Use HH:MM") from None


@dataclass(frozen=True)
class Task:
    """Immutable task record."""

    id: str
    text: str
    created_at: datetime
    completed: bool = False
    category: str | None = None
    priority: Priority | None = None
    due_date: date | None = None
    due_time: time | None = None
    order: int = 0

    def to_dict(self) -> dict:
        """Serialize to dict for formatters."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "category": self.category,
            "priority": self.priority.value if self.priority else None,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "due_time": self.due_time.strftime("%H:%M") if self.due_time else None,
            "order": self.order,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class TaskDraft:
    """User input for a new task, validated on construction."""

    text: str
    category: str | None = None
    priority: Priority | None = None
    due_date: date | None = None
    due_time: time | None = None

    def __post_init__(self):
        # frozen: bypass __setattr__ to store the normalized values
        object.__setattr__(self, "text", validate_text(self.text))
        object.__setattr__(self, "category", validate_category(self.category))
