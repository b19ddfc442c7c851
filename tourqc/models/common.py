"""Common types, enums and the issue-tag vocabulary shared across all models."""

import re
from enum import Enum

# Entity ids: letters, digits, dash and underscore
ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_\-]*$"
_ID_RE = re.compile(ID_PATTERN)


def is_valid_id(value: str) -> bool:
    """Check that value matches the entity id format."""
    return bool(_ID_RE.match(value))


class ProductLine(str, Enum):
    """Tour product line."""

    WR = "WR"
    WRX = "WRX"


class Severity(str, Enum):
    """Annotation severity."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Period(str, Enum):
    """Trend bucket granularity.

    Buckets have a fixed length in days; calendar months and quarters are
    approximated as 30 and 90 days.
    """

    WEEK = "Week"
    MONTH = "Month"
    QUARTER = "Quarter"

    @property
    def days(self) -> int:
        return _PERIOD_DAYS[self]

    @property
    def label_prefix(self) -> str:
        return self.value[0]


_PERIOD_DAYS = {Period.WEEK: 7, Period.MONTH: 30, Period.QUARTER: 90}


class Grain(str, Enum):
    """Grouping level for trend summaries."""

    DESTINATION = "Destination"
    ITINERARY = "Itinerary"


class IssueScope(str, Enum):
    """Scope key used to bucket issue clusters."""

    ALL = "all"
    DESTINATION = "destination"
    ITINERARY = "itinerary"
    TOUR = "tour"


class ActionType(str, Enum):
    """Kind of suggested remediation."""

    DMC_CHANGE = "DMC_CHANGE"
    COORDINATOR_TRAINING = "COORDINATOR_TRAINING"
    ITINERARY_ADJUSTMENT = "ITINERARY_ADJUSTMENT"
    ACCOMMODATION_UPGRADE = "ACCOMMODATION_UPGRADE"
    SUPPLIER_REVIEW = "SUPPLIER_REVIEW"
    PROCESS_IMPROVEMENT = "PROCESS_IMPROVEMENT"


class Priority(str, Enum):
    """Suggested action priority."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        """Sort rank, most urgent first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.CRITICAL: 0, Priority.HIGH: 1, Priority.MEDIUM: 2, Priority.LOW: 3}


class ActionStatus(str, Enum):
    """Suggested action lifecycle status (no enforced transitions)."""

    SUGGESTED = "SUGGESTED"
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Controlled vocabulary of issue tags and their display labels
TAG_DEFINITIONS: dict[str, str] = {
    "cleanliness_hygiene": "Cleanliness & hygiene",
    "poor_accommodation_quality": "Accommodation quality",
    "itinerary_changes_cancellations": "Itinerary changes/cancellations",
    "logistics_failures": "Logistics failures",
    "comfort_issues": "Comfort issues",
    "poor_value_for_money": "Poor value for money",
    "weak_leadership_decision_making": "Weak leadership/decision making",
    "communication_clarity_issues": "Communication clarity issues",
    "friendly_kind": "Friendly & kind",
    "helpful_available": "Helpful & available",
}


def tag_label(tag: str) -> str:
    """Display label for an issue tag (the raw tag when outside the vocabulary)."""
    return TAG_DEFINITIONS.get(tag, tag)


def is_known_tag(tag: str) -> bool:
    """Check whether tag belongs to the controlled vocabulary."""
    return tag in TAG_DEFINITIONS
