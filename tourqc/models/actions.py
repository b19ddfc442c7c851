"""Action models - suggested remediations and recorded corrective actions."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tourqc.models.common import ActionStatus, ActionType, Priority, is_valid_id


class SuggestedAction(BaseModel):
    """A proposed remediation for a recurring issue."""

    model_config = ConfigDict(frozen=True)

    id: str
    destination_id: str
    itinerary_id: str | None = None
    issue_tag: str
    action_type: ActionType
    description: str = ""
    priority: Priority
    status: ActionStatus
    created_at: date
    due_date: date
    owner: str
    affected_tours: int = Field(default=0, ge=0)


class ImpactMetrics(BaseModel):
    """Externally measured before/after outcome of a corrective action.

    The six numbers are supplied independently and are not reconciled
    against survey data.
    """

    model_config = ConfigDict(frozen=True)

    avg_score_before: float = Field(..., ge=0, le=10, strict=True)
    avg_score_after: float = Field(..., ge=0, le=10, strict=True)
    pct_below8_before: float = Field(..., ge=0, le=100, strict=True)
    pct_below8_after: float = Field(..., ge=0, le=100, strict=True)
    tours_before_action: int = Field(..., ge=0, strict=True)
    tours_after_action: int = Field(..., ge=0, strict=True)


class CorrectiveAction(BaseModel):
    """A remediation actually carried out, with its measured impact."""

    model_config = ConfigDict(frozen=True)

    id: str
    suggested_action_id: str | None = None
    destination_id: str
    itinerary_id: str | None = None
    issue_tag: str
    action_taken: str
    implemented_at: date
    owner: str = ""
    notes: str = ""
    impact_metrics: ImpactMetrics


class CorrectiveActionInput(BaseModel):
    """Caller-supplied payload for recording a corrective action.

    When suggested_action_id is set, destination_id, itinerary_id, issue_tag
    and owner default to the suggestion's values.
    """

    model_config = ConfigDict(extra="forbid")

    suggested_action_id: str | None = None
    destination_id: str | None = None
    itinerary_id: str | None = None
    issue_tag: str | None = None
    owner: str | None = None
    action_taken: str = Field(..., min_length=1)
    implemented_at: date
    notes: str
    impact_metrics: ImpactMetrics

    @field_validator("suggested_action_id", "destination_id", "itinerary_id")
    @classmethod
    def validate_id_format(cls, v: str | None) -> str | None:
        """Ensure ids follow the entity id format."""
        if v is not None and not is_valid_id(v):
            raise ValueError(f"malformed id: {v!r}")
        return v

    @field_validator("action_taken")
    @classmethod
    def validate_action_taken_not_blank(cls, v: str) -> str:
        """Reject whitespace-only descriptions."""
        if not v.strip():
            raise ValueError("action_taken must not be blank")
        return v
