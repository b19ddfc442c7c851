"""Entity models - the loaded operational hierarchy.

Destination -> Itinerary -> Tour -> SurveyResponse -> Annotation (0 or 1).
All entities are immutable once created.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from tourqc.models.common import ProductLine, Severity


class Destination(BaseModel):
    """Root of the geographic hierarchy."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    country: str


class Itinerary(BaseModel):
    """A sellable route within one destination."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    destination_id: str


class Tour(BaseModel):
    """A dated departure of an itinerary."""

    model_config = ConfigDict(frozen=True)

    id: str
    itinerary_id: str
    start_date: date
    end_date: date
    product_line: ProductLine
    dmc_name: str
    coordinator_name: str

    @field_validator("end_date")
    @classmethod
    def validate_end_after_start(cls, v: date, info: ValidationInfo) -> date:
        """Ensure end_date > start_date."""
        if "start_date" in info.data and v <= info.data["start_date"]:
            raise ValueError("end_date must be after start_date")
        return v


class SurveyScores(BaseModel):
    """Numeric sub-scores of a survey response (nominally 0-10, not clamped)."""

    model_config = ConfigDict(frozen=True)

    overall: float
    qp: float
    accommodation: float
    logistics: float
    pre_departure_info: float
    coordinator_courtesy: float
    coordinator_leadership: float
    coordinator_organisation: float


# Score categories in display order
SCORE_FIELDS: tuple[str, ...] = tuple(SurveyScores.model_fields)


class SurveyComments(BaseModel):
    """Free-text comment fields."""

    model_config = ConfigDict(frozen=True)

    general: str = ""
    accommodation_bad: str = ""
    logistics: str = ""
    coordinator: str = ""

    def first_non_empty(self) -> str:
        """First filled comment among general, accommodation and logistics."""
        return self.general or self.accommodation_bad or self.logistics


class SurveyResponse(BaseModel):
    """A single traveller's post-tour survey."""

    model_config = ConfigDict(frozen=True)

    id: str
    tour_id: str
    created_at: date
    scores: SurveyScores
    comments: SurveyComments = Field(default_factory=SurveyComments)
    domain: str = ""

    @property
    def overall(self) -> float:
        return self.scores.overall


class AnnotationTags(BaseModel):
    """Issue tags split by subject."""

    model_config = ConfigDict(frozen=True)

    product_tags: tuple[str, ...] = ()
    coordinator_tags: tuple[str, ...] = ()


class Annotation(BaseModel):
    """Issue annotation attached to at most one survey response."""

    model_config = ConfigDict(frozen=True)

    response_id: str
    tags: AnnotationTags
    severity: Severity
    confidence: float = Field(..., ge=0, le=1)
    evidence_snippets: tuple[str, ...] = Field(..., min_length=1)

    @property
    def issue_tags(self) -> tuple[str, ...]:
        """Union of product and coordinator tags, deduplicated, first-seen order."""
        return tuple(dict.fromkeys(self.tags.product_tags + self.tags.coordinator_tags))

    @model_validator(mode="after")
    def validate_has_issue_tag(self) -> "Annotation":
        """Ensure the annotation carries at least one issue tag."""
        if not self.issue_tags:
            raise ValueError("annotation must carry at least one issue tag")
        return self
