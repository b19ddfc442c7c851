"""Filter specification consumed by the filter engine."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from tourqc.models.common import ProductLine, is_valid_id


class DateRange(BaseModel):
    """Inclusive date range applied to a tour's start date."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @field_validator("end")
    @classmethod
    def validate_end_after_start(cls, v: date, info: ValidationInfo) -> date:
        """Ensure end >= start."""
        if "start" in info.data and v < info.data["start"]:
            raise ValueError("end must be >= start")
        return v

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class FilterSpec(BaseModel):
    """Response filters, combined with logical AND.

    The threshold filter keeps responses whose overall score is below the
    configured satisfaction threshold. All other filters resolve through the
    response's tour.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    score_below_threshold: bool = Field(default=True, strict=True)
    destination_id: str | None = None
    itinerary_id: str | None = None
    product_line: ProductLine | None = None
    dmc_name: str | None = None
    coordinator_name: str | None = None
    date_range: DateRange | None = None

    @field_validator("destination_id", "itinerary_id")
    @classmethod
    def validate_id_format(cls, v: str | None) -> str | None:
        """Ensure ids follow the entity id format."""
        if v is not None and not is_valid_id(v):
            raise ValueError(f"malformed id: {v!r}")
        return v

    @field_validator("dmc_name", "coordinator_name")
    @classmethod
    def validate_name_not_blank(cls, v: str | None) -> str | None:
        """Ensure name filters are not blank."""
        if v is not None and not v.strip():
            raise ValueError("name filter must not be blank")
        return v

    @classmethod
    def unfiltered(cls) -> "FilterSpec":
        """Spec that returns the full population unchanged."""
        return cls(score_below_threshold=False)

    @property
    def needs_tour(self) -> bool:
        """Whether any active filter resolves through the response's tour."""
        return any(
            value is not None
            for value in (
                self.destination_id,
                self.itinerary_id,
                self.product_line,
                self.dmc_name,
                self.coordinator_name,
                self.date_range,
            )
        )

    @property
    def is_empty(self) -> bool:
        return not self.score_below_threshold and not self.needs_tour
