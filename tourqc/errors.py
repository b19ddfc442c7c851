"""Exception types raised to engine callers."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError


class ValidationError(Exception):
    """Caller input is structurally invalid.

    Raised for malformed filter specs and corrective-action input. Carries the
    list of field errors (pydantic's error dicts when the failure came from
    model validation).
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError, subject: str) -> "ValidationError":
        """Wrap a pydantic ValidationError raised while parsing caller input."""
        errors = exc.errors(include_url=False)
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in errors})
        return cls(f"invalid {subject}: {', '.join(fields) or 'input'}", errors)
