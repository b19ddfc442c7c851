"""Export JSON schemas for the engine's input and result models."""

import json
from pathlib import Path

from tourqc.models import (
    CorrectiveActionInput,
    DestinationSummary,
    FilterSpec,
    ImpactSummary,
    IssueCluster,
    OverviewKpis,
    SeriesPoint,
    TourSummary,
)

EXPORTED = (
    FilterSpec,
    CorrectiveActionInput,
    IssueCluster,
    DestinationSummary,
    SeriesPoint,
    ImpactSummary,
    OverviewKpis,
    TourSummary,
)


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for model in EXPORTED:
        schema = model.model_json_schema()
        path = schemas_dir / f"{model.__name__}.schema.json"
        with open(path, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Exported {model.__name__} schema to {path}")


if __name__ == "__main__":
    main()
