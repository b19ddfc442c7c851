"""Global pytest configuration."""

import os

# Pin bucketing settings for tests before any imports
os.environ.setdefault("QC_EPOCH_START", "2024-11-01")
os.environ.setdefault("QC_SATISFACTION_THRESHOLD", "8")
