"""
seedsynth - Schema-aware seed data synthesis.

Turns a SQL schema dump and a list of meeting summary records into:
- seed.sql: INSERT statements ordered to satisfy foreign keys
- mapping.json: how every output column was derived
- TESTDATA.md: a usage guide with a data summary

Surrogate keys are derived deterministically, so re-running on the same input
produces the same keys.
"""

__version__ = "0.1.0"

from seedsynth.config import Settings
from seedsynth.pipeline import PipelineResult, SeedPipeline, write_artifacts
from seedsynth.state import PipelineState

__all__ = [
    "PipelineResult",
    "PipelineState",
    "SeedPipeline",
    "Settings",
    "__version__",
    "write_artifacts",
]
