"""Batch conversion package."""

from .pipeline import (
    BatchReport,
    ImageOutcome,
    output_path_for,
    plan_output_paths,
    process_image,
    run_batch,
)
from .service import run_conversion

__all__ = [
    "BatchReport",
    "ImageOutcome",
    "output_path_for",
    "plan_output_paths",
    "process_image",
    "run_batch",
    "run_conversion",
]
