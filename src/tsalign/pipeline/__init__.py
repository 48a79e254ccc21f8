"""Functional pipeline for series alignment.

Composable, pure stages run in a single synchronous pass.
"""

from tsalign.pipeline.runner import align, merge, run_pipeline
from tsalign.pipeline.stages import STAGES, MergePlan, PipelineStage

__all__ = [
    "align",
    "merge",
    "run_pipeline",
    "STAGES",
    "MergePlan",
    "PipelineStage",
]
