"""Render SQL Server schemas as PlantUML class diagrams."""

from diagram.pipeline import DiagramPipeline, PipelineResult, PipelineStage, run_pipeline
from diagram.plantuml import render

__version__ = "1.0.0"

__all__ = [
    "DiagramPipeline",
    "PipelineResult",
    "PipelineStage",
    "__version__",
    "render",
    "run_pipeline",
]
