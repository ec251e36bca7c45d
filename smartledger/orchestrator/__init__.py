"""Pipeline orchestration"""

from .pipeline import AnalysisPipeline, PipelineContext

__all__ = ["AnalysisPipeline", "PipelineContext"]
