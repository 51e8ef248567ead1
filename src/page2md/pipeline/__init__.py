"""Per-request conversion pipeline."""

from .base import ConversionPipeline, EventEmitter, PageContext, PipelineStep

__all__ = ["ConversionPipeline", "EventEmitter", "PageContext", "PipelineStep"]
