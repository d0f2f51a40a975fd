"""Pipeline module - per-trigger alert delivery orchestration."""

from doorbell_relay.pipeline.core import AlertPipeline, PipelineStats

__all__ = ["AlertPipeline", "PipelineStats"]
