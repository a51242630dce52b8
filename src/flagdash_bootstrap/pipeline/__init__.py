"""Bootstrap pipeline orchestration."""

from flagdash_bootstrap.pipeline.executor import BootstrapPipeline, BootstrapPlan

__all__ = ["BootstrapPipeline", "BootstrapPlan"]
