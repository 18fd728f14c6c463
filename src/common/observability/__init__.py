"""Shared observability helpers."""

from common.observability.context import run_id_var
from common.observability.metrics import is_metrics_enabled

__all__ = ["is_metrics_enabled", "run_id_var"]
