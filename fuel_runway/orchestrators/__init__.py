"""Orchestrator layer for coordinating services and repositories."""

from .recalculation_orchestrator import OrchestratorConfig, RecalculationOrchestrator

__all__ = [
    "OrchestratorConfig",
    "RecalculationOrchestrator",
]
