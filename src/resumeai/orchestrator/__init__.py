"""
Workflow orchestration: agent registry, workflow catalog, orchestrator and
insight synthesis.
"""

from resumeai.orchestrator.catalog import (
    Stage,
    StageStep,
    WorkflowCatalog,
    WorkflowDefinition,
    build_default_catalog,
)
from resumeai.orchestrator.orchestrator import Orchestrator
from resumeai.orchestrator.registry import AgentRegistry, build_default_registry

__all__ = [
    "AgentRegistry",
    "Orchestrator",
    "Stage",
    "StageStep",
    "WorkflowCatalog",
    "WorkflowDefinition",
    "build_default_catalog",
    "build_default_registry",
]
