"""
Optimization output collection, the merge engine, per-profile locks and the
profile store seam.
"""

from resumeai.optimization.locks import ProfileLocks
from resumeai.optimization.merge import (
    is_optimization_stale,
    job_description_hash,
    merge,
)
from resumeai.optimization.output import (
    NewSkillEntry,
    OptimizationOutput,
    collect_optimization_output,
)
from resumeai.optimization.store import InMemoryProfileStore, ProfileStore

__all__ = [
    "InMemoryProfileStore",
    "NewSkillEntry",
    "OptimizationOutput",
    "ProfileLocks",
    "ProfileStore",
    "collect_optimization_output",
    "is_optimization_stale",
    "job_description_hash",
    "merge",
]
