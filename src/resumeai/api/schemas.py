"""
HTTP request bodies that have no counterpart in the core API.

Key Models:
    - SingleAgentRequest: input and context for one agent run
    - OptimizeRequest: optimize-and-merge pipeline request
    - MergeRequest: merge an optimization output into a profile
"""

from typing import Any, Dict, Optional

from resumeai.config.enums import WorkflowType
from resumeai.config.schemas import CamelModel, DataBundle, JobContext, Profile, ProfileData
from resumeai.optimization.output import OptimizationOutput


class SingleAgentRequest(CamelModel):
    input: Dict[str, Any] = {}
    job_context: Optional[JobContext] = None
    profile_data: Optional[ProfileData] = None


class OptimizeRequest(CamelModel):
    profile_data: ProfileData
    job_context: JobContext
    parameters: Dict[str, Any] = {}
    workflow_type: str = WorkflowType.FULL_RESUME_OPTIMIZATION.value
    parallel_execution: bool = True
    force: bool = False


class MergeRequest(CamelModel):
    profile: Profile
    data: DataBundle
    output: OptimizationOutput
