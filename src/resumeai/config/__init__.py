"""
Configuration Module for ResumeAI.

Re-exports the domain, request and result schemas and the identifier enums
so callers can import them from one place. The focused modules are:

- schemas.py: master records, Profile, JobContext
- request_schemas.py: WorkflowRequest and typed workflow parameters
- result_schemas.py: AgentResult, WorkflowResult, WorkflowInsights
- enums.py: AgentId, WorkflowType
- settings.py: environment-driven settings
- validation_constants.py: all VALID_* constants and limits
- prompts.py: prompt templates

For new code, import directly from the focused modules:
    from resumeai.config.schemas import Profile
    from resumeai.config.request_schemas import WorkflowRequest
"""

from resumeai.config.enums import AgentId, WorkflowType

from resumeai.config.schemas import (
    AIOptimization,
    DataBundle,
    Education,
    Experience,
    JobContext,
    NewSkillRecord,
    PersonalInfo,
    Profile,
    ProfileData,
    Project,
    Skill,
)

from resumeai.config.request_schemas import (
    CustomParameters,
    EditingParameters,
    OptimizationParameters,
    ReviewParameters,
    SkillsParameters,
    WorkflowParameters,
    WorkflowRequest,
)

from resumeai.config.result_schemas import (
    AgentResult,
    WorkflowInsights,
    WorkflowResult,
)

__all__ = [
    # Enums
    "AgentId",
    "WorkflowType",
    # Domain schemas
    "AIOptimization",
    "DataBundle",
    "Education",
    "Experience",
    "JobContext",
    "NewSkillRecord",
    "PersonalInfo",
    "Profile",
    "ProfileData",
    "Project",
    "Skill",
    # Request schemas
    "CustomParameters",
    "EditingParameters",
    "OptimizationParameters",
    "ReviewParameters",
    "SkillsParameters",
    "WorkflowParameters",
    "WorkflowRequest",
    # Result schemas
    "AgentResult",
    "WorkflowInsights",
    "WorkflowResult",
]
