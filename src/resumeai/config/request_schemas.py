"""
Request Schemas for workflow execution.

This module defines the Pydantic models callers use to start a workflow and
the typed parameter models each workflow recognizes.

Key Models:
    - WorkflowRequest: immutable description of one workflow execution
    - OptimizationParameters: knobs for the optimization workflows
    - ReviewParameters: knobs for review/ATS workflows
    - SkillsParameters: knobs for the skills analysis workflow
    - EditingParameters: knobs for manual editing assistance
    - CustomParameters: pass-through parameters for ad-hoc workflows

Note:
    Parameter models forbid unknown keys. The workflow catalog validates a
    definition's parameter model when the definition is registered, and the
    orchestrator validates request.parameters against it before any agent runs.
"""

from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator

from resumeai.config.schemas import CamelModel, JobContext, ProfileData
from resumeai.config.validation_constants import (
    DEFAULT_GLAZE_LEVEL,
    MAX_GRAMMAR_TEXT_LENGTH,
    VALID_GLAZE_LEVEL_RANGE,
    VALID_LENGTHS,
    VALID_REVIEW_DEPTHS,
    VALID_TONES,
)


class WorkflowParameters(CamelModel):
    """Base class for typed workflow parameters."""

    model_config = ConfigDict(extra="forbid")


class OptimizationParameters(WorkflowParameters):
    """Parameters recognized by the optimization workflows."""

    glaze_level: int = DEFAULT_GLAZE_LEVEL
    focus_areas: List[str] = []
    custom_instructions: Optional[str] = None
    preserve_readability: bool = True
    min_experiences: Optional[int] = Field(default=None, ge=0)
    min_projects: Optional[int] = Field(default=None, ge=0)

    @field_validator("glaze_level")
    @classmethod
    def validate_glaze_level(cls, v: int) -> int:
        if v not in VALID_GLAZE_LEVEL_RANGE:
            raise ValueError(
                f"glaze_level must be between {VALID_GLAZE_LEVEL_RANGE.start} "
                f"and {VALID_GLAZE_LEVEL_RANGE.stop - 1}"
            )
        return v


class ReviewParameters(WorkflowParameters):
    """Parameters recognized by the review and ATS workflows."""

    review_depth: str = "standard"
    focus_areas: List[str] = []
    user_concerns: List[str] = []

    @field_validator("review_depth")
    @classmethod
    def validate_review_depth(cls, v: str) -> str:
        if v not in VALID_REVIEW_DEPTHS:
            raise ValueError(
                f"Invalid review_depth: {v}. Valid options: {sorted(VALID_REVIEW_DEPTHS)}"
            )
        return v


class SkillsParameters(WorkflowParameters):
    """Parameters recognized by the skills analysis workflow."""

    include_soft_skills: bool = True
    confidence_threshold: int = Field(default=60, ge=0, le=100)


class EditingParameters(WorkflowParameters):
    """Parameters recognized by manual editing assistance."""

    text: str = ""
    instruction: str = ""
    tone: str = "professional"
    length: str = "same"

    @field_validator("text")
    @classmethod
    def validate_text_length(cls, v: str) -> str:
        if len(v) > MAX_GRAMMAR_TEXT_LENGTH:
            raise ValueError(
                f"text must be at most {MAX_GRAMMAR_TEXT_LENGTH} characters"
            )
        return v

    @field_validator("tone")
    @classmethod
    def validate_tone(cls, v: str) -> str:
        if v not in VALID_TONES:
            raise ValueError(f"Invalid tone: {v}. Valid options: {sorted(VALID_TONES)}")
        return v

    @field_validator("length")
    @classmethod
    def validate_length(cls, v: str) -> str:
        if v not in VALID_LENGTHS:
            raise ValueError(
                f"Invalid length: {v}. Valid options: {sorted(VALID_LENGTHS)}"
            )
        return v


class WorkflowRequest(CamelModel):
    """One workflow execution. Immutable once built.

    workflow_type is kept as a plain string so an unknown type reaches the
    orchestrator and fails there as a configuration error.
    """

    model_config = ConfigDict(frozen=True)

    workflow_type: str
    job_context: Optional[JobContext] = None
    profile_data: ProfileData
    parameters: Dict[str, Any] = {}
    parallel_execution: bool = False
    timeout_seconds: Optional[float] = Field(default=None, gt=0)


class CustomParameters(WorkflowParameters):
    """Parameters of an ad-hoc workflow. Every key is passed through to the agents."""

    model_config = ConfigDict(extra="allow")
