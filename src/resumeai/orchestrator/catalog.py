"""
Workflow Catalog - named workflows as ordered stages of agent steps.

A workflow is a sequence of stages. A stage is one ordering unit holding one
or more steps that may run concurrently. A step names the agent it runs, a
key that is unique within the workflow (the agent id unless the same agent
appears twice) and static inputs.

CLASSES:
    StageStep
    Stage
    WorkflowDefinition
    WorkflowCatalog

FUNCTIONS:
    validate_definition      (public)
    build_default_catalog    (public)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import ValidationError

from resumeai.config.enums import AgentId, WorkflowType
from resumeai.config.request_schemas import (
    EditingParameters,
    OptimizationParameters,
    ReviewParameters,
    SkillsParameters,
    WorkflowParameters,
)
from resumeai.orchestrator.registry import AgentRegistry
from resumeai.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageStep:
    agent_id: str
    key: Optional[str] = None
    inputs: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.key is None:
            object.__setattr__(self, "key", self.agent_id)


@dataclass(frozen=True)
class Stage:
    """One ordering unit.

    depends_on lists step keys of earlier stages whose successful payloads
    are handed to every step of this stage as prior_results.
    """

    name: str
    steps: Tuple[StageStep, ...]
    required: bool = True
    depends_on: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WorkflowDefinition:
    workflow_type: str
    stages: Tuple[Stage, ...]
    parameters_model: Type[WorkflowParameters] = WorkflowParameters
    description: str = ""

    def step_keys(self) -> List[str]:
        return [step.key for stage in self.stages for step in stage.steps]


def validate_definition(definition: WorkflowDefinition, registry: AgentRegistry) -> None:
    """Check a definition against the registry.

    Rules:
    1. At least one stage, and every stage has at least one step
    2. Every agent id is registered
    3. Step keys are unique within the workflow
    4. A stage depends only on step keys of earlier stages
    5. The parameter model's defaults validate

    Raises:
        ConfigurationError: On the first rule violated.
    """
    name = definition.workflow_type

    if not definition.stages:
        raise ConfigurationError(f"Workflow {name} has no stages")

    earlier_keys = set()
    for stage in definition.stages:
        if not stage.steps:
            raise ConfigurationError(f"Workflow {name}: stage {stage.name} has no steps")

        for dependency in stage.depends_on:
            if dependency not in earlier_keys:
                raise ConfigurationError(
                    f"Workflow {name}: stage {stage.name} depends on {dependency}, "
                    "which is not a step of an earlier stage"
                )

        stage_keys = set()
        for step in stage.steps:
            if step.agent_id not in registry:
                raise ConfigurationError(
                    f"Workflow {name}: stage {stage.name} uses unknown agent {step.agent_id}"
                )
            if step.key in earlier_keys or step.key in stage_keys:
                raise ConfigurationError(f"Workflow {name}: duplicate step key {step.key}")
            stage_keys.add(step.key)

        earlier_keys |= stage_keys

    try:
        definition.parameters_model()
    except ValidationError as e:
        raise ConfigurationError(
            f"Workflow {name}: parameter defaults do not validate: {e}"
        ) from e


class WorkflowCatalog:
    """Registry of workflow definitions, validated when registered."""

    def __init__(self, registry: AgentRegistry):
        self._registry = registry
        self._definitions: Dict[str, WorkflowDefinition] = {}

    def register(self, definition: WorkflowDefinition) -> None:
        validate_definition(definition, self._registry)
        self._definitions[definition.workflow_type] = definition
        logger.debug(f" Registered workflow {definition.workflow_type}")

    def get(self, workflow_type: str) -> WorkflowDefinition:
        """Look up a workflow.

        Raises:
            ConfigurationError: If the type is not registered.
        """
        try:
            return self._definitions[workflow_type]
        except KeyError:
            raise ConfigurationError(f"Unknown workflow type: {workflow_type}") from None

    def types(self) -> List[str]:
        return list(self._definitions)


# ---------- DEFAULT WORKFLOWS ----------

SKILLS = AgentId.SKILLS_EXTRACTOR.value
BUILDER = AgentId.RESUME_BUILDER.value
CONTENT = AgentId.CONTENT_OPTIMIZER.value
OPTIMIZER = AgentId.RESUME_OPTIMIZER.value
ATS = AgentId.ATS_OPTIMIZER.value
REVIEWER = AgentId.RESUME_REVIEWER.value
GRAMMAR = AgentId.GRAMMAR_ENHANCER.value


def default_definitions() -> List[WorkflowDefinition]:
    return [
        WorkflowDefinition(
            workflow_type=WorkflowType.FULL_RESUME_OPTIMIZATION.value,
            description="Complete resume optimization from job analysis to final review",
            parameters_model=OptimizationParameters,
            stages=(
                Stage(
                    "job-analysis",
                    (StageStep(SKILLS, inputs={"extraction_type": "skill-gap-analysis"}),),
                ),
                Stage("selection", (StageStep(BUILDER),), depends_on=(SKILLS,)),
                Stage(
                    "optimization",
                    (
                        StageStep(OPTIMIZER),
                        StageStep(CONTENT),
                        StageStep(ATS, inputs={"keyword_density": "aggressive"}),
                    ),
                    depends_on=(SKILLS, BUILDER),
                ),
                Stage(
                    "review",
                    (StageStep(REVIEWER, inputs={"review_depth": "comprehensive"}),),
                    required=False,
                ),
            ),
        ),
        WorkflowDefinition(
            workflow_type=WorkflowType.JOB_SPECIFIC_OPTIMIZATION.value,
            description="Optimize the resume for a specific job with gap analysis",
            parameters_model=OptimizationParameters,
            stages=(
                Stage(
                    "gap-analysis",
                    (StageStep(SKILLS, inputs={"extraction_type": "skill-gap-analysis"}),),
                ),
                Stage("selection", (StageStep(BUILDER),), depends_on=(SKILLS,)),
                Stage(
                    "optimization",
                    (StageStep(OPTIMIZER), StageStep(CONTENT)),
                    depends_on=(SKILLS, BUILDER),
                ),
            ),
        ),
        WorkflowDefinition(
            workflow_type=WorkflowType.CONTENT_ENHANCEMENT.value,
            description="Enhance content quality and impact",
            parameters_model=OptimizationParameters,
            stages=(
                Stage("enhancement", (StageStep(CONTENT),)),
                Stage("review", (StageStep(REVIEWER),), required=False),
            ),
        ),
        WorkflowDefinition(
            workflow_type=WorkflowType.SKILLS_ANALYSIS.value,
            description="Skills analysis and gap identification",
            parameters_model=SkillsParameters,
            stages=(
                Stage(
                    "skills",
                    tuple(
                        StageStep(SKILLS, key=f"{SKILLS}/{mode}", inputs={"extraction_type": mode})
                        for mode in ("job-requirements", "resume-skills", "skill-gap-analysis")
                    ),
                ),
            ),
        ),
        WorkflowDefinition(
            workflow_type=WorkflowType.RESUME_REVIEW.value,
            description="Resume review with ATS analysis",
            parameters_model=ReviewParameters,
            stages=(Stage("review", (StageStep(REVIEWER), StageStep(ATS))),),
        ),
        WorkflowDefinition(
            workflow_type=WorkflowType.ATS_OPTIMIZATION.value,
            description="ATS compatibility analysis",
            parameters_model=ReviewParameters,
            stages=(Stage("ats", (StageStep(ATS),)),),
        ),
        WorkflowDefinition(
            workflow_type=WorkflowType.MANUAL_EDITING_ASSISTANCE.value,
            description="Grammar and style help for a single text",
            parameters_model=EditingParameters,
            stages=(Stage("editing", (StageStep(GRAMMAR),)),),
        ),
    ]


def build_default_catalog(registry: AgentRegistry) -> WorkflowCatalog:
    catalog = WorkflowCatalog(registry)
    for definition in default_definitions():
        catalog.register(definition)
    return catalog
