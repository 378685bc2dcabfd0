"""
Rewrites individual resume items for a target job.

CLASSES:
    ContentItemRef
    OptimizedItem
    ContentOptimizerInput
    ContentOptimizerOutput
    ContentOptimizerAgent
"""

import json
import logging
from typing import List, Optional

from pydantic import Field, field_validator

from resumeai.agents.base import Agent, AgentContext, AgentInput, AgentOutput
from resumeai.config.enums import AgentId
from resumeai.config.prompts import (
    CONTENT_OPTIMIZER_SYSTEM_PROMPT as SYSTEM_PROMPT,
    CONTENT_OPTIMIZER_USER_PROMPT as USER_PROMPT_BASE,
    GLAZE_INSTRUCTIONS,
    JSON_ONLY_RULES,
)
from resumeai.config.validation_constants import (
    DEFAULT_GLAZE_LEVEL,
    VALID_GLAZE_LEVEL_RANGE,
    VALID_ITEM_TYPES,
)
from resumeai.utils.exceptions import AgentInputError
from resumeai.utils.llms import CapabilityRequest

logger = logging.getLogger(__name__)


class ContentItemRef(AgentOutput):
    type: str
    id: str

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v not in VALID_ITEM_TYPES:
            raise ValueError(f"Invalid item type: {v}. Valid options: {sorted(VALID_ITEM_TYPES)}")
        return v


class OptimizedItem(AgentOutput):
    type: str
    id: str
    bullets: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    name: Optional[str] = None
    details: Optional[str] = None
    improvement_score: int = 0
    changes: List[str] = []


class ContentOptimizerInput(AgentInput):
    glaze_level: int = DEFAULT_GLAZE_LEVEL
    focus_areas: List[str] = []
    custom_instructions: Optional[str] = None
    preserve_readability: bool = True
    # Defaults to every item the profile selects
    items: Optional[List[ContentItemRef]] = None

    @field_validator("glaze_level")
    @classmethod
    def validate_glaze_level(cls, v: int) -> int:
        if v not in VALID_GLAZE_LEVEL_RANGE:
            raise ValueError("glaze_level must be between 1 and 5")
        return v


class ContentOptimizerOutput(AgentOutput):
    optimized_items: List[OptimizedItem] = []
    optimization_analysis: dict = Field(default_factory=dict)
    recommendations: dict = Field(default_factory=dict)


class ContentOptimizerAgent(Agent):
    """Rewrites experience, project and skill items at a chosen glaze level."""

    agent_id = AgentId.CONTENT_OPTIMIZER.value
    name = "Content Optimizer"
    description = "Rewrites experience, project and skill content to match a job"
    input_model = ContentOptimizerInput
    output_model = ContentOptimizerOutput
    temperature = 0.5

    def check_input(self, agent_input: ContentOptimizerInput, context: AgentContext):
        data = self.require_data(context)

        if agent_input.items is None:
            profile = context.profile
            refs = []
            if profile is not None:
                refs += [ContentItemRef(type="experience", id=i) for i in profile.experience_ids]
                refs += [ContentItemRef(type="project", id=i) for i in profile.project_ids]
                refs += [ContentItemRef(type="skill", id=i) for i in profile.skill_ids]
            agent_input = agent_input.model_copy(update={"items": refs})

        records = self._records(data)
        missing = [ref.id for ref in agent_input.items if ref.id not in records[ref.type]]
        if missing:
            raise AgentInputError(f"{self.agent_id}: unknown item ids: {', '.join(missing)}")
        if not agent_input.items:
            raise AgentInputError(f"{self.agent_id}: no items to optimize")

        return agent_input

    def prepare_request(self, agent_input: ContentOptimizerInput, context: AgentContext) -> CapabilityRequest:
        records = self._records(context.data)
        items = [
            {"type": ref.type, **records[ref.type][ref.id].model_dump(exclude_none=True)}
            for ref in agent_input.items
        ]

        focus_rule = ""
        if agent_input.focus_areas:
            focus_rule = f"Focus on: {', '.join(agent_input.focus_areas)}."
        if agent_input.preserve_readability:
            focus_rule += "\nKeep every bullet readable; do not stuff keywords."

        custom_instructions = ""
        if agent_input.custom_instructions:
            custom_instructions = f"\nAdditional instructions:\n{agent_input.custom_instructions}"

        system_prompt = SYSTEM_PROMPT.format(
            glaze_instructions=GLAZE_INSTRUCTIONS[agent_input.glaze_level],
            focus_rule=focus_rule,
            rules=JSON_ONLY_RULES,
        )
        user_prompt = USER_PROMPT_BASE.format(
            job_description=context.job_description or "Not provided",
            items=json.dumps(items, indent=2),
            custom_instructions=custom_instructions,
        )
        return self.build_request(system_prompt, user_prompt)

    def post_process(self, output, agent_input: ContentOptimizerInput, context):
        """Keep only rewrites of items that were asked for."""
        requested = {(ref.type, ref.id) for ref in agent_input.items}
        kept = [item for item in output["optimized_items"] if (item["type"], item["id"]) in requested]
        if len(kept) < len(output["optimized_items"]):
            logger.warning(
                f" Content optimizer returned {len(output['optimized_items']) - len(kept)} unrequested items"
            )
        output["optimized_items"] = kept
        return output

    @staticmethod
    def _records(data):
        return {
            "experience": {e.id: e for e in data.experiences},
            "project": {p.id: p for p in data.projects},
            "skill": {s.id: s for s in data.skills},
        }
