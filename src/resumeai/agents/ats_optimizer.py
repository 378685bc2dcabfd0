"""
Scores how well a resume parses and ranks in applicant tracking systems.

CLASSES:
    AtsOptimizerAgent
"""

import json
from typing import List

from pydantic import Field, field_validator

from resumeai.agents.base import (
    Agent,
    AgentContext,
    AgentInput,
    AgentOutput,
    resume_snapshot,
)
from resumeai.config.enums import AgentId
from resumeai.config.prompts import (
    ATS_OPTIMIZER_SYSTEM_PROMPT as SYSTEM_PROMPT,
    JSON_ONLY_RULES,
    RESUME_REVIEW_USER_PROMPT as USER_PROMPT_BASE,
)
from resumeai.config.validation_constants import VALID_KEYWORD_DENSITIES
from resumeai.utils.llms import CapabilityRequest


class AtsScore(AgentOutput):
    score: int = 0
    grade: str = ""
    summary: str = ""


class MissingKeyword(AgentOutput):
    keyword: str
    suggested_location: str = ""


class KeywordOptimization(AgentOutput):
    missing_keywords: List[MissingKeyword] = []


class PlannedAction(AgentOutput):
    action: str


class ActionPlan(AgentOutput):
    immediate: List[PlannedAction] = []
    short_term: List[PlannedAction] = []


class AtsOptimizerInput(AgentInput):
    keyword_density: str = "moderate"

    @field_validator("keyword_density")
    @classmethod
    def validate_keyword_density(cls, v: str) -> str:
        if v not in VALID_KEYWORD_DENSITIES:
            raise ValueError(
                f"Invalid keyword_density: {v}. Valid options: {sorted(VALID_KEYWORD_DENSITIES)}"
            )
        return v


class AtsOptimizerOutput(AgentOutput):
    overall_ats_score: AtsScore = Field(default_factory=AtsScore, alias="overallATSScore")
    keyword_optimization: KeywordOptimization = KeywordOptimization()
    action_plan: ActionPlan = ActionPlan()


class AtsOptimizerAgent(Agent):
    agent_id = AgentId.ATS_OPTIMIZER.value
    name = "ATS Optimizer"
    description = "Scores ATS compatibility and lists missing keywords"
    input_model = AtsOptimizerInput
    output_model = AtsOptimizerOutput
    temperature = 0.2

    def check_input(self, agent_input, context: AgentContext):
        self.require_data(context)
        return agent_input

    def prepare_request(self, agent_input: AtsOptimizerInput, context: AgentContext) -> CapabilityRequest:
        system_prompt = SYSTEM_PROMPT.format(
            keyword_density=agent_input.keyword_density,
            rules=JSON_ONLY_RULES,
        )
        user_prompt = USER_PROMPT_BASE.format(
            job_description=context.job_description or "Not provided",
            resume=json.dumps(resume_snapshot(context), indent=2),
            concerns="",
        )
        return self.build_request(system_prompt, user_prompt)
