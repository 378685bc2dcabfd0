"""
Reviews a resume and grades it.

CLASSES:
    ResumeReviewerAgent
"""

import json
from typing import List, Optional

from pydantic import field_validator

from resumeai.agents.base import (
    Agent,
    AgentContext,
    AgentInput,
    AgentOutput,
    format_list,
    resume_snapshot,
)
from resumeai.config.enums import AgentId
from resumeai.config.prompts import (
    JSON_ONLY_RULES,
    RESUME_REVIEW_USER_PROMPT as USER_PROMPT_BASE,
    RESUME_REVIEWER_SYSTEM_PROMPT as SYSTEM_PROMPT,
)
from resumeai.config.validation_constants import VALID_REVIEW_DEPTHS
from resumeai.utils.llms import CapabilityRequest


class OverallAssessment(AgentOutput):
    score: int = 0
    grade: str = ""
    summary: str = ""
    strength_areas: List[str] = []
    improvement_areas: List[str] = []
    job_alignment_score: Optional[int] = None


class ReviewRecommendations(AgentOutput):
    immediate: List[str] = []
    short_term: List[str] = []
    long_term: List[str] = []


class ResumeReviewerInput(AgentInput):
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


class ResumeReviewerOutput(AgentOutput):
    overall_assessment: OverallAssessment = OverallAssessment()
    recommendations: ReviewRecommendations = ReviewRecommendations()


class ResumeReviewerAgent(Agent):
    agent_id = AgentId.RESUME_REVIEWER.value
    name = "Resume Reviewer"
    description = "Grades the resume and recommends improvements"
    input_model = ResumeReviewerInput
    output_model = ResumeReviewerOutput

    def check_input(self, agent_input, context: AgentContext):
        self.require_data(context)
        return agent_input

    def prepare_request(self, agent_input: ResumeReviewerInput, context: AgentContext) -> CapabilityRequest:
        concerns = ""
        if agent_input.user_concerns:
            concerns = "\nThe candidate is concerned about:\n- " + "\n- ".join(agent_input.user_concerns)

        system_prompt = SYSTEM_PROMPT.format(
            review_depth=agent_input.review_depth,
            focus_areas=format_list(agent_input.focus_areas, empty="all"),
            rules=JSON_ONLY_RULES,
        )
        user_prompt = USER_PROMPT_BASE.format(
            job_description=context.job_description or "Not provided",
            resume=json.dumps(resume_snapshot(context), indent=2),
            concerns=concerns,
        )
        return self.build_request(system_prompt, user_prompt)
