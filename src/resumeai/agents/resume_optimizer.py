"""
Produces the optimization document the merge engine folds into a profile.

CLASSES:
    PersonalInfoPatch
    ItemRewrite
    SkillRewrite
    NewSkillSuggestion
    ChangeAnalysis
    ResumeOptimizerInput
    ResumeOptimizerOutput
    ResumeOptimizerAgent
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
    prior_payload,
    resume_snapshot,
)
from resumeai.config.enums import AgentId
from resumeai.config.prompts import (
    GLAZE_INSTRUCTIONS,
    JSON_ONLY_RULES,
    RESUME_OPTIMIZER_SYSTEM_PROMPT as SYSTEM_PROMPT,
    RESUME_OPTIMIZER_USER_PROMPT as USER_PROMPT_BASE,
)
from resumeai.config.validation_constants import (
    DEFAULT_GLAZE_LEVEL,
    MIN_JOB_DESCRIPTION_LENGTH,
    VALID_GLAZE_LEVEL_RANGE,
)
from resumeai.utils.llms import CapabilityRequest


class PersonalInfoPatch(AgentOutput):
    summary: Optional[str] = None


class ItemRewrite(AgentOutput):
    id: str
    bullets: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    changes: List[str] = []


class SkillRewrite(AgentOutput):
    id: str
    name: Optional[str] = None
    details: Optional[str] = None
    changes: List[str] = []


class NewSkillSuggestion(AgentOutput):
    name: str
    details: str = ""
    reason: str = ""


class ChangeAnalysis(AgentOutput):
    job_alignment_score: Optional[int] = None
    score_explanation: str = ""
    technologies_added: List[str] = []
    keywords_incorporated: List[str] = []
    total_changes: int = 0


class ResumeOptimizerInput(AgentInput):
    glaze_level: int = DEFAULT_GLAZE_LEVEL
    focus_areas: List[str] = []
    custom_instructions: Optional[str] = None
    preserve_readability: bool = True

    @field_validator("glaze_level")
    @classmethod
    def validate_glaze_level(cls, v: int) -> int:
        if v not in VALID_GLAZE_LEVEL_RANGE:
            raise ValueError("glaze_level must be between 1 and 5")
        return v


class ResumeOptimizerOutput(AgentOutput):
    personal_info: Optional[PersonalInfoPatch] = None
    experience_optimizations: List[ItemRewrite] = []
    project_optimizations: List[ItemRewrite] = []
    skill_optimizations: List[SkillRewrite] = []
    new_skills: List[NewSkillSuggestion] = []
    recommended_experience_order: List[str] = []
    recommended_project_order: List[str] = []
    recommended_skill_order: List[str] = []
    key_insights: List[str] = []
    change_analysis: Optional[ChangeAnalysis] = None


class ResumeOptimizerAgent(Agent):
    """Tailors the whole resume to a job description.

    Its payload mirrors the merge engine's input: per-item rewrites keyed by
    id, new skill names, recommended orders and provenance notes.
    """

    agent_id = AgentId.RESUME_OPTIMIZER.value
    name = "Resume Optimizer"
    description = "Tailors the resume to a job description and suggests new skills"
    input_model = ResumeOptimizerInput
    output_model = ResumeOptimizerOutput
    max_tokens = 6000
    temperature = 0.4

    def check_input(self, agent_input, context: AgentContext):
        self.require_data(context)
        self.require_job_description(context, MIN_JOB_DESCRIPTION_LENGTH)
        return agent_input

    def prepare_request(self, agent_input: ResumeOptimizerInput, context: AgentContext) -> CapabilityRequest:
        snapshot = resume_snapshot(context)
        has_summary = bool(snapshot["personal_info"].get("summary"))

        custom_instructions = ""
        if agent_input.focus_areas:
            custom_instructions += f"\nFocus on: {format_list(agent_input.focus_areas)}."
        if agent_input.preserve_readability:
            custom_instructions += "\nKeep every bullet readable; do not stuff keywords."
        if agent_input.custom_instructions:
            custom_instructions += f"\nAdditional instructions:\n{agent_input.custom_instructions}"

        # Gap analysis from an earlier stage sharpens the new skill suggestions
        gaps = prior_payload(agent_input, AgentId.SKILLS_EXTRACTOR.value).get("skill_gaps") or {}
        missing = [s["name"] for s in gaps.get("missing_critical_skills", [])]
        if missing:
            custom_instructions += f"\nSkills the resume is missing: {format_list(missing)}."

        system_prompt = SYSTEM_PROMPT.format(
            glaze_instructions=GLAZE_INSTRUCTIONS[agent_input.glaze_level],
            rules=JSON_ONLY_RULES,
        )
        user_prompt = USER_PROMPT_BASE.format(
            job_description=context.job_description,
            resume=json.dumps(snapshot, indent=2),
            summary_state="has" if has_summary else "does not have",
            custom_instructions=custom_instructions,
        )
        return self.build_request(system_prompt, user_prompt)
