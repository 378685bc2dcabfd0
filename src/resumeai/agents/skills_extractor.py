"""
Extracts skills and technologies from a job description or a resume.

CLASSES:
    ExtractedSkill
    ExtractionSummary
    SkillGaps
    SkillsExtractorInput
    SkillsExtractorOutput
    SkillsExtractorAgent
"""

import json
import logging
from typing import Dict, List, Optional

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
    JSON_ONLY_RULES,
    SKILLS_EXTRACTOR_SYSTEM_PROMPT as SYSTEM_PROMPT,
    SKILLS_EXTRACTOR_USER_PROMPT as USER_PROMPT_BASE,
)
from resumeai.config.validation_constants import (
    MIN_SOURCE_TEXT_LENGTH,
    VALID_EXTRACTION_TYPES,
)
from resumeai.utils.exceptions import AgentInputError
from resumeai.utils.llms import CapabilityRequest

logger = logging.getLogger(__name__)


class ExtractedSkill(AgentOutput):
    name: str
    category: str = ""
    confidence: int = 0
    importance: str = "mentioned"
    type: str = ""


class ExtractionSummary(AgentOutput):
    total_skills_found: int = 0
    categories_identified: List[str] = []
    critical_skills: List[str] = []
    preferred_skills: List[str] = []


class SkillGaps(AgentOutput):
    missing_critical_skills: List[ExtractedSkill] = []
    missing_preferred_skills: List[ExtractedSkill] = []
    recommendations: List[str] = []


class SkillsExtractorInput(AgentInput):
    extraction_type: str = "job-requirements"
    # Defaults to the job description, or to the resume for "resume-skills"
    source_text: Optional[str] = None
    include_soft_skills: bool = True
    confidence_threshold: int = Field(default=60, ge=0, le=100)

    @field_validator("extraction_type")
    @classmethod
    def validate_extraction_type(cls, v: str) -> str:
        if v not in VALID_EXTRACTION_TYPES:
            raise ValueError(
                f"Invalid extraction_type: {v}. Valid options: {sorted(VALID_EXTRACTION_TYPES)}"
            )
        return v


class SkillsExtractorOutput(AgentOutput):
    extracted_skills: Dict[str, List[ExtractedSkill]] = {}
    extraction_summary: ExtractionSummary = ExtractionSummary()
    skill_gaps: Optional[SkillGaps] = None
    overall_confidence: int = 0


class SkillsExtractorAgent(Agent):
    """Extracts categorized skills from text.

    Modes:
    - job-requirements: what the job asks for
    - resume-skills: what the resume already shows
    - skill-gap-analysis: job requirements compared against the resume's skills
    """

    agent_id = AgentId.SKILLS_EXTRACTOR.value
    name = "Skills Extractor"
    description = "Extracts skills, technologies and requirements from job descriptions or resumes"
    input_model = SkillsExtractorInput
    output_model = SkillsExtractorOutput
    temperature = 0.2

    def check_input(self, agent_input: SkillsExtractorInput, context: AgentContext) -> SkillsExtractorInput:
        source_text = (agent_input.source_text or "").strip()

        if not source_text:
            if agent_input.extraction_type == "resume-skills":
                snapshot = resume_snapshot(context)
                source_text = json.dumps(snapshot, indent=2) if snapshot else ""
            else:
                source_text = context.job_description

        if len(source_text) < MIN_SOURCE_TEXT_LENGTH:
            raise AgentInputError(
                f"{self.agent_id}: source text must be at least "
                f"{MIN_SOURCE_TEXT_LENGTH} characters for {agent_input.extraction_type}"
            )

        return agent_input.model_copy(update={"source_text": source_text})

    def prepare_request(self, agent_input: SkillsExtractorInput, context: AgentContext) -> CapabilityRequest:
        if agent_input.include_soft_skills:
            soft_skills_rule = "Include soft skills as their own category."
        else:
            soft_skills_rule = "Do not include soft skills."

        existing_skills = "Not requested"
        if agent_input.extraction_type == "skill-gap-analysis":
            skills = resume_snapshot(context).get("skills", [])
            existing_skills = json.dumps(skills, indent=2) if skills else "None"

        system_prompt = SYSTEM_PROMPT.format(
            extraction_type=agent_input.extraction_type,
            soft_skills_rule=soft_skills_rule,
            confidence_threshold=agent_input.confidence_threshold,
            rules=JSON_ONLY_RULES,
        )
        user_prompt = USER_PROMPT_BASE.format(
            source_text=agent_input.source_text,
            existing_skills=existing_skills,
        )
        return self.build_request(system_prompt, user_prompt)

    def post_process(self, output, agent_input: SkillsExtractorInput, context):
        """Drop skills under the confidence threshold and recount."""
        threshold = agent_input.confidence_threshold
        kept = {}
        for category, skills in output["extracted_skills"].items():
            confident = [s for s in skills if s["confidence"] >= threshold]
            if confident:
                kept[category] = confident

        dropped = sum(len(s) for s in output["extracted_skills"].values()) - sum(
            len(s) for s in kept.values()
        )
        if dropped:
            logger.debug(f" Dropped {dropped} skills below confidence {threshold}")

        output["extracted_skills"] = kept
        output["extraction_summary"]["total_skills_found"] = sum(len(s) for s in kept.values())
        output["extraction_summary"]["categories_identified"] = list(kept)
        return output
