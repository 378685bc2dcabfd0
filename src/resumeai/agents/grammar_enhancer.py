"""
Improves a single piece of resume text following a user instruction.

CLASSES:
    GrammarEnhancerAgent
"""

from typing import List

from pydantic import Field, field_validator

from resumeai.agents.base import Agent, AgentContext, AgentInput, AgentOutput
from resumeai.config.enums import AgentId
from resumeai.config.prompts import (
    GRAMMAR_ENHANCER_SYSTEM_PROMPT as SYSTEM_PROMPT,
    GRAMMAR_ENHANCER_USER_PROMPT as USER_PROMPT_BASE,
    JSON_ONLY_RULES,
)
from resumeai.config.validation_constants import (
    MAX_GRAMMAR_TEXT_LENGTH,
    VALID_LENGTHS,
    VALID_TONES,
)
from resumeai.utils.llms import CapabilityRequest


class ChangesSummary(AgentOutput):
    grammar_fixes: List[str] = []
    style_improvements: List[str] = []
    keywords_added: List[str] = []


class Alternative(AgentOutput):
    text: str
    focus: str = ""
    reasoning: str = ""


class GrammarEnhancerInput(AgentInput):
    text: str = Field(min_length=1, max_length=MAX_GRAMMAR_TEXT_LENGTH)
    instruction: str = Field(min_length=1)
    tone: str = "professional"
    length: str = "same"

    @field_validator("text", "instruction")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
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
            raise ValueError(f"Invalid length: {v}. Valid options: {sorted(VALID_LENGTHS)}")
        return v


class GrammarEnhancerOutput(AgentOutput):
    enhanced_text: str
    changes_summary: ChangesSummary = ChangesSummary()
    alternatives: List[Alternative] = []
    confidence: int = 0


class GrammarEnhancerAgent(Agent):
    agent_id = AgentId.GRAMMAR_ENHANCER.value
    name = "Grammar Enhancer"
    description = "Improves grammar, style and impact of a single text"
    input_model = GrammarEnhancerInput
    output_model = GrammarEnhancerOutput
    max_tokens = 1500
    temperature = 0.5

    def prepare_request(self, agent_input: GrammarEnhancerInput, context: AgentContext) -> CapabilityRequest:
        job_rule = ""
        if context.job_description:
            job_rule = f"Where natural, align wording with this job:\n{context.job_description[:1000]}"

        system_prompt = SYSTEM_PROMPT.format(
            tone=agent_input.tone,
            length=agent_input.length,
            job_rule=job_rule,
            rules=JSON_ONLY_RULES,
        )
        user_prompt = USER_PROMPT_BASE.format(
            instruction=agent_input.instruction,
            text=agent_input.text,
        )
        return self.build_request(system_prompt, user_prompt)
