"""
Built-in agents.

Each agent builds one capability request from its validated input and parses
the response into a structured payload. The orchestrator owns the calls.
"""

from resumeai.agents.ats_optimizer import AtsOptimizerAgent
from resumeai.agents.base import Agent, AgentContext, AgentInput, AgentOutput
from resumeai.agents.content_optimizer import ContentOptimizerAgent
from resumeai.agents.grammar_enhancer import GrammarEnhancerAgent
from resumeai.agents.resume_builder import ResumeBuilderAgent
from resumeai.agents.resume_optimizer import ResumeOptimizerAgent
from resumeai.agents.resume_reviewer import ResumeReviewerAgent
from resumeai.agents.skills_extractor import SkillsExtractorAgent

# Registration order of the default registry
BUILTIN_AGENTS = (
    SkillsExtractorAgent,
    ResumeBuilderAgent,
    ContentOptimizerAgent,
    ResumeOptimizerAgent,
    AtsOptimizerAgent,
    ResumeReviewerAgent,
    GrammarEnhancerAgent,
)

__all__ = [
    "Agent",
    "AgentContext",
    "AgentInput",
    "AgentOutput",
    "AtsOptimizerAgent",
    "BUILTIN_AGENTS",
    "ContentOptimizerAgent",
    "GrammarEnhancerAgent",
    "ResumeBuilderAgent",
    "ResumeOptimizerAgent",
    "ResumeReviewerAgent",
    "SkillsExtractorAgent",
]
