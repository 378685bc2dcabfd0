"""Closed identifier sets for agents and workflows."""

from enum import Enum


class AgentId(str, Enum):
    """Identifiers of the built-in agents.

    Custom agents may still be registered under any other string id.
    """

    SKILLS_EXTRACTOR = "skills-extractor"
    RESUME_BUILDER = "resume-builder"
    CONTENT_OPTIMIZER = "content-optimizer"
    RESUME_OPTIMIZER = "resume-optimizer"
    ATS_OPTIMIZER = "ats-optimizer"
    RESUME_REVIEWER = "resume-reviewer"
    GRAMMAR_ENHANCER = "grammar-enhancer"


class WorkflowType(str, Enum):
    """Named workflows available in the default catalog."""

    FULL_RESUME_OPTIMIZATION = "full-resume-optimization"
    JOB_SPECIFIC_OPTIMIZATION = "job-specific-optimization"
    CONTENT_ENHANCEMENT = "content-enhancement"
    SKILLS_ANALYSIS = "skills-analysis"
    RESUME_REVIEW = "resume-review"
    ATS_OPTIMIZATION = "ats-optimization"
    MANUAL_EDITING_ASSISTANCE = "manual-editing-assistance"
    CUSTOM = "custom"
