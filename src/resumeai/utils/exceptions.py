"""
Custom exceptions for the ResumeAI orchestration and merge core.

Hierarchy:
    ResumeAIError
        ConfigurationError          unknown workflow type / agent id, bad definition
        CapabilityError
            TransientCapabilityError    overload, rate limit, connection drop
            PermanentCapabilityError    malformed or unparseable output
        AgentInputError             agent input rejected before any capability call
        WorkflowTimeoutError        workflow deadline exceeded
        MergeInvariantViolation     dangling reference repaired by the merge engine
"""


class ResumeAIError(Exception):
    """Base class for all ResumeAI errors."""

    pass


class ConfigurationError(ResumeAIError):
    """Raised for unknown workflow types, unknown agent ids and invalid definitions."""

    pass


class CapabilityError(ResumeAIError):
    """Base class for errors signalled by the generation capability."""

    pass


class TransientCapabilityError(CapabilityError):
    """Upstream overload or rate limit. Retried with backoff."""

    pass


class PermanentCapabilityError(CapabilityError):
    """Output could not be parsed into the agent's result shape. Never retried."""

    pass


class AgentInputError(ResumeAIError):
    """Raised when an agent rejects its input."""

    pass


class WorkflowTimeoutError(ResumeAIError):
    """Raised when a workflow exceeds its deadline."""

    pass


class MergeInvariantViolation(ResumeAIError):
    """A reference that would dangle after a merge.

    The merge engine never raises this; it records and logs instances while
    filtering the offending reference out.
    """

    def __init__(self, category: str, item_id: str, reason: str):
        self.category = category
        self.item_id = item_id
        self.reason = reason
        super().__init__(f"{category}: {item_id} {reason}")
