"""
Result Schemas for agent and workflow execution.

Key Models:
    - AgentResult: outcome of one agent invocation (never mutated after creation)
    - WorkflowInsights: cross-agent highlights synthesized from a successful run
    - WorkflowResult: aggregated outcome of a workflow execution
"""

from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field

from resumeai.config.schemas import CamelModel


class AgentResult(CamelModel):
    """Outcome of a single agent invocation.

    payload is the agent-specific structured output (empty on failure).
    step_key identifies the workflow step; it equals agent_id unless a
    workflow runs the same agent more than once.
    """

    model_config = ConfigDict(frozen=True)

    agent_id: str
    step_key: str = ""
    success: bool
    payload: Dict[str, Any] = {}
    error: Optional[str] = None
    error_type: Optional[str] = None
    duration_ms: float = 0.0
    attempts: int = 0


class WorkflowInsights(CamelModel):
    overall_score: Optional[int] = None
    highlights: List[str] = []
    key_recommendations: List[str] = []
    priority_actions: List[str] = []
    estimated_impact: str = "Low"


class WorkflowResult(CamelModel):
    """Aggregated outcome of a workflow.

    agent_results holds one entry per step that was started, keyed by step key,
    in execution order. error is set only when the workflow failed as a whole.
    """

    success: bool
    workflow_type: str
    agent_results: Dict[str, AgentResult] = Field(
        default_factory=dict,
        description=(
            "Results keyed by step key. A step key is the agent id unless a workflow "
            "runs the same agent more than once (skills-analysis uses "
            "'skills-extractor/<extraction type>'); use get() to look up by agent id."
        ),
    )
    insights: Optional[WorkflowInsights] = None
    total_execution_time_ms: float = 0.0
    error: Optional[str] = None
    failed_stage: Optional[str] = None

    def get(self, key: str) -> Optional[AgentResult]:
        """Look up a result by step key, falling back to the agent id."""
        if key in self.agent_results:
            return self.agent_results[key]
        for result in self.agent_results.values():
            if result.agent_id == key:
                return result
        return None
