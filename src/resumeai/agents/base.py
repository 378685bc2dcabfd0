"""
Agent base class and the context every agent invocation receives.

CLASSES:
    AgentContext
    AgentInput
    AgentOutput
    Agent

FUNCTIONS:
    resume_snapshot   (public)
    prior_payload     (public)
    format_list       (public)
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from resumeai.config import settings
from resumeai.config.schemas import DataBundle, JobContext, Profile
from resumeai.utils.exceptions import AgentInputError, PermanentCapabilityError
from resumeai.utils.llms import CapabilityRequest, extract_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgentContext:
    """Read-only inputs shared by every step of a workflow.

    The orchestrator hands each invocation its own deep copy.
    """

    job_context: JobContext = field(default_factory=JobContext)
    profile: Optional[Profile] = None
    data: Optional[DataBundle] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def job_description(self) -> str:
        return (self.job_context.job_description or "").strip()


class AgentInput(BaseModel):
    """Base input model. Unknown keys are ignored because workflow parameters
    are shared by every step of a workflow."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")

    prior_results: Dict[str, Dict[str, Any]] = {}


class AgentOutput(BaseModel):
    """Base output model. Lenient: missing fields fall back to defaults."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")


def prior_payload(agent_input: AgentInput, agent_id: str) -> Dict[str, Any]:
    """Return the first prior payload produced by the given agent.

    Matches the step key itself or keys of the form "<agent_id>/<suffix>".
    """
    for key, payload in agent_input.prior_results.items():
        if key == agent_id or key.startswith(f"{agent_id}/"):
            return payload
    return {}


def resume_snapshot(context: AgentContext) -> Dict[str, Any]:
    """Build the resume as the profile renders it: selected items with overrides applied.

    Args:
        context: Agent context carrying the profile and the master data.

    Returns:
        Dict with personal_info, experiences, projects, skills and education.
        Empty when the context carries no data.
    """
    if context.data is None:
        return {}

    data = context.data
    profile = context.profile

    def pick(records, ids, overrides):
        if profile is None:
            return [r.model_dump(exclude_none=True) for r in records]
        by_id = {r.id: r for r in records}
        selected = []
        for item_id in ids:
            if item_id in by_id:
                item = by_id[item_id].model_dump(exclude_none=True)
                item.update(
                    {k: v for k, v in overrides.get(item_id, {}).items() if k != "id"}
                )
                selected.append(item)
        return selected

    personal_info = data.personal_info.model_dump(exclude_none=True)
    if profile is not None:
        personal_info.update(profile.personal_info_override)

    return {
        "personal_info": personal_info,
        "experiences": pick(
            data.experiences,
            profile.experience_ids if profile else [],
            profile.experience_overrides if profile else {},
        ),
        "projects": pick(
            data.projects,
            profile.project_ids if profile else [],
            profile.project_overrides if profile else {},
        ),
        "skills": pick(
            data.skills,
            profile.skill_ids if profile else [],
            profile.skill_overrides if profile else {},
        ),
        "education": pick(
            data.education,
            profile.education_ids if profile else [],
            profile.education_overrides if profile else {},
        ),
    }


class Agent:
    """Base class for all agents.

    An agent turns a validated input plus the shared context into exactly one
    capability request and turns the raw response into a structured payload.
    It never calls the capability itself; the orchestrator does, so retries
    and timing live in one place.

    Subclasses set agent_id, name, description, input_model and output_model
    and implement prepare_request(). check_input() and post_process() are
    optional hooks.
    """

    agent_id: str = ""
    name: str = ""
    description: str = ""
    input_model: Type[AgentInput] = AgentInput
    output_model: Type[AgentOutput] = AgentOutput
    max_tokens: int = settings.DEFAULT_MAX_TOKENS
    temperature: float = settings.DEFAULT_TEMPERATURE

    # ------------------------------
    # Public interface
    # ------------------------------
    def validate_input(self, data: Dict[str, Any], context: AgentContext) -> AgentInput:
        """Validate raw input into the agent's input model.

        Raises:
            AgentInputError: If the input does not validate or is unusable
                in this context.
        """
        try:
            agent_input = self.input_model.model_validate(data)
        except ValidationError as e:
            raise AgentInputError(f"{self.agent_id}: invalid input: {e}") from e

        return self.check_input(agent_input, context)

    def check_input(self, agent_input: AgentInput, context: AgentContext) -> AgentInput:
        """Context-dependent checks. May return an enriched copy of the input."""
        return agent_input

    def prepare_request(self, agent_input: AgentInput, context: AgentContext) -> CapabilityRequest:
        raise NotImplementedError

    def parse_response(self, raw: str) -> Dict[str, Any]:
        """Parse raw capability output into the agent's payload.

        Raises:
            PermanentCapabilityError: If no JSON object can be extracted or it
                does not match the output model.
        """
        json_text = extract_json(raw)
        if json_text is None:
            logger.error(
                f" {self.agent_id} returned no parseable JSON. Raw response: {(raw or '')[:500]}"
            )
            raise PermanentCapabilityError(f"{self.agent_id}: response contained no JSON object")

        try:
            parsed = json.loads(json_text)
        except json.JSONDecodeError as e:
            raise PermanentCapabilityError(f"{self.agent_id}: invalid JSON: {e}") from e

        if not isinstance(parsed, dict):
            raise PermanentCapabilityError(
                f"{self.agent_id}: expected a JSON object, got {type(parsed).__name__}"
            )

        try:
            output = self.output_model.model_validate(parsed)
        except ValidationError as e:
            raise PermanentCapabilityError(
                f"{self.agent_id}: response does not match the expected shape: {e}"
            ) from e

        return output.model_dump()

    def post_process(
        self, output: Dict[str, Any], agent_input: AgentInput, context: AgentContext
    ) -> Dict[str, Any]:
        return output

    def describe(self) -> Dict[str, str]:
        return {"id": self.agent_id, "name": self.name, "description": self.description}

    # ------------------------------
    # Helpers for subclasses
    # ------------------------------
    def build_request(self, system_prompt: str, user_prompt: str) -> CapabilityRequest:
        return CapabilityRequest(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

    def require_data(self, context: AgentContext) -> DataBundle:
        if context.data is None:
            raise AgentInputError(f"{self.agent_id}: resume data is required")
        return context.data

    def require_job_description(self, context: AgentContext, minimum: int) -> str:
        job_description = context.job_description
        if len(job_description) < minimum:
            raise AgentInputError(
                f"{self.agent_id}: job description must be at least {minimum} characters"
            )
        return job_description


def format_list(items: List[str], empty: str = "None") -> str:
    return ", ".join(items) if items else empty
