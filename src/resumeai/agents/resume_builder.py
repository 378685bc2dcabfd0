"""
Selects the experiences and projects most relevant to a job.

CLASSES:
    SelectedItem
    SelectionAnalysis
    ResumeBuilderInput
    ResumeBuilderOutput
    ResumeBuilderAgent
"""

import json
import logging
from typing import List, Optional

from pydantic import Field

from resumeai.agents.base import (
    Agent,
    AgentContext,
    AgentInput,
    AgentOutput,
    format_list,
    prior_payload,
)
from resumeai.config.enums import AgentId
from resumeai.config.prompts import (
    JSON_ONLY_RULES,
    RESUME_BUILDER_SYSTEM_PROMPT as SYSTEM_PROMPT,
    RESUME_BUILDER_USER_PROMPT as USER_PROMPT_BASE,
)
from resumeai.config.validation_constants import (
    MIN_JOB_DESCRIPTION_LENGTH,
    MIN_RESUME_SELECTIONS,
)
from resumeai.utils.exceptions import AgentInputError
from resumeai.utils.llms import CapabilityRequest

logger = logging.getLogger(__name__)

FILL_REASON = "Added to meet the minimum selection count"


class SelectedItem(AgentOutput):
    id: str
    relevance_score: int = 0
    reasons: List[str] = []
    suggested_order: int = 0


class SelectionAnalysis(AgentOutput):
    selection_strategy: str = ""
    key_factors: List[str] = []
    missing_skills_needed: List[str] = []


class ResumeBuilderInput(AgentInput):
    min_experiences: Optional[int] = Field(default=None, ge=0)
    min_projects: Optional[int] = Field(default=None, ge=0)


class ResumeBuilderOutput(AgentOutput):
    selected_experiences: List[SelectedItem] = []
    selected_projects: List[SelectedItem] = []
    selection_analysis: SelectionAnalysis = SelectionAnalysis()


class ResumeBuilderAgent(Agent):
    """Picks which master experiences and projects go on a tailored resume.

    The selection always holds at least MIN_RESUME_SELECTIONS items in total
    (or every available item when there are fewer). Missing picks are filled
    from the master data in its own order.
    """

    agent_id = AgentId.RESUME_BUILDER.value
    name = "Resume Builder"
    description = "Selects the experiences and projects most relevant to a job"
    input_model = ResumeBuilderInput
    output_model = ResumeBuilderOutput

    def check_input(self, agent_input, context: AgentContext):
        data = self.require_data(context)
        self.require_job_description(context, MIN_JOB_DESCRIPTION_LENGTH)
        if not data.experiences and not data.projects:
            raise AgentInputError(f"{self.agent_id}: no experiences or projects to select from")
        return agent_input

    def prepare_request(self, agent_input: ResumeBuilderInput, context: AgentContext) -> CapabilityRequest:
        data = context.data
        skills = prior_payload(agent_input, AgentId.SKILLS_EXTRACTOR.value)
        summary = skills.get("extraction_summary", {})
        required_skills = summary.get("critical_skills", []) + summary.get("preferred_skills", [])

        available = len(data.experiences) + len(data.projects)
        system_prompt = SYSTEM_PROMPT.format(
            minimum=min(MIN_RESUME_SELECTIONS, available),
            rules=JSON_ONLY_RULES,
        )
        user_prompt = USER_PROMPT_BASE.format(
            job_description=context.job_description,
            required_skills=format_list(required_skills, empty="Not analyzed"),
            experiences=json.dumps([e.model_dump() for e in data.experiences], indent=2),
            projects=json.dumps([p.model_dump() for p in data.projects], indent=2),
        )
        return self.build_request(system_prompt, user_prompt)

    def post_process(self, output, agent_input: ResumeBuilderInput, context: AgentContext):
        """Drop unknown or repeated ids, then fill the selection up to its minimums."""
        data = context.data
        experiences = self._known(output["selected_experiences"], [e.id for e in data.experiences])
        projects = self._known(output["selected_projects"], [p.id for p in data.projects])

        if agent_input.min_experiences:
            self._fill(experiences, [e.id for e in data.experiences], agent_input.min_experiences)
        if agent_input.min_projects:
            self._fill(projects, [p.id for p in data.projects], agent_input.min_projects)

        available = len(data.experiences) + len(data.projects)
        minimum = min(MIN_RESUME_SELECTIONS, available)
        if len(experiences) + len(projects) < minimum:
            before = len(experiences) + len(projects)
            self._fill(experiences, [e.id for e in data.experiences], minimum - len(projects))
            self._fill(projects, [p.id for p in data.projects], minimum - len(experiences))
            logger.info(
                f" Resume builder selected {before} items, filled up to {len(experiences) + len(projects)}"
            )

        output["selected_experiences"] = experiences
        output["selected_projects"] = projects
        return output

    # ------------------------------
    # Internal helpers
    # ------------------------------
    @staticmethod
    def _known(selected, master_ids):
        """Keep selections whose id exists in master data, first occurrence wins, sorted by order."""
        master = set(master_ids)
        seen = set()
        kept = []
        for item in selected:
            if item["id"] in master and item["id"] not in seen:
                kept.append(item)
                seen.add(item["id"])
        # Unordered picks (0) go last, keeping the model's relative order
        kept.sort(key=lambda item: item["suggested_order"] or len(master) + 1)
        return kept

    @staticmethod
    def _fill(selected, master_ids, target):
        chosen = {item["id"] for item in selected}
        for item_id in master_ids:
            if len(selected) >= target:
                break
            if item_id not in chosen:
                selected.append(
                    {
                        "id": item_id,
                        "relevance_score": 0,
                        "reasons": [FILL_REASON],
                        "suggested_order": len(selected) + 1,
                    }
                )
                chosen.add(item_id)
