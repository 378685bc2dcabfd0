"""
Optimization output: the merge engine's input, and how it is collected from
a workflow result.

Key Models:
    - NewSkillEntry: a skill to add, with optional details
    - OptimizationOutput: per-id patches, new skills, orders and provenance notes

Collection order:
    1. content-optimizer rewrites
    2. resume-optimizer rewrites, overriding (1) field by field per id
    3. resume-builder selection order, only where (2) recommends no order
"""

import logging
from typing import Any, Dict, List, Optional, Union

from resumeai.config.enums import AgentId
from resumeai.config.result_schemas import WorkflowResult
from resumeai.config.schemas import CamelModel, JobContext

logger = logging.getLogger(__name__)

# Fields an agent may rewrite, per item category
REWRITABLE_FIELDS = {
    "experience": ("bullets", "tags"),
    "project": ("bullets", "tags"),
    "skill": ("name", "details"),
}


class NewSkillEntry(CamelModel):
    name: str
    details: str = ""


class OptimizationOutput(CamelModel):
    """Everything a merge applies to a profile.

    Item patches are keyed by the id of the master record they rewrite.
    """

    job_context: Optional[JobContext] = None
    personal_info: Dict[str, Any] = {}
    experiences: Dict[str, Dict[str, Any]] = {}
    projects: Dict[str, Dict[str, Any]] = {}
    skills: Dict[str, Dict[str, Any]] = {}
    education: Dict[str, Dict[str, Any]] = {}
    # Bare names or name + details
    new_skills: List[Union[str, NewSkillEntry]] = []
    recommended_experience_order: List[str] = []
    recommended_project_order: List[str] = []
    recommended_skill_order: List[str] = []
    key_insights: List[str] = []
    change_analysis: Optional[Dict[str, Any]] = None


def _patch(item: Dict[str, Any], category: str) -> Dict[str, Any]:
    return {
        field: item[field]
        for field in REWRITABLE_FIELDS[category]
        if item.get(field) is not None
    }


def collect_optimization_output(
    result: WorkflowResult, job_context: Optional[JobContext] = None
) -> OptimizationOutput:
    """
    Fold the successful agent payloads of a workflow into one OptimizationOutput.

    Failed agents contribute nothing. A workflow without any optimizing agent
    yields an output carrying only the job context.

    Args:
        result: Workflow result to collect from.
        job_context: The job the workflow was tailored to.

    Returns:
        OptimizationOutput ready for merge().
    """

    patches: Dict[str, Dict[str, Dict[str, Any]]] = {
        "experience": {},
        "project": {},
        "skill": {},
    }
    output: Dict[str, Any] = {"job_context": job_context}

    # 1. Content optimizer
    content = result.get(AgentId.CONTENT_OPTIMIZER.value)
    if content is not None and content.success:
        for item in content.payload.get("optimized_items", []):
            category = item.get("type")
            if category in patches:
                patch = _patch(item, category)
                if patch:
                    patches[category].setdefault(item["id"], {}).update(patch)

    # 2. Resume optimizer
    optimizer = result.get(AgentId.RESUME_OPTIMIZER.value)
    if optimizer is not None and optimizer.success:
        payload = optimizer.payload
        for category, key in (
            ("experience", "experience_optimizations"),
            ("project", "project_optimizations"),
            ("skill", "skill_optimizations"),
        ):
            for item in payload.get(key, []):
                patch = _patch(item, category)
                if patch:
                    patches[category].setdefault(item["id"], {}).update(patch)

        summary = (payload.get("personal_info") or {}).get("summary")
        if summary:
            output["personal_info"] = {"summary": summary}

        output["new_skills"] = [
            NewSkillEntry(name=s["name"], details=s.get("details", ""))
            for s in payload.get("new_skills", [])
        ]
        output["recommended_experience_order"] = payload.get("recommended_experience_order", [])
        output["recommended_project_order"] = payload.get("recommended_project_order", [])
        output["recommended_skill_order"] = payload.get("recommended_skill_order", [])
        output["key_insights"] = payload.get("key_insights", [])
        output["change_analysis"] = payload.get("change_analysis")

    # 3. Resume builder order as fallback
    builder = result.get(AgentId.RESUME_BUILDER.value)
    if builder is not None and builder.success:
        if not output.get("recommended_experience_order"):
            output["recommended_experience_order"] = [
                s["id"] for s in builder.payload.get("selected_experiences", [])
            ]
        if not output.get("recommended_project_order"):
            output["recommended_project_order"] = [
                s["id"] for s in builder.payload.get("selected_projects", [])
            ]

    collected = OptimizationOutput(
        experiences=patches["experience"],
        projects=patches["project"],
        skills=patches["skill"],
        **output,
    )
    logger.debug(
        " Collected optimization output",
        extra={
            "extra_fields": {
                "experience_patches": len(collected.experiences),
                "project_patches": len(collected.projects),
                "skill_patches": len(collected.skills),
                "new_skills": len(collected.new_skills),
            }
        },
    )
    return collected
