"""
Insight Synthesizer - cross-agent highlights for a successful workflow.

Pure reducer over agent payloads; no capability calls.

FUNCTIONS:
    synthesize_insights   (public)
"""

from typing import Dict, List, Optional

from resumeai.config.enums import AgentId
from resumeai.config.result_schemas import AgentResult, WorkflowInsights
from resumeai.config.validation_constants import (
    MAX_KEY_RECOMMENDATIONS,
    MAX_PRIORITY_ACTIONS,
)
from resumeai.utils.normalization import normalize_list


def _payloads(agent_results: Dict[str, AgentResult], agent_id: str) -> List[dict]:
    return [r.payload for r in agent_results.values() if r.success and r.agent_id == agent_id]


def _scores(agent_results: Dict[str, AgentResult]) -> List[int]:
    """Scores reported by agents that grade the resume (0-100)."""
    scores = []
    for payload in _payloads(agent_results, AgentId.RESUME_REVIEWER.value):
        score = payload.get("overall_assessment", {}).get("score")
        if score is not None:
            scores.append(score)
    for payload in _payloads(agent_results, AgentId.ATS_OPTIMIZER.value):
        score = payload.get("overall_ats_score", {}).get("score")
        if score is not None:
            scores.append(score)
    for payload in _payloads(agent_results, AgentId.RESUME_OPTIMIZER.value):
        score = (payload.get("change_analysis") or {}).get("job_alignment_score")
        if score is not None:
            scores.append(score)
    return scores


def _impact(success_rate: float) -> str:
    if success_rate >= 80:
        return "High"
    if success_rate >= 60:
        return "Medium"
    return "Low"


def synthesize_insights(
    agent_results: Dict[str, AgentResult], workflow_type: Optional[str] = None
) -> WorkflowInsights:
    """
    Reduce agent results to a handful of highlights.

    Highlights are ordered: readiness score, newly identified skills, missing
    critical skills, ATS grade. Each only appears when an agent produced it.

    Args:
        agent_results: Results of a workflow, keyed by step key.
        workflow_type: Workflow the results came from (unused by the reducer,
            kept for callers that log it).

    Returns:
        WorkflowInsights. overall_score is the mean of the reported scores,
        or the success rate when no agent reported one.
    """

    total = len(agent_results)
    succeeded = sum(1 for r in agent_results.values() if r.success)
    success_rate = (succeeded / total) * 100 if total else 0.0

    scores = _scores(agent_results)
    overall_score = round(sum(scores) / len(scores)) if scores else round(success_rate)

    highlights = []
    recommendations: List[str] = []
    actions: List[str] = []

    # 1. Readiness
    if scores:
        highlights.append(f"Resume readiness score: {overall_score}/100")

    # 2. New skills
    new_skills = []
    for payload in _payloads(agent_results, AgentId.RESUME_OPTIMIZER.value):
        new_skills += [s["name"] for s in payload.get("new_skills", [])]
    new_skills = normalize_list(new_skills)
    if new_skills:
        highlights.append(f"Newly identified skills: {', '.join(new_skills)}")

    # 3. Skill gaps
    missing = []
    for payload in _payloads(agent_results, AgentId.SKILLS_EXTRACTOR.value):
        gaps = payload.get("skill_gaps") or {}
        missing += [s["name"] for s in gaps.get("missing_critical_skills", [])]
        recommendations += gaps.get("recommendations", [])
    missing = normalize_list(missing)
    if missing:
        highlights.append(f"Missing critical skills: {', '.join(missing)}")

    # 4. ATS
    for payload in _payloads(agent_results, AgentId.ATS_OPTIMIZER.value):
        ats = payload.get("overall_ats_score", {})
        if ats.get("grade"):
            highlights.append(f"ATS compatibility: {ats['grade']} ({ats.get('score', 0)}/100)")
        actions += [a["action"] for a in payload.get("action_plan", {}).get("immediate", [])]

    for payload in _payloads(agent_results, AgentId.RESUME_REVIEWER.value):
        review = payload.get("recommendations", {})
        recommendations = review.get("immediate", []) + recommendations
        actions += review.get("short_term", [])

    for payload in _payloads(agent_results, AgentId.RESUME_OPTIMIZER.value):
        recommendations += payload.get("key_insights", [])

    return WorkflowInsights(
        overall_score=overall_score,
        highlights=highlights,
        key_recommendations=normalize_list(recommendations)[:MAX_KEY_RECOMMENDATIONS],
        priority_actions=normalize_list(actions)[:MAX_PRIORITY_ACTIONS],
        estimated_impact=_impact(success_rate),
    )
