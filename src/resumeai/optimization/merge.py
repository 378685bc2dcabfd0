"""
Optimization Merge Engine - folds an OptimizationOutput into a profile.

merge() is pure: it deep-copies its inputs and returns a new profile and a
new data bundle for the caller to persist. It never raises for data-shape
problems. References that would dangle are filtered out, logged and recorded
as repairs in the stamped provenance block.

Steps:
    1. Resolve new skill names against master skills (case-insensitive),
       creating master records only for names not seen before
    2. Add the resolved skill ids to the profile's skill list (ordered set)
    3. Apply item rewrites as override patches and recommended orders
    4. Validate referential integrity and repair what is broken
    5. Stamp ai_optimization provenance (new_skills lists the created
       master skills, resolved_skills every skill the output named)

FUNCTIONS:
    merge                    (public)
    job_description_hash     (public)
    is_optimization_stale    (public)
"""

import hashlib
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from resumeai.config import settings
from resumeai.config.schemas import (
    AIOptimization,
    DataBundle,
    NewSkillRecord,
    Profile,
    Skill,
)
from resumeai.optimization.output import NewSkillEntry, OptimizationOutput
from resumeai.utils.exceptions import MergeInvariantViolation
from resumeai.utils.normalization import normalize_token, skill_key, unique_ids

logger = logging.getLogger(__name__)

# (category, profile id-list attribute, override-map attribute, bundle attribute, output attribute)
CATEGORIES = (
    ("experience", "experience_ids", "experience_overrides", "experiences", "experiences"),
    ("project", "project_ids", "project_overrides", "projects", "projects"),
    ("skill", "skill_ids", "skill_overrides", "skills", "skills"),
    ("education", "education_ids", "education_overrides", "education", "education"),
)

ORDERS = (
    ("experience_ids", "recommended_experience_order"),
    ("project_ids", "recommended_project_order"),
    ("skill_ids", "recommended_skill_order"),
)


def _default_id_factory() -> str:
    return f"skill_{uuid.uuid4().hex[:12]}"


def job_description_hash(job_description: Optional[str]) -> str:
    """Stable fingerprint of a job description, insensitive to whitespace changes."""
    normalized = normalize_token(job_description or "")
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]


def is_optimization_stale(
    profile: Profile,
    job_description: Optional[str],
    max_age_hours: float = settings.OPTIMIZATION_MAX_AGE_HOURS,
    now: Optional[datetime] = None,
) -> bool:
    """
    Decide whether a profile's last optimization should be regenerated.

    Args:
        profile: Profile to check.
        job_description: Job description the caller wants to optimize for.
        max_age_hours: Age after which an optimization is stale.
        now: Current time (UTC). Defaults to datetime.now(timezone.utc).

    Returns:
        True if the profile was never optimized, the optimization is older
        than max_age_hours, or it was made for a different job description.
    """

    optimization = profile.ai_optimization
    if optimization is None:
        return True

    now = now or datetime.now(timezone.utc)
    try:
        stamped = datetime.fromisoformat(optimization.timestamp)
    except ValueError:
        logger.warning(f" Unreadable optimization timestamp on profile {profile.id}")
        return True
    if stamped.tzinfo is None:
        stamped = stamped.replace(tzinfo=timezone.utc)

    if now - stamped > timedelta(hours=max_age_hours):
        return True

    return job_description_hash(job_description) != optimization.job_description_hash


# ---------- MERGE STEPS ----------


def _resolve_new_skills(
    profile: Profile,
    bundle: DataBundle,
    output: OptimizationOutput,
    source_context: Optional[str],
    id_factory: Callable[[], str],
) -> List[NewSkillRecord]:
    """Steps 1 and 2."""
    by_key: Dict[str, Skill] = {}
    for skill in bundle.skills:
        by_key.setdefault(skill_key(skill.name), skill)
    used_ids = {skill.id for skill in bundle.skills}

    records: List[NewSkillRecord] = []
    recorded = set()
    for entry in output.new_skills:
        if isinstance(entry, str):
            entry = NewSkillEntry(name=entry)
        name = normalize_token(entry.name)
        if not name:
            continue

        key = skill_key(name)
        skill = by_key.get(key)
        created = skill is None
        if created:
            base_id = skill_id = id_factory()
            suffix = 1
            while skill_id in used_ids:
                suffix += 1
                skill_id = f"{base_id}-{suffix}"
            skill = Skill(
                id=skill_id,
                name=name,
                details=normalize_token(entry.details),
                source="optimization",
                source_context=source_context or None,
            )
            bundle.skills.append(skill)
            by_key[key] = skill
            used_ids.add(skill_id)

        if skill.id not in profile.skill_ids:
            profile.skill_ids.append(skill.id)

        if skill.id not in recorded:
            records.append(NewSkillRecord(id=skill.id, name=skill.name, created=created))
            recorded.add(skill.id)

    return records


def _apply_patches(
    profile: Profile, output: OptimizationOutput, repairs: List[MergeInvariantViolation]
) -> None:
    """Step 3: override patches and recommended orders."""
    for category, ids_attr, overrides_attr, _, output_attr in CATEGORIES:
        selected = set(getattr(profile, ids_attr))
        overrides = getattr(profile, overrides_attr)
        for item_id, patch in getattr(output, output_attr).items():
            if item_id not in selected:
                repairs.append(
                    MergeInvariantViolation(category, item_id, "is not in the profile; patch dropped")
                )
                continue
            fields = {k: v for k, v in patch.items() if k != "id"}
            if fields:
                overrides.setdefault(item_id, {}).update(fields)

    for ids_attr, order_attr in ORDERS:
        recommended = [i for i in unique_ids(getattr(output, order_attr)) if i in getattr(profile, ids_attr)]
        if recommended:
            rest = [i for i in getattr(profile, ids_attr) if i not in set(recommended)]
            setattr(profile, ids_attr, recommended + rest)


def _validate(profile: Profile, bundle: DataBundle) -> List[MergeInvariantViolation]:
    """Step 4: filter dangling and duplicate references, report name collisions."""
    repairs: List[MergeInvariantViolation] = []

    for category, ids_attr, overrides_attr, bundle_attr, _ in CATEGORIES:
        master_ids = {record.id for record in getattr(bundle, bundle_attr)}

        kept = []
        for item_id in getattr(profile, ids_attr):
            if item_id not in master_ids:
                repairs.append(MergeInvariantViolation(category, item_id, "missing from master data"))
            elif item_id in kept:
                repairs.append(MergeInvariantViolation(category, item_id, "listed more than once"))
            else:
                kept.append(item_id)
        setattr(profile, ids_attr, kept)

        overrides = getattr(profile, overrides_attr)
        for item_id in list(overrides):
            if item_id not in master_ids:
                repairs.append(
                    MergeInvariantViolation(category, item_id, "override has no master record")
                )
                del overrides[item_id]
            elif "id" in overrides[item_id]:
                repairs.append(MergeInvariantViolation(category, item_id, "override patched the id"))
                del overrides[item_id]["id"]

    seen: Dict[str, str] = {}
    for skill in bundle.skills:
        key = skill_key(skill.name)
        if key in seen:
            repairs.append(
                MergeInvariantViolation(
                    "skill", skill.id, f"has the same name as master skill {seen[key]}"
                )
            )
        else:
            seen[key] = skill.id

    return repairs


# ---------- PUBLIC INTERFACE ----------


def merge(
    profile: Profile,
    bundle: DataBundle,
    output: OptimizationOutput,
    now: Optional[datetime] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> Tuple[Profile, DataBundle]:
    """
    Merge an optimization into a profile and its master data.

    Re-merging the same output is a no-op for skills (names resolve to the
    same ids) and rewrites overrides with identical values. A different
    output always wins (last merge wins).

    Args:
        profile: Profile to update. Not mutated.
        bundle: Master data the profile views. Not mutated.
        output: What to merge.
        now: Timestamp for the provenance stamp. Defaults to now (UTC).
        id_factory: Allocates ids for new master skills.

    Returns:
        (profile', bundle'): the merged copies.
    """

    profile = profile.model_copy(deep=True)
    bundle = bundle.model_copy(deep=True)
    now = now or datetime.now(timezone.utc)
    job_context = output.job_context

    resolved_skills = _resolve_new_skills(
        profile,
        bundle,
        output,
        job_context.summary() if job_context else None,
        id_factory or _default_id_factory,
    )

    repairs: List[MergeInvariantViolation] = []
    _apply_patches(profile, output, repairs)

    # A summary is only rewritten, never introduced
    summary = output.personal_info.get("summary")
    if summary and (profile.personal_info_override.get("summary") or bundle.personal_info.summary):
        profile.personal_info_override["summary"] = summary

    repairs += _validate(profile, bundle)
    for repair in repairs:
        logger.warning(
            f" Merge repair: {repair}",
            extra={
                "extra_fields": {
                    "profile_id": profile.id,
                    "category": repair.category,
                    "item_id": repair.item_id,
                }
            },
        )

    profile.ai_optimization = AIOptimization(
        timestamp=now.isoformat(),
        job_context=job_context,
        job_description_hash=job_description_hash(job_context.job_description if job_context else None),
        new_skills=[s for s in resolved_skills if s.created],
        resolved_skills=resolved_skills,
        key_insights=list(output.key_insights),
        change_analysis=output.change_analysis,
        repairs=[str(repair) for repair in repairs],
    )

    logger.info(
        f" Merged optimization into profile {profile.id}",
        extra={
            "extra_fields": {
                "profile_id": profile.id,
                "resolved_skills": len(resolved_skills),
                "created_skills": sum(1 for s in resolved_skills if s.created),
                "repairs": len(repairs),
            }
        },
    )
    return profile, bundle
