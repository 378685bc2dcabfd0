"""
Domain Schemas for master data and resume profiles.

This module defines the Pydantic models for the user's master record set
(DataBundle) and the renderable selection/override views over it (Profile).

Key Models:
    - PersonalInfo, Experience, Project, Skill, Education: master records
    - DataBundle: the complete master record set
    - Profile: id-list selection + per-category override maps over a DataBundle
    - AIOptimization: provenance block stamped by the merge engine
    - JobContext: the target job an optimization is tailored to

Note:
    All models accept both snake_case field names and camelCase aliases so
    payloads produced by the generation capability (and by JavaScript clients)
    validate without translation.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting camelCase aliases as well as field names."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
    )


# ----- MASTER RECORDS -----


class PersonalInfo(CamelModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None
    summary: Optional[str] = None


class Experience(CamelModel):
    id: str
    title: str = ""
    company: str = ""
    date: str = ""
    bullets: List[str] = []
    tags: List[str] = []


class Project(CamelModel):
    id: str
    title: str = ""
    link: Optional[str] = None
    bullets: List[str] = []
    tags: List[str] = []


class Skill(CamelModel):
    """A skill group, e.g. name="Cloud Platforms", details="AWS, GCP".

    Skills discovered during optimization carry source="optimization" and a
    short summary of the job context that introduced them.
    """

    id: str
    name: str
    details: str = ""
    source: str = "user"  # "user" or "optimization"
    source_context: Optional[str] = None


class Education(CamelModel):
    id: str
    title: str = ""
    details: str = ""


class DataBundle(CamelModel):
    """The user's master record set."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    experiences: List[Experience] = []
    projects: List[Project] = []
    skills: List[Skill] = []
    education: List[Education] = []


# ----- JOB CONTEXT -----


class JobContext(CamelModel):
    """The target job. Every field is optional; workflows degrade without it."""

    job_description: Optional[str] = None
    position: Optional[str] = None
    company: Optional[str] = None
    url: Optional[str] = None

    def summary(self) -> str:
        """Short human-readable label, e.g. "Backend Engineer at Acme"."""
        if self.position and self.company:
            return f"{self.position} at {self.company}"
        if self.position or self.company:
            return self.position or self.company
        if self.job_description:
            return self.job_description.strip()[:80]
        return ""


# ----- PROFILE -----


class NewSkillRecord(CamelModel):
    """A skill an optimization resolved for a profile."""

    id: str
    name: str
    created: bool  # True if the master record was created by the merge


class AIOptimization(CamelModel):
    """Provenance of the latest optimization merged into a profile."""

    timestamp: str
    job_context: Optional[JobContext] = None
    job_description_hash: str = ""
    # Skills whose master record the merge created
    new_skills: List[NewSkillRecord] = []
    # Every skill the optimization named, created or matched to an existing record
    resolved_skills: List[NewSkillRecord] = []
    key_insights: List[str] = []
    change_analysis: Optional[Dict[str, Any]] = None
    repairs: List[str] = []


class Profile(CamelModel):
    """A named selection + override view over a DataBundle."""

    id: str
    name: str = ""
    experience_ids: List[str] = []
    project_ids: List[str] = []
    skill_ids: List[str] = []
    education_ids: List[str] = []
    # Profile-specific patches that never modify master data
    experience_overrides: Dict[str, Dict[str, Any]] = {}
    project_overrides: Dict[str, Dict[str, Any]] = {}
    skill_overrides: Dict[str, Dict[str, Any]] = {}
    education_overrides: Dict[str, Dict[str, Any]] = {}
    personal_info_override: Dict[str, Any] = {}
    section_order: List[str] = ["experience", "projects", "skills", "education"]
    template: str = "classic"
    ai_optimization: Optional[AIOptimization] = None


class ProfileData(CamelModel):
    """Profile + master data snapshot handed to the orchestrator (read-only)."""

    profile: Profile
    data: DataBundle
