"""
Profile persistence seam for optimize-and-merge runs.

optimize_resume() loads the current profile and master data through a store
after taking the profile's lock and saves the merged result before releasing
it. A serialized run therefore always merges on top of the previous run's
output instead of on the snapshot the caller read earlier.

The real persistence layer lives outside this package; it only has to
provide load() and save(). InMemoryProfileStore is the reference store used
by tests and single-process deployments.

CLASSES:
    ProfileStore          (protocol)
    InMemoryProfileStore
"""

from typing import Dict, Iterable, Optional, Protocol

from resumeai.config.schemas import ProfileData
from resumeai.utils.logger import get_logger

logger = get_logger(__name__)


class ProfileStore(Protocol):
    async def load(self, profile_id: str) -> Optional[ProfileData]:
        """Current profile and master data, or None if the profile is unknown."""
        ...

    async def save(self, profile_data: ProfileData) -> None:
        """Write a merged profile and master data atomically."""
        ...


class InMemoryProfileStore:
    """Keeps deep copies, so callers never share state with the store."""

    def __init__(self, initial: Iterable[ProfileData] = ()):
        self._profiles: Dict[str, ProfileData] = {}
        for profile_data in initial:
            self._profiles[profile_data.profile.id] = profile_data.model_copy(deep=True)

    async def load(self, profile_id: str) -> Optional[ProfileData]:
        stored = self._profiles.get(profile_id)
        return stored.model_copy(deep=True) if stored is not None else None

    async def save(self, profile_data: ProfileData) -> None:
        self._profiles[profile_data.profile.id] = profile_data.model_copy(deep=True)
        logger.info(
            f" Stored profile {profile_data.profile.id}",
            extra={
                "extra_fields": {
                    "profile_id": profile_data.profile.id,
                    "skills": len(profile_data.data.skills),
                }
            },
        )

    def __contains__(self, profile_id: str) -> bool:
        return profile_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)
