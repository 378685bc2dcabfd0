# ---------- TESTS FOR PROFILE STORE ----------

import asyncio

from resumeai.config.schemas import ProfileData
from resumeai.optimization.store import InMemoryProfileStore


def test_load_unknown_profile():
    """Test that an unknown profile id loads as None."""
    assert asyncio.run(InMemoryProfileStore().load("ghost")) is None


def test_load_returns_a_copy(profile_data):
    """Test that mutating a loaded profile does not change the stored one."""
    store = InMemoryProfileStore([profile_data])

    loaded = asyncio.run(store.load("profile-1"))
    loaded.profile.skill_ids.append("skill-go")

    again = asyncio.run(store.load("profile-1"))
    assert again.profile.skill_ids == ["skill-py", "skill-sql"]


def test_save_replaces_and_copies(profile_data):
    """Test that save replaces the stored profile and keeps its own copy."""
    store = InMemoryProfileStore()
    updated = ProfileData(profile=profile_data.profile.model_copy(deep=True), data=profile_data.data)
    updated.profile.skill_ids = ["skill-go"]

    asyncio.run(store.save(updated))
    updated.profile.skill_ids.append("skill-py")

    assert "profile-1" in store
    assert len(store) == 1
    assert asyncio.run(store.load("profile-1")).profile.skill_ids == ["skill-go"]


def test_initial_profiles_are_copied(profile_data):
    """Test that the store is independent of the profiles it was seeded with."""
    store = InMemoryProfileStore([profile_data])
    profile_data.profile.skill_ids.clear()

    assert asyncio.run(store.load("profile-1")).profile.skill_ids == ["skill-py", "skill-sql"]
