# ---------- TESTS FOR API SERVER ----------

import asyncio

import pytest
from fastapi.testclient import TestClient

from resumeai.api.server import create_app
from resumeai.main import create_orchestrator
from resumeai.optimization.store import InMemoryProfileStore

from conftest import ALL_RESPONSES, JOB_DESCRIPTION, FakeCapability


@pytest.fixture
def client():
    orchestrator = create_orchestrator(capability=FakeCapability(ALL_RESPONSES), base_delay=0)
    return TestClient(create_app(orchestrator=orchestrator))


@pytest.fixture
def profile_payload(profile_data):
    # JavaScript clients send camelCase keys
    return profile_data.model_dump(mode="json", by_alias=True)


@pytest.fixture
def job_payload():
    return {"jobDescription": JOB_DESCRIPTION, "position": "Backend Engineer", "company": "Globex"}


# --- AGENTS ---


def test_list_agents(client):
    """Test that every registered agent is listed."""
    response = client.get("/api/agents")

    assert response.status_code == 200
    agents = response.json()["agents"]
    assert len(agents) == 7
    assert agents[0] == {
        "id": "skills-extractor",
        "name": "Skills Extractor",
        "description": "Extracts skills, technologies and requirements from job descriptions or resumes",
    }


def test_execute_agent(client, job_payload):
    """Test running one agent over HTTP."""
    response = client.post(
        "/api/agents/grammar-enhancer/execute",
        json={
            "input": {"text": "led migration to go", "instruction": "Polish"},
            "jobContext": job_payload,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"]
    assert data["agentId"] == "grammar-enhancer"
    assert data["payload"]["enhanced_text"] == "Led the migration of billing services to Go."


def test_execute_agent_input_error(client):
    """Test that rejected agent input is a failed result, not an HTTP error."""
    response = client.post("/api/agents/resume-builder/execute", json={"input": {}})

    assert response.status_code == 200
    data = response.json()
    assert not data["success"]
    assert data["errorType"] == "AgentInputError"


def test_execute_unknown_agent(client):
    """Test that an unknown agent id is a 404."""
    response = client.post("/api/agents/ghost/execute", json={"input": {}})

    assert response.status_code == 404
    assert response.json()["detail"] == "Unknown agent: ghost"


# --- WORKFLOWS ---


def test_execute_workflow(client, profile_payload, job_payload):
    """Test running a workflow and the camelCase response."""
    response = client.post(
        "/api/workflows/execute",
        json={
            "workflowType": "resume-review",
            "profileData": profile_payload,
            "jobContext": job_payload,
            "parallelExecution": True,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"]
    assert data["workflowType"] == "resume-review"
    assert set(data["agentResults"]) == {"resume-reviewer", "ats-optimizer"}
    assert data["insights"]["overallScore"] == 76
    assert "totalExecutionTimeMs" in data


def test_execute_workflow_unknown_type(client, profile_payload):
    """Test that an unknown workflow type is a 400."""
    response = client.post(
        "/api/workflows/execute",
        json={"workflowType": "nope", "profileData": profile_payload},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Unknown workflow type: nope", "message": "Configuration error"}


def test_execute_workflow_invalid_parameters(client, profile_payload):
    """Test that invalid parameters give a failed workflow result."""
    response = client.post(
        "/api/workflows/execute",
        json={
            "workflowType": "ats-optimization",
            "profileData": profile_payload,
            "parameters": {"review_depth": "forensic"},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert not data["success"]
    assert "Invalid parameters" in data["error"]
    assert data["agentResults"] == {}


def test_execute_workflow_validation_error(client):
    """Test that a malformed body is a 422 with details."""
    response = client.post("/api/workflows/execute", json={"workflowType": "resume-review"})

    assert response.status_code == 422
    data = response.json()
    assert "detail" in data
    assert "message" in data


# --- OPTIMIZE AND MERGE ---


def test_optimize(client, profile_payload, job_payload):
    """Test the optimize-and-merge endpoint."""
    response = client.post(
        "/api/optimize",
        json={"profileData": profile_payload, "jobContext": job_payload, "parameters": {"glazeLevel": 3}},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"]
    assert data["merged"]
    assert not data["skipped"]
    assert "Kubernetes" in [s["name"] for s in data["data"]["skills"]]
    assert "skill-go" in data["profile"]["skillIds"]
    assert data["profile"]["aiOptimization"]["jobContext"]["company"] == "Globex"


def test_optimize_fresh_profile_is_skipped(client, profile_payload, job_payload):
    """Test that re-optimizing the returned profile for the same job is skipped."""
    first = client.post("/api/optimize", json={"profileData": profile_payload, "jobContext": job_payload}).json()

    response = client.post(
        "/api/optimize",
        json={"profileData": {"profile": first["profile"], "data": first["data"]}, "jobContext": job_payload},
    )

    data = response.json()
    assert data["success"]
    assert data["skipped"]
    assert data["result"] is None


def test_merge(client, profile_payload):
    """Test merging an optimization output without running agents."""
    response = client.post(
        "/api/merge",
        json={
            "profile": profile_payload["profile"],
            "data": profile_payload["data"],
            "output": {
                "newSkills": ["go", {"name": "Terraform", "details": "Modules"}],
                "experiences": {"exp-1": {"bullets": ["Rewritten"]}},
            },
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert [s["name"] for s in data["data"]["skills"]] == ["GO", "Python", "SQL", "Terraform"]
    assert data["profile"]["experienceOverrides"] == {"exp-1": {"bullets": ["Rewritten"]}}
    assert "skill-go" in data["profile"]["skillIds"]


# --- MIDDLEWARE AND STATS ---


def test_request_id_is_echoed(client):
    """Test that the X-Request-ID header is returned on the response."""
    response = client.get("/api/agents", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def test_stats(client):
    """Test that agent runs are counted."""
    client.post(
        "/api/agents/grammar-enhancer/execute",
        json={"input": {"text": "fix me", "instruction": "Polish"}},
    )

    stats = client.get("/api/stats").json()

    assert stats["total_executions"] == 1
    assert stats["agent_usage"] == {"grammar-enhancer": 1}


def test_request_id_is_generated(client):
    """Test that a request without X-Request-ID still gets one."""
    response = client.get("/api/agents")

    assert len(response.headers["X-Request-ID"]) == 16


# --- PROFILE STORE ---


def test_merges_accumulate_in_store(profile_data, profile_payload):
    """Test that merges posted with the same stale body build on the stored profile."""
    store = InMemoryProfileStore([profile_data])
    orchestrator = create_orchestrator(capability=FakeCapability(ALL_RESPONSES), base_delay=0)
    client = TestClient(create_app(orchestrator=orchestrator, store=store))

    for skill in ("Terraform", "Rust"):
        client.post(
            "/api/merge",
            json={
                "profile": profile_payload["profile"],
                "data": profile_payload["data"],
                "output": {"newSkills": [skill]},
            },
        )

    stored = asyncio.run(store.load("profile-1"))
    assert [s.name for s in stored.data.skills] == ["GO", "Python", "SQL", "Terraform", "Rust"]
    assert len(stored.profile.skill_ids) == 4
