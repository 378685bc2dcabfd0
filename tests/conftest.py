# ---------- SHARED FIXTURES ----------

import json

import pytest
from pydantic import ConfigDict

from resumeai.agents.base import Agent, AgentContext, AgentInput, AgentOutput
from resumeai.config.request_schemas import WorkflowRequest
from resumeai.config.schemas import (
    DataBundle,
    Education,
    Experience,
    JobContext,
    PersonalInfo,
    Profile,
    ProfileData,
    Project,
    Skill,
)

JOB_DESCRIPTION = (
    "We are hiring a backend engineer to build Go and Kubernetes services, "
    "own CI/CD pipelines and mentor junior engineers."
)

# Phrase in each built-in agent's system prompt, used to route fake responses
AGENT_MARKERS = {
    "skills-extractor": "Skills Extraction agent",
    "resume-builder": "Resume Builder agent",
    "content-optimizer": "Content Optimization agent",
    "resume-optimizer": "Resume Optimization agent",
    "ats-optimizer": "ATS Optimization agent",
    "resume-reviewer": "Resume Review agent",
    "grammar-enhancer": "Grammar Enhancement agent",
}


class FakeCapability:
    """In-memory generation capability.

    responses maps an agent id to one of:
    - a response string
    - an exception instance (raised)
    - an async callable taking the request
    - a list of the above, consumed in order (the last one repeats)
    """

    def __init__(self, responses=None, default="{}"):
        self.responses = dict(responses or {})
        self.default = default
        self.calls = []

    def identify(self, request):
        for agent_id, marker in AGENT_MARKERS.items():
            if marker in request.system_prompt:
                return agent_id
        # Test agents put their id in the user prompt
        return request.user_prompt

    def count(self, agent_id):
        return self.calls.count(agent_id)

    async def generate(self, request):
        agent_id = self.identify(request)
        self.calls.append(agent_id)

        response = self.responses.get(agent_id, self.default)
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            response = await response(request)
        return response


class EchoInput(AgentInput):
    model_config = ConfigDict(extra="allow")


class EchoOutput(AgentOutput):
    model_config = ConfigDict(extra="allow")


class EchoAgent(Agent):
    """Test agent: sends its own id as the prompt and keeps every input and response key."""

    input_model = EchoInput
    output_model = EchoOutput

    def __init__(self, agent_id):
        self.agent_id = agent_id
        self.name = agent_id
        self.description = f"Test agent {agent_id}"
        self.seen_inputs = []
        self.seen_contexts = []

    def prepare_request(self, agent_input, context):
        self.seen_inputs.append(agent_input)
        self.seen_contexts.append(context)
        return self.build_request("Test agent", self.agent_id)


class MutatingAgent(EchoAgent):
    """Test agent that scribbles on its context before building the request."""

    def prepare_request(self, agent_input, context):
        context.metadata["touched_by"] = self.agent_id
        context.profile.skill_ids.append(f"{self.agent_id}-skill")
        return super().prepare_request(agent_input, context)


# --- MOCK DATA ---


@pytest.fixture
def bundle():
    return DataBundle(
        personal_info=PersonalInfo(
            full_name="Ada Example",
            email="ada@example.com",
            summary="Backend engineer with six years of Python experience.",
        ),
        experiences=[
            Experience(
                id="exp-1",
                title="Backend Engineer",
                company="Acme",
                date="2020 - Present",
                bullets=["Built Python APIs", "Ran PostgreSQL in production"],
                tags=["Python", "PostgreSQL"],
            ),
            Experience(
                id="exp-2",
                title="Developer",
                company="Initech",
                date="2017 - 2020",
                bullets=["Maintained billing services"],
                tags=["Java"],
            ),
        ],
        projects=[
            Project(id="proj-1", title="Log shipper", bullets=["Wrote a log shipper in Go"], tags=["Go"]),
            Project(id="proj-2", title="Chess engine", bullets=["Bitboard move generator"], tags=["C"]),
        ],
        skills=[
            Skill(id="skill-go", name="GO", details="Services and CLIs"),
            Skill(id="skill-py", name="Python", details="FastAPI, asyncio"),
            Skill(id="skill-sql", name="SQL", details="PostgreSQL"),
        ],
        education=[Education(id="edu-1", title="BSc Computer Science", details="2013 - 2017")],
    )


@pytest.fixture
def profile():
    return Profile(
        id="profile-1",
        name="Backend",
        experience_ids=["exp-1", "exp-2"],
        project_ids=["proj-1"],
        skill_ids=["skill-py", "skill-sql"],
        education_ids=["edu-1"],
    )


@pytest.fixture
def profile_data(profile, bundle):
    return ProfileData(profile=profile, data=bundle)


@pytest.fixture
def job_context():
    return JobContext(job_description=JOB_DESCRIPTION, position="Backend Engineer", company="Globex")


@pytest.fixture
def context(profile, bundle, job_context):
    return AgentContext(job_context=job_context, profile=profile, data=bundle)


def make_request(profile_data, workflow_type="test", **kwargs):
    return WorkflowRequest(workflow_type=workflow_type, profile_data=profile_data, **kwargs)


# --- MOCK AGENT RESPONSES ---

SKILLS_RESPONSE = json.dumps(
    {
        "extractedSkills": {
            "languages": [
                {"name": "Go", "category": "languages", "confidence": 95, "importance": "critical"},
                {"name": "Rust", "category": "languages", "confidence": 30, "importance": "mentioned"},
            ],
            "platforms": [
                {"name": "Kubernetes", "category": "platforms", "confidence": 90, "importance": "critical"}
            ],
        },
        "extractionSummary": {
            "totalSkillsFound": 3,
            "categoriesIdentified": ["languages", "platforms"],
            "criticalSkills": ["Go", "Kubernetes"],
        },
        "skillGaps": {
            "missingCriticalSkills": [{"name": "Kubernetes", "confidence": 90}],
            "recommendations": ["Add Kubernetes experience"],
        },
        "overallConfidence": 88,
    }
)

BUILDER_RESPONSE = json.dumps(
    {
        "selectedExperiences": [
            {"id": "exp-2", "relevanceScore": 60, "reasons": ["Services"], "suggestedOrder": 2},
            {"id": "exp-1", "relevanceScore": 90, "reasons": ["Backend"], "suggestedOrder": 1},
        ],
        "selectedProjects": [
            {"id": "proj-1", "relevanceScore": 85, "reasons": ["Go"], "suggestedOrder": 1}
        ],
        "selectionAnalysis": {"selectionStrategy": "Backend focus"},
    }
)

CONTENT_RESPONSE = json.dumps(
    {
        "optimizedItems": [
            {
                "type": "experience",
                "id": "exp-1",
                "bullets": ["Built Python APIs serving 2M requests a day"],
                "tags": ["Python", "APIs"],
                "improvementScore": 70,
            },
            {
                "type": "project",
                "id": "proj-1",
                "bullets": ["Wrote a Go log shipper running on Kubernetes"],
                "improvementScore": 80,
            },
        ]
    }
)

OPTIMIZER_RESPONSE = json.dumps(
    {
        "personalInfo": {"summary": "Backend engineer building Go and Kubernetes services."},
        "experienceOptimizations": [
            {"id": "exp-1", "bullets": ["Built Go and Python APIs"], "changes": ["Added Go"]}
        ],
        "projectOptimizations": [],
        "skillOptimizations": [{"id": "skill-py", "details": "FastAPI, asyncio, pytest"}],
        "newSkills": [{"name": "Kubernetes", "details": "Deployments, Helm"}, {"name": "go"}],
        "recommendedExperienceOrder": [],
        "recommendedSkillOrder": ["skill-sql"],
        "keyInsights": ["Lead with Go experience"],
        "changeAnalysis": {"jobAlignmentScore": 82, "totalChanges": 4},
    }
)

ATS_RESPONSE = json.dumps(
    {
        "overallATSScore": {"score": 74, "grade": "Good", "summary": "Parses cleanly"},
        "keywordOptimization": {"missingKeywords": [{"keyword": "CI/CD", "suggestedLocation": "skills"}]},
        "actionPlan": {"immediate": [{"action": "Add CI/CD to skills"}]},
    }
)

REVIEWER_RESPONSE = json.dumps(
    {
        "overallAssessment": {"score": 78, "grade": "B", "summary": "Solid backend resume"},
        "recommendations": {"immediate": ["Quantify impact"], "shortTerm": ["Add a Kubernetes project"]},
    }
)

GRAMMAR_RESPONSE = json.dumps(
    {
        "enhancedText": "Led the migration of billing services to Go.",
        "changesSummary": {"grammarFixes": ["Fixed tense"]},
        "confidence": 90,
    }
)

ALL_RESPONSES = {
    "skills-extractor": SKILLS_RESPONSE,
    "resume-builder": BUILDER_RESPONSE,
    "content-optimizer": CONTENT_RESPONSE,
    "resume-optimizer": OPTIMIZER_RESPONSE,
    "ats-optimizer": ATS_RESPONSE,
    "resume-reviewer": REVIEWER_RESPONSE,
    "grammar-enhancer": GRAMMAR_RESPONSE,
}


@pytest.fixture
def fake_capability():
    return FakeCapability(ALL_RESPONSES)
