# ---------- TESTS FOR AGENT REGISTRY AND WORKFLOW CATALOG ----------

import pytest

from resumeai.config.enums import WorkflowType
from resumeai.config.request_schemas import WorkflowParameters
from resumeai.orchestrator.catalog import (
    Stage,
    StageStep,
    WorkflowCatalog,
    WorkflowDefinition,
    build_default_catalog,
    validate_definition,
)
from resumeai.orchestrator.registry import AgentRegistry, build_default_registry
from resumeai.utils.exceptions import ConfigurationError

from conftest import EchoAgent


class BrokenDefaultsParameters(WorkflowParameters):
    # Required field: the model has no valid defaults
    mandatory: str


@pytest.fixture
def registry():
    return AgentRegistry([EchoAgent("a"), EchoAgent("b")])


def definition(*stages, parameters_model=WorkflowParameters):
    return WorkflowDefinition(workflow_type="test", stages=tuple(stages), parameters_model=parameters_model)


# --- REGISTRY ---


def test_registry_lookup(registry):
    """Test lookup, membership and listing."""
    assert registry.get("a").agent_id == "a"
    assert "b" in registry
    assert "z" not in registry
    assert len(registry) == 2
    assert registry.ids() == ["a", "b"]
    assert registry.describe()[0] == {"id": "a", "name": "a", "description": "Test agent a"}


def test_registry_unknown_agent(registry):
    """Test that unknown ids raise ConfigurationError."""
    with pytest.raises(ConfigurationError, match="Unknown agent: z"):
        registry.get("z")


def test_registry_rejects_duplicates():
    """Test that two agents cannot share an id."""
    with pytest.raises(ConfigurationError, match="Duplicate agent id"):
        AgentRegistry([EchoAgent("a"), EchoAgent("a")])


def test_registry_rejects_missing_id():
    """Test that an agent without an id cannot be registered."""
    with pytest.raises(ConfigurationError, match="has no agent_id"):
        AgentRegistry([EchoAgent("")])


def test_default_registry_accepts_custom_agents():
    """Test that custom agents are registered after the built-ins."""
    registry = build_default_registry([EchoAgent("custom")])

    assert len(registry) == 8
    assert registry.ids()[-1] == "custom"


# --- DEFINITION VALIDATION ---


def test_step_key_defaults_to_agent_id():
    """Test that a step without a key is keyed by its agent."""
    assert StageStep("a").key == "a"
    assert StageStep("a", key="a/second").key == "a/second"


@pytest.mark.parametrize(
    "bad, message",
    [
        (definition(), "has no stages"),
        (definition(Stage("empty", ())), "has no steps"),
        (definition(Stage("s", (StageStep("ghost"),))), "unknown agent ghost"),
        (definition(Stage("s", (StageStep("a"), StageStep("a")))), "duplicate step key a"),
        (
            definition(Stage("s1", (StageStep("a"),)), Stage("s2", (StageStep("a"),))),
            "duplicate step key a",
        ),
        (
            definition(Stage("s1", (StageStep("a"),), depends_on=("b",)), Stage("s2", (StageStep("b"),))),
            "depends on b",
        ),
        (
            definition(Stage("s", (StageStep("a"), StageStep("b")), depends_on=("a",))),
            "depends on a",
        ),
        (
            definition(Stage("s", (StageStep("a"),)), parameters_model=BrokenDefaultsParameters),
            "parameter defaults do not validate",
        ),
    ],
)
def test_invalid_definitions(registry, bad, message):
    """Test every definition rule."""
    with pytest.raises(ConfigurationError, match=message):
        validate_definition(bad, registry)


def test_valid_definition_with_dependencies(registry):
    """Test that a stage may depend on any earlier step."""
    good = definition(
        Stage("s1", (StageStep("a"), StageStep("a", key="a/again"))),
        Stage("s2", (StageStep("b"),), depends_on=("a", "a/again")),
    )

    validate_definition(good, registry)

    assert good.step_keys() == ["a", "a/again", "b"]


# --- CATALOG ---


def test_catalog_register_and_get(registry):
    """Test that registered definitions can be looked up."""
    catalog = WorkflowCatalog(registry)
    catalog.register(definition(Stage("s", (StageStep("a"),))))

    assert catalog.get("test").stages[0].name == "s"
    assert catalog.types() == ["test"]


def test_catalog_rejects_invalid_definition(registry):
    """Test that registering an invalid definition fails."""
    catalog = WorkflowCatalog(registry)

    with pytest.raises(ConfigurationError):
        catalog.register(definition(Stage("s", (StageStep("ghost"),))))
    assert catalog.types() == []


def test_catalog_unknown_type(registry):
    """Test that unknown workflow types raise ConfigurationError."""
    with pytest.raises(ConfigurationError, match="Unknown workflow type: nope"):
        WorkflowCatalog(registry).get("nope")


def test_default_catalog_has_every_workflow():
    """Test that every named workflow except custom is in the default catalog."""
    catalog = build_default_catalog(build_default_registry())

    assert set(catalog.types()) == {t.value for t in WorkflowType if t is not WorkflowType.CUSTOM}


def test_full_workflow_shape():
    """Test the stages of the full optimization workflow."""
    full = build_default_catalog(build_default_registry()).get(WorkflowType.FULL_RESUME_OPTIMIZATION.value)

    assert [stage.name for stage in full.stages] == ["job-analysis", "selection", "optimization", "review"]
    assert [step.agent_id for step in full.stages[2].steps] == [
        "resume-optimizer",
        "content-optimizer",
        "ats-optimizer",
    ]
    assert full.stages[2].depends_on == ("skills-extractor", "resume-builder")
    assert not full.stages[3].required
    assert all(stage.required for stage in full.stages[:3])


def test_default_catalog_requires_builtin_agents(registry):
    """Test that the default workflows cannot be built over an unrelated registry."""
    with pytest.raises(ConfigurationError):
        build_default_catalog(registry)
