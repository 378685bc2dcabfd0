"""
Workflow API Routes.

Routes for listing agents, running workflows and single agents, and
optimizing and merging profiles.
"""

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from resumeai.agents.base import AgentContext
from resumeai.api.schemas import MergeRequest, OptimizeRequest, SingleAgentRequest
from resumeai.config.request_schemas import WorkflowRequest
from resumeai.config.schemas import JobContext, ProfileData
from resumeai.main import optimize_resume
from resumeai.optimization.merge import merge
from resumeai.utils.logger import get_logger, log_performance, set_correlation_id

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["workflows"])


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


@router.get("/agents")
async def list_agents(request: Request) -> JSONResponse:
    """List the registered agents.

    Returns:
        JSONResponse:
            {
                "agents": [{"id": "skills-extractor", "name": "...", "description": "..."}, ...]
            }
    """
    orchestrator = request.app.state.orchestrator
    return JSONResponse(content={"agents": orchestrator.registry.describe()})


@router.get("/stats")
async def execution_stats(request: Request) -> JSONResponse:
    """Agent execution counters since startup."""
    return JSONResponse(content=request.app.state.orchestrator.get_execution_stats())


@router.post("/workflows/execute")
async def execute_workflow(payload: WorkflowRequest, request: Request) -> JSONResponse:
    """Run a named workflow.

    Returns:
        JSONResponse with the WorkflowResult. A workflow that ran but failed
        is still a 200 response with success=false.

    Raises:
        ConfigurationError: Unknown workflow type (mapped to 400).
    """
    orchestrator = request.app.state.orchestrator
    # Unknown types surface as 400 instead of a failed result
    orchestrator.catalog.get(payload.workflow_type)

    set_correlation_id(profile_id=payload.profile_data.profile.id)
    result = await orchestrator.execute_workflow(payload)
    return JSONResponse(content=_dump(result))


@router.post("/agents/{agent_id}/execute")
async def execute_agent(agent_id: str, payload: SingleAgentRequest, request: Request) -> JSONResponse:
    """Run one agent outside any workflow.

    Raises:
        HTTPException 404: If no agent is registered under agent_id.
    """
    orchestrator = request.app.state.orchestrator
    if agent_id not in orchestrator.registry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown agent: {agent_id}",
        )

    context = AgentContext(
        job_context=payload.job_context or JobContext(),
        profile=payload.profile_data.profile if payload.profile_data else None,
        data=payload.profile_data.data if payload.profile_data else None,
    )
    result = await orchestrator.execute_single_agent(agent_id, payload.input, context)
    return JSONResponse(content=_dump(result))


@router.post("/optimize")
async def optimize(payload: OptimizeRequest, request: Request) -> JSONResponse:
    """Optimize a profile for a job and merge the result.

    Concurrent requests for the same profile are serialized. With a profile
    store each request merges on top of the previous one; without it the
    caller owns re-reading the profile between requests.

    Returns:
        JSONResponse:
            {
                "success": bool,
                "merged": bool,
                "skipped": bool,          # last optimization still fresh
                "profile": {...},
                "data": {...},
                "result": {...} | null    # WorkflowResult
            }
    """
    orchestrator = request.app.state.orchestrator
    orchestrator.catalog.get(payload.workflow_type)

    profile_id = payload.profile_data.profile.id
    set_correlation_id(profile_id=profile_id)

    outcome = await optimize_resume(
        orchestrator,
        payload.profile_data,
        payload.job_context,
        parameters=payload.parameters,
        workflow_type=payload.workflow_type,
        locks=request.app.state.profile_locks,
        store=request.app.state.profile_store,
        parallel_execution=payload.parallel_execution,
        force=payload.force,
    )

    result = outcome["result"]
    return JSONResponse(
        content={
            "success": outcome["skipped"] or (result is not None and result.success),
            "merged": outcome["merged"],
            "skipped": outcome["skipped"],
            "profile": _dump(outcome["profile"]),
            "data": _dump(outcome["data"]),
            "result": _dump(result) if result is not None else None,
        }
    )


@router.post("/merge")
async def merge_output(payload: MergeRequest, request: Request) -> JSONResponse:
    """Merge an optimization output into a profile without running any agent.

    With a profile store the stored profile is merged and saved; the body's
    profile and data are only used for profiles the store does not know.
    """
    store = request.app.state.profile_store
    profile_id = payload.profile.id

    async with request.app.state.profile_locks.hold(profile_id):
        current = await store.load(profile_id) if store is not None else None
        base = current or ProfileData(profile=payload.profile, data=payload.data)
        with log_performance("merge", profile_id=profile_id):
            profile, data = merge(base.profile, base.data, payload.output)
        if store is not None:
            await store.save(ProfileData(profile=profile, data=data))

    return JSONResponse(content={"profile": _dump(profile), "data": _dump(data)})
