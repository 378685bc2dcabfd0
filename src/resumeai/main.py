"""
ResumeAI caller-facing entry points.

This module is what callers (the HTTP layer, scripts, other services) use:

1. create_orchestrator: wires the default registry, catalog and OpenAI capability
2. execute_workflow: runs a named workflow
3. execute_single_agent: runs one agent outside any workflow
4. merge: folds an optimization into a profile (re-exported)
5. optimize_resume: the complete pipeline, load -> workflow -> collect -> merge -> save,
   serialized per profile

The pipeline uses a decorator-based approach for consistent error handling and
logging across its steps.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional

from resumeai.agents.base import Agent, AgentContext
from resumeai.config.enums import WorkflowType
from resumeai.config.request_schemas import WorkflowRequest
from resumeai.config.result_schemas import AgentResult, WorkflowResult
from resumeai.config.schemas import JobContext, ProfileData
from resumeai.optimization.locks import ProfileLocks
from resumeai.optimization.merge import is_optimization_stale, merge
from resumeai.optimization.output import collect_optimization_output
from resumeai.optimization.store import ProfileStore
from resumeai.orchestrator.orchestrator import Orchestrator
from resumeai.orchestrator.registry import build_default_registry
from resumeai.utils.llms import GenerationCapability, OpenAICapability
from resumeai.utils.logger import log_performance

logger = logging.getLogger(__name__)

__all__ = [
    "create_orchestrator",
    "execute_single_agent",
    "execute_workflow",
    "merge",
    "optimize_resume",
]


def pipeline_step(step_name: str, step_number: int, total_steps: int):
    """
    Decorator for async pipeline steps that provides consistent error handling and logging.

    Args:
        step_name: Human-readable name of the step
        step_number: Step number (1-indexed)
        total_steps: Total number of steps in pipeline
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                logger.info(f" Step {step_number}/{total_steps}: {step_name}...")
                result = await func(*args, **kwargs)
                logger.info(
                    f" Step {step_number}/{total_steps}: {step_name} completed successfully"
                )
                return result
            except Exception as e:
                error_msg = (
                    f" Step {step_number}/{total_steps}: {step_name} failed: {str(e)}"
                )
                logger.error(error_msg)
                raise RuntimeError(error_msg) from e

        return wrapper

    return decorator


def create_orchestrator(
    capability: Optional[GenerationCapability] = None,
    extra_agents: Iterable[Agent] = (),
    **kwargs,
) -> Orchestrator:
    """Build an orchestrator over the built-in agents (plus any custom ones).

    Args:
        capability: Generation capability. Defaults to OpenAICapability().
        extra_agents: Custom agents registered after the built-ins.
        **kwargs: Passed to Orchestrator (max_attempts, base_delay, timeout_seconds).
    """
    return Orchestrator(
        build_default_registry(extra_agents),
        capability or OpenAICapability(),
        **kwargs,
    )


async def execute_workflow(
    orchestrator: Orchestrator,
    workflow_type: str,
    profile_data: ProfileData,
    job_context: Optional[JobContext] = None,
    parameters: Optional[Dict[str, Any]] = None,
    parallel_execution: bool = False,
    timeout_seconds: Optional[float] = None,
) -> WorkflowResult:
    """Run a named workflow. Failures are reported on the result, never raised."""
    request = WorkflowRequest(
        workflow_type=workflow_type,
        job_context=job_context,
        profile_data=profile_data,
        parameters=parameters or {},
        parallel_execution=parallel_execution,
        timeout_seconds=timeout_seconds,
    )
    return await orchestrator.execute_workflow(request)


async def execute_single_agent(
    orchestrator: Orchestrator,
    agent_id: str,
    agent_input: Optional[Dict[str, Any]] = None,
    context: Optional[AgentContext] = None,
) -> AgentResult:
    """Run one agent. Raises ConfigurationError for an unknown agent id."""
    return await orchestrator.execute_single_agent(agent_id, agent_input, context)


async def optimize_resume(
    orchestrator: Orchestrator,
    profile_data: ProfileData,
    job_context: JobContext,
    parameters: Optional[Dict[str, Any]] = None,
    workflow_type: str = WorkflowType.FULL_RESUME_OPTIMIZATION.value,
    locks: Optional[ProfileLocks] = None,
    store: Optional[ProfileStore] = None,
    parallel_execution: bool = True,
    force: bool = False,
) -> Dict[str, Any]:
    """
    Optimize a profile for a job and merge the result.

    Runs the pipeline under the profile's lock:
    1. Workflow: run the optimization workflow
    2. Merge: collect the agent output and merge it into the profile

    With a store, the profile and master data are (re)loaded after the lock
    is taken and the merged result is saved before it is released, so
    concurrent optimizations of one profile build on each other. Without a
    store, profile_data is used as given; the caller must then re-read its
    own state under the same lock or a later merge overwrites an earlier one.

    A profile whose last optimization is still fresh for this job description
    is returned unchanged unless force is set.

    Args:
        orchestrator: Orchestrator to run the workflow on.
        profile_data: Profile and master data to optimize. With a store, only
            the profile id is used unless the store does not know the profile.
        job_context: Target job.
        parameters: Workflow parameters (e.g. {"glaze_level": 3}).
        workflow_type: Optimization workflow to run.
        locks: Per-profile locks shared by concurrent callers. Without it the
            call is not serialized against other optimizations.
        store: Persistence to load the current profile from and save the
            merged profile to.
        parallel_execution: Fan out multi-agent stages.
        force: Re-optimize even when the last optimization is fresh.

    Returns:
        Dict: Dictionary containing:
            - "result" (Optional[WorkflowResult]): The workflow result (None when skipped)
            - "profile" (Profile): The merged profile (or the current profile)
            - "data" (DataBundle): The merged master data (or the current data)
            - "merged" (bool): Whether a merge happened
            - "skipped" (bool): Whether the optimization was still fresh

    Raises:
        RuntimeError: If collecting or merging the output fails unexpectedly
    """
    profile_id = profile_data.profile.id
    locks = locks or ProfileLocks()

    async with locks.hold(profile_id):
        if store is not None:
            profile_data = await store.load(profile_id) or profile_data
        profile = profile_data.profile

        if not force and not is_optimization_stale(profile, job_context.job_description):
            logger.info(f" Profile {profile_id} optimization is fresh, skipping")
            return {
                "result": None,
                "profile": profile,
                "data": profile_data.data,
                "merged": False,
                "skipped": True,
            }

        @pipeline_step("Running optimization workflow", 1, 2)
        async def _step1_workflow():
            return await execute_workflow(
                orchestrator,
                workflow_type,
                profile_data,
                job_context=job_context,
                parameters=parameters,
                parallel_execution=parallel_execution,
            )

        result = await _step1_workflow()

        if not result.success:
            logger.warning(f" Optimization of profile {profile_id} failed: {result.error}")
            return {
                "result": result,
                "profile": profile,
                "data": profile_data.data,
                "merged": False,
                "skipped": False,
            }

        @pipeline_step("Merging optimization", 2, 2)
        async def _step2_merge():
            with log_performance("merge", profile_id=profile_id):
                output = collect_optimization_output(result, job_context)
                merged_profile, merged_data = merge(profile, profile_data.data, output)
            if store is not None:
                await store.save(ProfileData(profile=merged_profile, data=merged_data))
            return merged_profile, merged_data

        merged_profile, merged_data = await _step2_merge()

    logger.info(" Pipeline completed successfully")
    return {
        "result": result,
        "profile": merged_profile,
        "data": merged_data,
        "merged": True,
        "skipped": False,
    }
