"""
Orchestrator - runs workflows and single agents against a generation capability.

Responsibilities:
1. Look up the workflow definition and validate the request's parameters
2. Run stages strictly in declared order, fanning out within a stage when
   the caller asks for parallel execution
3. Retry transient capability failures with exponential backoff
4. Abort on a required stage's total failure; record optional failures
5. Enforce one deadline for the whole workflow and discard every agent
   result when it is exceeded
6. Aggregate results, synthesize insights and keep execution statistics

CLASSES:
    Orchestrator
"""

import asyncio
import copy
import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from resumeai.agents.base import Agent, AgentContext
from resumeai.config import settings
from resumeai.config.enums import WorkflowType
from resumeai.config.request_schemas import CustomParameters, WorkflowRequest
from resumeai.config.result_schemas import AgentResult, WorkflowResult
from resumeai.config.schemas import JobContext
from resumeai.orchestrator.catalog import (
    Stage,
    StageStep,
    WorkflowCatalog,
    WorkflowDefinition,
    build_default_catalog,
    validate_definition,
)
from resumeai.orchestrator.insights import synthesize_insights
from resumeai.orchestrator.registry import AgentRegistry
from resumeai.utils.exceptions import (
    AgentInputError,
    CapabilityError,
    ConfigurationError,
    TransientCapabilityError,
    WorkflowTimeoutError,
)
from resumeai.utils.llms import GenerationCapability

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class Orchestrator:
    """Executes workflows and single agents.

    Constructed explicitly and passed to callers; there is no module-level
    instance.

    Args:
        registry: Agents available to workflows.
        capability: Generation capability every agent call goes through.
        catalog: Workflow definitions. Defaults to the built-in catalog.
        max_attempts: Attempts per agent invocation, first call included.
        base_delay: Backoff before the first retry, in seconds. Doubles on
            each further retry.
        timeout_seconds: Deadline for a whole workflow execution.
    """

    def __init__(
        self,
        registry: AgentRegistry,
        capability: GenerationCapability,
        catalog: Optional[WorkflowCatalog] = None,
        max_attempts: int = settings.AGENT_MAX_ATTEMPTS,
        base_delay: float = settings.AGENT_RETRY_BASE_DELAY,
        timeout_seconds: float = settings.WORKFLOW_TIMEOUT_SECONDS,
    ):
        if max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")

        self.registry = registry
        self.capability = capability
        self.catalog = catalog or build_default_catalog(registry)
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.timeout_seconds = timeout_seconds
        self._stats: Dict[str, Any] = {}
        self.clear_stats()

    # ------------------------------
    # Public interface
    # ------------------------------
    async def execute_workflow(self, request: WorkflowRequest) -> WorkflowResult:
        """Run a catalog workflow.

        Never raises for agent or workflow failures; they are reported on the
        returned WorkflowResult. An unknown workflow type or invalid
        parameters fail before any agent runs.
        """
        start = time.perf_counter()
        try:
            definition = self.catalog.get(request.workflow_type)
        except ConfigurationError as e:
            logger.error(f" {e}")
            return self._failed(request.workflow_type, str(e), start)

        return await self._run_definition(definition, request, start)

    async def execute_custom_workflow(
        self, stages: Iterable[Stage], request: WorkflowRequest
    ) -> WorkflowResult:
        """Run an ad-hoc list of stages with the same rules as a catalog workflow.

        Parameters are passed through to every step unvalidated.
        """
        start = time.perf_counter()
        definition = WorkflowDefinition(
            workflow_type=WorkflowType.CUSTOM.value,
            stages=tuple(stages),
            parameters_model=CustomParameters,
            description="Custom workflow",
        )
        try:
            validate_definition(definition, self.registry)
        except ConfigurationError as e:
            logger.error(f" {e}")
            return self._failed(definition.workflow_type, str(e), start)

        return await self._run_definition(definition, request, start)

    async def execute_single_agent(
        self,
        agent_id: str,
        agent_input: Optional[Dict[str, Any]] = None,
        context: Optional[AgentContext] = None,
    ) -> AgentResult:
        """Run one agent outside any workflow.

        Raises:
            ConfigurationError: If agent_id is not registered.
        """
        agent = self.registry.get(agent_id)
        return await self._invoke(agent, agent_id, agent_input or {}, context or AgentContext())

    def get_available_agents(self) -> List[str]:
        return self.registry.ids()

    def get_execution_stats(self) -> Dict[str, Any]:
        """Invocation counters since construction or the last clear_stats()."""
        total = self._stats["total_executions"]
        return {
            "total_executions": total,
            "successful_executions": self._stats["successful_executions"],
            "failed_executions": self._stats["failed_executions"],
            "success_rate": round(self._stats["successful_executions"] / total * 100, 2) if total else 0.0,
            "average_execution_time_ms": round(self._stats["total_duration_ms"] / total, 2) if total else 0.0,
            "total_attempts": self._stats["total_attempts"],
            "agent_usage": dict(self._stats["agent_usage"]),
        }

    def clear_stats(self) -> None:
        self._stats = {
            "total_executions": 0,
            "successful_executions": 0,
            "failed_executions": 0,
            "total_duration_ms": 0.0,
            "total_attempts": 0,
            "agent_usage": {},
        }

    # ------------------------------
    # Workflow execution
    # ------------------------------
    async def _run_definition(
        self, definition: WorkflowDefinition, request: WorkflowRequest, start: float
    ) -> WorkflowResult:
        workflow_type = definition.workflow_type
        workflow_id = uuid.uuid4().hex[:12]
        log_fields = {"workflow_type": workflow_type, "workflow_id": workflow_id}

        try:
            parameters = definition.parameters_model.model_validate(request.parameters)
        except ValidationError as e:
            message = f"Invalid parameters for workflow {workflow_type}: {e}"
            logger.error(f" {message}", extra={"extra_fields": log_fields})
            return self._failed(workflow_type, message, start)

        context = AgentContext(
            job_context=request.job_context or JobContext(),
            profile=request.profile_data.profile,
            data=request.profile_data.data,
            metadata={"workflow_type": workflow_type, "workflow_id": workflow_id},
        )
        timeout = request.timeout_seconds or self.timeout_seconds

        logger.info(
            f" Starting workflow {workflow_type}",
            extra={
                "extra_fields": {
                    **log_fields,
                    "stages": len(definition.stages),
                    "parallel": request.parallel_execution,
                }
            },
        )

        # Filled stage by stage; abandoned as a whole on timeout
        results: Dict[str, AgentResult] = {}
        try:
            failed_stage, error = await asyncio.wait_for(
                self._run_stages(definition, request, parameters, context, results),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            message = str(
                WorkflowTimeoutError(f"Workflow {workflow_type} exceeded its {timeout}s deadline")
            )
            logger.error(
                f" {message}",
                extra={"extra_fields": {**log_fields, "discarded_results": len(results)}},
            )
            return self._failed(workflow_type, message, start)

        success = failed_stage is None
        result = WorkflowResult(
            success=success,
            workflow_type=workflow_type,
            agent_results=dict(results),
            insights=synthesize_insights(results, workflow_type) if success else None,
            total_execution_time_ms=_elapsed_ms(start),
            error=error,
            failed_stage=failed_stage,
        )

        log = logger.info if success else logger.error
        log(
            f" Workflow {workflow_type} {'completed' if success else 'failed'}",
            extra={
                "extra_fields": {
                    **log_fields,
                    "success": success,
                    "failed_stage": failed_stage,
                    "agents_run": len(results),
                    "duration_ms": result.total_execution_time_ms,
                }
            },
        )
        return result

    async def _run_stages(
        self,
        definition: WorkflowDefinition,
        request: WorkflowRequest,
        parameters: BaseModel,
        context: AgentContext,
        results: Dict[str, AgentResult],
    ) -> Tuple[Optional[str], Optional[str]]:
        """Run every stage in order.

        Returns:
            (failed_stage, error), both None when no required stage failed.
        """
        shared_input = parameters.model_dump()

        for stage in definition.stages:
            prior_results = {
                key: results[key].payload
                for key in stage.depends_on
                if key in results and results[key].success
            }
            step_inputs = [
                {**shared_input, **step.inputs, "prior_results": prior_results}
                for step in stage.steps
            ]

            if request.parallel_execution and len(stage.steps) > 1:
                stage_results = await asyncio.gather(
                    *(
                        self._run_step(step, data, context)
                        for step, data in zip(stage.steps, step_inputs)
                    )
                )
            else:
                stage_results = []
                for step, data in zip(stage.steps, step_inputs):
                    stage_results.append(await self._run_step(step, data, context))

            for result in stage_results:
                results[result.step_key] = result

            if any(r.success for r in stage_results):
                continue

            errors = "; ".join(dict.fromkeys(r.error or "unknown error" for r in stage_results))
            if stage.required:
                return stage.name, f"Required stage {stage.name} failed: {errors}"

            logger.warning(
                f" Optional stage {stage.name} failed: {errors}",
                extra={"extra_fields": {"workflow_type": definition.workflow_type}},
            )

        return None, None

    async def _run_step(self, step: StageStep, data: Dict[str, Any], context: AgentContext) -> AgentResult:
        return await self._invoke(self.registry.get(step.agent_id), step.key, data, context)

    # ------------------------------
    # Agent invocation
    # ------------------------------
    async def _invoke(
        self, agent: Agent, step_key: str, data: Dict[str, Any], context: AgentContext
    ) -> AgentResult:
        """Validate, call the capability with retries, parse.

        Every failure is captured into the returned AgentResult.
        """
        start = time.perf_counter()
        # Each invocation works on its own copy of the shared snapshot
        context = copy.deepcopy(context)
        attempts = 0

        try:
            agent_input = agent.validate_input(data, context)
            request = agent.prepare_request(agent_input, context)

            while True:
                attempts += 1
                try:
                    raw = await self.capability.generate(request)
                    break
                except TransientCapabilityError as e:
                    if attempts >= self.max_attempts:
                        raise
                    delay = self.base_delay * (2 ** (attempts - 1))
                    logger.warning(
                        f" {agent.agent_id} attempt {attempts}/{self.max_attempts} failed: {e}. "
                        f"Retrying in {delay}s...",
                        extra={"extra_fields": {"agent_id": agent.agent_id, "attempt": attempts}},
                    )
                    await asyncio.sleep(delay)

            payload = agent.post_process(agent.parse_response(raw), agent_input, context)
            result = AgentResult(
                agent_id=agent.agent_id,
                step_key=step_key,
                success=True,
                payload=payload,
                duration_ms=_elapsed_ms(start),
                attempts=attempts,
            )
        except (AgentInputError, CapabilityError) as e:
            result = self._failed_agent(agent, step_key, e, start, attempts)
        except Exception as e:
            logger.exception(f" Unexpected error in agent {agent.agent_id}")
            result = self._failed_agent(agent, step_key, e, start, attempts)

        self._record(result)
        return result

    def _failed_agent(
        self, agent: Agent, step_key: str, error: Exception, start: float, attempts: int
    ) -> AgentResult:
        logger.warning(
            f" Agent {agent.agent_id} failed after {attempts} attempts: {error}",
            extra={
                "extra_fields": {
                    "agent_id": agent.agent_id,
                    "step_key": step_key,
                    "error_type": type(error).__name__,
                }
            },
        )
        return AgentResult(
            agent_id=agent.agent_id,
            step_key=step_key,
            success=False,
            error=str(error),
            error_type=type(error).__name__,
            duration_ms=_elapsed_ms(start),
            attempts=attempts,
        )

    def _record(self, result: AgentResult) -> None:
        stats = self._stats
        stats["total_executions"] += 1
        stats["successful_executions" if result.success else "failed_executions"] += 1
        stats["total_duration_ms"] += result.duration_ms
        stats["total_attempts"] += result.attempts
        stats["agent_usage"][result.agent_id] = stats["agent_usage"].get(result.agent_id, 0) + 1

    @staticmethod
    def _failed(workflow_type: str, error: str, start: float) -> WorkflowResult:
        return WorkflowResult(
            success=False,
            workflow_type=workflow_type,
            error=error,
            total_execution_time_ms=_elapsed_ms(start),
        )
