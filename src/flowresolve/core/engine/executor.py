# src/flowresolve/core/engine/executor.py
"""
Executor de referência para planos resolvidos.

O executor consome um `ResolvedPlan` já ordenado e, para cada job:
    - monta os inputs (conteúdo de datasets externos lido do store na versão
      fixada; outputs de jobs anteriores lidos do RunContext)
    - chama o runner (`runner(job, inputs) -> {output: conteúdo}`)
    - captura todos os outputs declarados; outputs `type: dataset` viram
      uma NOVA versão no Dataset Store (nunca sobrescrevem a anterior)

Políticas:
    - Jobs cujo produtor não terminou em SUCCESS são SKIPPED
    - `executor.fail_fast` (padrão: true) interrompe a execução na primeira
      falha; os jobs restantes são SKIPPED
    - Exceções do runner viram `ResolverErrorPayload` em
      `JobResult.payload["error"]` (sem stack trace para o operador)
    - Nenhum retry: a falha é registrada e reportada

Limites explícitos:
    - Não reordena o plano
    - Não resolve referências (o plano já chega resolvido)
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from flowresolve.core.config import resolve_config
from flowresolve.core.errors import ResolverErrorPayload, executor_job_error
from flowresolve.core.exceptions import MissingJobOutput, ResolverException
from flowresolve.core.run.context import RunContext
from flowresolve.core.run.types import JobResult, JobStatus, RunResult
from flowresolve.core.traceability.manifest import (
    PlanManifest,
    add_event,
    job_failed,
    job_finished,
    job_started,
)
from flowresolve.core.workflow.types import ResolvedJob, ResolvedPlan
from flowresolve.datasets.store import DatasetStore


JobRunner = Callable[[ResolvedJob, Dict[str, Any]], Mapping[str, Any]]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PlanExecutor:
    """Executor canônico (sequencial) de um ResolvedPlan."""

    def __init__(
        self,
        *,
        plan: ResolvedPlan,
        store: DatasetStore,
        runner: JobRunner,
        ctx: RunContext,
        manifest: Optional[PlanManifest] = None,
    ):
        self.plan = plan
        self.store = store
        self.runner = runner
        self.ctx = ctx
        self.manifest = manifest

    def _fail_fast(self) -> bool:
        executor_cfg = (self.ctx.config or {}).get("executor", {}) or {}
        return bool(executor_cfg.get("fail_fast", True))

    # ------------------------------------------------------------------
    # Inputs / outputs
    # ------------------------------------------------------------------
    def _mount_inputs(self, job: ResolvedJob) -> Dict[str, Any]:
        mounted: Dict[str, Any] = {}
        for item in job.inputs:
            if item.dataset is not None:
                mounted[item.name] = self.store.read(item.dataset.id, item.dataset.version)
            else:
                mounted[item.name] = self.ctx.get_output(item.producer.job, item.producer.output)
        return mounted

    def _capture_outputs(self, job: ResolvedJob, produced: Mapping[str, Any]) -> List[Dict[str, Any]]:
        missing = [o.name for o in job.spec.outputs if o.name not in produced]
        if missing:
            raise MissingJobOutput(
                message=f"job '{job.id}' did not produce declared outputs: {missing}",
                job=job.id,
                path=f"{job.id}.outputs.{missing[0]}",
                details={"missing_outputs": missing},
                hint="O runner deve retornar um valor para cada output declarado.",
            )

        recorded: List[Dict[str, Any]] = []
        for out in job.spec.outputs:
            content = produced[out.name]
            self.ctx.set_output(job.id, out.name, content)
            if not out.is_dataset:
                continue
            version = self.store.record_version(out.dataset_id, content)
            recorded.append(version.to_dict())
            self.ctx.log(
                job_id=job.id,
                level="INFO",
                message="dataset version recorded",
                dataset_id=version.id,
                version=version.version,
            )
            if self.manifest is not None:
                add_event(
                    self.manifest,
                    event_type="dataset_version_recorded",
                    ts=_now(),
                    job_id=job.id,
                    payload={"dataset": version.to_dict()},
                )
        return recorded

    # ------------------------------------------------------------------
    # Resultados
    # ------------------------------------------------------------------
    def _exception_to_error(self, job_id: str, exc: Exception) -> ResolverErrorPayload:
        if isinstance(exc, ResolverException):
            return exc.to_payload()
        return executor_job_error(
            job=job_id,
            exc_type=exc.__class__.__name__,
            exc_message=str(exc) or None,
        )

    def _skip(self, job: ResolvedJob, summary: str) -> JobResult:
        result = JobResult(job_id=job.id, status=JobStatus.SKIPPED, summary=summary)
        self.ctx.log(job_id=job.id, level="WARNING", message=summary)
        self.ctx.add_warning(job_id=job.id, message=summary)
        if self.manifest is not None:
            job_finished(
                self.manifest,
                job_id=job.id,
                ts=_now(),
                result={"status": result.status.value, "summary": summary},
            )
        return self._with_warnings(result)

    def _with_warnings(self, result: JobResult) -> JobResult:
        warnings = list(self.ctx.warnings.get(result.job_id, []))
        if not warnings:
            return result
        payload = dict(result.payload)
        payload.setdefault("warnings", warnings)
        return replace(result, payload=payload)

    def run(self) -> RunResult:
        results: Dict[str, JobResult] = {}
        halted = False

        for job in self.plan.jobs:
            if halted:
                results[job.id] = self._skip(job, "skipped: execution halted by fail_fast")
                continue

            blocked = [d for d in job.depends_on if results[d].status != JobStatus.SUCCESS]
            if blocked:
                results[job.id] = self._skip(job, f"skipped due to failed dependency: {blocked}")
                continue

            self.ctx.log(job_id=job.id, level="INFO", message="job started", uses=job.spec.uses)
            if self.manifest is not None:
                job_started(self.manifest, job_id=job.id, ts=_now())

            try:
                produced = self.runner(job, self._mount_inputs(job))
                if not isinstance(produced, Mapping):
                    raise TypeError("runner must return a mapping of output name -> content")
                datasets = self._capture_outputs(job, produced)

            except Exception as e:
                error = self._exception_to_error(job.id, e)
                self.ctx.log(job_id=job.id, level="ERROR", message=error.message, error_type=error.type)
                if self.manifest is not None:
                    job_failed(self.manifest, job_id=job.id, ts=_now(), error=error.to_dict())
                results[job.id] = self._with_warnings(
                    JobResult(
                        job_id=job.id,
                        status=JobStatus.FAILED,
                        summary=error.message,
                        payload={"error": error.to_dict()},
                    )
                )
                if self._fail_fast():
                    halted = True
                continue

            result = JobResult(job_id=job.id, status=JobStatus.SUCCESS, summary="ok", datasets=datasets)
            self.ctx.log(job_id=job.id, level="INFO", message="job finished")
            if self.manifest is not None:
                job_finished(
                    self.manifest,
                    job_id=job.id,
                    ts=_now(),
                    result={"status": result.status.value, "summary": result.summary, "datasets": datasets},
                )
            results[job.id] = self._with_warnings(result)

        return RunResult(jobs=results)


def execute_plan(
    plan: ResolvedPlan,
    *,
    store: DatasetStore,
    runner: JobRunner,
    config: Optional[Dict[str, Any]] = None,
    manifest: Optional[PlanManifest] = None,
    run_id: Optional[str] = None,
) -> RunResult:
    """Atalho: cria o RunContext e executa o plano com `PlanExecutor`."""
    ctx = RunContext(
        run_id=run_id or uuid.uuid4().hex,
        created_at=_now(),
        config=resolve_config(config),
        meta={"document_hash": plan.document_hash},
    )
    return PlanExecutor(plan=plan, store=store, runner=runner, ctx=ctx, manifest=manifest).run()
