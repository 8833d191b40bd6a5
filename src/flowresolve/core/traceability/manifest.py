# src/flowresolve/core/traceability/manifest.py
"""
Manifest v1: registro forense da execução de um plano resolvido.

Este módulo define o `PlanManifest` e a API explícita que o executor usa
para registrar o ciclo de vida de cada job e as versões de dataset
gravadas no store.

O Manifest consolida:
    - run: metadados da execução (run_id, started_at, flowresolve_version)
    - inputs: identidade da entrada (document_hash, config_hash, order)
    - jobs: estado incremental por job_id
    - events: Event Log ordenado

Decisões arquiteturais:
    - Nenhum evento é emitido implicitamente
    - A ordem do Event Log reflete a ordem de chamada
    - Timestamps são normalizados para UTC timezone-aware
    - A estrutura é serializável em JSON e reconstruível via round-trip

Limites explícitos:
    - Não executa jobs
    - Não decide políticas de execução
    - Não valida o documento de workflow
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Normaliza um timestamp para UTC; timestamps naive são assumidos UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> int:
    """Duração em milissegundos, nunca negativa."""
    s = _ensure_tzaware_utc(start)
    e = _ensure_tzaware_utc(end)
    return max(0, int((e - s).total_seconds() * 1000))


@dataclass
class PlanManifest:
    """
    Manifest v1 de uma execução de plano.

    Invariantes:
        - `jobs` é sempre um dicionário indexado por job_id
        - `events` é sempre uma lista ordenada
        - A estrutura completa é serializável
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    jobs: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Cópia serializável e independente do estado interno."""
        return {
            "run": dict(self.run),
            "inputs": json.loads(json.dumps(self.inputs)),
            "jobs": {k: json.loads(json.dumps(v, default=str)) for k, v in self.jobs.items()},
            "events": [json.loads(json.dumps(e, default=str)) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanManifest":
        """Reconstrução permissiva: campos ausentes iniciam vazios."""
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            jobs={k: dict(v) for k, v in (data.get("jobs", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    flowresolve_version: str,
    document_hash: str,
    config_hash: str,
    order: List[str],
) -> PlanManifest:
    """
    Cria o Manifest inicial de uma execução.

    ⚠️ Esta função **não emite eventos**: o Event Log inicia vazio.
    """
    return PlanManifest(
        run={
            "run_id": run_id,
            "started_at": _iso(started_at),
            "flowresolve_version": flowresolve_version,
        },
        inputs={
            "document_hash": document_hash,
            "config_hash": config_hash,
            "order": list(order),
        },
        jobs={},
        events=[],
    )


def add_event(
    manifest: PlanManifest,
    *,
    event_type: str,
    ts: datetime,
    job_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Adiciona exatamente um evento ao Event Log, na ordem de chamada."""
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if job_id is not None:
        ev["job_id"] = job_id
    if payload is not None:
        ev["payload"] = dict(payload)
    manifest.events.append(ev)


def job_started(manifest: PlanManifest, *, job_id: str, ts: datetime) -> None:
    """Marca o job como `running` e registra `job_started`."""
    j = manifest.jobs.setdefault(job_id, {"job_id": job_id})
    j.update({"status": "running", "started_at": _iso(ts)})
    add_event(manifest, event_type="job_started", ts=ts, job_id=job_id)


def job_finished(manifest: PlanManifest, *, job_id: str, ts: datetime, result: Dict[str, Any]) -> None:
    """
    Registra conclusão do job (status final, duração, outputs gravados).

    Jobs pulados (`skipped`) também passam por aqui, sem `started_at`.
    """
    j = manifest.jobs.setdefault(job_id, {"job_id": job_id})
    started_iso = j.get("started_at")
    if started_iso:
        duration_ms = _ms_between(datetime.fromisoformat(started_iso), ts)
    else:
        duration_ms = 0

    status = result.get("status", "success")
    j.update(
        {
            "status": status,
            "finished_at": _iso(ts),
            "duration_ms": duration_ms,
            "summary": result.get("summary", ""),
            "datasets": list(result.get("datasets", []) or []),
        }
    )
    add_event(
        manifest,
        event_type="job_finished",
        ts=ts,
        job_id=job_id,
        payload={"status": status},
    )


def job_failed(manifest: PlanManifest, *, job_id: str, ts: datetime, error: Dict[str, Any]) -> None:
    """Marca o job como `failed` e associa o payload de erro."""
    j = manifest.jobs.setdefault(job_id, {"job_id": job_id})
    j.update({"status": "failed", "finished_at": _iso(ts), "error": dict(error)})
    add_event(manifest, event_type="job_failed", ts=ts, job_id=job_id, payload={"error": dict(error)})


def save_manifest(manifest: PlanManifest, path: Path) -> None:
    """Persiste o Manifest em JSON determinístico (chaves ordenadas)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def load_manifest(path: Path) -> PlanManifest:
    """Restaura um Manifest salvo por `save_manifest`."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return PlanManifest.from_dict(data)
