# src/flowresolve/core/run/types.py
"""
Tipos canônicos da execução de um plano resolvido.

Componentes principais:
    - JobStatus → enum de estados finais (SUCCESS, SKIPPED, FAILED)
    - JobResult → resultado imutável da execução de um job
    - RunResult → resultado agregado de uma execução de plano

Invariantes:
    - Enums possuem valores textuais canônicos (serializáveis no Manifest)
    - JobResult é imutável; enriquecimento cria nova instância
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class JobStatus(str, Enum):
    """
    Estados finais possíveis da execução de um job.

    Estados definidos:
        - SUCCESS: runner concluiu e todos os outputs declarados foram capturados
        - SKIPPED: job não executado (dependência falhou ou execução interrompida)
        - FAILED: runner levantou exceção ou omitiu output declarado

    Estados intermediários (ex.: running) não pertencem a este enum;
    eles existem apenas no Manifest.
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class JobResult:
    """
    Resultado imutável da execução de um job.

    Campos:
        - job_id: identificador do job no plano
        - status: estado final
        - summary: resumo textual
        - datasets: versões gravadas no store (`DatasetVersion.to_dict()`)
        - payload: dados adicionais (ex.: `error` com ResolverErrorPayload)
    """

    job_id: str
    status: JobStatus
    summary: str
    datasets: List[Dict[str, Any]] = field(default_factory=list)
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma execução de plano (ordem do plano preservada)."""

    jobs: Dict[str, JobResult] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return all(r.status == JobStatus.SUCCESS for r in self.jobs.values())
