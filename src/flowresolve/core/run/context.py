# src/flowresolve/core/run/context.py
"""
Contexto de execução compartilhado de um plano.

O `RunContext` é o único meio pelo qual o executor repassa outputs de um
job para os jobs consumidores, e onde os eventos estruturados de log e os
warnings da execução são acumulados.

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio contexto)
    - Ausência de estado global compartilhado
    - Logs estruturados (dicts) em vez de texto livre

Invariantes:
    - Outputs são indexados pelo par (job_id, output)
    - Logs sempre incluem `run_id` e `job_id`
    - Warnings são agrupados por `job_id`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple


@dataclass
class RunContext:
    """
    Contexto de execução de uma run.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - config: configuração efetiva do resolver/executor
    - meta: metadados livres (ex.: origem do documento)
    - events: log estruturado de eventos
    - warnings: warnings por job_id
    """

    run_id: str
    created_at: datetime
    config: Dict[str, Any]
    meta: Dict[str, Any] = field(default_factory=dict)

    _outputs: Dict[Tuple[str, str], Any] = field(default_factory=dict, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Output store
    # -----------------------------
    def set_output(self, job_id: str, output: str, value: Any) -> None:
        self._outputs[(job_id, output)] = value

    def has_output(self, job_id: str, output: str) -> bool:
        return (job_id, output) in self._outputs

    def get_output(self, job_id: str, output: str) -> Any:
        key = (job_id, output)
        if key not in self._outputs:
            raise KeyError(f"{job_id}.outputs.{output}")
        return self._outputs[key]

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, job_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "job_id": job_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, job_id: str, message: str) -> None:
        if job_id not in self.warnings:
            self.warnings[job_id] = []
        self.warnings[job_id].append(message)
