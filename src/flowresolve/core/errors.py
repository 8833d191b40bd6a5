"""
flowresolve: Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros expostos ao chamador.
Erros de resolução são artefatos de domínio e fazem parte do contrato
operacional do resolver, devendo ser:

- explícitos
- serializáveis
- localizáveis (job + caminho do campo)
- acionáveis

Nenhuma recuperação silenciosa é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolverErrorPayload:
    """
    Payload canônico de erro do resolver.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
      (sempre inclui `job` e `path` quando o erro vem do documento)
    - hint: ação sugerida ao autor do workflow (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Base
RESOLVER_ERROR = "RESOLVER_ERROR"

# Documento / Schema
SCHEMA_ERROR = "SCHEMA_ERROR"
MISSING_DATASET_ID = "MISSING_DATASET_ID"

# Referências / Datasets
INVALID_REFERENCE_SYNTAX = "INVALID_REFERENCE_SYNTAX"
UNRESOLVED_REFERENCE = "UNRESOLVED_REFERENCE"
CYCLIC_SELF_REFERENCE = "CYCLIC_SELF_REFERENCE"
DATASET_NOT_FOUND = "DATASET_NOT_FOUND"
VERSION_NOT_FOUND = "VERSION_NOT_FOUND"

# Ordenação
CYCLIC_DEPENDENCY = "CYCLIC_DEPENDENCY"

# Executor
MISSING_JOB_OUTPUT = "MISSING_JOB_OUTPUT"
EXECUTOR_JOB_ERROR = "EXECUTOR_JOB_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def executor_job_error(
    *,
    job: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique o runner do job e os inputs montados. Nenhum retry é aplicado automaticamente.",
) -> ResolverErrorPayload:
    return ResolverErrorPayload(
        type=EXECUTOR_JOB_ERROR,
        message="Falha inesperada durante a execução do job",
        details={
            "job": job,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )
