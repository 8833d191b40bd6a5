"""
flowresolve: Canonical Exceptions (v1)

Este módulo define as exceções tipadas da resolução de workflows.

Objetivo:
- Permitir que Validator/Resolver/Orderer levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ResolverErrorPayload
- Evitar ValueError/RuntimeError genéricos em falhas estruturais do documento

Regras:
- Toda exceção identifica o job e o caminho do campo (ex.: `B.inputs.x`)
  quando aplicável.
- Exceções devem carregar apenas dados estruturados (serializáveis).
- A resolução é tudo-ou-nada: nenhuma exceção carrega resultado parcial.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

from .errors import (
    CYCLIC_DEPENDENCY,
    CYCLIC_SELF_REFERENCE,
    DATASET_NOT_FOUND,
    INVALID_REFERENCE_SYNTAX,
    MISSING_DATASET_ID,
    MISSING_JOB_OUTPUT,
    RESOLVER_ERROR,
    SCHEMA_ERROR,
    UNRESOLVED_REFERENCE,
    VERSION_NOT_FOUND,
    ResolverErrorPayload,
)


@dataclass(eq=False)
class ResolverException(Exception):
    """Base class para exceções da resolução de workflows.

    Importante:
    - `job` e `path` localizam o erro no documento original
    - `details` carrega dados estruturados adicionais
    - Mensagem deve ser curta e humana
    """

    code: ClassVar[str] = RESOLVER_ERROR

    message: str
    job: Optional[str] = None
    path: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (at {self.path})"
        return self.message

    def to_payload(self) -> ResolverErrorPayload:
        details: Dict[str, Any] = {"job": self.job, "path": self.path}
        details.update(self.details)
        return ResolverErrorPayload(
            type=self.code,
            message=self.message,
            details=details,
            hint=self.hint,
        )


# ---------------------------------------------------------------------------
# Schema Validator
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class SchemaError(ResolverException):
    """Documento de workflow estruturalmente malformado."""

    code: ClassVar[str] = SCHEMA_ERROR


@dataclass(eq=False)
class MissingDatasetId(SchemaError):
    """Declaração `type: dataset` sem `with.id`."""

    code: ClassVar[str] = MISSING_DATASET_ID


# ---------------------------------------------------------------------------
# Reference Resolver
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class InvalidReferenceSyntax(ResolverException):
    """Dot-path fora do formato `<job>.outputs.<name>`."""

    code: ClassVar[str] = INVALID_REFERENCE_SYNTAX


@dataclass(eq=False)
class UnresolvedReferenceError(ResolverException):
    """Dot-path aponta para job inexistente ou output não declarado."""

    code: ClassVar[str] = UNRESOLVED_REFERENCE


@dataclass(eq=False)
class CyclicSelfReferenceError(ResolverException):
    """Dataset externo também é produzido por um job do mesmo grafo."""

    code: ClassVar[str] = CYCLIC_SELF_REFERENCE


@dataclass(eq=False)
class DatasetNotFound(ResolverException):
    """Dataset externo não existe no Dataset Store."""

    code: ClassVar[str] = DATASET_NOT_FOUND


@dataclass(eq=False)
class VersionNotFound(ResolverException):
    """Versão fixada (pinned) não existe para o identificador."""

    code: ClassVar[str] = VERSION_NOT_FOUND


# ---------------------------------------------------------------------------
# Dependency Orderer
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class CyclicDependencyError(ResolverException):
    """Grafo de jobs contém ciclo; `cycle` lista cada job do ciclo uma vez."""

    code: ClassVar[str] = CYCLIC_DEPENDENCY

    @property
    def cycle(self) -> List[str]:
        return list(self.details.get("cycle", []))


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class MissingJobOutput(ResolverException):
    """Runner não produziu um output declarado pelo job."""

    code: ClassVar[str] = MISSING_JOB_OUTPUT
