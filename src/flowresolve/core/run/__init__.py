# src/flowresolve/core/run/__init__.py
"""
Estruturas de execução de planos resolvidos.

- **types**: `JobStatus`, `JobResult`, `RunResult`
- **context**: `RunContext` (outputs entre jobs, logs estruturados, warnings)

Limites explícitos:
- Não resolve documentos
- Não ordena jobs (o plano já chega ordenado)
"""

from .context import RunContext  # noqa: F401
from .types import JobResult, JobStatus, RunResult  # noqa: F401
