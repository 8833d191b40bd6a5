# src/flowresolve/__init__.py
"""
flowresolve: resolução determinística de especificações de workflow.

Este pacote raiz define o namespace público do flowresolve. Um documento
de workflow declara jobs; cada job consome inputs (datasets externos
versionados ou outputs de outros jobs) e declara outputs. O resolver
transforma o documento em um plano de execução ordenado e verificado.

Princípios centrais:
    - A resolução é pura, síncrona e tudo-ou-nada
    - Mesmo documento + mesmo estado do store → plano idêntico
    - Todo erro identifica o job e o caminho do campo
    - Versões de dataset são append-only

Arquitetura em alto nível:
    - core.document     → texto YAML/JSON → mapping
    - core.workflow     → Schema Validator e Reference Resolver
    - core.engine       → Dependency Orderer, fachada e executor
    - core.traceability → Manifest e Event Log da execução
    - datasets          → Dataset Store versionado
    - notebook_ui       → renderização de planos e erros
    - cli               → `flowresolve validate` / `flowresolve plan`

Limites explícitos:
    - Não agenda nem distribui jobs
    - Não persiste datasets em disco
"""

__version__ = "0.1.0"

from .core.engine.resolve import load_and_resolve, resolve_workflow  # noqa: E402
from .datasets.store import InMemoryDatasetStore  # noqa: E402
from .notebook_ui import RenderResult, render_error, render_plan  # noqa: E402

__all__ = [
    "__version__",
    "InMemoryDatasetStore",
    "RenderResult",
    "load_and_resolve",
    "render_error",
    "render_plan",
    "resolve_workflow",
]
