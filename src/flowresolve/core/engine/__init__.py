# src/flowresolve/core/engine/__init__.py
"""
Engine do flowresolve.

Este pacote contém a implementação responsável por **ordenar**, **resolver**
e **executar** workflows, respeitando a configuração efetiva.

Componentes principais:
    - planner  → Dependency Orderer (ordenação topológica determinística)
    - resolve  → fachada tudo-ou-nada: documento → ResolvedPlan
    - executor → executor de referência de um ResolvedPlan

Princípios fundamentais:
    - Resolução e execução são responsabilidades separadas
    - A ordem é determinística para o mesmo documento e configuração
    - Políticas de execução são controladas por configuração

Invariantes:
    - Jobs só são executados após suas dependências
    - Cada job é executado no máximo uma vez por run
    - O resultado reflete explicitamente o estado de cada job

Limites explícitos:
    - Não define runners de domínio
    - Não persiste resultados automaticamente
"""

from .executor import JobRunner, PlanExecutor, execute_plan  # noqa: F401
from .planner import JobVisitState, order_jobs  # noqa: F401
from .resolve import load_and_resolve, resolve_workflow  # noqa: F401
