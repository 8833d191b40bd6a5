# src/flowresolve/core/workflow/__init__.py
"""
# Workflow Core

Modelo de dados do workflow e as duas primeiras etapas da resolução.

## Componentes

- **types**: `DatasetRef`, `InputBinding`, `OutputDeclaration`, `JobSpec`,
  `WorkflowGraph` e as formas resolvidas (`ResolvedInput`, `ResolvedJob`,
  `ResolvedPlan`)
- **schema**: Schema Validator (`validate_workflow_document`)
- **references**: Reference Resolver (`parse_reference`, `resolve_references`,
  `resolve_workflow_inputs`)

A ordenação topológica vive em `flowresolve.core.engine.planner`.
"""

from .references import (  # noqa: F401
    collect_dependencies,
    parse_reference,
    resolve_references,
    resolve_workflow_inputs,
)
from .schema import RECOGNIZED_JOB_KEYS, validate_workflow_document  # noqa: F401
from .types import (  # noqa: F401
    OUTPUT_TYPE_DATASET,
    OUTPUT_TYPE_VOLUME,
    DatasetRef,
    InputBinding,
    JobOutputRef,
    JobSpec,
    OutputDeclaration,
    ResolvedInput,
    ResolvedJob,
    ResolvedPlan,
    WorkflowGraph,
)
