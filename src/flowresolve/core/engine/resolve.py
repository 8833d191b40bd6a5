# src/flowresolve/core/engine/resolve.py
"""
Resolução completa de um documento de workflow.

Encadeia as três etapas do resolver sobre um único documento:

    documento → Schema Validator → WorkflowGraph
              → Reference Resolver → inputs resolvidos + dependências
              → Dependency Orderer → ResolvedPlan

A resolução é tudo-ou-nada: qualquer erro é propagado imediatamente ao
chamador e nenhum plano parcial é produzido. Cada chamada aloca suas
próprias estruturas; não há estado compartilhado entre chamadas, de modo
que documentos diferentes podem ser resolvidos concorrentemente.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from flowresolve.core.config import compute_config_hash, resolve_config
from flowresolve.core.document import compute_document_hash, load_workflow_document
from flowresolve.core.workflow.references import (
    collect_dependencies,
    resolve_references,
    resolve_workflow_inputs,
)
from flowresolve.core.workflow.schema import validate_workflow_document
from flowresolve.core.workflow.types import ResolvedJob, ResolvedPlan
from flowresolve.datasets.store import DatasetStore

from .planner import order_jobs


def resolve_workflow(
    document: Dict[str, Any],
    *,
    store: DatasetStore,
    config: Optional[Dict[str, Any]] = None,
) -> ResolvedPlan:
    """Valida, resolve e ordena um documento de workflow já parseado.

    Args:
        document: mapping produzido pelo parser de texto.
        store: Dataset Store consultado para existência e versões.
        config: overrides de configuração (mesclados sobre `DEFAULT_CONFIG`).

    Returns:
        ResolvedPlan: plano somente leitura, pronto para o executor.
    """
    effective = resolve_config(config)

    graph = validate_workflow_document(document)
    workflow_inputs = resolve_workflow_inputs(graph, store=store)
    resolved_inputs = resolve_references(graph, store=store)
    depends_on = collect_dependencies(resolved_inputs)

    order = order_jobs(
        graph.job_ids,
        depends_on,
        tie_break=effective["ordering"]["tie_break"],
    )

    jobs = tuple(
        ResolvedJob(
            spec=graph.get(job_id),
            inputs=resolved_inputs[job_id],
            depends_on=tuple(depends_on[job_id]),
        )
        for job_id in order
    )

    return ResolvedPlan(
        jobs=jobs,
        document_hash=compute_document_hash(document),
        config_hash=compute_config_hash(effective),
        inputs=workflow_inputs,
    )


def load_and_resolve(
    path: Union[str, Path],
    *,
    store: DatasetStore,
    config: Optional[Dict[str, Any]] = None,
) -> ResolvedPlan:
    """Parseia o arquivo de workflow (YAML/JSON) e resolve o documento."""
    return resolve_workflow(load_workflow_document(path), store=store, config=config)
