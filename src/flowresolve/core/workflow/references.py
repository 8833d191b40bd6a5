"""
Reference Resolver: inputs de jobs para fontes concretas.

Resolve cada InputBinding de um `WorkflowGraph` para:
    - um `DatasetRef` fixado (dataset externo, versão consultada no store), ou
    - um `JobOutputRef` (par job/output produtor dentro do grafo)

Políticas (v1):
    - Dot-path `<job>.outputs.<name>`: exatamente três segmentos não vazios,
      segmento do meio literal `outputs`
    - Dataset externo não pode ser produzido por nenhum job do mesmo grafo
      (o dataset deve ser gerado fora do workflow); vale também para os
      `inputs` de nível de workflow
    - Referência sem versão → versão mais recente no momento da resolução
    - Referência com versão → deve existir exatamente; nunca é substituída

Invariantes:
    - Resolução tudo-ou-nada: o primeiro erro interrompe a resolução
    - O store é apenas consultado (nenhuma escrita)
    - A ordem dos inputs de cada job é preservada
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from flowresolve.core.exceptions import (
    CyclicSelfReferenceError,
    DatasetNotFound,
    InvalidReferenceSyntax,
    UnresolvedReferenceError,
    VersionNotFound,
)
from flowresolve.datasets.store import DatasetStore

from .types import (
    DatasetRef,
    InputBinding,
    JobOutputRef,
    JobSpec,
    ResolvedInput,
    WorkflowGraph,
)


OUTPUTS_SEGMENT = "outputs"


def parse_reference(text: str, *, job: Optional[str] = None, path: Optional[str] = None) -> JobOutputRef:
    """Interpreta `<job>.outputs.<name>` como JobOutputRef.

    Raises:
        InvalidReferenceSyntax: se o texto não tiver exatamente três
            segmentos não vazios com `outputs` no meio.
    """
    segments = text.split(".")
    if len(segments) != 3 or any(not s for s in segments) or segments[1] != OUTPUTS_SEGMENT:
        raise InvalidReferenceSyntax(
            message=f"invalid reference {text!r}: expected '<job>.outputs.<name>'",
            job=job,
            path=path,
            details={"reference": text},
            hint="Use o formato `<job>.outputs.<name>` para consumir o output de outro job.",
        )
    return JobOutputRef(job=segments[0], output=segments[2])


def _producers_by_dataset(graph: WorkflowGraph) -> Dict[str, JobOutputRef]:
    # primeiro produtor em ordem de declaração
    producers: Dict[str, JobOutputRef] = {}
    for spec in graph:
        for out in spec.outputs:
            if out.is_dataset and out.dataset_id and out.dataset_id not in producers:
                producers[out.dataset_id] = JobOutputRef(job=spec.id, output=out.name)
    return producers


def _resolve_external(
    owner: Optional[str],
    binding: InputBinding,
    *,
    path: str,
    store: DatasetStore,
    producers: Dict[str, JobOutputRef],
) -> ResolvedInput:
    # owner: job consumidor, ou None para inputs de nível de workflow
    ref = binding.dataset

    producer = producers.get(ref.id)
    if producer is not None:
        raise CyclicSelfReferenceError(
            message=(
                f"dataset '{ref.id}' is declared as external input and also produced "
                f"by '{producer}' in the same workflow"
            ),
            job=owner,
            path=path,
            details={
                "dataset_id": ref.id,
                "producer_job": producer.job,
                "producer_output": producer.output,
            },
            hint=(
                "Gere o dataset fora do workflow, ou consuma o output do job "
                f"produtor via `{producer}`."
            ),
        )

    if not store.exists(ref.id):
        raise DatasetNotFound(
            message=f"external dataset '{ref.id}' does not exist",
            job=owner,
            path=f"{path}.with.id",
            details={"dataset_id": ref.id},
            hint="Crie o dataset (e ao menos uma versão) antes de resolver o workflow.",
        )

    if ref.is_pinned:
        if not store.has_version(ref.id, ref.version):
            raise VersionNotFound(
                message=f"version '{ref.version}' of dataset '{ref.id}' does not exist",
                job=owner,
                path=f"{path}.with.version",
                details={"dataset_id": ref.id, "version": ref.version},
                hint="Fixe uma versão existente ou remova `with.version` para usar a mais recente.",
            )
        pinned = ref
    else:
        pinned = DatasetRef(id=ref.id, version=store.latest_version(ref.id))

    return ResolvedInput(name=binding.name, dataset=pinned)


def _resolve_job_output(job: JobSpec, binding: InputBinding, *, graph: WorkflowGraph) -> ResolvedInput:
    path = f"{job.id}.inputs.{binding.name}"
    ref = parse_reference(binding.reference, job=job.id, path=path)

    if ref.job not in graph:
        raise UnresolvedReferenceError(
            message=f"reference '{binding.reference}' points to unknown job '{ref.job}'",
            job=job.id,
            path=path,
            details={"reference": binding.reference, "known_jobs": graph.job_ids},
        )

    out = graph.get(ref.job).output(ref.output)
    if out is None:
        raise UnresolvedReferenceError(
            message=f"job '{ref.job}' does not declare output '{ref.output}'",
            job=job.id,
            path=path,
            details={
                "reference": binding.reference,
                "declared_outputs": [o.name for o in graph.get(ref.job).outputs],
            },
        )

    return ResolvedInput(
        name=binding.name,
        producer=ref,
        dataset_id=out.dataset_id if out.is_dataset else None,
    )


def resolve_references(graph: WorkflowGraph, *, store: DatasetStore) -> Dict[str, Tuple[ResolvedInput, ...]]:
    """Resolve todos os inputs do grafo.

    Returns:
        Dict[str, Tuple[ResolvedInput, ...]]: job_id → inputs resolvidos,
        em ordem de declaração de jobs e de inputs.

    Raises:
        InvalidReferenceSyntax, UnresolvedReferenceError,
        CyclicSelfReferenceError, DatasetNotFound, VersionNotFound
    """
    producers = _producers_by_dataset(graph)
    resolved: Dict[str, Tuple[ResolvedInput, ...]] = {}

    for spec in graph:
        items: List[ResolvedInput] = []
        for binding in spec.inputs:
            if binding.is_external:
                items.append(
                    _resolve_external(
                        spec.id,
                        binding,
                        path=f"{spec.id}.inputs.{binding.name}",
                        store=store,
                        producers=producers,
                    )
                )
            else:
                items.append(_resolve_job_output(spec, binding, graph=graph))
        resolved[spec.id] = tuple(items)

    return resolved


def resolve_workflow_inputs(graph: WorkflowGraph, *, store: DatasetStore) -> Tuple[ResolvedInput, ...]:
    """Resolve os `inputs` de nível de workflow para versões fixadas.

    Seguem as mesmas regras dos inputs externos de job; os erros trazem
    `job=None` e caminho `inputs.<name>`.
    """
    producers = _producers_by_dataset(graph)
    return tuple(
        _resolve_external(None, binding, path=f"inputs.{binding.name}", store=store, producers=producers)
        for binding in graph.inputs
    )


def collect_dependencies(resolved: Dict[str, Tuple[ResolvedInput, ...]]) -> Dict[str, List[str]]:
    """Deriva job → jobs produtores (sem duplicatas, ordem dos inputs)."""
    deps: Dict[str, List[str]] = {}
    for job_id, inputs in resolved.items():
        seen: List[str] = []
        for item in inputs:
            if item.producer is not None and item.producer.job not in seen:
                seen.append(item.producer.job)
        deps[job_id] = seen
    return deps
