# src/flowresolve/core/workflow/types.py
"""
Tipos canônicos do modelo de workflow.

Este módulo define as estruturas imutáveis que representam um documento
de workflow já validado (`WorkflowGraph`) e o plano resolvido entregue ao
executor (`ResolvedPlan`).

Componentes principais:
    - DatasetRef         → identificador + versão opcional de dataset
    - InputBinding       → input de job: dataset externo ou dot-path
    - OutputDeclaration  → output de job: nome, tipo e dataset alvo
    - JobSpec            → job validado (inputs/outputs ordenados, diretiva)
    - WorkflowGraph      → mapping job_id → JobSpec em ordem de declaração
    - JobOutputRef       → par (job, output) resolvido a partir de um dot-path
    - ResolvedInput      → input com fonte concreta (versão fixada ou produtor)
    - ResolvedJob        → job + inputs resolvidos + dependências
    - ResolvedPlan       → sequência ordenada de ResolvedJob + hashes

Princípios fundamentais:
    - Tipos são imutáveis (frozen) após o parse
    - A ordem de declaração do documento é preservada em todas as sequências
    - Nenhuma lógica de validação ou resolução vive neste módulo

Invariantes:
    - Dois DatasetRef são iguais sse `id` e `version` coincidem
    - Um ResolvedInput possui exatamente uma fonte (dataset OU producer)
    - Um ResolvedInput externo possui sempre versão fixada

Limites explícitos:
    - Não valida documentos
    - Não consulta o Dataset Store
    - Não executa jobs
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


OUTPUT_TYPE_DATASET = "dataset"
OUTPUT_TYPE_VOLUME = "volume"


@dataclass(frozen=True)
class DatasetRef:
    """
    Referência a um dataset versionado.

    Uma referência sem `version` significa "a versão mais recente de `id`"
    no momento da resolução. Uma referência com `version` é fixada (pinned)
    e nunca resolve para outra versão.
    """

    id: str
    version: Optional[str] = None

    @property
    def is_pinned(self) -> bool:
        return self.version is not None

    def __str__(self) -> str:
        if self.version is None:
            return self.id
        return f"{self.id}@{self.version}"


@dataclass(frozen=True)
class InputBinding:
    """
    Input declarado por um job.

    Exatamente um dos campos de fonte está presente:
        - dataset: dataset externo (`type: dataset` com `with.id`)
        - reference: dot-path cru `<job>.outputs.<name>`, interpretado
          apenas pelo Reference Resolver
    """

    name: str
    dataset: Optional[DatasetRef] = None
    reference: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return self.dataset is not None


@dataclass(frozen=True)
class OutputDeclaration:
    """Output declarado por um job; `dataset_id` só existe para `type: dataset`."""

    name: str
    type: str
    dataset_id: Optional[str] = None

    @property
    def is_dataset(self) -> bool:
        return self.type == OUTPUT_TYPE_DATASET


@dataclass(frozen=True)
class JobSpec:
    """
    Job validado do workflow.

    A diretiva de execução (`uses` + `with`) e o `env` são opacos para o
    resolver: são apenas transportados até o executor. Ambos são copiados
    na construção e expostos como mappings somente leitura; ficam fora do
    `hash` (a igualdade continua comparando o conteúdo).
    """

    id: str
    inputs: Tuple[InputBinding, ...] = ()
    outputs: Tuple[OutputDeclaration, ...] = ()
    uses: Optional[str] = None
    with_params: Mapping[str, Any] = field(default_factory=dict, hash=False)
    env: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "with_params", MappingProxyType(deepcopy(dict(self.with_params))))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    def output(self, name: str) -> Optional[OutputDeclaration]:
        for out in self.outputs:
            if out.name == name:
                return out
        return None

    def produced_dataset_ids(self) -> List[str]:
        return [o.dataset_id for o in self.outputs if o.is_dataset and o.dataset_id]


@dataclass(frozen=True)
class WorkflowGraph:
    """
    Grafo de workflow validado: job_id → JobSpec, em ordem de declaração.

    `inputs` são as declarações de datasets externos de nível de workflow
    (forma envelope); não pertencem a nenhum job.

    Invariante (garantida pelo Reference Resolver): todo input não externo
    referencia um job existente que declara o output referenciado.
    """

    jobs: Dict[str, JobSpec]
    inputs: Tuple[InputBinding, ...] = ()

    def __contains__(self, job_id: object) -> bool:
        return job_id in self.jobs

    def __iter__(self) -> Iterator[JobSpec]:
        return iter(self.jobs.values())

    def __len__(self) -> int:
        return len(self.jobs)

    def get(self, job_id: str) -> JobSpec:
        return self.jobs[job_id]

    @property
    def job_ids(self) -> List[str]:
        return list(self.jobs)


@dataclass(frozen=True)
class JobOutputRef:
    """Par (job, output) resolvido a partir de `<job>.outputs.<name>`."""

    job: str
    output: str

    def __str__(self) -> str:
        return f"{self.job}.outputs.{self.output}"


@dataclass(frozen=True)
class ResolvedInput:
    """
    Input com fonte concreta.

    Campos:
        - name: nome do input no job consumidor
        - dataset: DatasetRef fixado (somente inputs externos)
        - producer: JobOutputRef (somente inputs entre jobs)
        - dataset_id: identificador de dataset escrito pelo produtor,
          quando o output do produtor é `type: dataset`
    """

    name: str
    dataset: Optional[DatasetRef] = None
    producer: Optional[JobOutputRef] = None
    dataset_id: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return self.dataset is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.dataset is not None:
            return {
                "name": self.name,
                "source": "dataset",
                "id": self.dataset.id,
                "version": self.dataset.version,
            }
        return {
            "name": self.name,
            "source": "job",
            "job": self.producer.job if self.producer else None,
            "output": self.producer.output if self.producer else None,
            "dataset_id": self.dataset_id,
        }


@dataclass(frozen=True)
class ResolvedJob:
    """Job do plano: JobSpec + inputs resolvidos + jobs dos quais depende."""

    spec: JobSpec
    inputs: Tuple[ResolvedInput, ...] = ()
    depends_on: Tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return self.spec.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.spec.id,
            "uses": self.spec.uses,
            "with": deepcopy(dict(self.spec.with_params)),
            "env": dict(self.spec.env),
            "depends_on": list(self.depends_on),
            "inputs": [i.to_dict() for i in self.inputs],
            "outputs": [
                {"name": o.name, "type": o.type, "dataset_id": o.dataset_id}
                for o in self.spec.outputs
            ],
        }


@dataclass(frozen=True)
class ResolvedPlan:
    """
    Plano resolvido, somente leitura, entregue ao executor.

    Decisões arquiteturais:
        - `jobs` segue a ordem topológica produzida pelo Dependency Orderer
        - `document_hash` e `config_hash` identificam a entrada da resolução
        - `inputs` guarda os datasets externos de nível de workflow, fixados
        - Dois planos resolvidos do mesmo documento, sem mudança no store,
          são iguais (`==`)
    """

    jobs: Tuple[ResolvedJob, ...]
    document_hash: str
    config_hash: str
    inputs: Tuple[ResolvedInput, ...] = ()

    @property
    def order(self) -> List[str]:
        return [j.id for j in self.jobs]

    def get(self, job_id: str) -> ResolvedJob:
        for job in self.jobs:
            if job.id == job_id:
                return job
        raise KeyError(job_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_hash": self.document_hash,
            "config_hash": self.config_hash,
            "order": self.order,
            "inputs": [i.to_dict() for i in self.inputs],
            "jobs": [j.to_dict() for j in self.jobs],
        }
