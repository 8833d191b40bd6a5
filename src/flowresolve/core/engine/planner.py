# src/flowresolve/core/engine/planner.py
"""
Dependency Orderer: ordenação topológica determinística de jobs.

Este módulo recebe os jobs de um workflow (em ordem de declaração) e as
dependências derivadas das referências `<job>.outputs.<name>` já resolvidas,
e produz uma sequência linear de job ids em que todo job aparece depois de
todos os jobs dos quais depende.

O planner opera exclusivamente em nível estrutural, analisando:
    - identificadores de jobs
    - arestas produtor → consumidor
    - formação de ciclos

Decisões arquiteturais:
    - Busca em profundidade iterativa (sem recursão) com máquina de estados
      por job: UNVISITED → IN_PROGRESS → RESOLVED
    - Um job revisitado em IN_PROGRESS fecha um ciclo → CyclicDependencyError
      com o caminho completo do ciclo
    - Jobs RESOLVED nunca são revisitados (memoização)
    - Empates são resolvidos pela ordem de declaração (padrão) ou por ordem
      lexicográfica do job id (`ordering.tie_break: lexicographic`)

Invariantes:
    - Nenhum job aparece antes de suas dependências
    - Todos os jobs aparecem exatamente uma vez
    - A mesma entrada produz sempre a mesma ordem

Limites explícitos:
    - Não executa jobs
    - Não consulta o Dataset Store
    - Não interpreta dot-paths (recebe dependências já resolvidas)
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple

from flowresolve.core.config.loader import TIE_BREAK_DECLARATION, TIE_BREAK_LEXICOGRAPHIC
from flowresolve.core.exceptions import CyclicDependencyError, UnresolvedReferenceError


class JobVisitState(str, Enum):
    """
    Estado de um job durante a ordenação.

    Estados definidos:
        - UNVISITED: ainda não alcançado pela busca
        - IN_PROGRESS: na pilha atual; dependências sendo visitadas
        - RESOLVED: todas as dependências já emitidas; job emitido
    """

    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


def order_jobs(
    job_ids: Sequence[str],
    depends_on: Mapping[str, Sequence[str]],
    *,
    tie_break: str = TIE_BREAK_DECLARATION,
) -> List[str]:
    """
    Produz uma ordem topológica determinística dos jobs.

    Args:
        job_ids (Sequence[str]): Jobs em ordem de declaração no documento.
        depends_on (Mapping[str, Sequence[str]]): job → jobs produtores dos
            quais ele consome outputs. Jobs ausentes não têm dependências.
        tie_break (str): "declaration" ou "lexicographic".

    Returns:
        List[str]: job ids em ordem de execução.

    Raises:
        ValueError: Se houver job id duplicado ou `tie_break` desconhecido.
        UnresolvedReferenceError: Se uma dependência não for um job declarado.
        CyclicDependencyError: Se algum job depender transitivamente de si
            mesmo; `cycle` lista cada job do ciclo exatamente uma vez.
    """
    if len(set(job_ids)) != len(job_ids):
        dupes = sorted({j for j in job_ids if list(job_ids).count(j) > 1})
        raise ValueError(f"Duplicate job ids: {dupes}")

    declared: Dict[str, int] = {jid: i for i, jid in enumerate(job_ids)}

    if tie_break == TIE_BREAK_DECLARATION:
        def _ordered(ids: Sequence[str]) -> List[str]:
            return sorted(ids, key=declared.__getitem__)
    elif tie_break == TIE_BREAK_LEXICOGRAPHIC:
        def _ordered(ids: Sequence[str]) -> List[str]:
            return sorted(ids)
    else:
        raise ValueError(f"Unknown tie_break policy: {tie_break!r}")

    for jid, deps in depends_on.items():
        for dep in deps:
            if dep not in declared:
                raise UnresolvedReferenceError(
                    message=f"job '{jid}' depends on unknown job '{dep}'",
                    job=jid,
                    path=f"{jid}.inputs",
                    details={"dependency": dep, "known_jobs": list(job_ids)},
                )

    state: Dict[str, JobVisitState] = {jid: JobVisitState.UNVISITED for jid in job_ids}
    order: List[str] = []

    for root in _ordered(job_ids):
        if state[root] is not JobVisitState.UNVISITED:
            continue

        path: List[str] = [root]
        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(_ordered(depends_on.get(root, ()))))]
        state[root] = JobVisitState.IN_PROGRESS

        while stack:
            node, pending = stack[-1]
            child = next(pending, None)

            if child is None:
                stack.pop()
                path.pop()
                state[node] = JobVisitState.RESOLVED
                order.append(node)
                continue

            if state[child] is JobVisitState.RESOLVED:
                continue

            if state[child] is JobVisitState.IN_PROGRESS:
                cycle = path[path.index(child):]
                raise CyclicDependencyError(
                    message="Cycle detected in job dependency graph: " + " -> ".join(cycle + [child]),
                    job=child,
                    path=f"{child}.inputs",
                    details={"cycle": cycle},
                    hint="Remova uma das referências `<job>.outputs.<name>` que fecham o ciclo.",
                )

            state[child] = JobVisitState.IN_PROGRESS
            path.append(child)
            stack.append((child, iter(_ordered(depends_on.get(child, ())))))

    return order
