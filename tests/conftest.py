# tests/conftest.py
"""
Fixtures compartilhados para testes do flowresolve.

Este módulo define fixtures reutilizáveis que fornecem:
- documentos de workflow mínimos e determinísticos (forma direta e envelope)
- um Dataset Store em memória com versões conhecidas
- contexto de execução controlado (RunContext)
- runners dummy para testes do executor

Decisões arquiteturais:
    - Documentos são dicionários já parseados (sem I/O)
    - Fixtures retornam sempre novas instâncias (nenhum estado compartilhado)
    - Imports do core são realizados de forma lazy para melhorar a clareza
      de erros durante falhas

Invariantes:
    - Nenhuma fixture realiza I/O
    - Nenhuma fixture contém lógica de domínio
    - Todas as fixtures são seguras para execução em paralelo

Limites explícitos:
    - Não substituir testes de integração da CLI
    - Não validar semântica completa do resolver
"""

import pytest
from datetime import datetime, timezone


# =====================================================
# Documentos de workflow
# =====================================================

@pytest.fixture
def linear_workflow() -> dict:
    """
    Workflow mínimo A → B.

    `A` produz o dataset `d1`; `B` consome `A.outputs.foo`. A ordem
    resolvida esperada é `[A, B]`.
    """
    return {
        "A": {
            "uses": "tasks/extract",
            "outputs": {"foo": {"type": "dataset", "with": {"id": "d1"}}},
        },
        "B": {
            "uses": "tasks/report",
            "inputs": {"x": "A.outputs.foo"},
        },
    }


@pytest.fixture
def external_input_workflow() -> dict:
    """
    Workflow com input externo não fixado (`raw`) e job consumidor.

    `ingest` lê a versão mais recente de `raw` e produz `clean`;
    `train` consome `ingest.outputs.table`.
    """
    return {
        "ingest": {
            "uses": "tasks/ingest",
            "inputs": {"src": {"type": "dataset", "with": {"id": "raw"}}},
            "outputs": {"table": {"type": "dataset", "with": {"id": "clean"}}},
        },
        "train": {
            "uses": "tasks/train",
            "inputs": {"data": "ingest.outputs.table"},
            "outputs": {"model": {"type": "volume"}},
        },
    }


@pytest.fixture
def envelope_workflow() -> dict:
    """Mesmo grafo linear, na forma envelope (`jobs` + `env`)."""
    return {
        "env": {"STAGE": "dev", "DEBUG": False},
        "jobs": {
            "A": {
                "outputs": {"foo": {"type": "dataset", "with": {"id": "d1"}}},
                "env": {"STAGE": "prod"},
            },
            "B": {"inputs": {"x": "A.outputs.foo"}},
        },
    }


# =====================================================
# Dataset Store
# =====================================================

@pytest.fixture
def seeded_store():
    """
    InMemoryDatasetStore com `raw` em duas versões (`v1`, `v2`).

    Returns:
        InMemoryDatasetStore: store novo a cada teste.
    """
    from flowresolve.datasets.store import InMemoryDatasetStore

    return InMemoryDatasetStore.from_mapping(
        {"raw": [{"rows": [1, 2]}, {"rows": [1, 2, 3]}]}
    )


@pytest.fixture
def empty_store():
    from flowresolve.datasets.store import InMemoryDatasetStore

    return InMemoryDatasetStore()


# =====================================================
# Execução
# =====================================================

@pytest.fixture
def dummy_config() -> dict:
    """Configuração efetiva mínima (defaults explícitos)."""
    return {
        "ordering": {"tie_break": "declaration"},
        "executor": {"fail_fast": True},
    }


@pytest.fixture
def dummy_ctx(dummy_config):
    """
    RunContext determinístico para testes do executor.

    `run_id` e `created_at` são fixos; a config é injetada explicitamente.
    """
    from flowresolve.core.run.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=dummy_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def echo_runner():
    """
    Runner dummy: produz, para cada output declarado, um dict com o job id
    e os inputs recebidos. Registra a ordem de chamada em `runner.calls`.
    """

    class _EchoRunner:
        def __init__(self):
            self.calls = []

        def __call__(self, job, inputs):
            self.calls.append(job.id)
            return {
                out.name: {"job": job.id, "inputs": dict(inputs)}
                for out in job.spec.outputs
            }

    return _EchoRunner()
