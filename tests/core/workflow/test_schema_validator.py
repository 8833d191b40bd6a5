# tests/core/workflow/test_schema_validator.py
"""
Testes do Schema Validator (documento cru → WorkflowGraph).

Os testes asseguram que:
- documentos válidos são materializados em ordem de declaração
- chaves desconhecidas, nomes inválidos e formas inválidas são SchemaError
- `type: dataset` sem `with.id` é MissingDatasetId (inputs e outputs)
- todo erro identifica o job e o caminho do campo
- a forma envelope (`jobs` + `env`) compõe o env de workflow sob o do job
- `inputs` de nível de workflow são declarações de datasets externos
- `with` e `env` do job não compartilham estado com o documento cru

Limites explícitos:
    - Não valida dot-paths (Reference Resolver)
    - Não consulta o Dataset Store
"""

import pytest

from flowresolve.core.exceptions import MissingDatasetId, SchemaError
from flowresolve.core.workflow.schema import validate_workflow_document
from flowresolve.core.workflow.types import DatasetRef


def test_linear_workflow_is_materialized(linear_workflow):
    graph = validate_workflow_document(linear_workflow)

    assert graph.job_ids == ["A", "B"]
    a, b = graph.get("A"), graph.get("B")
    assert a.uses == "tasks/extract"
    assert a.outputs[0].name == "foo"
    assert a.outputs[0].is_dataset
    assert a.outputs[0].dataset_id == "d1"
    assert b.inputs[0].name == "x"
    assert b.inputs[0].reference == "A.outputs.foo"
    assert not b.inputs[0].is_external


def test_input_and_output_order_is_preserved():
    doc = {
        "J": {
            "inputs": {"z": "A.outputs.o", "a": "A.outputs.o", "m": "A.outputs.o"},
            "outputs": {"y": {"type": "volume"}, "b": {"type": "volume"}},
        }
    }
    spec = validate_workflow_document(doc).get("J")
    assert [i.name for i in spec.inputs] == ["z", "a", "m"]
    assert [o.name for o in spec.outputs] == ["y", "b"]


def test_external_input_pinned_and_unpinned():
    doc = {
        "J": {
            "inputs": {
                "latest": {"type": "dataset", "with": {"id": "raw"}},
                "pinned": {"type": "dataset", "with": {"id": "raw", "version": "v1"}},
                "numeric": {"type": "dataset", "with": {"id": "raw", "version": 2}},
            }
        }
    }
    inputs = validate_workflow_document(doc).get("J").inputs

    assert inputs[0].dataset == DatasetRef(id="raw")
    assert not inputs[0].dataset.is_pinned
    assert inputs[1].dataset == DatasetRef(id="raw", version="v1")
    assert inputs[2].dataset.version == "2"


def test_null_sections_are_empty():
    spec = validate_workflow_document({"A": {"inputs": None, "outputs": None}}).get("A")
    assert spec.inputs == ()
    assert spec.outputs == ()


def test_job_without_fields_is_accepted():
    graph = validate_workflow_document({"A": {}})
    assert graph.get("A").uses is None
    assert len(graph) == 1


def test_volume_output_has_no_dataset_id():
    spec = validate_workflow_document({"A": {"outputs": {"m": {"type": "volume"}}}}).get("A")
    assert spec.outputs[0].dataset_id is None
    assert spec.produced_dataset_ids() == []


# ---------------------------------------------------------------------------
# Erros de schema
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("document", [None, [], "A", 42])
def test_root_must_be_mapping(document):
    with pytest.raises(SchemaError):
        validate_workflow_document(document)


def test_empty_workflow_is_rejected():
    with pytest.raises(SchemaError):
        validate_workflow_document({})


def test_unknown_job_key_names_job_and_path():
    with pytest.raises(SchemaError) as exc:
        validate_workflow_document({"A": {"uses": "x", "run": "echo"}})

    assert exc.value.job == "A"
    assert exc.value.path == "A.run"
    assert "run" in exc.value.message


@pytest.mark.parametrize("name", ["bad name", "a.b", "", "ç"])
def test_invalid_job_names(name):
    with pytest.raises(SchemaError):
        validate_workflow_document({name: {}})


def test_invalid_input_name():
    with pytest.raises(SchemaError) as exc:
        validate_workflow_document({"A": {"inputs": {"x.y": "B.outputs.o"}}})
    assert exc.value.path == "A.inputs.x.y"


def test_invalid_output_name():
    with pytest.raises(SchemaError) as exc:
        validate_workflow_document({"A": {"outputs": {"o/1": {"type": "volume"}}}})
    assert exc.value.job == "A"


def test_job_fields_must_be_mapping():
    with pytest.raises(SchemaError):
        validate_workflow_document({"A": ["uses", "x"]})


@pytest.mark.parametrize(
    "fields, path",
    [
        ({"inputs": {"x": 3}}, "A.inputs.x"),
        ({"inputs": {"x": "   "}}, "A.inputs.x"),
        ({"inputs": {"x": {"type": "volume", "with": {"id": "d"}}}}, "A.inputs.x.type"),
        ({"inputs": ["x"]}, "A.inputs"),
        ({"outputs": {"o": "dataset"}}, "A.outputs.o"),
        ({"outputs": {"o": {"with": {"id": "d"}}}}, "A.outputs.o.type"),
        ({"outputs": {"o": {"type": "dataset", "with": {"id": "d"}, "mode": "w"}}}, "A.outputs.o"),
        ({"uses": ""}, "A.uses"),
        ({"with": "params"}, "A.with"),
        ({"env": {"K": [1, 2]}}, "A.env.K"),
    ],
)
def test_malformed_fields_report_path(fields, path):
    with pytest.raises(SchemaError) as exc:
        validate_workflow_document({"A": fields})
    assert exc.value.job == "A"
    assert exc.value.path == path


def test_dataset_output_without_id_is_missing_dataset_id():
    """Cenário canônico: output `type: dataset` sem `with.id`."""
    doc = {"A": {"outputs": {"foo": {"type": "dataset"}}}}

    with pytest.raises(MissingDatasetId) as exc:
        validate_workflow_document(doc)

    err = exc.value
    assert isinstance(err, SchemaError)
    assert err.job == "A"
    assert err.path == "A.outputs.foo.with.id"
    assert err.to_payload().type == "MISSING_DATASET_ID"


def test_dataset_input_without_id_is_missing_dataset_id():
    doc = {"B": {"inputs": {"x": {"type": "dataset", "with": {"version": "v1"}}}}}

    with pytest.raises(MissingDatasetId) as exc:
        validate_workflow_document(doc)

    assert exc.value.path == "B.inputs.x.with.id"


# ---------------------------------------------------------------------------
# Forma envelope e env
# ---------------------------------------------------------------------------

def test_envelope_env_is_merged_under_job_env(envelope_workflow):
    graph = validate_workflow_document(envelope_workflow)

    assert graph.job_ids == ["A", "B"]
    assert graph.get("A").env == {"STAGE": "prod", "DEBUG": "false"}
    assert graph.get("B").env == {"STAGE": "dev", "DEBUG": "false"}


def test_envelope_paths_are_job_relative():
    doc = {"jobs": {"A": {"outputs": {"foo": {"type": "dataset", "with": {}}}}}}
    with pytest.raises(MissingDatasetId) as exc:
        validate_workflow_document(doc)
    assert exc.value.path == "A.outputs.foo.with.id"


def test_envelope_rejects_unknown_root_keys():
    with pytest.raises(SchemaError) as exc:
        validate_workflow_document({"jobs": {"A": {}}, "name": "wf"})
    assert exc.value.path == "name"


def test_envelope_with_no_jobs_is_rejected():
    with pytest.raises(SchemaError):
        validate_workflow_document({"jobs": {}})


def test_env_scalars_are_normalized_to_str():
    spec = validate_workflow_document({"A": {"env": {"N": 3, "F": 1.5, "ON": True}}}).get("A")
    assert spec.env == {"N": "3", "F": "1.5", "ON": "true"}


def test_with_params_are_carried_opaquely():
    spec = validate_workflow_document({"A": {"uses": "t", "with": {"retries": 2, "tags": ["x"]}}}).get("A")
    assert spec.with_params == {"retries": 2, "tags": ["x"]}


def test_with_params_are_copied_from_document():
    doc = {"A": {"with": {"opts": {"lr": 1}}}}
    spec = validate_workflow_document(doc).get("A")

    doc["A"]["with"]["opts"]["lr"] = 999

    assert spec.with_params == {"opts": {"lr": 1}}


def test_with_and_env_are_read_only():
    spec = validate_workflow_document({"A": {"with": {"k": 1}, "env": {"E": "x"}}}).get("A")

    with pytest.raises(TypeError):
        spec.with_params["k"] = 2
    with pytest.raises(TypeError):
        spec.env["E"] = "y"
    assert isinstance(hash(spec), int)


# ---------------------------------------------------------------------------
# Inputs de nível de workflow
# ---------------------------------------------------------------------------

def test_workflow_level_inputs_are_external_datasets():
    doc = {
        "inputs": {
            "raw": {"type": "dataset", "with": {"id": "d0"}},
            "ref": {"type": "dataset", "with": {"id": "d9", "version": "v2"}},
        },
        "jobs": {"A": {}},
    }

    graph = validate_workflow_document(doc)

    assert [b.name for b in graph.inputs] == ["raw", "ref"]
    assert graph.inputs[0].dataset == DatasetRef(id="d0")
    assert graph.inputs[1].dataset == DatasetRef(id="d9", version="v2")


def test_bare_form_has_no_workflow_inputs(linear_workflow):
    assert validate_workflow_document(linear_workflow).inputs == ()


@pytest.mark.parametrize(
    "inputs, exc_type, path",
    [
        ({"y": {"type": "dataset", "with": {}}}, MissingDatasetId, "inputs.y.with.id"),
        ({"y": "A.outputs.o"}, SchemaError, "inputs.y"),
        ({"y": {"type": "volume"}}, SchemaError, "inputs.y.type"),
        (["y"], SchemaError, "inputs"),
    ],
)
def test_malformed_workflow_level_inputs(inputs, exc_type, path):
    with pytest.raises(exc_type) as exc:
        validate_workflow_document({"inputs": inputs, "jobs": {"A": {}}})
    assert exc.value.path == path
    assert exc.value.job is None
