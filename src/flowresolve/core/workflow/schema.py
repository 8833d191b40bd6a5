"""
Schema Validator: documento de workflow v1.

Converte o mapping cru produzido pelo parser de texto em um
`WorkflowGraph` imutável, ou falha com `SchemaError` / `MissingDatasetId`
identificando o job e o caminho do campo.

Formatos de raiz aceitos:

    # forma direta: job → campos
    A:
      outputs:
        foo: {type: dataset, with: {id: d1}}
    B:
      inputs:
        x: A.outputs.foo

    # forma envelope: `jobs` + `env` e `inputs` de nível de workflow
    env: {STAGE: dev}
    inputs:
      raw: {type: dataset, with: {id: d0}}
    jobs:
      A: ...

`inputs` de nível de workflow declaram datasets externos ao workflow;
como inputs externos de job, não podem ser produzidos por nenhum job.

Função pura: não consulta o Dataset Store e não interpreta dot-paths.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from flowresolve.core.config.merge import deep_merge
from flowresolve.core.exceptions import MissingDatasetId, SchemaError

from .types import (
    OUTPUT_TYPE_DATASET,
    DatasetRef,
    InputBinding,
    JobSpec,
    OutputDeclaration,
    WorkflowGraph,
)


RECOGNIZED_JOB_KEYS = frozenset({"uses", "with", "inputs", "outputs", "env"})
ENVELOPE_KEYS = frozenset({"jobs", "env", "inputs"})

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_SCALAR_TYPES = (str, int, float, bool)


def _is_non_empty_str(x: Any) -> bool:
    return isinstance(x, str) and bool(x.strip())


def _is_valid_name(x: Any) -> bool:
    return isinstance(x, str) and bool(_NAME_RE.match(x))


def _expect(cond: bool, msg: str, *, job: Optional[str] = None, path: Optional[str] = None) -> None:
    if not cond:
        raise SchemaError(message=msg, job=job, path=path)


def _as_mapping(value: Any, msg: str, *, job: Optional[str], path: str) -> Dict[Any, Any]:
    # YAML `inputs:` sem valor chega como None -> mapping vazio
    if value is None:
        return {}
    _expect(isinstance(value, dict), msg, job=job, path=path)
    return value


def _normalize_env(env: Any, *, job: Optional[str], path: str) -> Dict[str, str]:
    env = _as_mapping(env, "env must be a mapping", job=job, path=path)
    out: Dict[str, str] = {}
    for key, value in env.items():
        _expect(_is_non_empty_str(key), f"env key must be a non-empty string: {key!r}", job=job, path=path)
        _expect(
            isinstance(value, _SCALAR_TYPES),
            f"env.{key} must be a scalar value",
            job=job,
            path=f"{path}.{key}",
        )
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
        else:
            out[key] = str(value)
    return out


def _unwrap_envelope(document: Dict[Any, Any]) -> Tuple[Dict[Any, Any], Dict[str, str], Tuple[InputBinding, ...], bool]:
    """Separa jobs, env e inputs de nível de workflow; indica se a forma envelope foi usada."""
    if not isinstance(document.get("jobs"), dict):
        return document, {}, (), False

    unknown = sorted(str(k) for k in document if k not in ENVELOPE_KEYS)
    _expect(
        not unknown,
        f"unknown workflow-level keys: {unknown}; allowed: {sorted(ENVELOPE_KEYS)}",
        path=unknown[0] if unknown else None,
    )
    workflow_env = _normalize_env(document.get("env"), job=None, path="env")
    workflow_inputs = _validate_workflow_inputs(document.get("inputs"))
    return document["jobs"], workflow_env, workflow_inputs, True


def _validate_external_input(job_id: Optional[str], name: str, spec: Dict[Any, Any], path: str) -> InputBinding:
    unknown = sorted(str(k) for k in spec if k not in {"type", "with"})
    _expect(not unknown, f"unknown keys in input '{name}': {unknown}", job=job_id, path=path)
    _expect(
        spec.get("type") == OUTPUT_TYPE_DATASET,
        f"input '{name}' must be a '<job>.outputs.<name>' reference or declare type: dataset",
        job=job_id,
        path=f"{path}.type",
    )

    with_ = _as_mapping(spec.get("with"), f"input '{name}'.with must be a mapping", job=job_id, path=f"{path}.with")
    dataset_id = with_.get("id")
    if not _is_non_empty_str(dataset_id):
        raise MissingDatasetId(
            message=f"dataset input '{name}' must declare with.id",
            job=job_id,
            path=f"{path}.with.id",
            hint="Declare o identificador do dataset externo em `with.id`.",
        )

    version = with_.get("version")
    if version is not None:
        _expect(
            isinstance(version, (str, int)) and not isinstance(version, bool) and str(version).strip() != "",
            f"input '{name}'.with.version must be a non-empty string",
            job=job_id,
            path=f"{path}.with.version",
        )
        version = str(version)

    return InputBinding(name=name, dataset=DatasetRef(id=dataset_id, version=version))


def _validate_inputs(job_id: str, raw: Any, prefix: str) -> Tuple[InputBinding, ...]:
    path = f"{prefix}.inputs"
    inputs = _as_mapping(raw, "inputs must be a mapping", job=job_id, path=path)
    bindings: List[InputBinding] = []
    for name, source in inputs.items():
        _expect(
            _is_valid_name(name),
            f"invalid input name: {name!r} (allowed: letters, digits, '-', '_')",
            job=job_id,
            path=f"{path}.{name}",
        )
        ipath = f"{path}.{name}"
        if isinstance(source, str):
            _expect(bool(source.strip()), f"input '{name}' reference is empty", job=job_id, path=ipath)
            bindings.append(InputBinding(name=name, reference=source.strip()))
        elif isinstance(source, dict):
            bindings.append(_validate_external_input(job_id, name, source, ipath))
        else:
            raise SchemaError(
                message=f"input '{name}' must be a reference string or a dataset mapping",
                job=job_id,
                path=ipath,
            )
    return tuple(bindings)


def _validate_workflow_inputs(raw: Any) -> Tuple[InputBinding, ...]:
    inputs = _as_mapping(raw, "workflow-level inputs must be a mapping", job=None, path="inputs")
    bindings: List[InputBinding] = []
    for name, source in inputs.items():
        ipath = f"inputs.{name}"
        _expect(
            _is_valid_name(name),
            f"invalid input name: {name!r} (allowed: letters, digits, '-', '_')",
            path=ipath,
        )
        _expect(
            isinstance(source, dict),
            f"workflow-level input '{name}' must be a dataset mapping (type: dataset, with.id)",
            path=ipath,
        )
        bindings.append(_validate_external_input(None, name, source, ipath))
    return tuple(bindings)


def _validate_outputs(job_id: str, raw: Any, prefix: str) -> Tuple[OutputDeclaration, ...]:
    path = f"{prefix}.outputs"
    outputs = _as_mapping(raw, "outputs must be a mapping", job=job_id, path=path)
    declarations: List[OutputDeclaration] = []
    for name, spec in outputs.items():
        opath = f"{path}.{name}"
        _expect(
            _is_valid_name(name),
            f"invalid output name: {name!r} (allowed: letters, digits, '-', '_')",
            job=job_id,
            path=opath,
        )
        _expect(isinstance(spec, dict), f"output '{name}' must be a mapping", job=job_id, path=opath)
        unknown = sorted(str(k) for k in spec if k not in {"type", "with"})
        _expect(not unknown, f"unknown keys in output '{name}': {unknown}", job=job_id, path=opath)

        otype = spec.get("type")
        _expect(_is_non_empty_str(otype), f"output '{name}' must declare type", job=job_id, path=f"{opath}.type")
        with_ = _as_mapping(spec.get("with"), f"output '{name}'.with must be a mapping", job=job_id, path=f"{opath}.with")

        dataset_id = None
        if otype == OUTPUT_TYPE_DATASET:
            dataset_id = with_.get("id")
            if not _is_non_empty_str(dataset_id):
                raise MissingDatasetId(
                    message=f"dataset output '{name}' must declare with.id",
                    job=job_id,
                    path=f"{opath}.with.id",
                    hint="Declare em `with.id` o dataset que receberá a nova versão.",
                )

        declarations.append(OutputDeclaration(name=name, type=otype, dataset_id=dataset_id))
    return tuple(declarations)


def _validate_job(job_id: Any, fields: Any, *, workflow_env: Dict[str, str]) -> JobSpec:
    jpath = str(job_id)
    _expect(
        _is_valid_name(job_id),
        f"invalid job name: {job_id!r} (allowed: letters, digits, '-', '_')",
        job=str(job_id),
        path=jpath,
    )
    _expect(isinstance(fields, dict), f"job '{job_id}' must be a mapping", job=job_id, path=jpath)

    unknown = sorted(str(k) for k in fields if k not in RECOGNIZED_JOB_KEYS)
    _expect(
        not unknown,
        f"unknown keys in job '{job_id}': {unknown}; allowed: {sorted(RECOGNIZED_JOB_KEYS)}",
        job=job_id,
        path=f"{jpath}.{unknown[0]}" if unknown else jpath,
    )

    uses = fields.get("uses")
    if uses is not None:
        _expect(_is_non_empty_str(uses), "uses must be a non-empty string", job=job_id, path=f"{jpath}.uses")

    with_params = _as_mapping(fields.get("with"), "with must be a mapping", job=job_id, path=f"{jpath}.with")
    job_env = _normalize_env(fields.get("env"), job=job_id, path=f"{jpath}.env")

    return JobSpec(
        id=job_id,
        inputs=_validate_inputs(job_id, fields.get("inputs"), jpath),
        outputs=_validate_outputs(job_id, fields.get("outputs"), jpath),
        uses=uses,
        with_params=with_params,
        env=deep_merge(workflow_env, job_env),
    )


def validate_workflow_document(document: Any) -> WorkflowGraph:
    """Valida e materializa um WorkflowGraph a partir do documento cru.

    Raises:
        SchemaError: documento malformado (raiz, chaves, nomes, tipos).
        MissingDatasetId: `type: dataset` sem `with.id`.
    """
    _expect(isinstance(document, dict), "workflow document must be a mapping/dict")

    jobs_doc, workflow_env, workflow_inputs, enveloped = _unwrap_envelope(document)
    _expect(bool(jobs_doc), "workflow must declare at least one job", path="jobs" if enveloped else None)

    jobs: Dict[str, JobSpec] = {}
    for job_id, fields in jobs_doc.items():
        jobs[job_id] = _validate_job(job_id, fields, workflow_env=workflow_env)

    return WorkflowGraph(jobs=jobs, inputs=workflow_inputs)
