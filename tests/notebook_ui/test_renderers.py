# tests/notebook_ui/test_renderers.py

import copy

from flowresolve.core.engine.resolve import resolve_workflow
from flowresolve.core.exceptions import MissingDatasetId
from flowresolve.notebook_ui.renderers import render_error, render_plan


def test_render_plan_lists_jobs_in_order(external_input_workflow, seeded_store):
    plan = resolve_workflow(external_input_workflow, store=seeded_store)

    result = render_plan(plan)

    lines = result.text.splitlines()
    assert lines[0] == "Resolved plan (2 jobs)"
    assert lines[1].startswith("  1. ingest [tasks/ingest]")
    assert "src <- raw@v2" in result.text
    assert "2. train [tasks/train] after ingest" in result.text
    assert plan.document_hash in result.html
    assert "<th>depends_on</th>" in result.html


def test_render_plan_accepts_dict(linear_workflow, empty_store):
    data = resolve_workflow(linear_workflow, store=empty_store).to_dict()
    before = copy.deepcopy(data)

    assert "B" in render_plan(data).text
    assert data == before


def test_render_error_from_exception():
    err = MissingDatasetId(message="dataset output 'foo' must declare with.id", job="A", path="A.outputs.foo.with.id")

    result = render_error(err)

    assert result.text.startswith("MISSING_DATASET_ID: dataset output 'foo'")
    assert "at: A.outputs.foo.with.id" in result.text
    assert "MISSING_DATASET_ID" in result.html


def test_render_error_from_dict_with_hint():
    result = render_error({"type": "X", "message": "m", "details": {}, "hint": "fix <it>"})
    assert "hint: fix <it>" in result.text
    assert "fix &lt;it&gt;" in result.html


def test_render_error_escapes_details():
    result = render_error({"type": "X", "message": "m", "details": {"path": "<script>"}})
    assert "<script>" not in result.html
    assert "&lt;script&gt;" in result.html


def test_render_error_does_not_mutate_input_dict():
    payload = {"type": "X", "message": "m", "details": {"job": "A", "nested": [1, 2]}}
    before = copy.deepcopy(payload)
    render_error(payload)
    assert payload == before


def test_render_fallback_for_unknown_input_is_text_only():
    result = render_plan(object())
    assert result.text
    assert result.html is None


def test_render_plan_shows_workflow_inputs(seeded_store):
    doc = {"inputs": {"src": {"type": "dataset", "with": {"id": "raw"}}}, "jobs": {"A": {}}}

    result = render_plan(resolve_workflow(doc, store=seeded_store))

    assert "workflow inputs: src <- raw@v2" in result.text
    assert "(no jobs)" not in result.html
