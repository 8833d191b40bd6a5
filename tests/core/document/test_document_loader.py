# tests/core/document/test_document_loader.py
"""
Testes do parser de texto de workflow (YAML/JSON → mapping).

O parser é um colaborador externo ao resolver: suas falhas são
`DocumentError` e acontecem antes da validação de schema.
"""

from pathlib import Path

import pytest

from flowresolve.core.document import (
    DocumentNotFoundError,
    DocumentParseError,
    UnsupportedDocumentFormatError,
    load_workflow_document,
    parse_workflow_text,
)


WORKFLOW_YAML = """\
A:
  uses: tasks/extract
  outputs:
    foo:
      type: dataset
      with:
        id: d1
B:
  inputs:
    x: A.outputs.foo
"""


def test_parse_yaml_preserves_declaration_order():
    doc = parse_workflow_text(WORKFLOW_YAML)
    assert list(doc) == ["A", "B"]
    assert doc["B"]["inputs"]["x"] == "A.outputs.foo"


def test_parse_json():
    doc = parse_workflow_text('{"A": {"uses": "x"}}', fmt="json")
    assert doc == {"A": {"uses": "x"}}


@pytest.mark.parametrize(
    "text",
    [
        "",
        "- a\n- b\n",
        "A: [unclosed\n",
    ],
)
def test_parse_rejects_empty_non_mapping_and_invalid(text):
    with pytest.raises(DocumentParseError):
        parse_workflow_text(text)


def test_parse_unknown_format():
    with pytest.raises(UnsupportedDocumentFormatError):
        parse_workflow_text("A: {}", fmt="toml")


def test_load_infers_format_from_extension(tmp_path: Path):
    yml = tmp_path / "wf.yml"
    yml.write_text(WORKFLOW_YAML, encoding="utf-8")
    js = tmp_path / "wf.json"
    js.write_text('{"A": {}}', encoding="utf-8")

    assert list(load_workflow_document(yml)) == ["A", "B"]
    assert load_workflow_document(str(js)) == {"A": {}}


def test_load_missing_file(tmp_path: Path):
    with pytest.raises(DocumentNotFoundError):
        load_workflow_document(tmp_path / "missing.yaml")


def test_load_unsupported_extension(tmp_path: Path):
    p = tmp_path / "wf.txt"
    p.write_text("A: {}", encoding="utf-8")
    with pytest.raises(UnsupportedDocumentFormatError):
        load_workflow_document(p)
