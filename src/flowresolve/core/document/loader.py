"""Loader de documentos de workflow (YAML/JSON).

Notas:
- YAML é preferencial, JSON é alternativo.
- O formato é inferido pela extensão do arquivo.
- O loader não valida schema: devolve o mapping cru para o Schema Validator.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .errors import (
    DocumentNotFoundError,
    DocumentParseError,
    UnsupportedDocumentFormatError,
)


def parse_workflow_text(text: str, *, fmt: str = "yaml") -> Dict[str, Any]:
    """Converte texto de workflow em mapping.

    Args:
        text: conteúdo do documento.
        fmt: "yaml" ou "json".

    Raises:
        UnsupportedDocumentFormatError: se `fmt` não for suportado.
        DocumentParseError: se o parsing falhar ou a raiz não for um mapping.
    """
    try:
        if fmt == "yaml":
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise UnsupportedDocumentFormatError(f"unsupported workflow format: {fmt}")
    except UnsupportedDocumentFormatError:
        raise
    except (yaml.YAMLError, ValueError) as e:
        raise DocumentParseError(str(e) or "failed to parse workflow document") from e

    if data is None:
        # YAML vazio -> None
        raise DocumentParseError("workflow document is empty")

    if not isinstance(data, dict):
        raise DocumentParseError("workflow document root must be a mapping/dict")

    return data


def load_workflow_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Carrega documento de workflow a partir de YAML/JSON.

    Raises:
        DocumentNotFoundError: se arquivo não existir.
        UnsupportedDocumentFormatError: se extensão não suportada.
        DocumentParseError: se parsing falhar.
    """
    p = Path(path)
    if not p.exists():
        raise DocumentNotFoundError(f"workflow file not found: {p}")

    suffix = p.suffix.lower()
    if suffix in {".yml", ".yaml"}:
        fmt = "yaml"
    elif suffix == ".json":
        fmt = "json"
    else:
        raise UnsupportedDocumentFormatError(f"unsupported workflow format: {suffix}")

    return parse_workflow_text(p.read_text(encoding="utf-8"), fmt=fmt)
