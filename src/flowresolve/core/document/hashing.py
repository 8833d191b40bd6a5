"""Hashing canônico do documento de workflow.

O hash do documento serve para:
- rastreabilidade no ResolvedPlan/Manifest
- detecção de divergência entre resoluções

Decisão: mesma política do hash de configuração (JSON canônico + SHA-256).
"""

from __future__ import annotations

from typing import Any, Dict

from flowresolve.core.config.hashing import canonical_sha256


def compute_document_hash(document: Dict[str, Any]) -> str:
    """Computa SHA-256 do documento em formato canônico."""
    return canonical_sha256(document)
