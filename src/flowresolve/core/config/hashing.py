# src/flowresolve/core/config/hashing.py
"""
Hashing canônico de estruturas declarativas.

O hash representa a **identidade estrutural** de uma configuração ou de um
documento de workflow e é registrado no `ResolvedPlan` e no Manifest,
permitindo verificar que duas resoluções partiram exatamente da mesma
entrada.

Política de hashing (v1):
    - Serialização JSON canônica (sort_keys, separadores compactos)
    - Codificação UTF-8
    - SHA-256, hexadecimal de 64 caracteres

Invariantes:
    - Estruturas equivalentes produzem o mesmo hash, independente da
      ordem original das chaves
    - Chaves de mapping são normalizadas para `str`
"""


import hashlib
import json
from typing import Any, Dict, Mapping


def _canonicalize(data: Any) -> Any:
    if isinstance(data, Mapping):
        return {str(k): _canonicalize(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_canonicalize(v) for v in data]
    return data


def canonical_sha256(data: Any) -> str:
    """Computa SHA-256 de `data` em JSON canônico (valores não-JSON via `str`)."""
    canonical_json = json.dumps(
        _canonicalize(data),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera o hash determinístico da configuração efetiva do resolver.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"config to hash must be a dict, got: {type(config).__name__}"
        )
    return canonical_sha256(config)
