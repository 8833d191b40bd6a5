# src/flowresolve/core/config/merge.py
"""
Deep-merge determinístico de estruturas de configuração.

Utilizado em dois pontos:
    - resolução da configuração do resolver (defaults + override local)
    - composição do `env` de nível de workflow sob o `env` de cada job

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

Invariantes:
    - Nenhum input é mutado
    - A mesma entrada sempre produz a mesma saída
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combina `base` com `override`, retornando um novo dicionário.

    Chaves ausentes no override são preservadas da base. Valores do
    override prevalecem. Dicionários aninhados são mesclados recursivamente.

    Raises:
        ConfigTypeConflictError: Se a mesma chave tiver tipos incompatíveis
            (ex.: dict na base e string no override).
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"deep_merge requires dicts at the root, got "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, value in override.items():
        if key not in result:
            result[key] = deepcopy(value)
            continue

        current = result[key]

        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
            continue

        if isinstance(value, list):
            result[key] = deepcopy(value)
            continue

        if type(current) is not type(value):
            raise ConfigTypeConflictError(
                f"Type conflict on key '{key}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )

        result[key] = deepcopy(value)

    return result
