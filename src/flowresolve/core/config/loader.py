# src/flowresolve/core/config/loader.py
"""
Loader canônico de configuração do resolver.

A configuração efetiva é resolvida a partir de:
    - um arquivo de defaults (opcional; na ausência, `DEFAULT_CONFIG`)
    - um arquivo local de overrides (opcional)

Responsabilidades do módulo:
    - Carregar arquivos de configuração em YAML ou JSON
    - Validar requisitos estruturais mínimos (tipo raiz)
    - Resolver a configuração final via deep-merge determinístico
    - Validar os valores das chaves conhecidas

Chaves conhecidas (v1):
    ordering.tie_break   → "declaration" (padrão) | "lexicographic"
    executor.fail_fast   → bool (padrão: true)

Invariantes:
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults
    - A mesma entrada sempre produz a mesma configuração final
"""

from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional
import json

import yaml  # PyYAML

from .merge import deep_merge
from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidConfigValueError,
    UnsupportedConfigFormatError,
)


TIE_BREAK_DECLARATION = "declaration"
TIE_BREAK_LEXICOGRAPHIC = "lexicographic"

DEFAULT_CONFIG: Dict[str, Any] = {
    "ordering": {"tie_break": TIE_BREAK_DECLARATION},
    "executor": {"fail_fast": True},
}


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Arquivos vazios são interpretados como dicionários vazios.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Unsupported config format: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root must be a dict, got: {type(data).__name__}"
        )

    return data


def validate_resolver_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida os valores das chaves conhecidas e retorna a própria configuração.

    Chaves desconhecidas são preservadas sem validação (a configuração é
    extensível); chaves conhecidas com valor fora do domínio são erro.

    Raises:
        InvalidConfigValueError: Se `ordering.tie_break` ou
            `executor.fail_fast` tiverem valor inválido.
    """
    ordering = config.get("ordering", {}) or {}
    if not isinstance(ordering, dict):
        raise InvalidConfigValueError("ordering must be a mapping")
    tie_break = ordering.get("tie_break", TIE_BREAK_DECLARATION)
    if tie_break not in {TIE_BREAK_DECLARATION, TIE_BREAK_LEXICOGRAPHIC}:
        raise InvalidConfigValueError(
            f"ordering.tie_break must be one of "
            f"['{TIE_BREAK_DECLARATION}', '{TIE_BREAK_LEXICOGRAPHIC}'], got: {tie_break!r}"
        )

    executor = config.get("executor", {}) or {}
    if not isinstance(executor, dict):
        raise InvalidConfigValueError("executor must be a mapping")
    if not isinstance(executor.get("fail_fast", True), bool):
        raise InvalidConfigValueError("executor.fail_fast must be boolean")

    return config


def resolve_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Aplica `overrides` (dict já carregado) sobre `DEFAULT_CONFIG` e valida."""
    effective = deep_merge(DEFAULT_CONFIG, overrides or {})
    return validate_resolver_config(effective)


def load_config(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva do resolver.

    Política de resolução:
        - Sem `defaults_path`, a base é `DEFAULT_CONFIG`
        - Com `defaults_path`, o arquivo é obrigatório e é mesclado sobre
          `DEFAULT_CONFIG` (chaves ausentes continuam com o padrão)
        - O arquivo local é opcional; quando presente, tem prioridade

    Args:
        defaults_path (Optional[str]): Caminho para o arquivo de defaults.
        local_path (Optional[str]): Caminho opcional para overrides locais.

    Returns:
        Dict[str, Any]: Configuração final resolvida e validada.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults informado não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
        InvalidConfigValueError: Se uma chave conhecida tiver valor inválido.
    """
    effective = deepcopy(DEFAULT_CONFIG)

    if defaults_path is not None:
        effective = deep_merge(effective, _load_file(Path(defaults_path)))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return validate_resolver_config(effective)
