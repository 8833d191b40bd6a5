# src/flowresolve/core/config/__init__.py

"""
Camada de configuração do resolver.

Este pacote carrega, mescla, valida e identifica (via hash) as
configurações que controlam a resolução e a execução de planos:
política de desempate da ordenação e política de falha do executor.

Princípios fundamentais:
    - Configuração não contém lógica de resolução
    - Overrides são sempre explícitos
    - A mesma entrada sempre produz a mesma configuração final

Limites explícitos:
    - Não valida documentos de workflow
    - Não interage com o Dataset Store
"""

from .errors import (  # noqa: F401
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidConfigValueError,
    UnsupportedConfigFormatError,
)
from .hashing import canonical_sha256, compute_config_hash  # noqa: F401
from .loader import (  # noqa: F401
    DEFAULT_CONFIG,
    TIE_BREAK_DECLARATION,
    TIE_BREAK_LEXICOGRAPHIC,
    load_config,
    resolve_config,
    validate_resolver_config,
)
from .merge import deep_merge  # noqa: F401
