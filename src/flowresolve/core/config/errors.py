# src/flowresolve/core/config/errors.py
"""
Exceções canônicas da camada de configuração do resolver.

As exceções aqui definidas representam falhas ao carregar, mesclar ou
validar as configurações do resolver (política de desempate da ordenação,
política de falha do executor). Não representam erros do documento de
workflow, que pertencem à hierarquia `ResolverException`.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de resolução ou execução de job
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do resolver.

    Permite captura genérica de erros de configuração, separando-os
    claramente das falhas de resolução do documento de workflow.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Exceção levantada quando o arquivo de configuração base (defaults)
    não é encontrado no caminho especificado.

    Decisões arquiteturais:
        - Quando um caminho de defaults é informado, ele é obrigatório
        - Não há fallback silencioso para o `DEFAULT_CONFIG` embutido
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando a extensão do arquivo de configuração
    não é suportada (v1: `.yaml`, `.yml`, `.json`).
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"executor": {"fail_fast": true}}
        - override: {"executor": "off"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class InvalidConfigValueError(ConfigError):
    """
    Exceção levantada quando uma chave conhecida recebe valor fora do
    domínio permitido (ex.: `ordering.tie_break: random`).
    """
