# src/sysboot/core/config/errors.py
"""
Exceções canônicas da camada de configuração do SysBoot.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento recursivo da árvore de configuração YAML.

As exceções aqui definidas representam **violações estruturais
explícitas** da árvore de configuração, e não erros genéricos de execução.

Princípios fundamentais:
    - Exceções são tipadas e carregam um `code` estável
    - Erros estruturais são tratados como falhas fatais
    - Mensagens de erro são claras e direcionadas ao usuário

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - `ConfigError` é um `LoaderError`, logo possui `code` e `message`

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de System, subsistemas ou BehaviorBus
"""

from typing import Optional

from sysboot.core.errors import (
    CIRCULAR_CONFIGURATION,
    FILE_NOT_FOUND,
    INVALID_CONFIG_ROOT,
    MALFORMED_DIRECTIVE,
    LoaderError,
)


class ConfigError(LoaderError):
    """
    Exceção base para erros relacionados à árvore de configuração.

    Esta hierarquia permite:
        - captura genérica de erros de configuração
        - distinção clara entre falhas estruturais e falhas de bootstrap
    """

    code_default: str = "config_error"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(code or self.code_default, message)


class ConfigFileNotFoundError(ConfigError):
    """
    Exceção levantada quando um arquivo YAML referenciado não existe
    ou não pode ser lido.

    Decisões arquiteturais:
        - Não há retry
        - A falha é propagada até o chamador de `load()`
    """

    code_default = FILE_NOT_FOUND

    def __init__(self, path: str):
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class MalformedDirectiveError(ConfigError):
    """
    Exceção levantada quando a diretiva de uma chave não é null,
    string ou mapeamento.

    A mensagem segue exatamente o formato
    `"Invalid initialization entry type - {key}"`.
    """

    code_default = MALFORMED_DIRECTIVE

    def __init__(self, key: str):
        super().__init__(f"Invalid initialization entry type - {key}")
        self.key = key


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando um arquivo de inicialização (ou de extensão)
    não possui um mapeamento no nível raiz.

    Invariantes:
        - Arquivos vazios são interpretados como mapeamentos vazios
        - Listas ou escalares no root são inválidos
    """

    code_default = INVALID_CONFIG_ROOT


class CircularConfigurationError(ConfigError):
    """
    Exceção levantada quando uma cadeia de `extend: true` retorna a um
    par (pasta, arquivo) já presente na pilha de carregamento.
    """

    code_default = CIRCULAR_CONFIGURATION

    def __init__(self, chain: list):
        rendered = " -> ".join(chain)
        super().__init__(f"Circular configuration extension: {rendered}")
        self.chain = list(chain)
