# src/sysboot/core/config/__init__.py

"""
Camada de configuração do SysBoot.

Este pacote contém as estruturas e utilitários responsáveis por carregar
recursivamente a árvore de configuração YAML de uma aplicação.

A configuração no SysBoot é:
    - declarativa
    - guiada pela estrutura de diretórios
    - determinística

Responsabilidades do pacote:
    - Utilitários de caminho e leitura de YAML (`paths`)
    - Resolução de diretivas por chave (`directives`)
    - Carregamento recursivo com extensão de subárvores (`loader`)
    - Geração de hash canônico para rastreabilidade (`hashing`)

Limites explícitos:
    - Não valida semântica de domínio
    - Não há hot reload nem rollback de carregamentos parciais
"""

from .directives import ConfigNode, PathMode, resolve_directive
from .errors import (
    CircularConfigurationError,
    ConfigError,
    ConfigFileNotFoundError,
    InvalidConfigRootTypeError,
    MalformedDirectiveError,
)
from .hashing import compute_config_hash
from .loader import ConfigTree, LoadResult, load_config_tree, to_relative

__all__ = [
    "CircularConfigurationError",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigNode",
    "ConfigTree",
    "InvalidConfigRootTypeError",
    "LoadResult",
    "MalformedDirectiveError",
    "PathMode",
    "compute_config_hash",
    "load_config_tree",
    "resolve_directive",
    "to_relative",
]
