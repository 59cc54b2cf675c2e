# src/sysboot/__init__.py
"""
SysBoot - bootstrap declarativo de aplicações a partir de árvores YAML.

Este pacote raiz define o namespace público do SysBoot, um framework
pequeno para carregar recursivamente a configuração de uma aplicação a
partir de arquivos YAML e compor, sobre ela, behaviors nomeados e
subsistemas plugáveis.

Arquitetura em alto nível:
    - core.config    → carregamento recursivo, diretivas, caminhos e hashing
    - core.sync      → AsyncFifoLock (exclusão mútua FIFO cooperativa)
    - core.behavior  → BehaviorBus (pub/sub nomeado)
    - core.cache     → cache limitado de arquivos
    - core.subsystem → composição de subsistemas por nível de acesso
    - core.system    → bootstrap da aplicação (System)

Limites explícitos:
    - Não é um serviço distribuído de configuração
    - Não valida schema de configuração
    - Não há hot reload
"""

from .core.config import ConfigTree, load_config_tree
from .core.errors import LoaderError, SysbootError
from .core.options import SystemOptions
from .core.system import System

__all__ = [
    "ConfigTree",
    "LoaderError",
    "SysbootError",
    "System",
    "SystemOptions",
    "load_config_tree",
]
