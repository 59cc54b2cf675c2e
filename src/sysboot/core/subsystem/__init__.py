"""
Subsistemas do SysBoot: composição por dados e métodos com nível de acesso.

Componentes:
    - types    → Access, SubsystemData, SubsystemMethod, Subsystem, Entrypoint
    - planner  → declarações de `subsystems:` e ordem de inicialização
    - registry → fábricas por tipo
    - builtins → tipos embutidos (behavior, info, options, log, event)
"""

from .planner import (
    CircularDependencyError,
    SubsystemDeclaration,
    UnknownDependencyError,
    parse_declarations,
    plan_imports,
)
from .registry import (
    DuplicateSubsystemTypeError,
    SubsystemContext,
    SubsystemRegistry,
    default_registry,
)
from .types import (
    ALL_ACCESS,
    Access,
    DataView,
    Entrypoint,
    Subsystem,
    SubsystemData,
    SubsystemMethod,
)

__all__ = [
    "ALL_ACCESS",
    "Access",
    "CircularDependencyError",
    "DataView",
    "DuplicateSubsystemTypeError",
    "Entrypoint",
    "Subsystem",
    "SubsystemContext",
    "SubsystemData",
    "SubsystemDeclaration",
    "SubsystemMethod",
    "SubsystemRegistry",
    "UnknownDependencyError",
    "default_registry",
    "parse_declarations",
    "plan_imports",
]
