# src/sysboot/core/subsystem/registry.py
"""
Registro de tipos de subsistema.

O `SubsystemRegistry` associa o `type` declarado em `subsystems:` a uma
fábrica `(SubsystemContext) -> Subsystem`. O `System` recebe o registry
por injeção; `default_registry()` retorna um registry com os tipos
embutidos (`behavior`, `info`, `options`, `log`, `event`).

Invariantes:
    - Cada tipo é registrado uma única vez
    - A ordem de registro é preservada

Limites explícitos:
    - Não importa módulos dinamicamente
    - Não resolve dependências (ver `planner`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from sysboot.core.errors import SUBSYSTEM_UNKNOWN_TYPE, LoaderError

from .planner import SubsystemDeclaration
from .types import Subsystem


@dataclass
class SubsystemContext:
    """
    Argumentos entregues à fábrica de um subsistema.

    Campos:
        system: instância do `System` em carregamento
        declaration: declaração do subsistema
        args: argumentos resolvidos (`system_args` e/ou `shared`)
    """

    system: Any
    declaration: SubsystemDeclaration
    args: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.declaration.name

    @property
    def vars(self) -> Any:
        return self.declaration.vars


SubsystemFactory = Callable[[SubsystemContext], Subsystem]


class DuplicateSubsystemTypeError(ValueError):
    """Exceção levantada quando um tipo de subsistema é registrado duas vezes."""


@dataclass
class SubsystemRegistry:
    _factories: Dict[str, SubsystemFactory] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, type_name: str, factory: SubsystemFactory) -> None:
        if not isinstance(type_name, str) or not type_name.strip():
            raise ValueError("subsystem type must be a non-empty string")
        if type_name in self._factories:
            raise DuplicateSubsystemTypeError(f"Duplicate subsystem type: {type_name}")
        self._factories[type_name] = factory
        self._order.append(type_name)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._factories

    def types(self) -> List[str]:
        return list(self._order)

    def create(self, context: SubsystemContext) -> Subsystem:
        type_name = context.declaration.type
        factory = self._factories.get(type_name)
        if factory is None:
            raise LoaderError(
                SUBSYSTEM_UNKNOWN_TYPE,
                f"Unknown subsystem type '{type_name}' for subsystem '{context.name}'",
            )
        return factory(context)


def default_registry() -> SubsystemRegistry:
    from .builtins import BUILTIN_SUBSYSTEMS

    registry = SubsystemRegistry()
    for type_name, factory in BUILTIN_SUBSYSTEMS.items():
        registry.add(type_name, factory)
    return registry
