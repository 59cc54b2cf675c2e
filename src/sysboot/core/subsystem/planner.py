# src/sysboot/core/subsystem/planner.py
"""
Planejador de inicialização de subsistemas.

Este módulo lê as declarações da seção `subsystems:` da árvore de
configuração e produz uma ordem de inicialização que respeita as
dependências declaradas (`depends`).

Formato de uma declaração:

    subsystems:
      options:
        type: options
        roles: [options]
        args: [system_args]
      log:
        type: log
        depends: [options]
        roles: [log]

Decisões arquiteturais:
    - Declarações malformadas (não mapeamento ou sem `type` string não
      vazio) são ignoradas
    - Campos opcionais malformados assumem seus defaults
    - Ordenação topológica determinística (Kahn); empates são resolvidos
      pela ordem de declaração
    - Dependência desconhecida e ciclo são falhas fatais

Invariantes:
    - Nenhum subsistema é inicializado antes de suas dependências
    - Cada declaração válida aparece exatamente uma vez na ordem final

Limites explícitos:
    - Não instancia subsistemas
    - Não atribui roles
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from sysboot.core.errors import (
    SUBSYSTEM_CIRCULAR_DEPENDS,
    SUBSYSTEM_UNKNOWN_DEPENDS,
    LoaderError,
)

ARG_SYSTEM_ARGS = "system_args"
ARG_SHARED = "shared"


class UnknownDependencyError(LoaderError):
    """
    Exceção levantada quando um subsistema depende de um nome não declarado.

    Invariantes:
        - Um subsistema não pode depender de um subsistema inexistente
    """

    def __init__(self, name: str, dependency: str):
        super().__init__(
            SUBSYSTEM_UNKNOWN_DEPENDS,
            f"Subsystem '{name}' depends on unknown subsystem '{dependency}'",
        )
        self.name = name
        self.dependency = dependency


class CircularDependencyError(LoaderError):
    """
    Exceção levantada quando as dependências entre subsistemas formam um ciclo.

    Nenhuma inicialização parcial é realizada nesta condição.
    """

    def __init__(self, remaining: Iterable[str] = ()):
        super().__init__(
            SUBSYSTEM_CIRCULAR_DEPENDS,
            "System cannot be initialized with subsystem circular dependencies.",
        )
        self.remaining = list(remaining)


@dataclass(frozen=True)
class SubsystemDeclaration:
    name: str
    type: str
    depends: List[str] = field(default_factory=list)
    roles: List[str] = field(default_factory=list)
    args: List[str] = field(default_factory=list)
    vars: Any = None


def _string_list(value: Any) -> List[str]:
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    return []


def parse_declarations(subsystems: Any) -> Dict[str, SubsystemDeclaration]:
    """
    Converte a seção `subsystems:` em declarações, preservando a ordem.

    Args:
        subsystems (Any): Valor da seção `subsystems:` (esperado: mapeamento).

    Returns:
        Dict[str, SubsystemDeclaration]: Declarações válidas, por nome.
    """
    declarations: Dict[str, SubsystemDeclaration] = {}
    if not isinstance(subsystems, Mapping):
        return declarations

    for name, entry in subsystems.items():
        if not isinstance(entry, Mapping):
            continue
        type_name = entry.get("type")
        if not isinstance(type_name, str) or not type_name:
            continue
        declarations[str(name)] = SubsystemDeclaration(
            name=str(name),
            type=type_name,
            depends=_string_list(entry.get("depends")),
            roles=_string_list(entry.get("roles")),
            args=_string_list(entry.get("args")),
            vars=entry.get("vars"),
        )
    return declarations


def plan_imports(declarations: Mapping[str, SubsystemDeclaration]) -> List[SubsystemDeclaration]:
    """
    Produz a ordem de inicialização dos subsistemas declarados.

    Args:
        declarations (Mapping[str, SubsystemDeclaration]): Declarações por nome.

    Returns:
        List[SubsystemDeclaration]: Declarações em ordem topológica.

    Raises:
        UnknownDependencyError: Se uma dependência não for declarada.
        CircularDependencyError: Se houver ciclo no grafo de dependências.
    """
    names = list(declarations)
    position = {name: i for i, name in enumerate(names)}

    for name, decl in declarations.items():
        for dep in decl.depends:
            if dep not in declarations:
                raise UnknownDependencyError(name, dep)

    # Kahn (determinístico pela ordem de declaração)
    incoming_count: Dict[str, int] = {}
    outgoing: Dict[str, List[str]] = {name: [] for name in names}
    for name, decl in declarations.items():
        unique_deps = list(dict.fromkeys(decl.depends))
        incoming_count[name] = len(unique_deps)
        for dep in unique_deps:
            outgoing[dep].append(name)

    ready: List[str] = [name for name in names if incoming_count[name] == 0]
    order: List[str] = []

    while ready:
        name = ready.pop(0)
        order.append(name)
        for child in outgoing[name]:
            incoming_count[child] -= 1
            if incoming_count[child] == 0:
                ready.append(child)
                ready.sort(key=position.__getitem__)

    if len(order) != len(names):
        raise CircularDependencyError(n for n in names if n not in order)

    return [declarations[name] for name in order]
