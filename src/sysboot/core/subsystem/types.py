# src/sysboot/core/subsystem/types.py
"""
Tipos canônicos de subsistemas do SysBoot.

Um subsistema é um **valor** composto por dados e métodos nomeados, cada
um com um nível de acesso. A visibilidade não depende de herança: no
registro, o `System` constrói uma `Entrypoint` somente-leitura para cada
nível de acesso (privado, protegido, público, compartilhado).

Decisões arquiteturais:
    - `Access` é um conjunto de flags combináveis
    - `Entrypoint.get` devolve cópias rasas de dicts e listas, de modo que
      consumidores não mutem o estado do subsistema
    - `Entrypoint.call` expõe apenas os métodos do nível solicitado

Invariantes:
    - Entrypoints são imutáveis após a construção
    - Um item sem o flag do nível não aparece na entrypoint desse nível
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import IntFlag
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping


class Access(IntFlag):
    PRIVATE = 1
    PROTECTED = 2
    PUBLIC = 4
    SHARED = 8


ALL_ACCESS = Access.PRIVATE | Access.PROTECTED | Access.PUBLIC | Access.SHARED


@dataclass(frozen=True)
class SubsystemData:
    name: str
    obj: Any
    access: Access = Access.PRIVATE


@dataclass(frozen=True)
class SubsystemMethod:
    name: str
    fn: Callable[..., Any]
    access: Access = Access.PRIVATE


class DataView(Mapping):
    """Mapeamento somente-leitura que devolve cópias rasas dos valores."""

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def __getitem__(self, name: str) -> Any:
        value = self._data[name]
        if isinstance(value, (dict, list, set)):
            return copy.copy(value)
        return value

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


@dataclass(frozen=True)
class Entrypoint:
    """
    Visão de um subsistema para um nível de acesso.

    Campos:
        get: dados visíveis (cópias)
        call: métodos visíveis
    """

    get: DataView
    call: Mapping[str, Callable[..., Any]]


@dataclass
class Subsystem:
    """
    Subsistema composto por dados e métodos com nível de acesso.

    Campos:
        name: nome do subsistema (chave em `subsystems:`)
        type: tipo registrado no `SubsystemRegistry`
        data: itens de dados
        methods: métodos
    """

    name: str
    type: str
    data: List[SubsystemData] = field(default_factory=list)
    methods: List[SubsystemMethod] = field(default_factory=list)

    def add_data(self, *items: SubsystemData) -> None:
        self.data.extend(items)

    def add_methods(self, *items: SubsystemMethod) -> None:
        self.methods.extend(items)

    def entrypoint(self, access: Access) -> Entrypoint:
        data = {d.name: d.obj for d in self.data if d.access & access}
        methods = {m.name: m.fn for m in self.methods if m.access & access}
        return Entrypoint(get=DataView(data), call=MappingProxyType(methods))
