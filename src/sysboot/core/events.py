# src/sysboot/core/events.py
"""
Nomes canônicos de eventos do SysBoot.

Os nomes de eventos disparados pelo `System` não são constantes globais:
são agrupados em um `EventNames` imutável, injetado no `System` no momento
da construção. `DEFAULT_EVENTS` é apenas o valor padrão dessa injeção.

Invariantes:
    - Instâncias de `EventNames` são imutáveis
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EventNames:
    """
    Tabela de nomes de eventos usada pelo `System` e seus subsistemas.

    Campos:
        error_exists: código de erro declarado em duplicidade
        system_load: bootstrap concluído
        behavior_attach: behavior registrado com sucesso
        behavior_attach_fail: falha de registro de behavior
        behavior_attach_request_fail: pedido de registro malformado
        type_error: argumento de tipo inesperado
        event_fail: falha ao disparar evento
    """

    error_exists: str = "error_exists"
    system_load: str = "system_load"
    behavior_attach: str = "behavior_attach"
    behavior_attach_fail: str = "behavior_attach_fail"
    behavior_attach_request_fail: str = "behavior_attach_request_fail"
    type_error: str = "type_error"
    event_fail: str = "event_fail"


DEFAULT_EVENTS = EventNames()
