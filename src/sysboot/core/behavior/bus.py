# src/sysboot/core/behavior/bus.py
"""
BehaviorBus - registro de behaviors nomeados (pub/sub) do SysBoot.

Um *behavior* é um nome escolhido pela aplicação ao qual um ou mais
callbacks são associados. Cada registro recebe um identificador interno
único; disparar um nome invoca todos os callbacks associados, na ordem
de registro.

Decisões arquiteturais:
    - O incremento do contador de ids e a atualização dos dois índices
      (nome → ids, id → nome) são serializados pelo `AsyncFifoLock`
    - Falhas de registro retornam o sentinela `BEHAVIOR_CREATION_ERROR`
      em vez de levantar exceção
    - `trigger()` nunca levanta: nomes desconhecidos são no-op e exceções
      de callbacks são registradas no log

Invariantes:
    - Ids são únicos, atribuídos de forma monotônica e nunca reutilizados
    - Um nome pode ter zero, um ou vários ids
    - O disparo respeita a ordem de registro

Limites explícitos:
    - Callbacks são síncronos
    - Não há remoção de registros
    - O lock não é compartilhado entre instâncias
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from sysboot.core.sync import AsyncFifoLock

logger = logging.getLogger(__name__)

BEHAVIOR_CREATION_ERROR = "behavior_creation_error"

# Limite padrão de listeners por emissor no runtime de origem.
DEFAULT_MAX_BEHAVIORS = 10


class BehaviorBus:
    """
    Registro de behaviors nomeados com disparo ordenado.

    Args:
        max_behaviors (int): Quantidade máxima de registros (ids) aceitos.
        lock (Optional[AsyncFifoLock]): Lock que protege contador e índices.
    """

    def __init__(
        self,
        max_behaviors: int = DEFAULT_MAX_BEHAVIORS,
        lock: Optional[AsyncFifoLock] = None,
    ):
        self.max_behaviors = max_behaviors
        self._lock = lock or AsyncFifoLock()
        self._counter = 0
        self._ids_by_name: Dict[str, List[str]] = {}
        self._name_by_id: Dict[str, str] = {}
        self._listeners: Dict[str, Callable[..., Any]] = {}

    @property
    def counter(self) -> int:
        return self._counter

    def __len__(self) -> int:
        return len(self._name_by_id)

    async def register(self, name: Any, callback: Any) -> str:
        """
        Registra `callback` sob o behavior `name`.

        Returns:
            str: Id atribuído (string decimal) ou `BEHAVIOR_CREATION_ERROR`
            quando `name` não é string, `callback` não é chamável ou a
            capacidade foi esgotada.
        """
        if not isinstance(name, str) or not callable(callback):
            logger.warning("Registro de behavior inválido: %r", name)
            return BEHAVIOR_CREATION_ERROR

        await self._lock.acquire()
        try:
            if self._counter >= self.max_behaviors:
                logger.warning(
                    "Capacidade de behaviors esgotada (%d): %s",
                    self.max_behaviors,
                    name,
                )
                return BEHAVIOR_CREATION_ERROR

            behavior_id = str(self._counter)
            self._counter += 1
            self._ids_by_name.setdefault(name, []).append(behavior_id)
            self._name_by_id[behavior_id] = name
            self._listeners[behavior_id] = callback
        finally:
            self._lock.release()

        logger.debug("Behavior registrado: %s (id=%s)", name, behavior_id)
        return behavior_id

    async def add_behaviors(
        self, behaviors: Iterable[Mapping[str, Callable[..., Any]]]
    ) -> List[str]:
        """
        Registra behaviors em lote, no formato `[{name: callback}, ...]`.

        Returns:
            List[str]: Resultado de cada registro, na ordem de declaração.
        """
        results: List[str] = []
        for entry in behaviors:
            for name, callback in entry.items():
                results.append(await self.register(name, callback))
        return results

    def trigger(self, name: Any, *args: Any) -> None:
        """Dispara todos os callbacks de `name`, na ordem de registro."""
        if not isinstance(name, str):
            logger.warning("Nome de behavior inválido: %r", name)
            return

        for behavior_id in list(self._ids_by_name.get(name, ())):
            try:
                self._listeners[behavior_id](*args)
            except Exception:
                logger.exception("Falha no behavior %s (id=%s)", name, behavior_id)

    def ids_for(self, name: str) -> List[str]:
        return list(self._ids_by_name.get(name, ()))

    def name_for(self, behavior_id: str) -> Optional[str]:
        return self._name_by_id.get(behavior_id)
