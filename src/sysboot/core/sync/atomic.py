# src/sysboot/core/sync/atomic.py
"""
Exclusão mútua cooperativa com ordenação FIFO estrita.

Este módulo define o `AsyncFifoLock`, o primitivo utilizado pelo SysBoot
para serializar mutações de estado compartilhado entre corrotinas de um
mesmo event loop (asyncio), sem qualquer primitivo nativo de mutex.

Algoritmo (tickets):
    - cada `acquire()` retira um ticket lendo e avançando `ticket_counter`
    - o ticket só é atendido quando `ticket == service_counter` e o lock
      está livre; o atendimento marca o lock como ocupado e avança
      `service_counter`
    - ambos os contadores retornam a zero logo após `MAX_TICKET`

Decisões arquiteturais:
    - Em vez de polling, cada ticket em espera registra um Future em uma
      fila de despertar; `release()` entrega o lock diretamente ao
      próximo ticket (hand-off), preservando a ordem FIFO
    - `release()` não valida o dono do lock (disciplina do chamador)
    - Não há timeout

Invariantes:
    - No máximo um detentor por vez
    - Tickets são atendidos exatamente na ordem em que foram retirados
    - `release()` nunca altera `ticket_counter`

Limites explícitos:
    - Seguro apenas dentro de um único event loop
    - Não libera automaticamente em caso de erro do detentor
"""

from __future__ import annotations

import asyncio
from typing import Dict, Optional, Set


# Maior inteiro exato de um double (Number.MAX_SAFE_INTEGER).
MAX_TICKET = 2**53 - 1


def _increment(counter: int) -> int:
    return 0 if counter == MAX_TICKET else counter + 1


class AsyncFifoLock:
    """
    Lock assíncrono com fila de tickets e atendimento estritamente FIFO.

    Uso:

        lock = AsyncFifoLock()
        await lock.acquire()
        try:
            ...  # seção crítica
        finally:
            lock.release()

    ou `async with lock: ...`.

    Cancelamento de uma corrotina em espera abandona seu ticket (ele é
    pulado quando chegar a vez); cancelamento logo após o hand-off libera
    o lock para o próximo da fila.
    """

    def __init__(self, initial_ticket: int = 0):
        if not 0 <= initial_ticket <= MAX_TICKET:
            raise ValueError(f"initial_ticket fora do intervalo: {initial_ticket}")
        self._locked: bool = False
        self._ticket_counter: int = initial_ticket
        self._service_counter: int = initial_ticket
        self._waiters: Dict[int, asyncio.Future] = {}
        self._abandoned: Set[int] = set()

    # -----------------------------
    # Estado (inspeção)
    # -----------------------------
    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def ticket_counter(self) -> int:
        return self._ticket_counter

    @property
    def service_counter(self) -> int:
        return self._service_counter

    @property
    def waiting(self) -> int:
        return len(self._waiters)

    # -----------------------------
    # Operações
    # -----------------------------
    async def acquire(self) -> None:
        ticket = self._ticket_counter
        self._ticket_counter = _increment(self._ticket_counter)

        if not self._locked and ticket == self._service_counter:
            self._claim()
            return

        future = asyncio.get_running_loop().create_future()
        self._waiters[ticket] = future
        try:
            await future
        except asyncio.CancelledError:
            if future.done() and not future.cancelled():
                # hand-off já ocorreu: repassa o lock
                self.release()
            elif self._waiters.pop(ticket, None) is not None:
                self._abandoned.add(ticket)
                self._wake_next()
            raise

    def release(self) -> None:
        self._locked = False
        self._wake_next()

    async def __aenter__(self) -> "AsyncFifoLock":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.release()

    # -----------------------------
    # Internos
    # -----------------------------
    def _claim(self) -> None:
        self._locked = True
        self._service_counter = _increment(self._service_counter)

    def _wake_next(self) -> None:
        if self._locked:
            return
        while True:
            if self._service_counter in self._abandoned:
                self._abandoned.discard(self._service_counter)
                self._service_counter = _increment(self._service_counter)
                continue
            future: Optional[asyncio.Future] = self._waiters.pop(self._service_counter, None)
            if future is None:
                return
            if not future.done():
                break
            # cancelado antes de processar o próprio cancelamento
            self._service_counter = _increment(self._service_counter)
        self._claim()
        future.set_result(None)
