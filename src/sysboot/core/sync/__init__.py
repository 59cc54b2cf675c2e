"""
Primitivos de sincronização cooperativa do SysBoot.

- `AsyncFifoLock`: exclusão mútua com atendimento FIFO estrito por tickets
"""

from .atomic import MAX_TICKET, AsyncFifoLock

__all__ = ["AsyncFifoLock", "MAX_TICKET"]
