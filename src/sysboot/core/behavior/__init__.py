"""
Registro de behaviors (pub/sub nomeado) do SysBoot.
"""

from .bus import BEHAVIOR_CREATION_ERROR, DEFAULT_MAX_BEHAVIORS, BehaviorBus

__all__ = ["BEHAVIOR_CREATION_ERROR", "DEFAULT_MAX_BEHAVIORS", "BehaviorBus"]
