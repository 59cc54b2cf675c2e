# src/sysboot/core/subsystem/builtins.py
"""
Subsistemas embutidos do SysBoot.

Tipos disponíveis:
    - behavior: BehaviorBus da instância (registro e disparo de behaviors)
    - info: expõe `vars` como dados compartilháveis
    - options: `info` acrescido das opções do `System` (requer `system_args`)
    - log: roteia `log()` / `error()` conforme `options.logging`
    - event: expõe `vars.data` (descrições de eventos)

Roteamento de log:
    - off: apenas o log estruturado de eventos
    - console: logging padrão (INFO / ERROR)
    - file: logging padrão com handler de arquivo `<root_dir>/<id>.log`
    - queue: apenas o log estruturado de eventos
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Mapping

from sysboot.core.behavior import DEFAULT_MAX_BEHAVIORS, BehaviorBus
from sysboot.core.errors import system_options_failure
from sysboot.core.options import check_options_failure
from sysboot.logging_config import build_console_handler, build_file_handler

from .planner import ARG_SYSTEM_ARGS
from .registry import SubsystemContext
from .types import ALL_ACCESS, Access, Subsystem, SubsystemData, SubsystemMethod

INFO_ACCESS = Access.PRIVATE | Access.PROTECTED | Access.SHARED
EVENT_ACCESS = Access.PRIVATE | Access.PROTECTED | Access.PUBLIC


def _vars_mapping(context: SubsystemContext) -> Dict[str, Any]:
    return dict(context.vars) if isinstance(context.vars, Mapping) else {}


def behavior_subsystem(context: SubsystemContext) -> Subsystem:
    variables = _vars_mapping(context)
    max_behaviors = variables.get("max_behaviors", DEFAULT_MAX_BEHAVIORS)
    if not isinstance(max_behaviors, int) or isinstance(max_behaviors, bool):
        max_behaviors = DEFAULT_MAX_BEHAVIORS

    bus = BehaviorBus(max_behaviors=max_behaviors)
    system = context.system

    def behave(name: str) -> None:
        bus.trigger(name, system)

    subsystem = Subsystem(name=context.name, type=context.declaration.type)
    subsystem.add_data(
        SubsystemData("data", variables.get("data") or {}, Access.PRIVATE | Access.PROTECTED),
        SubsystemData("bus", bus, Access.PRIVATE),
    )
    subsystem.add_methods(
        SubsystemMethod("register", bus.register, Access.PRIVATE | Access.PROTECTED),
        SubsystemMethod("add_behaviors", bus.add_behaviors, Access.PRIVATE | Access.PROTECTED),
        SubsystemMethod("behave", behave, ALL_ACCESS),
        SubsystemMethod("ids_for", bus.ids_for, Access.PRIVATE),
    )
    return subsystem


def info_subsystem(context: SubsystemContext) -> Subsystem:
    subsystem = Subsystem(name=context.name, type=context.declaration.type)
    for name, obj in _vars_mapping(context).items():
        subsystem.add_data(SubsystemData(str(name), obj, INFO_ACCESS))
    return subsystem


def options_subsystem(context: SubsystemContext) -> Subsystem:
    system_args = context.args.get(ARG_SYSTEM_ARGS) or {}
    options = system_args.get("options")
    if check_options_failure(options):
        raise system_options_failure()

    subsystem = info_subsystem(context)
    for name, obj in options.to_dict().items():
        subsystem.add_data(SubsystemData(name, obj, INFO_ACCESS))
    return subsystem


def _route(system: Any, level: int, text: str) -> None:
    options = system.options
    mode = options.logging
    if mode not in ("console", "file"):
        return

    logger = logging.getLogger(f"sysboot.system.{options.id}")
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    if mode == "file":
        _ensure_file_handler(logger, os.path.join(options.root_dir, f"{options.id}.log"))
    else:
        _ensure_console_handler(logger)
    logger.log(level, "%s: %s", options.id, text)


def _ensure_file_handler(logger: logging.Logger, path: str) -> None:
    target = os.path.abspath(path)
    for handler in logger.handlers:
        if getattr(handler, "baseFilename", None) == target:
            return
    logger.addHandler(build_file_handler(target))


def _ensure_console_handler(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        if type(handler) is logging.StreamHandler:
            return
    logger.addHandler(build_console_handler())


def log_subsystem(context: SubsystemContext) -> Subsystem:
    system = context.system

    def make(level: int, level_name: str) -> Callable[[str], None]:
        def emit(text: str) -> None:
            system.record_event(source=context.name, level=level_name, message=text)
            _route(system, level, text)

        return emit

    subsystem = Subsystem(name=context.name, type=context.declaration.type)
    subsystem.add_methods(
        SubsystemMethod("log", make(logging.INFO, "INFO"), Access.PRIVATE | Access.PROTECTED),
        SubsystemMethod("error", make(logging.ERROR, "ERROR"), Access.PRIVATE | Access.PROTECTED),
    )
    return subsystem


def event_subsystem(context: SubsystemContext) -> Subsystem:
    subsystem = Subsystem(name=context.name, type=context.declaration.type)
    subsystem.add_data(SubsystemData("data", _vars_mapping(context).get("data"), EVENT_ACCESS))
    return subsystem


BUILTIN_SUBSYSTEMS = {
    "behavior": behavior_subsystem,
    "info": info_subsystem,
    "options": options_subsystem,
    "log": log_subsystem,
    "event": event_subsystem,
}
