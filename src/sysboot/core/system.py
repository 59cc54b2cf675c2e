# src/sysboot/core/system.py
"""
System - bootstrap canônico de uma aplicação SysBoot.

O `System` carrega a árvore de configuração da aplicação, inicializa os
subsistemas declarados, materializa os erros declarados, registra os
behaviors do host e dispara o evento `system_load`.

Sequência de `load()`:
    1. Valida as opções (`system_options_failure`)
    2. Carrega a árvore a partir de `(root_dir, relative_init_dir, init_filename)`
    3. Inicializa subsistemas em ordem de dependência e atribui roles
    4. Materializa a seção `errors:` em uma `ErrorTable`
    5. Registra os behaviors do host e dispara `system_load`

Decisões arquiteturais:
    - Falhas que não são `LoaderError` são convertidas em
      `LoaderError("functionality_error")`
    - O callback `on_error` recebe o erro antes de ele ser levantado
    - Os roles obrigatórios (`options`, `log`, `behavior`) recebem
      subsistemas embutidos quando a configuração não os declara
    - Nomes de eventos são injetados (`EventNames`)

Invariantes:
    - Uma configuração só é exposta após carregamento completo
    - Todo log e todo evento disparado é registrado em `events`

Limites explícitos:
    - Não há hot reload
    - Não há rollback de subsistemas já inicializados em caso de falha
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

from sysboot.core.behavior import BEHAVIOR_CREATION_ERROR
from sysboot.core.cache import FileCache
from sysboot.core.config.loader import ConfigTree
from sysboot.core.config.paths import (
    is_directory,
    is_file,
    join,
    list_directory,
    load_yaml,
    relativize,
)
from sysboot.core.errors import (
    ErrorTable,
    LoaderError,
    SysbootError,
    functionality_error,
    system_options_failure,
)
from sysboot.core.events import DEFAULT_EVENTS, EventNames
from sysboot.core.options import SystemOptions, check_options_failure
from sysboot.core.subsystem import (
    Access,
    Entrypoint,
    SubsystemContext,
    SubsystemDeclaration,
    SubsystemRegistry,
    default_registry,
    parse_declarations,
    plan_imports,
)
from sysboot.core.subsystem.planner import ARG_SHARED, ARG_SYSTEM_ARGS

logger = logging.getLogger(__name__)

__all__ = [
    "FileFacade",
    "FilterContext",
    "SharedState",
    "System",
    "SystemOptions",
    "check_options_failure",
]

ROLE_OPTIONS = "options"
ROLE_LOG = "log"
ROLE_BEHAVIOR = "behavior"

# role → argumentos do subsistema embutido
_REQUIRED_ROLES = {
    ROLE_OPTIONS: [ARG_SYSTEM_ARGS],
    ROLE_LOG: [],
    ROLE_BEHAVIOR: [],
}


@dataclass(frozen=True)
class FilterContext:
    """Item avaliado por um filtro de `FileFacade.list`."""

    dir: str
    item: str
    item_name: str


Filter = Callable[[FilterContext], Awaitable[bool]]


class FileFacade:
    """
    Acesso a arquivos relativo ao diretório raiz do `System`.

    Args:
        root_dir (str): Diretório raiz.
        cache (FileCache): Cache usado por `get_file` e `get_yaml`.
    """

    def __init__(self, root_dir: str, cache: FileCache):
        self.root_dir = root_dir
        self.cache = cache

    async def get_file(
        self,
        directory: str,
        filename: str,
        cache_ttl: Optional[int] = None,
        force: bool = False,
    ) -> bytes:
        return await self.cache.get_file(directory, filename, cache_ttl, force)

    async def get_yaml(self, directory: str, filename: str) -> Any:
        return await load_yaml(self.root_dir, directory, filename, reader=self.cache.read)

    async def list(self, directory: str, filter: Optional[Filter] = None) -> List[str]:
        """
        Lista `directory` (relativo à raiz), opcionalmente filtrando.

        Os filtros são avaliados concorrentemente; a ordem da listagem
        é preservada.
        """
        names = await list_directory(os.path.join(self.root_dir, directory))
        if filter is None:
            return names

        contexts = [
            FilterContext(dir=directory, item=join(directory, name), item_name=name)  # type: ignore[arg-type]
            for name in names
        ]
        matches = await asyncio.gather(*(filter(c) for c in contexts))
        return [name for name, matched in zip(names, matches) if matched]

    async def is_file(self, context: FilterContext) -> bool:
        return await is_file(os.path.join(self.root_dir, context.item))

    async def is_dir(self, context: FilterContext) -> bool:
        return await is_directory(os.path.join(self.root_dir, context.item))

    def to_absolute(self, directory: str, filename: str) -> str:
        return os.path.join(self.root_dir, directory, filename)

    @staticmethod
    def to_relative(root_dir: str, target: Union[str, List[str]]) -> Union[str, List[str]]:
        return relativize(root_dir, target)

    @staticmethod
    def join(root_dir: str, target: Union[str, List[str]]) -> Union[str, List[str]]:
        return join(root_dir, target)


@dataclass
class SharedState:
    """Estado entregue aos subsistemas que declaram o argumento `shared`."""

    role: Dict[str, str] = field(default_factory=dict)
    subsystem: Dict[str, Entrypoint] = field(default_factory=dict)


class System:
    """
    Instância de uma aplicação SysBoot.

    Uso:

        system = System(SystemOptions(
            id="lab", root_dir="/app", relative_init_dir="config",
            init_filename="init", logging="console",
        ))
        await system.load()
        system.config["data"]

    Args:
        options (SystemOptions): Opções da instância.
        behaviors (Optional[Iterable[Mapping]]): Behaviors do host, no
            formato `[{name: callback(system)}, ...]`.
        on_error (Optional[Callable[[LoaderError], None]]): Recebe o erro
            de carregamento antes de ele ser levantado.
        events (EventNames): Nomes de eventos.
        registry (Optional[SubsystemRegistry]): Tipos de subsistema.
        cache (Optional[FileCache]): Cache de arquivos.
    """

    def __init__(
        self,
        options: SystemOptions,
        behaviors: Optional[Iterable[Mapping[str, Callable[["System"], Any]]]] = None,
        on_error: Optional[Callable[[LoaderError], None]] = None,
        events: EventNames = DEFAULT_EVENTS,
        registry: Optional[SubsystemRegistry] = None,
        cache: Optional[FileCache] = None,
    ):
        self.options = options
        self.event_names = events
        self.on_error = on_error
        self.registry = registry or default_registry()

        self._behaviors = list(behaviors or [])
        self._cache = cache
        self._file: Optional[FileFacade] = None
        self._config: Optional[Dict[str, Any]] = None
        self.fingerprint: Optional[str] = None
        self.loaded = False

        self.roles: Dict[str, str] = {}
        self.public: Dict[str, Entrypoint] = {}
        self.protected: Dict[str, Entrypoint] = {}
        self._private: Dict[str, Entrypoint] = {}
        self.shared = SharedState(role=self.roles)

        self.error_table = ErrorTable(on_exists=self._on_error_exists)
        self.events: List[Dict[str, Any]] = []

    # -----------------------------
    # Bootstrap
    # -----------------------------
    async def load(self) -> "System":
        """
        Executa o bootstrap completo.

        Raises:
            LoaderError: Em qualquer falha; falhas inesperadas chegam como
                `functionality_error`, com a causa original encadeada.
        """
        try:
            await self._bootstrap()
        except LoaderError as error:
            self._fail(error)
            raise
        except Exception as exc:
            error = functionality_error()
            self._fail(error, exc)
            raise error from exc

        self.loaded = True
        return self

    async def _bootstrap(self) -> None:
        if check_options_failure(self.options):
            raise system_options_failure()

        root_dir = self.options.root_dir
        if self._cache is None:
            self._cache = FileCache(root_dir)
        self._file = FileFacade(root_dir, self._cache)

        result = await ConfigTree(root_dir, reader=self._cache.read).load(
            self.options.relative_init_dir, self.options.init_filename
        )
        self._config = result.tree
        self.fingerprint = result.fingerprint
        self.record_event(
            source="loader",
            level="INFO",
            message="Configuration loaded.",
            files_loaded=result.files_loaded,
            fingerprint=result.fingerprint,
        )

        self._init_subsystems(self._config.get("subsystems"))

        declared_errors = self._config.get("errors")
        if isinstance(declared_errors, dict):
            self.error_table.add_declared(declared_errors)

        await self._role(ROLE_BEHAVIOR).call["add_behaviors"](self._behaviors)
        self.fire(self.event_names.system_load, "Behaviors initialized during system loading.")

    def _init_subsystems(self, subsystems: Any) -> None:
        declarations = parse_declarations(subsystems)

        declared_roles = {role for d in declarations.values() for role in d.roles}
        implicit: Dict[str, SubsystemDeclaration] = {}
        for role, args in _REQUIRED_ROLES.items():
            if role in declared_roles:
                continue
            name = role if role not in declarations else f"system_{role}"
            implicit[name] = SubsystemDeclaration(name=name, type=role, roles=[role], args=list(args))
        declarations = {**implicit, **declarations}

        for declaration in plan_imports(declarations):
            for role in declaration.roles:
                self.roles[role] = declaration.name

            context = SubsystemContext(
                system=self,
                declaration=declaration,
                args=self._resolve_args(declaration.args),
            )
            subsystem = self.registry.create(context)

            self._private[declaration.name] = subsystem.entrypoint(Access.PRIVATE)
            self.protected[declaration.name] = subsystem.entrypoint(Access.PROTECTED)
            self.public[declaration.name] = subsystem.entrypoint(Access.PUBLIC)
            self.shared.subsystem[declaration.name] = subsystem.entrypoint(Access.SHARED)
            logger.debug("Subsistema inicializado: %s (%s)", declaration.name, declaration.type)

    def _resolve_args(self, names: List[str]) -> Dict[str, Any]:
        args: Dict[str, Any] = {}
        if ARG_SYSTEM_ARGS in names:
            args[ARG_SYSTEM_ARGS] = {"behaviors": self._behaviors, "options": self.options}
        if ARG_SHARED in names:
            args[ARG_SHARED] = self.shared
        return args

    def _fail(self, error: LoaderError, cause: Optional[BaseException] = None) -> None:
        logger.error(
            "Falha no carregamento do sistema %s: [%s] %s",
            self.options_id,
            error.code,
            error.message,
            exc_info=cause,
        )
        self.record_event(source="system", level="ERROR", message=error.message, code=error.code)
        if self.on_error is not None:
            self.on_error(error)

    # -----------------------------
    # Acesso
    # -----------------------------
    @property
    def options_id(self) -> Any:
        return getattr(self.options, "id", None)

    @property
    def config(self) -> Dict[str, Any]:
        if self._config is None:
            raise RuntimeError("System not loaded")
        return self._config

    @property
    def file(self) -> FileFacade:
        if self._file is None:
            raise RuntimeError("System not loaded")
        return self._file

    def subsystem(self, name: str) -> Entrypoint:
        """Entrypoint privada do subsistema `name`."""
        return self._private[name]

    def _role(self, role: str) -> Entrypoint:
        return self._private[self.roles[role]]

    def _has_role(self, role: str) -> bool:
        return self.roles.get(role) in self._private

    def get_error(self, code: str) -> Optional[SysbootError]:
        return self.error_table.get(code)

    def add_error(self, code: str, message: str) -> bool:
        return self.error_table.add(code, message)

    def _on_error_exists(self, code: str) -> None:
        self.fire(self.event_names.error_exists, "Error to be added already exists.")

    # -----------------------------
    # Behaviors
    # -----------------------------
    def fire(self, event: str, message: str) -> None:
        """Registra `message` e dispara o behavior `event`."""
        if not self._has_role(ROLE_BEHAVIOR):
            self.record_event(
                source="behavior",
                level="WARNING",
                message=message,
                event=self.event_names.event_fail,
                requested=event,
            )
            return
        self.record_event(source="behavior", level="INFO", message=message, event=event)
        self._role(ROLE_BEHAVIOR).call["behave"](event)

    def behave(self, event: str) -> None:
        """Dispara o behavior `event`, registrando sua descrição."""
        descriptions = self._role(ROLE_BEHAVIOR).get["data"] if self._has_role(ROLE_BEHAVIOR) else {}
        entry = descriptions.get(event) if isinstance(descriptions, dict) else None
        if isinstance(entry, dict) and isinstance(entry.get("text"), str):
            self.log(f"Behavior - {entry['text']}")
        else:
            self.log(f"Behavior - Undocumented behavior - {event}")
        if self._has_role(ROLE_BEHAVIOR):
            self._role(ROLE_BEHAVIOR).call["behave"](event)

    async def on(self, event: Any, callback: Any) -> str:
        """
        Associa `callback(system)` ao behavior `event`.

        Returns:
            str: Id do registro ou `BEHAVIOR_CREATION_ERROR`.
        """
        if not isinstance(event, str) or not callable(callback):
            self.fire(self.event_names.behavior_attach_request_fail, "Behavior attach request malformed.")
            return BEHAVIOR_CREATION_ERROR

        behavior_id = await self._role(ROLE_BEHAVIOR).call["register"](event, callback)
        if behavior_id == BEHAVIOR_CREATION_ERROR:
            self.fire(self.event_names.behavior_attach_fail, f"Could not attach behavior - {event}")
        else:
            self.fire(self.event_names.behavior_attach, f"Behavior attached - {event}")
        return behavior_id

    # -----------------------------
    # Log
    # -----------------------------
    def log(self, text: Any) -> None:
        self._emit("log", text)

    def error(self, text: Any) -> None:
        self._emit("error", text)

    def _emit(self, method: str, text: Any) -> None:
        if not isinstance(text, str):
            self.fire(self.event_names.type_error, f"Log text must be a string, got {type(text).__name__}.")
            return
        if self._has_role(ROLE_LOG):
            self._role(ROLE_LOG).call[method](text)
        else:
            self.record_event(source="system", level="ERROR" if method == "error" else "INFO", message=text)

    def record_event(self, *, source: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "system_id": self.options_id,
            "source": source,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)
