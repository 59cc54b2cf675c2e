# tests/core/system/test_system_bootstrap.py
"""
Testes de ponta a ponta do bootstrap do System.

Este módulo valida a sequência completa de `System.load()`:
opções → árvore de configuração → subsistemas → erros declarados →
behaviors do host → evento `system_load`.

Os testes asseguram que:
- a configuração carregada é exposta apenas após o bootstrap
- roles obrigatórios recebem subsistemas embutidos
- subsistemas declarados são inicializados com suas visões de acesso
- erros declarados são materializados e duplicidades disparam `error_exists`
- falhas chegam ao `on_error` e são levantadas como LoaderError
- o roteamento de log respeita `options.logging`

Limites explícitos:
    - Não valida o algoritmo do loader (ver tests/core/config)
"""

import logging
import os

import pytest
import yaml

from sysboot.core.behavior import BEHAVIOR_CREATION_ERROR
from sysboot.core.config.hashing import compute_config_hash
from sysboot.core.errors import LoaderError
from sysboot.core.events import EventNames
from sysboot.core.options import check_options_failure
from sysboot.core.system import System


LAB_TREE = {
    "init.yml": "data:\n  folder: cfg\n  file: settings\nerrors:\nsubsystems:\n",
    "cfg/settings.yml": "color: red\n",
    "errors.yml": (
        "no_beakers:\n"
        "  message: Beakers out of stock.\n"
        "bare: {}\n"
        "garbled: text\n"
    ),
    "subsystems.yml": (
        "lab_info:\n"
        "  type: info\n"
        "  roles: [info]\n"
        "  vars:\n"
        "    homepage: https://example.org\n"
        "lab_events:\n"
        "  type: event\n"
        "  depends: [lab_info]\n"
        "  vars:\n"
        "    data:\n"
        "      system_load:\n"
        "        text: System loaded.\n"
        "main_behavior:\n"
        "  type: behavior\n"
        "  roles: [behavior]\n"
        "  vars:\n"
        "    data:\n"
        "      custom:\n"
        "        text: Custom happened.\n"
    ),
}


@pytest.mark.asyncio
async def test_minimal_bootstrap_loads_config_and_fires_system_load(settings_tree, make_options):
    """
    Sem seção `subsystems:`, os roles obrigatórios recebem subsistemas
    embutidos e o behavior `system_load` do host é disparado com o System.
    """
    calls = []
    system = System(
        make_options(settings_tree),
        behaviors=[{"system_load": lambda s: calls.append(s)}],
    )

    result = await system.load()

    assert result is system
    assert system.loaded is True
    assert system.config == {"data": {"color": "red"}}
    assert calls == [system]
    assert set(system.roles) == {"options", "log", "behavior"}
    assert system.subsystem(system.roles["options"]).get["id"] == "test_system"
    assert system.fingerprint == compute_config_hash(system.config)


@pytest.mark.asyncio
async def test_declared_subsystems_errors_and_roles(write_tree, make_options):
    root = write_tree(LAB_TREE)
    system = System(make_options(root, logging="queue"))

    await system.load()

    assert system.config["data"] == {"color": "red"}
    assert system.roles["info"] == "lab_info"
    assert system.roles["behavior"] == "main_behavior"

    assert system.subsystem("lab_info").get["homepage"] == "https://example.org"
    assert system.shared.subsystem["lab_info"].get["homepage"] == "https://example.org"
    assert "homepage" not in system.public["lab_info"].get
    assert system.public["lab_events"].get["data"] == {"system_load": {"text": "System loaded."}}

    assert system.get_error("no_beakers").message == "Beakers out of stock."
    assert system.get_error("bare").message == "Error message not set."
    assert "garbled" not in system.error_table


@pytest.mark.asyncio
async def test_duplicate_error_fires_error_exists(write_tree, make_options):
    root = write_tree(LAB_TREE)
    system = System(make_options(root))
    await system.load()
    fired = []

    await system.on("error_exists", lambda s: fired.append(s))

    assert system.add_error("no_beakers", "Other message.") is False
    assert system.get_error("no_beakers").message == "Beakers out of stock."
    assert fired == [system]


@pytest.mark.asyncio
async def test_behave_logs_documented_text(write_tree, make_options):
    root = write_tree(LAB_TREE)
    system = System(make_options(root, logging="queue"))
    await system.load()
    fired = []
    await system.on("custom", lambda s: fired.append("custom"))

    system.behave("custom")
    system.behave("unknown")

    messages = [e["message"] for e in system.events]
    assert "Behavior - Custom happened." in messages
    assert "Behavior - Undocumented behavior - unknown" in messages
    assert fired == ["custom"]


@pytest.mark.asyncio
async def test_on_reports_attach_outcomes(settings_tree, make_options):
    system = System(make_options(settings_tree))
    await system.load()

    behavior_id = await system.on("ping", lambda s: None)
    failed = await system.on(42, lambda s: None)

    assert behavior_id.isdigit()
    assert failed == BEHAVIOR_CREATION_ERROR
    fired = [e.get("event") for e in system.events]
    assert "behavior_attach" in fired
    assert "behavior_attach_request_fail" in fired


@pytest.mark.asyncio
async def test_capacity_exhaustion_fires_attach_fail(write_tree, make_options):
    root = write_tree(
        {
            "init.yml": "subsystems:\n",
            "subsystems.yml": "bus:\n  type: behavior\n  roles: [behavior]\n  vars:\n    max_behaviors: 1\n",
        }
    )
    system = System(make_options(root))
    await system.load()

    assert await system.on("a", lambda s: None) == "0"
    assert await system.on("b", lambda s: None) == BEHAVIOR_CREATION_ERROR
    assert "behavior_attach_fail" in [e.get("event") for e in system.events]


@pytest.mark.asyncio
async def test_injected_event_names(settings_tree, make_options):
    calls = []
    system = System(
        make_options(settings_tree),
        behaviors=[{"booted": lambda s: calls.append("booted")}],
        events=EventNames(system_load="booted"),
    )

    await system.load()

    assert calls == ["booted"]


@pytest.mark.asyncio
async def test_inconsistent_options_fail_before_io(tmp_path, make_options):
    received = []
    system = System(make_options(tmp_path, logging="loud"), on_error=received.append)

    with pytest.raises(LoaderError) as exc:
        await system.load()

    assert exc.value.code == "system_options_failure"
    assert received == [exc.value]
    assert system.loaded is False
    with pytest.raises(RuntimeError):
        system.config


@pytest.mark.asyncio
async def test_loader_errors_propagate_unchanged(write_tree, make_options):
    root = write_tree({"init.yml": "broken: 7\n"})
    received = []
    system = System(make_options(root), on_error=received.append)

    with pytest.raises(LoaderError) as exc:
        await system.load()

    assert exc.value.code == "malformed_directive"
    assert str(exc.value) == "Invalid initialization entry type - broken"
    assert received == [exc.value]


@pytest.mark.asyncio
async def test_unexpected_failures_become_functionality_error(write_tree, make_options):
    """
    Erros que não são LoaderError (aqui, YAML inválido) chegam como
    `functionality_error`, com a causa original encadeada.
    """
    root = write_tree({"init.yml": "data:\n", "data.yml": "a: [1, 2\n"})
    received = []
    system = System(make_options(root), on_error=received.append)

    with pytest.raises(LoaderError) as exc:
        await system.load()

    assert exc.value.code == "functionality_error"
    assert isinstance(exc.value.__cause__, yaml.YAMLError)
    assert received == [exc.value]
    assert system.events[-1]["level"] == "ERROR"


@pytest.mark.asyncio
async def test_circular_subsystems_fail(write_tree, make_options):
    root = write_tree(
        {
            "init.yml": "subsystems:\n",
            "subsystems.yml": (
                "a:\n  type: info\n  depends: [b]\n"
                "b:\n  type: info\n  depends: [a]\n"
            ),
        }
    )

    with pytest.raises(LoaderError) as exc:
        await System(make_options(root)).load()

    assert exc.value.code == "subsystem_circular_depends"


@pytest.mark.asyncio
async def test_unknown_subsystem_type_fails(write_tree, make_options):
    root = write_tree({"init.yml": "subsystems:\n", "subsystems.yml": "x:\n  type: warp_drive\n"})

    with pytest.raises(LoaderError) as exc:
        await System(make_options(root)).load()

    assert exc.value.code == "subsystem_unknown_type"


@pytest.mark.asyncio
async def test_queue_logging_records_events_only(settings_tree, make_options, caplog):
    system = System(make_options(settings_tree, logging="queue"))
    await system.load()

    with caplog.at_level(logging.DEBUG, logger="sysboot.system"):
        system.log("Lab working.")
        system.error("Lab on fire.")

    levels = {e["message"]: e["level"] for e in system.events}
    assert levels["Lab working."] == "INFO"
    assert levels["Lab on fire."] == "ERROR"
    assert not [r for r in caplog.records if r.name.startswith("sysboot.system.")]


@pytest.mark.asyncio
async def test_console_logging_uses_standard_logging(settings_tree, make_options, caplog):
    system = System(make_options(settings_tree, logging="console"))
    await system.load()

    with caplog.at_level(logging.INFO, logger="sysboot.system.test_system"):
        system.log("Lab working.")
        system.error("Lab on fire.")

    records = [(r.levelno, r.getMessage()) for r in caplog.records if r.name == "sysboot.system.test_system"]
    assert (logging.INFO, "test_system: Lab working.") in records
    assert (logging.ERROR, "test_system: Lab on fire.") in records


@pytest.mark.asyncio
async def test_file_logging_writes_under_root(settings_tree, make_options):
    system = System(make_options(settings_tree, id="file_system", logging="file"))
    await system.load()

    system.log("Written to file.")

    logger = logging.getLogger("sysboot.system.file_system")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    content = (settings_tree / "file_system.log").read_text(encoding="utf-8")
    assert "file_system: Written to file." in content


@pytest.mark.asyncio
async def test_non_string_log_fires_type_error(settings_tree, make_options):
    system = System(make_options(settings_tree))
    await system.load()

    system.log(123)

    assert system.events[-1]["event"] == "type_error"


@pytest.mark.asyncio
async def test_file_facade(write_tree, make_options):
    root = write_tree(LAB_TREE)
    system = System(make_options(root))
    await system.load()
    facade = system.file

    files = await facade.list("", facade.is_file)
    dirs = await facade.list("", facade.is_dir)

    assert files == ["errors.yml", "init.yml", "subsystems.yml"]
    assert dirs == ["cfg"]
    assert await facade.get_yaml("cfg", "settings") == {"color": "red"}
    assert await facade.get_file("cfg", "settings.yml") == b"color: red\n"
    assert facade.to_absolute("cfg", "settings.yml") == os.path.join(str(root), "cfg", "settings.yml")
    assert facade.to_relative(str(root), os.path.join(str(root), "cfg")) == "cfg"


def test_check_options_failure(make_options, tmp_path):
    assert check_options_failure(make_options(tmp_path)) is False
    assert check_options_failure(make_options(tmp_path, logging="verbose")) is True
    assert check_options_failure(make_options(tmp_path, id=7)) is True
    assert check_options_failure(None) is True
