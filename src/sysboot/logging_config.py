# src/sysboot/logging_config.py
"""
Configuração de logging do SysBoot.

Este módulo centraliza o formato e os handlers usados pelo pacote: o
logging raiz de aplicações que embutem o SysBoot e os loggers por
instância de `System` (modos `console` e `file`).

Decisões arquiteturais:
    - Formato único: "%(asctime)s %(levelname)s %(name)s: %(message)s"
    - Nível lido de `SYSBOOT_LOG_LEVEL` quando não informado (default INFO)
    - Arquivos de log rotacionam por tamanho (`SYSBOOT_LOG_MAX_BYTES`,
      `SYSBOOT_LOG_BACKUP_COUNT`)

Invariantes:
    - `setup_logging` não adiciona handlers a um logger raiz já configurado

Limites explícitos:
    - Não configura loggers de terceiros
"""

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.environ.get("SYSBOOT_LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def build_file_handler(
    log_file: Union[str, Path],
    level: Optional[Union[str, int]] = None,
) -> RotatingFileHandler:
    """Handler de arquivo rotativo com o formato do pacote; cria a pasta do log."""
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    max_bytes = int(os.environ.get("SYSBOOT_LOG_MAX_BYTES", str(5 * 1024 * 1024)))
    backup_count = int(os.environ.get("SYSBOOT_LOG_BACKUP_COUNT", "5"))

    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setLevel(_resolve_level(level))
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: Optional[Union[str, int]] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """Configura o logging raiz para aplicações que embutem o SysBoot."""
    resolved = _resolve_level(level)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved)
    stream_handler.setFormatter(formatter)

    root_logger.setLevel(resolved)
    root_logger.addHandler(stream_handler)

    if log_file is not None:
        root_logger.addHandler(build_file_handler(log_file, resolved))


def build_console_handler(level: Optional[Union[str, int]] = None) -> logging.StreamHandler:
    """Handler de console (stderr) com o formato do pacote."""
    handler = logging.StreamHandler()
    handler.setLevel(_resolve_level(level))
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler
