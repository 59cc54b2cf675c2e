# src/sysboot/core/options.py
"""
Opções de construção do `System`.

As opções são um objeto de valor explícito, validado antes de qualquer
I/O: nenhuma opção é lida de variáveis globais.

Invariantes:
    - `id`, `root_dir`, `relative_init_dir` e `init_filename` são strings
    - `logging` pertence a `LOGGING_MODES`
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

LOGGING_MODES = ("off", "console", "file", "queue")

_STRING_OPTIONS = ("id", "root_dir", "relative_init_dir", "init_filename")


@dataclass(frozen=True)
class SystemOptions:
    """
    Opções do `System`.

    Campos:
        id: identificador da instância (prefixo das mensagens de log)
        root_dir: diretório raiz da aplicação
        relative_init_dir: pasta do arquivo inicial, relativa à raiz
        init_filename: nome do arquivo inicial (`.yml` opcional)
        logging: `off`, `console`, `file` ou `queue`
    """

    id: str
    root_dir: str
    relative_init_dir: str
    init_filename: str
    logging: str = "off"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def check_options_failure(options: Any) -> bool:
    """
    Retorna True se as opções forem inconsistentes; False se estiverem OK.

    Aceita um `SystemOptions` ou qualquer objeto com os mesmos atributos.
    """
    if options is None:
        return True

    logging_mode = getattr(options, "logging", None)
    if not isinstance(logging_mode, str) or logging_mode not in LOGGING_MODES:
        return True

    for name in _STRING_OPTIONS:
        if not isinstance(getattr(options, name, None), str):
            return True

    return False
