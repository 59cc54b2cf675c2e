"""
SysBoot - Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do SysBoot.
Erros carregam sempre um código estável (`code`) e uma mensagem humana,
e são considerados parte do contrato operacional do sistema, devendo ser:

- explícitos
- identificáveis por código
- rastreáveis
- acionáveis

Nenhuma decisão implícita é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional


# ---------------------------------------------------------------------------
# Catálogo canônico de códigos de erro (v1)
# ---------------------------------------------------------------------------

# Loader / Bootstrap
SYSTEM_OPTIONS_FAILURE = "system_options_failure"
FUNCTIONALITY_ERROR = "functionality_error"
OTHER_ERROR = "other_error"
SUBSYSTEM_CIRCULAR_DEPENDS = "subsystem_circular_depends"
SUBSYSTEM_UNKNOWN_TYPE = "subsystem_unknown_type"
SUBSYSTEM_UNKNOWN_DEPENDS = "subsystem_unknown_depends"

# Arquivos / Configuração
FILE_NOT_FOUND = "file_not_found"
FILE_SYSTEM_ERROR = "file_system_error"
MALFORMED_DIRECTIVE = "malformed_directive"
INVALID_CONFIG_ROOT = "invalid_config_root"
CIRCULAR_CONFIGURATION = "circular_configuration"

# Defaults para códigos e mensagens ausentes
DEFAULT_CODE = "default_code"
DEFAULT_MESSAGE = "default_message"

# Mensagem padrão de erros declarados sem `message`
DEFAULT_DECLARED_MESSAGE = "Error message not set."


class SysbootError(Exception):
    """
    Erro canônico do SysBoot: uma exceção com código estável.

    Campos:
    - code: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    """

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message

    @staticmethod
    def is_system_error(error: Any) -> bool:
        """Retorna True apenas para `SysbootError` com código não vazio.

        Códigos vazios retornam False devido à ambiguidade.
        """
        return isinstance(error, SysbootError) and error.code != ""


class LoaderError(SysbootError):
    """
    Erro levantado durante o carregamento do sistema.

    Códigos ou mensagens ausentes (não-string ou vazios) são substituídos
    pelos defaults canônicos `default_code` / `default_message`.
    """

    def __init__(self, code: Any = None, message: Any = None):
        if not isinstance(code, str) or not code:
            code = DEFAULT_CODE
        if not isinstance(message, str) or not message:
            message = DEFAULT_MESSAGE
        super().__init__(code, message)


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def system_options_failure() -> LoaderError:
    return LoaderError(
        SYSTEM_OPTIONS_FAILURE,
        "The options provided to the system constructor are inconsistent.",
    )


def functionality_error() -> LoaderError:
    return LoaderError(
        FUNCTIONALITY_ERROR,
        "There was an error in the loader functionality in constructor subroutines.",
    )


def file_system_error(path: str) -> LoaderError:
    return LoaderError(FILE_SYSTEM_ERROR, f"Could not read file: {path}")


# ---------------------------------------------------------------------------
# Tabela de erros declarados em configuração
# ---------------------------------------------------------------------------

@dataclass
class ErrorTable:
    """
    Tabela de erros declarados pela aplicação (seção `errors:` da configuração).

    Decisões arquiteturais:
        - Cada código é registrado uma única vez
        - Duplicidade não sobrescreve: o callback `on_exists` é acionado
        - Entradas malformadas são ignoradas no carregamento em lote

    Invariantes:
        - Todo valor armazenado é um `SysbootError` com `code` igual à chave
    """

    on_exists: Optional[Callable[[str], None]] = None
    _errors: Dict[str, SysbootError] = field(default_factory=dict, init=False, repr=False)

    def add(self, code: str, message: str) -> bool:
        if code in self._errors:
            if self.on_exists is not None:
                self.on_exists(code)
            return False
        self._errors[code] = SysbootError(code, message)
        return True

    def add_declared(self, declared: Dict[str, Any]) -> None:
        """Registra erros no formato `{code: {message: str}}`."""
        for code, entry in declared.items():
            if not isinstance(entry, dict):
                continue
            message = entry.get("message")
            if not isinstance(message, str) or message == "":
                message = DEFAULT_DECLARED_MESSAGE
            self.add(str(code), message)

    def get(self, code: str) -> Optional[SysbootError]:
        return self._errors.get(code)

    def __getitem__(self, code: str) -> SysbootError:
        return self._errors[code]

    def __contains__(self, code: object) -> bool:
        return code in self._errors

    def __iter__(self) -> Iterator[str]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)
