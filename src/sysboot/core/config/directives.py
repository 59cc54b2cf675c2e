# src/sysboot/core/config/directives.py
"""
Resolução de diretivas da árvore de configuração do SysBoot.

Cada chave de um arquivo de inicialização carrega uma *diretiva*: o valor
YAML bruto que descreve de onde o conteúdo daquela chave deve ser lido.
Este módulo converte a diretiva bruta em um `ConfigNode` resolvido.

Formas aceitas de diretiva:
    - null / ausente          → defaults
    - ""                      → defaults
    - "nome"                  → arquivo explícito, sem recursão
    - mapeamento              → campos opcionais `folder`, `file`, `path`, `extend`

Decisões arquiteturais:
    - O `folder` padrão é sempre o caminho relativo corrente, inclusive
      quando `extend: true` (a chave nunca é usada como pasta implícita)
    - Campos `folder`, `file` e `path` só são considerados quando são
      strings não vazias; `extend` só quando é booleano
    - Qualquer outro tipo de diretiva é erro fatal

Invariantes:
    - `file` nunca é vazio
    - `location` é determinístico para a mesma diretiva e o mesmo caminho

Limites explícitos:
    - Não realiza I/O
    - Não valida existência de arquivos ou pastas
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import MalformedDirectiveError
from .paths import join


class PathMode(str, Enum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


@dataclass(frozen=True)
class ConfigNode:
    """
    Diretiva resolvida de uma chave da árvore de configuração.

    Campos:
        key: nome da propriedade no objeto pai
        folder: pasta resolvida (relativa à raiz, ou ao caminho corrente
            quando `path_mode` é RELATIVE)
        file: nome do arquivo (sem extensão obrigatória)
        path_mode: modo de interpretação de `folder`
        extend: se True, o conteúdo é carregado recursivamente como subárvore
        relative_path: caminho relativo corrente no momento da resolução
    """

    key: str
    folder: str
    file: str
    path_mode: PathMode = PathMode.ABSOLUTE
    extend: bool = False
    relative_path: str = ""

    @property
    def location(self) -> str:
        """Pasta efetiva, relativa à raiz, onde `file` será procurado."""
        if self.path_mode is PathMode.RELATIVE:
            if not self.folder:
                return self.relative_path
            return join(self.relative_path, self.folder)  # type: ignore[return-value]
        return self.folder


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def resolve_directive(key: Any, descriptor: Any, relative_path: str) -> ConfigNode:
    """
    Resolve a diretiva bruta de uma chave em um `ConfigNode`.

    Args:
        key (Any): Chave do arquivo YAML (convertida para string nos defaults).
        descriptor (Any): Valor YAML bruto associado à chave.
        relative_path (str): Caminho relativo corrente (pasta do arquivo em
            processamento).

    Returns:
        ConfigNode: Diretiva resolvida.

    Raises:
        MalformedDirectiveError: Se a diretiva não for null, string ou
            mapeamento (números, booleanos e listas são inválidos).
    """
    name = str(key)
    node = {
        "key": name,
        "folder": relative_path,
        "file": name,
        "path_mode": PathMode.ABSOLUTE,
        "extend": False,
        "relative_path": relative_path,
    }

    if descriptor is None or descriptor == "":
        return ConfigNode(**node)

    if isinstance(descriptor, str):
        node["file"] = descriptor
        return ConfigNode(**node)

    if not isinstance(descriptor, dict):
        raise MalformedDirectiveError(name)

    folder = descriptor.get("folder")
    if _non_empty_str(folder):
        node["folder"] = folder

    file = descriptor.get("file")
    if _non_empty_str(file):
        node["file"] = file

    if descriptor.get("path") == PathMode.RELATIVE.value:
        node["path_mode"] = PathMode.RELATIVE
        if not _non_empty_str(folder):
            # pasta corrente, sem duplicar o caminho relativo
            node["folder"] = ""

    extend = descriptor.get("extend")
    if isinstance(extend, bool):
        node["extend"] = extend

    return ConfigNode(**node)
