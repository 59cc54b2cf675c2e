# src/sysboot/core/config/paths.py
"""
Utilitários de caminho e de leitura de arquivos da árvore de configuração.

Este módulo reúne as funções puras (ou de I/O simples) das quais o
`ConfigTree` depende para resolver caminhos de forma independente do
separador do sistema operacional.

Responsabilidades do módulo:
    - Concatenar caminhos (inclusive listas de caminhos, elemento a elemento)
    - Relativizar caminhos
    - Testar existência de arquivos e diretórios
    - Listar diretórios
    - Ler e interpretar arquivos YAML

Decisões arquiteturais:
    - `is_file` / `is_directory` nunca levantam exceção (qualquer erro → False)
    - `list_directory` levanta exceção para diretório inexistente, permitindo
      ao chamador distinguir "caminho inválido" de "diretório vazio"
    - Erros de parse YAML são propagados sem modificação
    - I/O de arquivo é executado via `asyncio.to_thread`

Limites explícitos:
    - Não mantém cache (ver `sysboot.core.cache`)
    - Não interpreta diretivas de configuração
"""

from __future__ import annotations

import asyncio
import os
import stat
from typing import Any, List, Sequence, Union

import yaml  # PyYAML

from sysboot.core.errors import LoaderError

from .errors import ConfigFileNotFoundError


YAML_EXTENSION = ".yml"

PathLike = Union[str, Sequence[str]]


def join(*parts: PathLike) -> Union[str, List[str]]:
    """
    Concatena caminhos; listas são combinadas elemento a elemento.

    Quando nenhum argumento é lista, retorna uma string. Caso contrário,
    retorna uma lista com o comprimento da maior lista: listas menores
    repetem seu último elemento e listas vazias são ignoradas.

    Exemplo:
        join("root", ["a", "b"]) -> ["root/a", "root/b"]
    """
    if not parts:
        return ""

    is_list = [not isinstance(p, str) for p in parts]
    lengths = [len(p) if flag else 1 for p, flag in zip(parts, is_list)]
    max_length = max(lengths)

    if max_length == 0:
        return ""

    if not any(is_list):
        return os.path.join(*parts)  # type: ignore[arg-type]

    results: List[str] = []
    for i in range(max_length):
        segment: List[str] = []
        for part, flag, length in zip(parts, is_list, lengths):
            if not flag:
                segment.append(part)  # type: ignore[arg-type]
            elif length > i:
                segment.append(part[i])
            elif length > 0:
                segment.append(part[length - 1])
        results.append(os.path.join(*segment) if segment else "")
    return results


def relativize(base: str, target: PathLike) -> Union[str, List[str]]:
    """Caminho relativo de `base` até `target` (string ou lista)."""
    if isinstance(target, str):
        return os.path.relpath(target, base)
    return [os.path.relpath(t, base) for t in target]


async def is_file(path: str) -> bool:
    """True se o caminho existe e não é diretório; False em qualquer erro."""
    try:
        stats = await asyncio.to_thread(os.stat, path)
    except (OSError, ValueError):
        return False
    return not stat.S_ISDIR(stats.st_mode)


async def is_directory(path: str) -> bool:
    """True se o caminho existe e é diretório; False em qualquer erro."""
    try:
        stats = await asyncio.to_thread(os.stat, path)
    except (OSError, ValueError):
        return False
    return stat.S_ISDIR(stats.st_mode)


async def list_directory(path: str) -> List[str]:
    """Entradas do diretório (ordenadas); levanta se o diretório não existe."""
    entries = await asyncio.to_thread(os.listdir, path)
    return sorted(entries)


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


async def read_file(root_dir: str, relative_dir: str, filename: str) -> bytes:
    """Lê `root_dir/relative_dir/filename`; erros de I/O são propagados."""
    full_path = os.path.join(root_dir, relative_dir, filename)
    return await asyncio.to_thread(_read_bytes, full_path)


def parse_yaml(text: Union[str, bytes]) -> Any:
    """Interpreta YAML via `yaml.safe_load`; erros de parse são propagados."""
    return yaml.safe_load(text)


def with_yaml_extension(filename: str) -> str:
    if filename.endswith(YAML_EXTENSION):
        return filename
    return filename + YAML_EXTENSION


async def load_yaml(
    root_dir: str,
    relative_dir: str,
    filename: str,
    *,
    reader=read_file,
) -> Any:
    """
    Lê e interpreta um arquivo YAML, adicionando `.yml` quando ausente.

    Args:
        root_dir (str): Diretório raiz absoluto.
        relative_dir (str): Diretório relativo à raiz.
        filename (str): Nome do arquivo, com ou sem extensão.
        reader: Corrotina `(root, dir, file) -> bytes` usada para a leitura.

    Returns:
        Any: Documento YAML interpretado (mapeamento, lista, escalar ou None).

    Raises:
        ConfigFileNotFoundError: Se o arquivo não existir ou não puder ser lido.
        yaml.YAMLError: Se o conteúdo não for YAML válido.
    """
    filename = with_yaml_extension(filename)
    try:
        contents = await reader(root_dir, relative_dir, filename)
    except (OSError, LoaderError) as exc:
        raise ConfigFileNotFoundError(os.path.join(root_dir, relative_dir, filename)) from exc
    return parse_yaml(contents)
