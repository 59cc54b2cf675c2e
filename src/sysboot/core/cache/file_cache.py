# src/sysboot/core/cache/file_cache.py
"""
Cache limitado de arquivos do SysBoot, indexado por caminho.

Política (v1):
    - Miss: o arquivo é lido e inserido; com o cache cheio, a entrada
      inserida há mais tempo é descartada
    - Hit com o mesmo TTL: relê se expirado ou se `force`
    - Hit com TTL novo: reduz a expiração se necessário, registra o TTL
      e relê apenas se `force`
    - `max_files <= 0` desabilita o cache

Decisões arquiteturais:
    - O relógio é injetável (segundos inteiros) para testes determinísticos
    - Falhas de leitura são convertidas em `LoaderError("file_system_error")`
    - `read()` tem a assinatura de leitor do `ConfigTree`

Limites explícitos:
    - Não observa modificações no disco
    - Não é compartilhado entre processos
"""

from __future__ import annotations

import logging
import os
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple

from sysboot.core.config.paths import read_file
from sysboot.core.errors import file_system_error

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 100
DEFAULT_CACHE_TTL = 86400

Reader = Callable[[str, str, str], Awaitable[bytes]]
CacheKey = Tuple[str, str]


@dataclass
class CachedFile:
    content: bytes
    cache_ttl: int
    expires: int


class FileCache:
    """
    Cache de arquivos com capacidade máxima e expiração por TTL.

    Args:
        root_dir (str): Diretório raiz usado por `get_file`.
        reader (Reader): Corrotina `(root, dir, file) -> bytes`.
        max_files (int): Capacidade máxima de arquivos em cache.
        default_ttl (int): TTL padrão em segundos.
        clock (Callable[[], float]): Fonte de tempo em segundos.
    """

    def __init__(
        self,
        root_dir: str = "",
        reader: Reader = read_file,
        max_files: int = DEFAULT_MAX_FILES,
        default_ttl: int = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self.root_dir = root_dir
        self.reader = reader
        self.max_files = max_files
        self.default_ttl = default_ttl
        self.clock = clock
        self._files: "OrderedDict[CacheKey, CachedFile]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return any(os.path.join(root, rel) == path for root, rel in self._files)

    def clear(self) -> None:
        self._files.clear()

    async def get_file(
        self,
        directory: str,
        filename: str,
        cache_ttl: Optional[int] = None,
        force: bool = False,
    ) -> bytes:
        """
        Retorna o conteúdo de `root_dir/directory/filename`, usando o cache.

        Raises:
            LoaderError: `file_system_error` se a leitura falhar.
        """
        return await self._get(self.root_dir, directory, filename, cache_ttl, force)

    async def read(self, root_dir: str, relative_dir: str, filename: str) -> bytes:
        """Leitor compatível com `ConfigTree(reader=...)`."""
        return await self._get(root_dir, relative_dir, filename, None, False)

    async def _get(
        self,
        root_dir: str,
        directory: str,
        filename: str,
        cache_ttl: Optional[int],
        force: bool,
    ) -> bytes:
        if cache_ttl is None:
            cache_ttl = self.default_ttl

        if self.max_files <= 0:
            return await self._read(root_dir, directory, filename)

        now = int(self.clock())
        expires = now + cache_ttl
        key = (root_dir, os.path.join(directory, filename))
        entry = self._files.get(key)

        if entry is None:
            content = await self._read(root_dir, directory, filename)
            if len(self._files) >= self.max_files:
                evicted, _ = self._files.popitem(last=False)
                logger.debug("Arquivo removido do cache: %s", os.path.join(*evicted))
            self._files[key] = CachedFile(content, cache_ttl, expires)
            return content

        if entry.cache_ttl == cache_ttl:
            if now > entry.expires:
                entry.content = await self._read(root_dir, directory, filename)
                entry.expires = expires
            elif force:
                entry.content = await self._read(root_dir, directory, filename)
        else:
            if entry.expires > expires:
                entry.expires = expires
            entry.cache_ttl = cache_ttl
            if force:
                entry.content = await self._read(root_dir, directory, filename)

        return entry.content

    async def _read(self, root_dir: str, directory: str, filename: str) -> bytes:
        try:
            return await self.reader(root_dir, directory, filename)
        except OSError as exc:
            raise file_system_error(os.path.join(root_dir, directory, filename)) from exc
