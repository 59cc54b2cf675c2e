# src/sysboot/core/config/loader.py
"""
Loader recursivo da árvore de configuração do SysBoot.

A partir de um diretório raiz, de um caminho relativo inicial e de um
arquivo inicial, este módulo lê arquivos YAML e monta um dicionário
aninhado seguindo as diretivas de cada chave (ver `directives`).

Algoritmo:
    1. Lê o arquivo inicial como mapeamento (`init`)
    2. Resolve a diretiva de cada chave de `init`
    3. Chave sem `extend`: o documento YAML apontado é atribuído literalmente
    4. Chave com `extend: true`: o arquivo apontado é carregado
       recursivamente, a partir da pasta resolvida
    5. Todas as chaves de um nível são resolvidas concorrentemente; falha
       em qualquer chave falha o nível inteiro e cancela as chaves irmãs
       ainda pendentes

Decisões arquiteturais:
    - Cadeias circulares de `extend` são detectadas com uma pilha de pares
      (pasta, arquivo) e geram `CircularConfigurationError`
    - Arquivos de inicialização/extensão vazios equivalem a `{}`
    - O resultado preserva a ordem das chaves do arquivo de origem
    - A leitura de arquivos é injetável (`reader`), permitindo o uso do
      `FileCache`

Invariantes:
    - Toda chave do arquivo inicial (e de cada subárvore estendida)
      aparece no resultado
    - Nenhum estado mutável é compartilhado entre chamadas de `load()`

Limites explícitos:
    - Não há rollback nem resultado parcial
    - Não há hot reload
    - Não valida semântica das chaves carregadas
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from .directives import ConfigNode, resolve_directive
from .errors import CircularConfigurationError, InvalidConfigRootTypeError
from .hashing import compute_config_hash
from .paths import load_yaml, read_file, relativize, with_yaml_extension

logger = logging.getLogger(__name__)

Reader = Callable[[str, str, str], Awaitable[bytes]]

# Alias da API histórica do loader.
to_relative = relativize


@dataclass(frozen=True)
class LoadResult:
    """
    Resultado de um carregamento completo.

    Campos:
        tree: árvore de configuração montada
        files_loaded: quantidade de arquivos YAML lidos
        fingerprint: hash canônico da árvore (SHA-256)
    """

    tree: Dict[str, Any]
    files_loaded: int
    fingerprint: str


def _frame(relative_path: str, filename: str) -> Tuple[str, str]:
    return os.path.normpath(relative_path or "."), with_yaml_extension(filename)


class ConfigTree:
    """
    Carregador recursivo de árvores de configuração YAML.

    Uso:

        result = await ConfigTree("/app").load("config", "init")
        result.tree  # dict aninhado

    Args:
        root_dir (str): Diretório raiz; todos os caminhos são relativos a ele.
        reader (Optional[Reader]): Corrotina `(root, dir, file) -> bytes`.
    """

    def __init__(self, root_dir: str, *, reader: Optional[Reader] = None):
        self.root_dir = root_dir
        self.reader: Reader = reader or read_file

    async def load(self, relative_start_path: str, start_filename: str) -> LoadResult:
        """
        Carrega a árvore a partir de `(relative_start_path, start_filename)`.

        Raises:
            ConfigFileNotFoundError: Se algum arquivo referenciado não existir.
            MalformedDirectiveError: Se alguma diretiva tiver tipo inválido.
            InvalidConfigRootTypeError: Se um arquivo de inicialização não
                for um mapeamento.
            CircularConfigurationError: Se uma cadeia de `extend` for circular.
            yaml.YAMLError: Se algum arquivo não for YAML válido.
        """
        counter = [0]
        tree = await self._load_level(
            relative_start_path, start_filename, (), counter
        )
        fingerprint = compute_config_hash(tree)
        logger.debug(
            "Configuração carregada: %s/%s (%d arquivos, hash=%s)",
            relative_start_path,
            start_filename,
            counter[0],
            fingerprint,
        )
        return LoadResult(tree=tree, files_loaded=counter[0], fingerprint=fingerprint)

    async def _read(self, relative_dir: str, filename: str, counter: list) -> Any:
        counter[0] += 1
        return await load_yaml(self.root_dir, relative_dir, filename, reader=self.reader)

    async def _load_level(
        self,
        relative_path: str,
        filename: str,
        stack: Tuple[Tuple[str, str], ...],
        counter: list,
    ) -> Dict[str, Any]:
        frame = _frame(relative_path, filename)
        if frame in stack:
            chain = [os.path.join(*f) for f in stack + (frame,)]
            raise CircularConfigurationError(chain)
        stack = stack + (frame,)

        init = await self._read(relative_path, filename, counter)
        if init is None:
            init = {}
        if not isinstance(init, dict):
            raise InvalidConfigRootTypeError(
                f"Config root deve ser dict, recebido: {type(init).__name__} "
                f"({os.path.join(*frame)})"
            )

        # diretivas resolvidas antes de qualquer leitura: falha rápida
        nodes = [resolve_directive(key, value, relative_path) for key, value in init.items()]

        tasks = [
            asyncio.ensure_future(self._load_node(node, stack, counter)) for node in nodes
        ]
        try:
            values = await asyncio.gather(*tasks)
        except Exception:
            # primeira falha rejeita o nível: irmãos pendentes param de ler
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return {key: value for key, value in zip(init.keys(), values)}

    async def _load_node(
        self,
        node: ConfigNode,
        stack: Tuple[Tuple[str, str], ...],
        counter: list,
    ) -> Any:
        if node.extend:
            return await self._load_level(node.location, node.file, stack, counter)
        return await self._read(node.location, node.file, counter)


async def load_config_tree(
    root_dir: str,
    relative_start_path: str,
    start_filename: str,
    *,
    reader: Optional[Reader] = None,
) -> Dict[str, Any]:
    """
    Atalho funcional: carrega e retorna apenas a árvore de configuração.

    Args:
        root_dir (str): Diretório raiz.
        relative_start_path (str): Caminho relativo do arquivo inicial.
        start_filename (str): Nome do arquivo inicial (`.yml` é opcional).
        reader (Optional[Reader]): Leitor alternativo de arquivos.

    Returns:
        Dict[str, Any]: Árvore de configuração montada.
    """
    result = await ConfigTree(root_dir, reader=reader).load(
        relative_start_path, start_filename
    )
    return result.tree
