# tests/conftest.py
"""
Fixtures compartilhados para testes do SysBoot.

Este módulo define fixtures reutilizáveis que fornecem:
- um construtor de árvores YAML em diretório temporário
- a árvore de exemplo de ponta a ponta (init → cfg/settings)
- opções mínimas e determinísticas de `System`

Decisões arquiteturais:
    - Toda árvore de configuração é criada sob `tmp_path`
    - Arquivos são escritos em UTF-8, exatamente como fornecidos
    - Imports do core são realizados de forma lazy

Invariantes:
    - Nenhuma fixture depende de variáveis de ambiente
    - Nenhuma fixture compartilha estado entre testes

Limites explícitos:
    - Não substituir testes de integração do `System`
    - Não conter lógica condicional complexa
"""

from pathlib import Path
from typing import Callable, Dict

import pytest


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """
    Fixture que escreve uma árvore de arquivos sob `tmp_path`.

    Recebe um mapeamento `caminho relativo → conteúdo` e retorna o
    diretório raiz. Pastas intermediárias são criadas automaticamente.

    Exemplo:
        root = write_tree({"init.yml": "data:", "data.yml": "a: 1"})
    """

    def _write(files: Dict[str, str]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def settings_tree(write_tree) -> Path:
    """Árvore mínima: `init.yml` aponta para `cfg/settings.yml`."""
    return write_tree(
        {
            "init.yml": (
                "data:\n"
                "  file: settings\n"
                "  path: relative\n"
                "  folder: cfg\n"
                "  extend: false\n"
            ),
            "cfg/settings.yml": "color: red\n",
        }
    )


@pytest.fixture
def make_options():
    """Fábrica de `SystemOptions` com defaults de teste."""
    from sysboot.core.options import SystemOptions

    def _make(root_dir, **overrides):
        values = {
            "id": "test_system",
            "root_dir": str(root_dir),
            "relative_init_dir": "",
            "init_filename": "init",
            "logging": "off",
        }
        values.update(overrides)
        return SystemOptions(**values)

    return _make
