# src/sysboot/core/config/hashing.py
"""
Impressão digital (fingerprint) da árvore de configuração do SysBoot.

O fingerprint identifica o **conteúdo** de uma árvore carregada e é
registrado no log de eventos do bootstrap, permitindo comparar dois
carregamentos do mesmo diretório.

Documentos YAML não são JSON: `yaml.safe_load` produz chaves de qualquer
tipo escalar (inteiros, datas, booleanos, null), datas e timestamps,
binários (`!!binary`) e conjuntos (`!!set`). Por isso a árvore é primeiro
reescrita em uma forma canônica, serializável e sem ambiguidade, e só
então serializada e resumida.

Forma canônica:
    - escalares JSON (str, int, float, bool, None) permanecem como estão
    - mapeamento  → {"map": [[chave, valor], ...]}, pares ordenados pela
      serialização da chave canônica
    - sequência   → {"seq": [...]}
    - conjunto    → {"set": [...]}, itens ordenados pela serialização
    - date/datetime → {"timestamp": isoformat}
    - bytes       → {"binary": base64}
    - qualquer outro valor → {"repr": repr(valor)}

Decisões arquiteturais:
    - Chaves passam pela mesma forma canônica que valores, logo `80` e
      `"80"` produzem fingerprints distintos
    - Nenhuma chave ou valor válido em YAML levanta exceção
    - A ordem das chaves no arquivo não altera o fingerprint

Invariantes:
    - Árvores com o mesmo conteúdo produzem o mesmo fingerprint
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres (SHA-256)
"""

import base64
import datetime
import hashlib
import json
from typing import Any, Dict


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def canonical_form(value: Any) -> Any:
    """Reescreve um documento YAML na forma canônica serializável."""
    if isinstance(value, dict):
        pairs = [[canonical_form(k), canonical_form(v)] for k, v in value.items()]
        pairs.sort(key=lambda pair: _dumps(pair[0]))
        return {"map": pairs}
    if isinstance(value, list):
        return {"seq": [canonical_form(item) for item in value]}
    if isinstance(value, (set, frozenset)):
        return {"set": sorted((canonical_form(item) for item in value), key=_dumps)}
    if isinstance(value, (datetime.date, datetime.datetime)):
        return {"timestamp": value.isoformat()}
    if isinstance(value, bytes):
        return {"binary": base64.b64encode(value).decode("ascii")}
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return {"repr": repr(value)}


def compute_config_hash(config: Dict[Any, Any]) -> str:
    """
    Gera o fingerprint SHA-256 de uma árvore de configuração carregada.

    Args:
        config (Dict[Any, Any]): Árvore produzida pelo loader.

    Returns:
        str: Hash SHA-256 hexadecimal da forma canônica.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    return hashlib.sha256(_dumps(canonical_form(config)).encode("utf-8")).hexdigest()
