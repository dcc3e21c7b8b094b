# src/strata_config/core/config/hashing.py
"""
Hashing canônico da configuração resolvida.

O hash representa a identidade estrutural da configuração efetiva e
serve para rastrear qual configuração uma execução realmente usou.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Valores não nativos de JSON (datas, por exemplo) viram texto
    - Codificação UTF-8 e SHA-256

Invariantes:
    - Configurações estruturalmente equivalentes produzem o mesmo hash
    - O resultado é sempre uma string hexadecimal de 64 caracteres
"""

import hashlib
import json
from typing import Any


def compute_config_hash(data: Any) -> str:
    """
    Gera o hash SHA-256 da forma canônica de dados de configuração.

    Args:
        data (Any): Dados puros (dict/list/escalares) da configuração.

    Returns:
        str: Hash hexadecimal de 64 caracteres.
    """
    canonical_json = json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
