# tests/core/config/test_hashing.py
"""
Testes do hashing canônico da configuração resolvida.

Os testes asseguram que:
- configurações equivalentes produzem o mesmo hash, independente da ordem das chaves
- o algoritmo corresponde ao SHA-256 do JSON canônico
- valores não nativos de JSON são aceitos (convertidos em texto)

Invariantes:
    - O hash retornado possui 64 caracteres hexadecimais
    - O cálculo não depende de estado externo
"""

import hashlib
import json
from datetime import date

import pytest

try:
    from strata_config.core.config.hashing import compute_config_hash
except Exception as e:  # noqa: BLE001
    compute_config_hash = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha explicitamente quando a função de hashing não pode ser importada."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config hashing module. Implement:\n"
            "- src/strata_config/core/config/hashing.py (compute_config_hash)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_hash_is_deterministic_and_order_independent():
    _require_imports()
    h1 = compute_config_hash({"a": 1, "b": {"c": [1, 2]}})
    h2 = compute_config_hash({"b": {"c": [1, 2]}, "a": 1})

    assert h1 == h2
    assert isinstance(h1, str)
    assert len(h1) == 64


def test_hash_matches_sha256_of_canonical_json():
    """
    Verifica que o hash é o SHA-256 do JSON canônico.

    Forma canônica:
        - chaves ordenadas
        - separadores compactos
        - UTF-8 sem escape de caracteres não ASCII
    """
    _require_imports()
    cfg = {"nome": "configuração", "n": 1}
    canonical = json.dumps(cfg, sort_keys=True, separators=(",", ":"), ensure_ascii=False)

    assert compute_config_hash(cfg) == hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def test_hash_changes_on_override():
    _require_imports()
    assert compute_config_hash({"port": 8080}) != compute_config_hash({"port": 9090})


def test_hash_accepts_non_json_values():
    _require_imports()
    assert compute_config_hash({"since": date(2024, 1, 1)}) == compute_config_hash({"since": "2024-01-01"})
