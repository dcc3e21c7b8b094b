# tests/core/secrets/test_detect.py
"""
Testes do predicado de detecção de chaves secretas.

Os testes asseguram que:
- termos sensíveis casam sem diferenciar maiúsculas de minúsculas
- chaves compostas (snake_case, kebab-case, camelCase) são quebradas em palavras
- palavras que apenas contêm o termo (`compass`, `passport`) não casam
- predicados customizados substituem o padrão

Limites explícitos:
    - Não valida a travessia de redação
"""

import re

import pytest

try:
    from strata_config.core.secrets.detect import (
        DEFAULT_MATCHER,
        SecretMatcher,
        is_secret_key,
        resolve_matcher,
        split_key_words,
    )
except Exception as e:  # noqa: BLE001
    SecretMatcher = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha explicitamente quando o módulo de detecção não pode ser importado."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing secret detection. Implement:\n"
            "- src/strata_config/core/secrets/detect.py (SecretMatcher, is_secret_key)\n"
            f"Import error: {_IMPORT_ERR}"
        )


@pytest.mark.parametrize(
    "key",
    [
        "key",
        "secret",
        "pass",
        "PASS",
        "passes",
        "password",
        "Passwords",
        "cert",
        "certificate",
        "token",
        "authorization",
        "Authorization",
        "apiKey",
        "api_key",
        "client_secret",
        "db-password",
        "accessToken",
        "DBPassword",
        "SSLCert",
        "JWTSecret",
        "AWSKey",
    ],
)
def test_secret_keys_match(key):
    _require_imports()
    assert is_secret_key(key)


@pytest.mark.parametrize(
    "key",
    ["past", "compass", "passport", "user", "name", "monkey", "keyboard", "certain", ""],
)
def test_plain_keys_do_not_match(key):
    _require_imports()
    assert not is_secret_key(key)


def test_split_key_words():
    _require_imports()
    assert split_key_words("api_key") == ["api", "key"]
    assert split_key_words("apiKey") == ["api", "Key"]
    assert split_key_words("db-password.v2") == ["db", "password", "v2"]
    assert split_key_words("DBPassword") == ["DB", "Password"]
    assert split_key_words("SSLCert") == ["SSL", "Cert"]
    assert split_key_words("PASS") == ["PASS"]


def test_custom_pattern():
    _require_imports()
    matcher = SecretMatcher(r"^pin$")

    assert matcher("pin")
    assert matcher("card_pin")
    assert not matcher("password")
    assert matcher.pattern == r"^pin$"


def test_resolve_matcher():
    """
    Verifica a normalização do predicado informado pelo chamador.

    Invariantes:
        - None resulta no predicado padrão, nunca em detecção desligada
        - Strings e regex compiladas viram `SecretMatcher`
        - Callables são usados como vieram
    """
    _require_imports()

    def predicate(key):
        return key == "x"

    assert resolve_matcher(None) is DEFAULT_MATCHER
    assert resolve_matcher("^x$")("x")
    assert resolve_matcher(re.compile("^x$"))("x")
    assert resolve_matcher(predicate) is predicate


def test_custom_pattern_with_separators_matches_original_key():
    """Padrões com `-`, `_` ou `.` são aplicados também à chave original."""
    _require_imports()
    matcher = SecretMatcher(r"^x-auth-header$")

    assert matcher("x-auth-header")
    assert matcher("X-Auth-Header")
    assert not matcher("x-auth")
