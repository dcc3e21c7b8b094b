# src/strata_config/core/secrets/__init__.py
"""
Redação de segredos do Strata Config.

Componentes principais:
    - detect → predicado de chave secreta (`SecretMatcher`)
    - redact → engine de mascaramento in-place (`hide_secrets`)
"""

from strata_config.core.secrets.detect import (
    DEFAULT_MATCHER,
    SECRET_DEFAULT_PATTERN,
    SecretMatcher,
    is_secret_key,
)
from strata_config.core.secrets.redact import (
    SECRET_LENGTH_CUTOFF,
    hide_secrets,
    hide_secrets_all,
    mask_scalar_text,
)

__all__ = [
    "DEFAULT_MATCHER",
    "SECRET_DEFAULT_PATTERN",
    "SECRET_LENGTH_CUTOFF",
    "SecretMatcher",
    "hide_secrets",
    "hide_secrets_all",
    "is_secret_key",
    "mask_scalar_text",
]
