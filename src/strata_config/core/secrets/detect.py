# src/strata_config/core/secrets/detect.py
"""
Detecção de chaves sensíveis.

Este módulo define o predicado padrão que decide se uma chave de
mapping indica um valor secreto (senha, token, certificado, ...).

Política de detecção (v1):
    - A chave é quebrada em palavras por caracteres não alfanuméricos
      e por transições camelCase (minúscula → maiúscula e fim de sigla,
      como em `DBPassword`)
    - A chave é secreta quando a chave original, a chave sem separadores
      ou alguma palavra casa com o padrão, sem diferenciar maiúsculas de
      minúsculas
    - Palavras que apenas contêm o termo não casam: `compass`,
      `passport` e `past` não são secretas

Limites explícitos:
    - Não inspeciona valores, apenas o texto da chave
    - Chamadores podem substituir o predicado por qualquer callable
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Pattern, Union

SECRET_DEFAULT_PATTERN = (
    r"^(?:api)?(?:keys?|secrets?|pass(?:word|wd|phrase)?(?:e?s)?|certs?|certificates?"
    r"|tokens?|auth|authorization|credentials?)$"
)

SecretPredicate = Callable[[str], bool]

_WORD_SEPARATOR = re.compile(r"[^0-9A-Za-z]+")
# `apiKey` → api|Key; `DBPassword` → DB|Password
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def split_key_words(key: str) -> List[str]:
    """`api_key` → [api, key]; `apiKey` → [api, Key]; `SSLCert` → [SSL, Cert]."""
    words: List[str] = []
    for chunk in _WORD_SEPARATOR.split(key):
        if chunk:
            words.extend(w for w in _CAMEL_BOUNDARY.split(chunk) if w)
    return words


class SecretMatcher:
    """
    Predicado de chave secreta baseado em expressão regular.

    A expressão é aplicada à chave original, à chave sem separadores e
    a cada palavra da chave. Instâncias são imutáveis e podem ser compartilhadas
    entre threads.
    """

    def __init__(self, pattern: Union[str, Pattern[str]] = SECRET_DEFAULT_PATTERN) -> None:
        if isinstance(pattern, str):
            pattern = re.compile(pattern, re.IGNORECASE)
        self._pattern = pattern

    @property
    def pattern(self) -> str:
        return self._pattern.pattern

    def __call__(self, key: str) -> bool:
        if not key:
            return False
        words = split_key_words(key)
        candidates = [key, "".join(words)] + words
        return any(self._pattern.search(candidate) for candidate in candidates)

    def __repr__(self) -> str:
        return f"SecretMatcher({self.pattern!r})"


DEFAULT_MATCHER = SecretMatcher()


def is_secret_key(key: str) -> bool:
    """Aplica o predicado padrão a uma chave."""
    return DEFAULT_MATCHER(key)


def resolve_matcher(matcher: Optional[Union[SecretPredicate, str, Pattern[str]]]) -> SecretPredicate:
    """
    Normaliza o predicado informado pelo chamador.

    None resulta no predicado padrão (nunca desliga a detecção);
    strings e regex compiladas viram `SecretMatcher`.
    """
    if matcher is None:
        return DEFAULT_MATCHER
    if isinstance(matcher, (str, re.Pattern)):
        return SecretMatcher(matcher)
    return matcher
