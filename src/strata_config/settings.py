# src/strata_config/settings.py
"""
Configurações da própria biblioteca Strata Config.

Valores lidos de variáveis de ambiente com prefixo `STRATA_`
(ou de um arquivo `.env`), validados por pydantic-settings.

Exemplo:
    STRATA_MASK_LENGTH_CUTOFF=16
    STRATA_SECRET_PATTERN='^(?:pin|otp)$'
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configurações globais, somente leitura após a criação."""

    model_config = SettingsConfigDict(
        env_prefix="STRATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    secret_pattern: Optional[str] = Field(
        default=None,
        description="Regex que substitui o predicado padrão de chave secreta.",
    )

    mask_length_cutoff: int = Field(
        default=32,
        ge=1,
        description="Tamanho a partir do qual um segredo vira `**<N>**`.",
    )

    log_level: str = Field(default="INFO", description="Nível usado por configure_logging.")

    @field_validator("secret_pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        """Garante que o padrão compila."""
        if v is None:
            return v
        if not v.strip():
            raise ValueError("secret_pattern não pode ser vazio")
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"secret_pattern inválido: {e}") from e
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Instância única de `Settings`; use `get_settings.cache_clear()` em testes."""
    return Settings()
