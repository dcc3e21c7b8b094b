# tests/conftest.py
"""
Fixtures compartilhados para testes do Strata Config.

Este módulo define fixtures reutilizáveis que fornecem:
- documentos YAML de base e overlay semelhantes ao uso real
- documentos com âncoras e aliases
- isolamento das configurações globais (`Settings`)

Decisões arquiteturais:
    - Documentos são fornecidos como string para evitar I/O
    - Testes que precisam de arquivo usam `tmp_path`
    - O cache de `get_settings` é limpo antes e depois de cada teste

Invariantes:
    - Nenhuma fixture depende de variáveis de ambiente reais
    - Dados retornados são determinísticos e isolados

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica de domínio
"""

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """
    Garante que `Settings` seja recriado a partir de um ambiente limpo.

    Remove variáveis `STRATA_*` herdadas do processo e limpa o cache
    de `get_settings`, de modo que cada teste observe os valores padrão
    (ou apenas os que ele mesmo definir via `monkeypatch.setenv`).
    """
    from strata_config.settings import get_settings

    for name in ("STRATA_SECRET_PATTERN", "STRATA_MASK_LENGTH_CUTOFF", "STRATA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def base_yaml() -> str:
    """
    YAML de configuração base (defaults).

    Returns:
        str: Documento base com mapping aninhado, lista e segredo.
    """
    return """\
id: 1
name: base
server:
  host: localhost
  port: 8080
tags: [a, b]
password: pa
"""


@pytest.fixture
def overlay_yaml() -> str:
    """
    YAML de overlay (configuração local).

    Returns:
        str: Documento que sobrescreve escalares e estende a lista.
    """
    return """\
name: local
server:
  port: 9090
tags: [c]
"""


@pytest.fixture
def anchored_yaml() -> str:
    """
    YAML com uma âncora referenciada por três chaves, duas delas secretas.

    Returns:
        str: Documento com âncora `&shared` e três aliases.
    """
    return """\
base: &shared s3cr3t
token: *shared
apiKey: *shared
label: *shared
"""
