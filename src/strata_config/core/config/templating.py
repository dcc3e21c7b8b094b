# src/strata_config/core/config/templating.py
"""
Expansão de templates das fontes de configuração.

Antes do parse YAML, cada fonte é tratada como um template Jinja2 e
expandida para texto puro. O template tem acesso a variáveis de
ambiente, argumentos de linha de comando e arquivos locais.

Funções disponíveis no template:
    - env(name, default=None)  → variável de ambiente
    - required(message, value) → falha com `message` se o valor for vazio
    - read(path)               → conteúdo de um arquivo texto
    - arg(name)                → valor de `-name v`, `--name v` ou `--name=v`
    - has_arg(name)            → se o argumento foi informado

Filtros adicionais:
    - value | quote              → string entre aspas duplas (YAML/JSON)
    - value | required(message)  → mesma semântica da função

Exemplo:
    name: {{ env("APP_NAME") | required("APP_NAME precisa estar definido") | quote }}
    debug: {{ "true" if has_arg("debug") else "false" }}

Limites explícitos:
    - Não faz parse YAML
    - Variáveis indefinidas são erro (StrictUndefined)
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import jinja2

from strata_config.core.config.errors import TemplateRenderError


def parse_args(argv: Sequence[str]) -> Dict[str, Optional[str]]:
    """
    Extrai argumentos nomeados de uma linha de comando.

    `-name value`, `--name value` e `--name=value` definem um valor;
    uma flag isolada (seguida de outra flag ou no fim) fica presente
    com valor None. Tudo após `--` é ignorado.
    """
    values: Dict[str, Optional[str]] = {}
    i = 0
    while i < len(argv):
        token = argv[i]
        if token == "--":
            break
        if token.startswith("-") and token.strip("-"):
            name = token.lstrip("-")
            if "=" in name:
                name, value = name.split("=", 1)
                values[name] = value
            elif i + 1 < len(argv) and not argv[i + 1].startswith("-"):
                values[name] = argv[i + 1]
                i += 1
            else:
                values[name] = None
        i += 1
    return values


def _is_empty(value: Any) -> bool:
    if isinstance(value, jinja2.Undefined):
        return True
    return value is None or (isinstance(value, str) and value == "")


def _required(message: str, value: Any) -> Any:
    if _is_empty(value):
        raise TemplateRenderError(message)
    return value


def _required_filter(value: Any, message: str) -> Any:
    return _required(message, value)


def _quote(value: Any) -> str:
    if value is None or isinstance(value, jinja2.Undefined):
        return '""'
    return json.dumps(str(value), ensure_ascii=False)


def _read(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateRenderError(f"Não foi possível ler {path}: {e}") from e


def _build_environment(args: Mapping[str, Optional[str]], environ: Mapping[str, str]) -> jinja2.Environment:
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.globals.update(
        env=lambda name, default=None: environ.get(name, default),
        required=_required,
        read=_read,
        arg=lambda name: args.get(name),
        has_arg=lambda name: name in args,
    )
    env.filters.update(
        quote=_quote,
        required=_required_filter,
    )
    return env


def render_template(
    text: str,
    *,
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    source: str = "<string>",
) -> str:
    """
    Expande o template de uma fonte de configuração.

    Args:
        text (str): Conteúdo bruto da fonte.
        argv (Optional[Sequence[str]]): Argumentos de linha de comando
            (sem o nome do programa). None resulta em nenhum argumento.
        environ (Optional[Mapping[str, str]]): Ambiente; None usa `os.environ`.
        source (str): Nome da fonte, usado nas mensagens de erro.

    Returns:
        str: Texto expandido, pronto para o parse YAML.

    Raises:
        TemplateRenderError: Em erro de sintaxe, variável indefinida,
            `required` não satisfeito ou falha de leitura em `read`.
    """
    env = _build_environment(parse_args(argv or []), os.environ if environ is None else environ)
    try:
        return env.from_string(text).render()
    except TemplateRenderError as e:
        raise TemplateRenderError(f"{source}: {e}") from e
    except jinja2.TemplateError as e:
        raise TemplateRenderError(f"Template inválido em {source}: {e}") from e
