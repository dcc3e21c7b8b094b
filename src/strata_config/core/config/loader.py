# src/strata_config/core/config/loader.py
"""
Loader canônico de configuração do Strata Config.

Este módulo é a fachada que conecta as peças do core: lê as fontes,
expande templates, decodifica cada fonte em árvore, compõe as árvores
com o engine de merge e decodifica o resultado no tipo pedido pelo
chamador. Também re-serializa a configuração, com ou sem segredos.

Fluxo de carregamento:
    fontes → template (Jinja2) → YAML → árvores → merge (fold) →
    dados puros → valor tipado (pydantic) → hook de validação

Política de resolução:
    - Pelo menos uma fonte é obrigatória
    - A primeira fonte é a base; as seguintes são overlays, em ordem
    - Âncoras de fontes anteriores são visíveis nas seguintes
    - Qualquer falha aborta o carregamento inteiro

Invariantes:
    - Nenhuma configuração parcial é retornada
    - `Config.get()` devolve uma cópia; o valor mantido nunca é mutado
    - Saídas com segredos ocultos não alteram o valor mantido

Limites explícitos:
    - Não interpreta o significado dos campos
    - Não faz parse completo de linha de comando (apenas `arg`/`has_arg`)
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import IO, Any, Callable, Generic, List, Mapping, Optional, Pattern, Sequence, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from strata_config.core.config.errors import (
    DecodeError,
    NoSourcesError,
    SourceNotFoundError,
    SourceReadError,
    ValidationFailedError,
)
from strata_config.core.config.hashing import compute_config_hash
from strata_config.core.config.templating import render_template
from strata_config.core.merge.engine import merge_all
from strata_config.core.secrets.detect import SecretPredicate
from strata_config.core.secrets.redact import hide_secrets
from strata_config.core.tree.codec import Decoder, encode, from_python, to_python
from strata_config.core.tree.nodes import Node

logger = logging.getLogger(__name__)

T = TypeVar("T")

Validator = Callable[[Any], None]
Matcher = Optional[Union[SecretPredicate, str, Pattern[str]]]


class Config(Generic[T]):
    """
    Configuração carregada e decodificada em um tipo do chamador.

    O tipo de destino pode ser qualquer tipo aceito por `pydantic.TypeAdapter`:
    modelos pydantic, dataclasses, TypedDicts, `dict`, etc.
    """

    def __init__(self, content: T, target: Any = Any) -> None:
        self._content = content
        self._adapter: TypeAdapter = TypeAdapter(target)

    def get(self) -> T:
        """Cópia profunda do valor; mutá-la não altera a configuração."""
        return copy.deepcopy(self._content)

    def to_python(self) -> Any:
        """Dados puros (compatíveis com JSON) equivalentes ao valor."""
        return self._adapter.dump_python(self._content, mode="json", by_alias=True)

    def to_tree(self) -> Node:
        """Nova árvore de documento representando o valor."""
        return from_python(self.to_python())

    def to(self, stream: IO[str]) -> None:
        """Escreve a configuração como YAML."""
        encode(self.to_tree(), stream)

    def to_file(self, path: Union[str, Path]) -> None:
        """Escreve a configuração em um arquivo, substituindo-o se existir."""
        with Path(path).open("w", encoding="utf-8") as f:
            self.to(f)

    def to_secrets_hidden(self, stream: IO[str], matcher: Matcher = None) -> None:
        """
        Escreve a configuração com segredos ocultos e estrutura colapsada.

        Exemplo:
            id: id0
            secrets: [secret0, secret1]

        é escrito como:
            id: id0
            secrets: '*'
        """
        tree = self.to_tree()
        hide_secrets(tree, True, matcher)
        encode(tree, stream)

    def to_secrets_hidden_structured(self, stream: IO[str], matcher: Matcher = None) -> None:
        """
        Escreve a configuração com segredos ocultos, preservando a estrutura.

        Exemplo:
            secrets: [secret0, secret1]

        é escrito como:
            secrets:
            - '*******'
            - '*******'
        """
        tree = self.to_tree()
        hide_secrets(tree, False, matcher)
        encode(tree, stream)

    def fingerprint(self) -> str:
        """Hash SHA-256 canônico da configuração (ver `compute_config_hash`)."""
        return compute_config_hash(self.to_python())


# ---------------------------------------------------------------------------
# Leitura de fontes
# ---------------------------------------------------------------------------

def _stream_name(stream: Any, position: int) -> str:
    name = getattr(stream, "name", None)
    return str(name) if isinstance(name, (str, Path)) else f"<stream {position}>"


def _read_stream(stream: IO[Any], source: str) -> str:
    try:
        data = stream.read()
        if isinstance(data, bytes):
            data = data.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Falha ao ler {source}: {e}") from e
    return data


def _read_file(path: Union[str, Path]) -> str:
    file = Path(path)
    if not file.exists():
        raise SourceNotFoundError(f"Arquivo de configuração não encontrado: {file}")
    try:
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Falha ao ler {file}: {e}") from e


def _decode_sources(
    texts: Sequence[str],
    names: Sequence[str],
    argv: Optional[Sequence[str]],
    environ: Optional[Mapping[str, str]],
) -> Node:
    if not texts:
        raise NoSourcesError("Nenhuma fonte de configuração informada")

    decoder = Decoder()
    trees: List[Node] = []
    for text, name in zip(texts, names):
        rendered = render_template(text, argv=argv, environ=environ, source=name)
        trees.append(decoder.decode(rendered, source=name))
        logger.debug("Fonte decodificada: %s", name)

    return merge_all(trees)


def load_tree_from_streams(
    *streams: IO[Any],
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Node:
    """
    Carrega e compõe streams em uma única árvore de documento.

    Útil quando o chamador quer a árvore (com âncoras) em vez de um valor
    tipado, por exemplo para redigir e re-serializar um arquivo.
    """
    if not streams:
        raise NoSourcesError("Nenhuma fonte de configuração informada")
    names = [_stream_name(stream, i) for i, stream in enumerate(streams)]
    texts = [_read_stream(stream, name) for stream, name in zip(streams, names)]
    return _decode_sources(texts, names, argv, environ)


def load_tree_from_files(
    *paths: Union[str, Path],
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Node:
    """Mesmo que `load_tree_from_streams`, a partir de caminhos de arquivo."""
    if not paths:
        raise NoSourcesError("Nenhum arquivo de configuração informado")
    texts = [_read_file(path) for path in paths]
    return _decode_sources(texts, [str(path) for path in paths], argv, environ)


# ---------------------------------------------------------------------------
# Decodificação tipada
# ---------------------------------------------------------------------------

def _run_validator(value: Any, validator: Optional[Validator]) -> None:
    if validator is not None:
        hook = validator
    else:
        method = getattr(value, "validate_config", None)
        if not callable(method):
            return

        def hook(_: Any) -> None:
            method()

    try:
        hook(value)
    except ValidationFailedError:
        raise
    except ValueError as e:
        logger.warning("Configuração rejeitada pela validação: %s", e)
        raise ValidationFailedError(f"Configuração inválida: {e}") from e


def decode_tree(tree: Node, target: Any, validator: Optional[Validator] = None) -> Config:
    """
    Decodifica uma árvore no tipo `target` e executa o hook de validação.

    O hook é `validator`, se informado; caso contrário, o método
    `validate_config()` do valor decodificado, se existir. O hook rejeita
    o valor levantando `ValueError` (ou `ValidationFailedError`).

    Raises:
        DecodeError: Se a árvore não puder ser convertida em `target`.
        ValidationFailedError: Se o hook rejeitar o valor.
    """
    data = to_python(tree)
    adapter: TypeAdapter = TypeAdapter(target)
    try:
        value = adapter.validate_python(data)
    except ValidationError as e:
        raise DecodeError(f"Configuração não corresponde ao tipo {getattr(target, '__name__', target)}: {e}") from e

    _run_validator(value, validator)
    return Config(value, target)


def load_from_streams(
    target: Any,
    *streams: IO[Any],
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    validator: Optional[Validator] = None,
) -> Config:
    """
    Carrega a configuração a partir de um ou mais streams.

    O primeiro stream é a base; os seguintes são aplicados como overlays,
    na ordem, via merge estrito (listas concatenadas, mappings mesclados
    por chave, escalares sobrescritos).

    Args:
        target: Tipo de destino (modelo pydantic, dataclass, dict, ...).
        *streams: Objetos com `read()` retornando texto ou bytes UTF-8.
        argv: Argumentos visíveis às funções `arg`/`has_arg` do template.
        environ: Ambiente visível à função `env`; None usa `os.environ`.
        validator: Hook de validação opcional.

    Returns:
        Config: Configuração decodificada.

    Raises:
        NoSourcesError: Se nenhum stream for informado.
        SourceReadError: Se algum stream falhar na leitura.
        TemplateRenderError: Se algum template falhar.
        EmptySourceError: Se alguma fonte não tiver documento.
        DecodeError: Se o YAML for inválido ou não corresponder ao tipo.
        MergeError: Se os documentos forem estruturalmente incompatíveis.
        ValidationFailedError: Se a validação rejeitar o valor.
    """
    tree = load_tree_from_streams(*streams, argv=argv, environ=environ)
    config = decode_tree(tree, target, validator)
    logger.info("Configuração carregada de %d stream(s)", len(streams))
    return config


def load_from_files(
    target: Any,
    *paths: Union[str, Path],
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    validator: Optional[Validator] = None,
) -> Config:
    """
    Carrega a configuração a partir de um ou mais arquivos.

    Mesmo contrato de `load_from_streams`; adicionalmente levanta
    `SourceNotFoundError` se algum arquivo não existir.
    """
    tree = load_tree_from_files(*paths, argv=argv, environ=environ)
    config = decode_tree(tree, target, validator)
    logger.info(
        "Configuração carregada de %d arquivo(s)",
        len(paths),
        extra={"sources": [str(path) for path in paths]},
    )
    return config
