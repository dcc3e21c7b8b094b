# src/strata_config/__init__.py
"""
Strata Config: configuração tipada a partir de documentos YAML em camadas.

Uma aplicação descreve sua configuração em um ou mais documentos
(base + overlays), opcionalmente expandidos por templates Jinja2.
O Strata Config compõe os documentos com regras determinísticas,
decodifica o resultado em um tipo do chamador e consegue re-emitir
a configuração com os campos secretos mascarados.

Exemplo:
    from pydantic import BaseModel
    from strata_config import load_from_files

    class Settings(BaseModel):
        id: int
        name: str

    config = load_from_files(Settings, "base.yaml", "local.yaml")
    print(config.get().name)
"""

from strata_config.core.config.errors import (
    ConfigError,
    DecodeError,
    EmptyDocumentError,
    EmptySourceError,
    KindMismatchError,
    MergeError,
    MissingOperandError,
    NestedKindMismatchError,
    NoSourcesError,
    ScalarTagMismatchError,
    SourceNotFoundError,
    SourceReadError,
    TemplateRenderError,
    ValidationFailedError,
)
from strata_config.core.config.loader import (
    Config,
    decode_tree,
    load_from_files,
    load_from_streams,
    load_tree_from_files,
    load_tree_from_streams,
)
from strata_config.core.merge import merge_all, merge_nodes
from strata_config.core.secrets import (
    SECRET_DEFAULT_PATTERN,
    SecretMatcher,
    hide_secrets,
    is_secret_key,
)
from strata_config.core.tree import Node, NodeKind, decode_document, encode

__all__ = [
    "Config",
    "ConfigError",
    "DecodeError",
    "EmptyDocumentError",
    "EmptySourceError",
    "KindMismatchError",
    "MergeError",
    "MissingOperandError",
    "NestedKindMismatchError",
    "NoSourcesError",
    "Node",
    "NodeKind",
    "SECRET_DEFAULT_PATTERN",
    "ScalarTagMismatchError",
    "SecretMatcher",
    "SourceNotFoundError",
    "SourceReadError",
    "TemplateRenderError",
    "ValidationFailedError",
    "decode_document",
    "decode_tree",
    "encode",
    "hide_secrets",
    "is_secret_key",
    "load_from_files",
    "load_from_streams",
    "load_tree_from_files",
    "load_tree_from_streams",
    "merge_all",
    "merge_nodes",
]
