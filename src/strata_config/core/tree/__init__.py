# src/strata_config/core/tree/__init__.py
"""
Modelo de árvore de documento e codec YAML.

Componentes principais:
    - nodes → `Node`, `NodeKind` e tags de escalar
    - codec → texto YAML ⇄ árvore ⇄ dados Python
"""

from strata_config.core.tree.codec import (
    Decoder,
    decode_document,
    decode_stream,
    encode,
    from_python,
    to_python,
)
from strata_config.core.tree.nodes import (
    BOOL_TAG,
    FLOAT_TAG,
    INT_TAG,
    MAP_TAG,
    NULL_TAG,
    SEQ_TAG,
    STR_TAG,
    TIMESTAMP_TAG,
    Node,
    NodeKind,
    structurally_equal,
)

__all__ = [
    "BOOL_TAG",
    "FLOAT_TAG",
    "INT_TAG",
    "MAP_TAG",
    "NULL_TAG",
    "SEQ_TAG",
    "STR_TAG",
    "TIMESTAMP_TAG",
    "Decoder",
    "Node",
    "NodeKind",
    "decode_document",
    "decode_stream",
    "encode",
    "from_python",
    "structurally_equal",
    "to_python",
]
