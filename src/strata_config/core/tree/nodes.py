# src/strata_config/core/tree/nodes.py
"""
Modelo canônico de árvore de documento do Strata Config.

Este módulo define o `Node`, a representação genérica e independente de
sintaxe de um documento estruturado já decodificado. Merge, redação de
segredos e codec operam exclusivamente sobre este modelo.

Tipos de nó (conjunto fechado):
    - DOCUMENT → exatamente um filho raiz (ou nenhum, se vazio)
    - MAPPING  → filhos alternados chave, valor, chave, valor, ...
    - SEQUENCE → filhos ordenados
    - SCALAR   → texto literal + tag de tipo, sem filhos
    - ALIAS    → referência não proprietária a outro nó (`target`)

Decisões arquiteturais:
    - Uma única classe com `kind` em vez de subclasses: a redação pode
      colapsar uma coleção em escalar no próprio nó
    - Despacho por tipo é feito por tabelas indexadas por `NodeKind`;
      um tipo ausente na tabela é erro, nunca comportamento padrão
    - Alvos de alias são compartilhados por identidade: mutar o alvo
      é visível através de todos os aliases

Invariantes:
    - `children` de um MAPPING tem comprimento par
    - `target` só é significativo em nós ALIAS
    - Escalares guardam o texto original, sem coerção para tipos nativos

Limites explícitos:
    - Não faz parse nem serialização (ver `codec`)
    - Não interpreta o significado dos campos de configuração
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class NodeKind(str, Enum):
    """Tipos de nó da árvore de documento."""

    DOCUMENT = "document"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    ALIAS = "alias"


# Tags na forma curta YAML; tags customizadas são mantidas como vieram.
STR_TAG = "!!str"
INT_TAG = "!!int"
BOOL_TAG = "!!bool"
FLOAT_TAG = "!!float"
NULL_TAG = "!!null"
TIMESTAMP_TAG = "!!timestamp"
MAP_TAG = "!!map"
SEQ_TAG = "!!seq"

COLLECTION_KINDS = frozenset({NodeKind.DOCUMENT, NodeKind.MAPPING, NodeKind.SEQUENCE})


@dataclass(eq=False)
class Node:
    """
    Nó da árvore de documento.

    Igualdade é por identidade (`eq=False`): dois nós distintos com o
    mesmo conteúdo continuam sendo alvos de alias diferentes. Para
    comparação estrutural use `structurally_equal`.

    Atributos:
        kind: tipo do nó
        tag: marcador de tipo (obrigatório em escalares)
        value: texto literal de um escalar
        children: filhos ordenados (ver docstring do módulo)
        target: nó referenciado por um ALIAS
        anchor: nome da âncora quando o nó é alvo de aliases
        style: estilo de escalar do codec (ex.: "|" para bloco literal)
    """

    kind: NodeKind
    tag: str = ""
    value: str = ""
    children: List["Node"] = field(default_factory=list)
    target: Optional["Node"] = field(default=None, repr=False)
    anchor: Optional[str] = None
    style: Optional[str] = None

    # -----------------------------
    # Construtores
    # -----------------------------
    @classmethod
    def scalar(cls, value: str, tag: str = STR_TAG, *, style: Optional[str] = None) -> "Node":
        return cls(NodeKind.SCALAR, tag=tag, value=value, style=style)

    @classmethod
    def mapping(cls, pairs: Optional[List[Tuple["Node", "Node"]]] = None, tag: str = MAP_TAG) -> "Node":
        children: List[Node] = []
        for key, value in pairs or []:
            children.append(key)
            children.append(value)
        return cls(NodeKind.MAPPING, tag=tag, children=children)

    @classmethod
    def sequence(cls, items: Optional[List["Node"]] = None, tag: str = SEQ_TAG) -> "Node":
        return cls(NodeKind.SEQUENCE, tag=tag, children=list(items or []))

    @classmethod
    def document(cls, root: Optional["Node"] = None) -> "Node":
        return cls(NodeKind.DOCUMENT, children=[root] if root is not None else [])

    @classmethod
    def alias(cls, target: "Node") -> "Node":
        return cls(NodeKind.ALIAS, target=target)

    # -----------------------------
    # Navegação
    # -----------------------------
    @property
    def root(self) -> Optional["Node"]:
        """Filho raiz de um DOCUMENT, ou None se vazio."""
        if self.kind is not NodeKind.DOCUMENT:
            raise TypeError(f"root só existe em DOCUMENT, recebido: {self.kind.value}")
        return self.children[0] if self.children else None

    def resolve(self) -> "Node":
        """Segue a cadeia de aliases até um nó que não é ALIAS."""
        node = self
        seen = set()
        while node.kind is NodeKind.ALIAS:
            if node.target is None:
                raise ValueError("alias sem alvo resolvido")
            if id(node) in seen:
                raise ValueError("cadeia de aliases cíclica")
            seen.add(id(node))
            node = node.target
        return node

    def pairs(self) -> Iterator[Tuple["Node", "Node"]]:
        """Itera pares (chave, valor) de um MAPPING."""
        if self.kind is not NodeKind.MAPPING:
            raise TypeError(f"pairs só existe em MAPPING, recebido: {self.kind.value}")
        # Um conteúdo de tamanho ímpar (inválido) descarta o último item.
        for i in range(0, len(self.children) - 1, 2):
            yield self.children[i], self.children[i + 1]

    def get(self, key: str) -> Optional["Node"]:
        """Valor de um MAPPING pela chave textual; a última ocorrência vence."""
        found = None
        for k, v in self.pairs():
            if k.resolve().value == key:
                found = v
        return found


def structurally_equal(a: Optional[Node], b: Optional[Node]) -> bool:
    """
    Compara duas árvores pela forma e conteúdo, atravessando aliases.

    Âncoras e estilos não participam da comparação. Estruturas recursivas
    são comparadas uma única vez por par de nós.
    """
    stack = [(a, b)]
    seen = set()
    while stack:
        x, y = stack.pop()
        if x is None or y is None:
            if x is not y:
                return False
            continue
        x, y = x.resolve(), y.resolve()
        if (id(x), id(y)) in seen:
            continue
        seen.add((id(x), id(y)))
        if x.kind is not y.kind:
            return False
        if x.kind is NodeKind.SCALAR:
            if x.tag != y.tag or x.value != y.value:
                return False
            continue
        if len(x.children) != len(y.children):
            return False
        stack.extend(zip(x.children, y.children))
    return True
