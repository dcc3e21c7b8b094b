# src/strata_config/core/merge/engine.py
"""
Engine canônico de merge de árvores de documento.

Este módulo implementa a política oficial de composição de documentos
do Strata Config: um overlay `b` é aplicado sobre uma base `a`,
produzindo uma nova árvore ou falhando por inteiro.

Política de merge (v1):
    - DOCUMENT × DOCUMENT → merge das raízes, reembrulhado em novo DOCUMENT
    - MAPPING  × MAPPING  → merge profundo por chave; ordem de `a`, depois
      chaves exclusivas de `b` na ordem de `b`
    - SEQUENCE × SEQUENCE → concatenação (`a` seguido de `b`), sem dedup
    - SCALAR   × SCALAR   → overlay vence, desde que as tags coincidam
    - ALIAS    × ALIAS    → merge dos alvos; alvos idênticos são no-op
    - tipos diferentes    → erro estrutural explícito

Princípios fundamentais:
    - Tudo ou nada: nenhum resultado parcial é retornado
    - Nenhuma coerção de forma ou de tipo escalar
    - Valores presentes em um único lado são compartilhados, não copiados

Invariantes:
    - O mesmo par de entradas sempre produz a mesma saída
    - Entradas são consideradas consumidas após o merge (subárvores e
      nós ALIAS são reaproveitados no resultado)
    - Após um merge bem-sucedido, aliases no resultado apontam para o
      valor que de fato terminou no resultado

Limites explícitos:
    - Não carrega arquivos nem decodifica texto
    - Não interpreta o significado das chaves
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from strata_config.core.config.errors import (
    EmptyDocumentError,
    KindMismatchError,
    MergeError,
    MissingOperandError,
    NestedKindMismatchError,
    ScalarTagMismatchError,
)
from strata_config.core.tree.nodes import Node, NodeKind

logger = logging.getLogger(__name__)

_Path = Tuple[str, ...]


def _key_identity(key: Node) -> Tuple[str, str, object]:
    resolved = key.resolve()
    if resolved.kind is NodeKind.SCALAR:
        return ("scalar", resolved.tag, resolved.value)
    return (resolved.kind.value, "", id(resolved))


def _key_label(key: Node) -> str:
    resolved = key.resolve()
    if resolved.kind is NodeKind.SCALAR:
        return resolved.value
    return f"<{resolved.kind.value}>"


def _index_mapping(node: Node) -> Dict[Tuple[str, str, object], Tuple[Node, Node]]:
    """Indexa um MAPPING por chave: posição da primeira ocorrência, valor da última."""
    index: Dict[Tuple[str, str, object], Tuple[Node, Node]] = {}
    for key, value in node.pairs():
        identity = _key_identity(key)
        if identity in index:
            index[identity] = (index[identity][0], value)
        else:
            index[identity] = (key, value)
    return index


class _Merger:
    """
    Estado de uma única chamada de merge.

    Guarda quais nós de entrada foram substituídos por nós mesclados
    (para reapontar aliases ao final) e memoriza pares já mesclados,
    de modo que um mesmo par alcançado por dois caminhos produza um
    único nó resultante.
    """

    def __init__(self) -> None:
        self._replaced: Dict[int, Tuple[Node, Node]] = {}
        self._memo: Dict[Tuple[int, int], Node] = {}
        self._dispatch: Dict[NodeKind, Callable[[Node, Node, _Path], Node]] = {
            NodeKind.DOCUMENT: self._merge_documents,
            NodeKind.MAPPING: self._merge_mappings,
            NodeKind.SEQUENCE: self._merge_sequences,
            NodeKind.SCALAR: self._merge_scalars,
            NodeKind.ALIAS: self._merge_aliases,
        }

    def merge(self, a: Optional[Node], b: Optional[Node], path: _Path = ()) -> Node:
        if a is None or b is None:
            raise MissingOperandError("Merge requer duas árvores, recebido None", path)

        if a.kind is not b.kind:
            message = f"Conflito de forma: {a.kind.value} vs {b.kind.value}"
            if path:
                raise NestedKindMismatchError(message, path)
            raise KindMismatchError(message)

        pair = (id(a), id(b))
        if pair in self._memo:
            return self._memo[pair]

        handler = self._dispatch.get(a.kind)
        if handler is None:
            raise MergeError(f"Tipo de nó sem regra de merge: {a.kind!r}", path)

        result = handler(a, b, path)

        self._memo[pair] = result
        for source in (a, b):
            if source is not result:
                self._replaced[id(source)] = (source, result)
        return result

    # -----------------------------
    # Regras por tipo
    # -----------------------------
    def _merge_documents(self, a: Node, b: Node, path: _Path) -> Node:
        if not a.children or not b.children:
            raise EmptyDocumentError("Documento sem conteúdo raiz", path)
        return Node.document(self.merge(a.children[0], b.children[0], path))

    def _merge_mappings(self, a: Node, b: Node, path: _Path) -> Node:
        left = _index_mapping(a)
        right = _index_mapping(b)

        children: List[Node] = []
        for identity, (key, value) in left.items():
            if identity in right:
                value = self.merge(value, right[identity][1], path + (_key_label(key),))
            children.append(key)
            children.append(value)

        for identity, (key, value) in right.items():
            if identity not in left:
                children.append(key)
                children.append(value)

        return Node(NodeKind.MAPPING, tag=a.tag or b.tag, children=children)

    def _merge_sequences(self, a: Node, b: Node, path: _Path) -> Node:
        return Node(NodeKind.SEQUENCE, tag=a.tag or b.tag, children=a.children + b.children)

    def _merge_scalars(self, a: Node, b: Node, path: _Path) -> Node:
        if a.tag != b.tag:
            raise ScalarTagMismatchError(
                f"Conflito de tipo escalar: {a.tag or '<sem tag>'} vs {b.tag or '<sem tag>'}",
                path,
            )
        return b

    def _merge_aliases(self, a: Node, b: Node, path: _Path) -> Node:
        if a.target is None or b.target is None:
            raise MissingOperandError("Alias sem alvo resolvido", path)
        if a.target is b.target:
            return a
        return Node.alias(self.merge(a.target, b.target, path))

    # -----------------------------
    # Pós-processamento
    # -----------------------------
    def retarget_aliases(self, root: Node) -> None:
        """Reaponta aliases do resultado para os nós que substituíram seus alvos."""
        stack = [root]
        visited = set()
        while stack:
            node = stack.pop()
            if id(node) in visited:
                continue
            visited.add(id(node))

            if node.kind is not NodeKind.ALIAS:
                stack.extend(node.children)
                continue

            target = node.target
            hops = set()
            while target is not None and id(target) in self._replaced and id(target) not in hops:
                hops.add(id(target))
                target = self._replaced[id(target)][1]
            node.target = target


def merge_nodes(a: Optional[Node], b: Optional[Node]) -> Node:
    """
    Aplica o overlay `b` sobre a base `a` e retorna a árvore resultante.

    Decisões arquiteturais:
        - Despacho pelo tipo de `a`, após verificar que `a` e `b` coincidem
        - Qualquer erro na recursão aborta o merge inteiro
        - Aliases são reapontados somente após o sucesso completo

    Args:
        a (Node): Árvore base.
        b (Node): Árvore de overlay.

    Returns:
        Node: Nova árvore resultante (pode compartilhar subárvores das entradas).

    Raises:
        MissingOperandError: Se algum dos lados for None.
        KindMismatchError: Se as formas no nível raiz forem diferentes.
        NestedKindMismatchError: Se as formas divergirem sob uma chave comum.
        ScalarTagMismatchError: Se dois escalares tiverem tags diferentes.
        EmptyDocumentError: Se um DOCUMENT não tiver raiz.
    """
    merger = _Merger()
    result = merger.merge(a, b)
    merger.retarget_aliases(result)
    return result


def merge_all(trees: Iterable[Optional[Node]]) -> Node:
    """
    Compõe uma lista de árvores via fold estrito da esquerda para a direita.

    `merge_all([t0, t1, t2])` equivale a `merge_nodes(merge_nodes(t0, t1), t2)`:
    a primeira árvore define a forma base e as seguintes vencem os conflitos
    na ordem em que aparecem.

    Raises:
        MissingOperandError: Se a lista for vazia ou contiver None.
        MergeError: Qualquer falha de `merge_nodes` durante o fold.
    """
    trees = list(trees)
    if not trees:
        raise MissingOperandError("Nenhuma árvore informada para merge")

    result = trees[0]
    if result is None:
        raise MissingOperandError("Árvore base ausente")

    for position, overlay in enumerate(trees[1:], start=1):
        logger.debug("Aplicando overlay %d de %d", position, len(trees) - 1)
        result = merge_nodes(result, overlay)

    return result
