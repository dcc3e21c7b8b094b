# src/strata_config/core/secrets/redact.py
"""
Engine de redação de segredos sobre a árvore de documento.

Este módulo percorre uma árvore, classifica subárvores como secretas ou
não a partir das chaves de mapping e mascara os valores secretos
**no próprio nó** (operação destrutiva).

Política de redação (v1):
    - Travessia em largura guiada por uma fila de itens (nó, secreto)
    - Em um mapping não secreto, cada valor cuja chave casa com o
      predicado é enfileirado como secreto; as chaves nunca são mascaradas
    - Escalar secreto → tag `!!str` e texto trocado por `*` repetido,
      ou por `**<N>**` quando o tamanho atinge o limite (32 por padrão)
    - Alias secreto → o alvo compartilhado é enfileirado como secreto,
      portanto todos os aliases passam a exibir o valor mascarado
    - Coleção secreta → colapsada em um escalar `*` (hide_structure=True)
      ou mantida com todos os valores enfileirados como secretos

Invariantes:
    - Cada par (nó, secreto) é processado no máximo uma vez
    - Árvore ausente (None) é no-op
    - Nenhuma exceção é levantada para árvores bem formadas

Limites explícitos:
    - Não existe variante não destrutiva: quem precisa do original deve
      decodificar ou mesclar novamente antes de chamar
    - Não serializa a árvore
"""

from __future__ import annotations

import logging
import re
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Pattern, Set, Tuple, Union

from strata_config.core.secrets.detect import SecretPredicate, resolve_matcher
from strata_config.core.tree.nodes import STR_TAG, Node, NodeKind
from strata_config.settings import get_settings

logger = logging.getLogger(__name__)

MASK_CHAR = "*"
COLLAPSED_MASK = "*"
SECRET_LENGTH_CUTOFF = 32

_WorkItem = Tuple[Node, bool]


def mask_scalar_text(text: str, cutoff: int = SECRET_LENGTH_CUTOFF) -> str:
    """
    Máscara de um texto escalar.

    `"pa"` → `"**"`; a partir de `cutoff` caracteres o texto vira
    `"**<N>**"`, revelando apenas o tamanho aproximado.
    """
    if len(text) < cutoff:
        return MASK_CHAR * len(text)
    return f"{MASK_CHAR * 2}{len(text)}{MASK_CHAR * 2}"


def _key_text(key: Node) -> str:
    resolved = key.resolve()
    return resolved.value if resolved.kind is NodeKind.SCALAR else ""


class _Redactor:
    """Estado de uma chamada de redação: predicado, modo, limite e contadores."""

    def __init__(self, is_secret: SecretPredicate, hide_structure: bool, cutoff: int) -> None:
        self.is_secret = is_secret
        self.hide_structure = hide_structure
        self.cutoff = cutoff
        self.masked = 0
        self.collapsed = 0
        self._scan_dispatch: Dict[NodeKind, Callable[[Node], List[_WorkItem]]] = {
            NodeKind.DOCUMENT: self._scan_children,
            NodeKind.MAPPING: self._scan_mapping,
            NodeKind.SEQUENCE: self._scan_children,
            NodeKind.SCALAR: self._scan_scalar,
            NodeKind.ALIAS: self._scan_alias,
        }
        self._hide_dispatch: Dict[NodeKind, Callable[[Node], List[_WorkItem]]] = {
            NodeKind.DOCUMENT: self._hide_collection,
            NodeKind.MAPPING: self._hide_collection,
            NodeKind.SEQUENCE: self._hide_collection,
            NodeKind.SCALAR: self._hide_scalar,
            NodeKind.ALIAS: self._hide_alias,
        }

    def run(self, root: Node) -> None:
        queue: Deque[_WorkItem] = deque([(root, False)])
        processed: Set[Tuple[int, bool]] = set()

        while queue:
            node, secret = queue.popleft()
            mark = (id(node), secret)
            if mark in processed:
                continue
            processed.add(mark)

            dispatch = self._hide_dispatch if secret else self._scan_dispatch
            queue.extend(dispatch[node.kind](node))

    # -----------------------------
    # Itens não secretos
    # -----------------------------
    def _scan_mapping(self, node: Node) -> List[_WorkItem]:
        return [(value, bool(self.is_secret(_key_text(key)))) for key, value in node.pairs()]

    def _scan_children(self, node: Node) -> List[_WorkItem]:
        return [(child, False) for child in node.children]

    def _scan_scalar(self, node: Node) -> List[_WorkItem]:
        return []

    def _scan_alias(self, node: Node) -> List[_WorkItem]:
        return [(node.target, False)] if node.target is not None else []

    # -----------------------------
    # Itens secretos
    # -----------------------------
    def _hide_scalar(self, node: Node) -> List[_WorkItem]:
        node.tag = STR_TAG
        node.value = mask_scalar_text(node.value, self.cutoff)
        self.masked += 1
        return []

    def _hide_alias(self, node: Node) -> List[_WorkItem]:
        return [(node.target, True)] if node.target is not None else []

    def _hide_collection(self, node: Node) -> List[_WorkItem]:
        if self.hide_structure:
            node.kind = NodeKind.SCALAR
            node.tag = STR_TAG
            node.value = COLLAPSED_MASK
            node.children = []
            node.style = None
            self.collapsed += 1
            return []

        if node.kind is NodeKind.MAPPING:
            # nomes de chave permanecem visíveis
            return [(value, True) for _, value in node.pairs()]
        return [(child, True) for child in node.children]


def hide_secrets(
    root: Optional[Node],
    hide_structure: bool = True,
    matcher: Optional[Union[SecretPredicate, str, Pattern[str]]] = None,
    *,
    cutoff: Optional[int] = None,
) -> None:
    """
    Mascara, no próprio nó, todos os valores secretos de uma árvore.

    Decisões arquiteturais:
        - Operação destrutiva e sem retorno: o efeito é observável apenas
          pela árvore mutada
        - `matcher` None usa o predicado configurado (ou o padrão), nunca
          desliga a detecção
        - Alvos de alias são mascarados uma vez e refletidos em todos os aliases

    Args:
        root (Optional[Node]): Árvore a redigir; None é no-op.
        hide_structure (bool): Colapsa coleções secretas em `*` quando True;
            preserva a estrutura e mascara cada folha quando False.
        matcher: Predicado sobre o texto da chave, ou expressão regular.
        cutoff (Optional[int]): Tamanho a partir do qual o escalar vira
            `**<N>**`. None usa o valor de `Settings.mask_length_cutoff`.
    """
    if root is None:
        return

    settings = get_settings()
    if matcher is None and settings.secret_pattern:
        matcher = re.compile(settings.secret_pattern, re.IGNORECASE)
    if cutoff is None:
        cutoff = settings.mask_length_cutoff

    redactor = _Redactor(resolve_matcher(matcher), hide_structure, cutoff)
    redactor.run(root)

    logger.debug(
        "Redação concluída: %d escalares mascarados, %d coleções colapsadas",
        redactor.masked,
        redactor.collapsed,
    )


def hide_secrets_all(
    roots: Iterable[Optional[Node]],
    hide_structure: bool = True,
    matcher: Optional[Union[SecretPredicate, str, Pattern[str]]] = None,
    *,
    cutoff: Optional[int] = None,
) -> None:
    """Aplica `hide_secrets` a cada documento de um stream."""
    for root in roots:
        hide_secrets(root, hide_structure, matcher, cutoff=cutoff)
