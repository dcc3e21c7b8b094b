# tests/core/tree/test_nodes.py
"""
Testes do modelo de árvore de documento (Node).

Este módulo valida o vocabulário compartilhado por merge, redação e
codec: construtores, navegação e comparação estrutural.

Os testes asseguram que:
- construtores produzem nós com o `kind` e a tag esperados
- aliases resolvem para o alvo compartilhado, por identidade
- cadeias de alias cíclicas são detectadas
- `structurally_equal` ignora âncoras e atravessa aliases

Invariantes:
    - Igualdade de `Node` é por identidade, nunca por conteúdo
    - Mutar um alvo é visível através de todos os seus aliases

Limites explícitos:
    - Não valida parse nem serialização
    - Não valida merge nem redação
"""

import pytest

try:
    from strata_config.core.tree.nodes import (
        INT_TAG,
        MAP_TAG,
        STR_TAG,
        Node,
        NodeKind,
        structurally_equal,
    )
except Exception as e:  # noqa: BLE001
    Node = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha explicitamente quando o modelo de árvore não pode ser importado."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing tree model. Implement:\n"
            "- src/strata_config/core/tree/nodes.py (Node, NodeKind)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_constructors_set_kind_and_tags():
    """
    Verifica que os construtores de conveniência produzem nós coerentes.

    Invariantes:
        - MAPPING guarda pares como filhos alternados chave, valor
        - DOCUMENT vazio não tem raiz
    """
    _require_imports()
    key, value = Node.scalar("port"), Node.scalar("8080", INT_TAG)
    mapping = Node.mapping([(key, value)])

    assert mapping.kind is NodeKind.MAPPING
    assert mapping.tag == MAP_TAG
    assert mapping.children == [key, value]
    assert list(mapping.pairs()) == [(key, value)]
    assert key.tag == STR_TAG

    assert Node.document().root is None
    assert Node.document(mapping).root is mapping


def test_root_rejects_non_document():
    _require_imports()
    with pytest.raises(TypeError):
        Node.scalar("x").root


def test_get_returns_last_occurrence():
    """Chaves duplicadas em um mapping: a última ocorrência vence em `get`."""
    _require_imports()
    first, last = Node.scalar("1", INT_TAG), Node.scalar("2", INT_TAG)
    mapping = Node.mapping([(Node.scalar("n"), first), (Node.scalar("n"), last)])

    assert mapping.get("n") is last
    assert mapping.get("missing") is None


def test_alias_shares_target_by_identity():
    """
    Verifica a semântica de estado compartilhado dos aliases.

    Mutar o alvo por um caminho deve ser visível por todos os aliases;
    nenhum alias guarda cópia do valor.
    """
    _require_imports()
    target = Node.scalar("secret")
    first, second = Node.alias(target), Node.alias(target)

    target.value = "changed"

    assert first.resolve() is target
    assert second.resolve().value == "changed"


def test_resolve_detects_cycles():
    _require_imports()
    a = Node(NodeKind.ALIAS)
    b = Node.alias(a)
    a.target = b

    with pytest.raises(ValueError):
        a.resolve()


def test_identity_equality():
    """Dois nós com o mesmo conteúdo continuam distintos."""
    _require_imports()
    assert Node.scalar("x") != Node.scalar("x")


def test_structurally_equal_ignores_anchor_and_follows_alias():
    _require_imports()
    target = Node.scalar("v")
    target.anchor = "ref"
    left = Node.mapping([(Node.scalar("k"), Node.alias(target))])
    right = Node.mapping([(Node.scalar("k"), Node.scalar("v"))])

    assert structurally_equal(left, right)
    assert not structurally_equal(left, Node.mapping([(Node.scalar("k"), Node.scalar("v", INT_TAG))]))
    assert not structurally_equal(left, None)
    assert structurally_equal(None, None)
