# tests/core/tree/test_codec.py
"""
Testes do codec YAML da árvore de documento.

Este módulo valida a conversão entre texto YAML, árvores `Node` e
dados Python puros.

Os testes asseguram que:
- escalares guardam o texto original e a tag resolvida
- aliases YAML viram nós ALIAS com alvo compartilhado
- âncoras de uma fonte são visíveis nas fontes seguintes
- fontes vazias, inválidas ou com vários documentos são rejeitadas
- a serialização preserva âncoras, aliases e estilos de bloco

Decisões arquiteturais:
    - Texto YAML fornecido como string, sem I/O
    - Comparações feitas sobre dados Python quando a forma exata
      do texto emitido não é relevante

Limites explícitos:
    - Não valida merge nem redação
    - Não valida expansão de templates
"""

import pytest
import yaml

try:
    from strata_config.core.config.errors import DecodeError, EmptySourceError
    from strata_config.core.tree.codec import (
        Decoder,
        decode_document,
        decode_stream,
        encode,
        from_python,
        to_python,
    )
    from strata_config.core.tree.nodes import BOOL_TAG, INT_TAG, STR_TAG, Node, NodeKind
except Exception as e:  # noqa: BLE001
    Decoder = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha explicitamente quando o codec não pode ser importado."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing tree codec. Implement:\n"
            "- src/strata_config/core/tree/codec.py (Decoder, encode, to_python)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_decode_keeps_text_and_tags():
    """
    Verifica que o decode não converte escalares em tipos nativos.

    Invariantes:
        - O texto do escalar é exatamente o do documento
        - A tag reflete o tipo resolvido pelo YAML (forma curta)
    """
    _require_imports()
    tree = decode_document("port: 8080\ndebug: true\nname: app\n")

    assert tree.kind is NodeKind.DOCUMENT
    root = tree.root
    assert root.kind is NodeKind.MAPPING
    assert root.get("port").value == "8080"
    assert root.get("port").tag == INT_TAG
    assert root.get("debug").tag == BOOL_TAG
    assert root.get("name").tag == STR_TAG


def test_alias_becomes_alias_node():
    """A primeira ocorrência é o alvo; as seguintes viram ALIAS para ele."""
    _require_imports()
    root = decode_document("a: &ref value\nb: *ref\n").root

    owner = root.get("a")
    alias = root.get("b")
    assert owner.kind is NodeKind.SCALAR
    assert owner.anchor == "ref"
    assert alias.kind is NodeKind.ALIAS
    assert alias.target is owner


def test_decoder_shares_anchors_between_sources():
    """
    Verifica que um overlay pode referenciar uma âncora definida na base.

    Decisões arquiteturais:
        - Um único `Decoder` por carregamento acumula as âncoras
        - O alias no overlay aponta para o nó da árvore base
    """
    _require_imports()
    decoder = Decoder()
    base = decoder.decode("defaults: &d\n  retries: 3\n", source="base.yaml")
    overlay = decoder.decode("service: *d\n", source="local.yaml")

    alias = overlay.root.get("service")
    assert alias.kind is NodeKind.ALIAS
    assert alias.target is base.root.get("defaults")


def test_decoder_allows_redefining_inherited_anchor():
    _require_imports()
    decoder = Decoder()
    decoder.decode("a: &x 1\n")
    overlay = decoder.decode("b: &x 2\nc: *x\n")

    assert overlay.root.get("c").target is overlay.root.get("b")


def test_unknown_alias_is_decode_error():
    _require_imports()
    with pytest.raises(DecodeError):
        decode_document("a: *missing\n")


@pytest.mark.parametrize("text", ["", "# apenas comentário\n", "\n\n"])
def test_empty_source_raises(text):
    _require_imports()
    with pytest.raises(EmptySourceError):
        decode_document(text, source="vazio.yaml")


@pytest.mark.parametrize("text", ["a: [1, 2\n", "a: 1\n---\nb: 2\n"])
def test_invalid_or_multi_document_source_raises(text):
    _require_imports()
    with pytest.raises(DecodeError):
        decode_document(text)


def test_decode_stream_returns_each_document():
    _require_imports()
    documents = decode_stream("a: 1\n---\nb: 2\n")

    assert [to_python(doc) for doc in documents] == [{"a": 1}, {"b": 2}]


def test_encode_preserves_anchor_names():
    _require_imports()
    text = encode(decode_document("a: &ref value\nb: *ref\n"))

    assert "&ref" in text
    assert "*ref" in text
    assert yaml.safe_load(text) == {"a": "value", "b": "value"}


def test_encode_preserves_literal_block_style():
    _require_imports()
    text = encode(decode_document("cert: |\n  line1\n  line2\n"))

    assert "cert: |" in text


def test_encode_multiple_documents_writes_to_stream():
    """Várias árvores viram vários documentos; com stream nada é retornado."""
    _require_imports()
    import io

    stream = io.StringIO()
    result = encode([decode_document("a: 1\n"), decode_document("b: 2\n")], stream)

    assert result is None
    assert list(yaml.safe_load_all(stream.getvalue())) == [{"a": 1}, {"b": 2}]


def test_to_python_and_from_python():
    _require_imports()
    data = {"a": 1, "b": ["x", True], "c": None}

    tree = from_python(data)

    assert tree.root.get("a").tag == INT_TAG
    assert to_python(tree) == data
    assert to_python(Node.document()) is None


def test_from_python_keeps_key_order():
    _require_imports()
    tree = from_python({"z": 1, "a": 2})

    assert [k.value for k, _ in tree.root.pairs()] == ["z", "a"]


def test_dumper_anchor_names_are_per_instance():
    """Nomes de âncora de uma serialização não vazam para a seguinte."""
    _require_imports()
    import io

    from strata_config.core.tree.codec import _AnchorPreservingDumper

    first = _AnchorPreservingDumper(io.StringIO(), {1: "ref"})
    second = _AnchorPreservingDumper(io.StringIO())

    assert first.anchor_names == {1: "ref"}
    assert second.anchor_names == {}
    assert "anchor_names" not in vars(_AnchorPreservingDumper)

    assert "&ref" in encode(decode_document("a: &ref v\nb: *ref\n"))
    assert "&other" in encode(decode_document("a: &other v\nb: *other\n"))
