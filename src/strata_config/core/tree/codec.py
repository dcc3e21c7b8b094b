# src/strata_config/core/tree/codec.py
"""
Codec YAML da árvore de documento.

Este módulo converte texto YAML em árvores `Node` e vice-versa, usando
o composer e o serializer do PyYAML. Também converte árvores em dados
Python puros (dict/list/escalares) e o caminho inverso.

Política de aliases:
    - O PyYAML representa aliases como identidade de nó compartilhada
    - A primeira ocorrência (ordem do documento) vira o nó proprietário
    - Toda ocorrência seguinte vira um nó ALIAS apontando para ele
    - Na serialização, nomes de âncora originais são reaproveitados
      quando não há colisão

Âncoras entre fontes:
    - `Decoder` mantém as âncoras das fontes já decodificadas, de modo que
      um overlay pode referenciar (`*ref`) uma âncora definida na base
    - Um overlay pode redefinir um nome de âncora herdado

Limites explícitos:
    - Não faz merge nem redação
    - Não expande templates
    - Apenas um documento por fonte em `Decoder.decode`
"""

from __future__ import annotations

import io
from typing import Any, Dict, IO, Iterable, List, Optional, Tuple, Union

import yaml  # PyYAML

from strata_config.core.config.errors import DecodeError, EmptySourceError
from strata_config.core.tree.nodes import (
    MAP_TAG,
    NULL_TAG,
    SEQ_TAG,
    STR_TAG,
    Node,
    NodeKind,
)

_YAML_TAG_PREFIX = "tag:yaml.org,2002:"


def short_tag(tag: Optional[str]) -> str:
    """`tag:yaml.org,2002:int` → `!!int`; tags customizadas ficam intactas."""
    if not tag:
        return ""
    if tag.startswith(_YAML_TAG_PREFIX):
        return "!!" + tag[len(_YAML_TAG_PREFIX):]
    return tag


def long_tag(tag: str) -> str:
    if tag.startswith("!!"):
        return _YAML_TAG_PREFIX + tag[2:]
    return tag


# ---------------------------------------------------------------------------
# Texto → árvore
# ---------------------------------------------------------------------------

class _AnchorTrackingLoader(yaml.SafeLoader):
    """
    Loader que registra nomes de âncora e aceita âncoras herdadas.

    O composer padrão descarta os nomes de âncora e rejeita aliases
    para âncoras de outros documentos; este loader guarda os nomes
    por identidade de nó e semeia o documento com as âncoras herdadas.
    """

    def __init__(self, stream: Union[str, IO[str]], inherited: Optional[Dict[str, yaml.Node]] = None) -> None:
        super().__init__(stream)
        self.inherited: Dict[str, yaml.Node] = dict(inherited or {})
        self.defined: Dict[str, yaml.Node] = {}
        self.anchor_names: Dict[int, str] = {}

    def compose_document(self):
        self.anchors = dict(self.inherited)
        self.defined = {}
        return super().compose_document()

    def compose_node(self, parent, index):
        if self.check_event(yaml.AliasEvent):
            return super().compose_node(parent, index)

        anchor = self.peek_event().anchor
        if anchor is not None and anchor not in self.defined:
            # redefinição de uma âncora herdada
            self.anchors.pop(anchor, None)

        node = super().compose_node(parent, index)

        if anchor is not None:
            self.defined[anchor] = node
            self.anchor_names[id(node)] = anchor
        return node


class _TreeBuilder:
    """Converte nós do PyYAML em `Node`, transformando identidade em ALIAS."""

    def __init__(self, anchor_names: Dict[int, str], known: Dict[int, Tuple[yaml.Node, Node]]) -> None:
        self._anchor_names = anchor_names
        self._known = known

    def build(self, ynode: yaml.Node) -> Node:
        entry = self._known.get(id(ynode))
        if entry is not None:
            return Node.alias(entry[1])

        if isinstance(ynode, yaml.ScalarNode):
            node = Node.scalar(ynode.value, short_tag(ynode.tag), style=ynode.style)
        elif isinstance(ynode, yaml.SequenceNode):
            node = Node(NodeKind.SEQUENCE, tag=short_tag(ynode.tag))
        elif isinstance(ynode, yaml.MappingNode):
            node = Node(NodeKind.MAPPING, tag=short_tag(ynode.tag))
        else:
            raise DecodeError(f"Nó YAML não suportado: {type(ynode).__name__}")

        node.anchor = self._anchor_names.get(id(ynode))
        # registrado antes dos filhos: estruturas recursivas viram ALIAS
        self._known[id(ynode)] = (ynode, node)

        if isinstance(ynode, yaml.SequenceNode):
            node.children = [self.build(item) for item in ynode.value]
        elif isinstance(ynode, yaml.MappingNode):
            for key, value in ynode.value:
                node.children.append(self.build(key))
                node.children.append(self.build(value))

        return node


class Decoder:
    """
    Decodificador de fontes YAML com âncoras compartilhadas entre fontes.

    Uma instância deve ser usada por carregamento: cada chamada a `decode`
    torna as âncoras da fonte visíveis para as fontes seguintes.
    """

    def __init__(self) -> None:
        self._anchors: Dict[str, yaml.Node] = {}
        self._known: Dict[int, Tuple[yaml.Node, Node]] = {}

    def decode(self, text: str, *, source: str = "<string>") -> Node:
        """
        Decodifica exatamente um documento YAML em uma árvore DOCUMENT.

        Raises:
            EmptySourceError: Se o texto não contém nenhum documento.
            DecodeError: Se o YAML for inválido ou contiver mais de um documento.
        """
        loader = _AnchorTrackingLoader(text, self._anchors)
        try:
            ynode = loader.get_single_node()
        except yaml.YAMLError as e:
            raise DecodeError(f"YAML inválido em {source}: {e}") from e
        finally:
            loader.dispose()

        if ynode is None:
            raise EmptySourceError(f"Fonte sem documento: {source}")

        self._anchors.update(loader.defined)
        builder = _TreeBuilder(loader.anchor_names, self._known)
        return Node.document(builder.build(ynode))


def decode_document(text: str, *, source: str = "<string>") -> Node:
    """Decodifica um único documento YAML, sem âncoras herdadas."""
    return Decoder().decode(text, source=source)


def decode_stream(text: str, *, source: str = "<string>") -> List[Node]:
    """Decodifica todos os documentos de um stream YAML multi-documento."""
    loader = _AnchorTrackingLoader(text)
    documents: List[Node] = []
    try:
        while loader.check_node():
            ynode = loader.get_node()
            documents.append(Node.document(_TreeBuilder(loader.anchor_names, {}).build(ynode)))
    except yaml.YAMLError as e:
        raise DecodeError(f"YAML inválido em {source}: {e}") from e
    finally:
        loader.dispose()
    return documents


# ---------------------------------------------------------------------------
# Árvore → texto
# ---------------------------------------------------------------------------

class _YamlBuilder:
    """Converte `Node` em nós do PyYAML; aliases viram identidade compartilhada."""

    def __init__(self) -> None:
        self.memo: Dict[int, yaml.Node] = {}
        self.anchor_names: Dict[int, str] = {}

    def build(self, node: Node) -> yaml.Node:
        if node.kind is NodeKind.ALIAS:
            if node.target is None:
                raise ValueError("alias sem alvo resolvido")
            return self.build(node.target)

        cached = self.memo.get(id(node))
        if cached is not None:
            return cached

        if node.kind is NodeKind.DOCUMENT:
            root = node.root
            if root is None:
                return yaml.ScalarNode(long_tag(NULL_TAG), "")
            return self.build(root)

        if node.kind is NodeKind.SCALAR:
            ynode: yaml.Node = yaml.ScalarNode(long_tag(node.tag or STR_TAG), node.value, style=node.style)
            self._register(node, ynode)
        elif node.kind is NodeKind.SEQUENCE:
            ynode = yaml.SequenceNode(long_tag(node.tag or SEQ_TAG), [])
            self._register(node, ynode)
            ynode.value.extend(self.build(child) for child in node.children)
        elif node.kind is NodeKind.MAPPING:
            ynode = yaml.MappingNode(long_tag(node.tag or MAP_TAG), [])
            self._register(node, ynode)
            ynode.value.extend((self.build(k), self.build(v)) for k, v in node.pairs())
        else:
            raise ValueError(f"tipo de nó desconhecido: {node.kind!r}")

        return ynode

    def _register(self, node: Node, ynode: yaml.Node) -> None:
        self.memo[id(node)] = ynode
        if node.anchor:
            self.anchor_names[id(ynode)] = node.anchor


class _AnchorPreservingDumper(yaml.SafeDumper):
    """Dumper que reaproveita os nomes de âncora originais quando únicos."""

    anchor_names: Dict[int, str]

    def __init__(self, stream: IO[str], anchor_names: Optional[Dict[int, str]] = None, **kwargs: Any) -> None:
        super().__init__(stream, **kwargs)
        self.anchor_names = dict(anchor_names or {})

    def generate_anchor(self, node):
        used = {name for name in self.anchors.values() if name}
        name = self.anchor_names.get(id(node))
        if name and name not in used:
            return name
        name = super().generate_anchor(node)
        while name in used:
            name = super().generate_anchor(node)
        return name


def encode(trees: Union[Node, Iterable[Node]], stream: Optional[IO[str]] = None) -> Optional[str]:
    """
    Serializa uma ou mais árvores como YAML em estilo bloco.

    Cada árvore vira um documento; a partir do segundo, o separador `---`
    é emitido. Sem `stream`, o texto é retornado.
    """
    if isinstance(trees, Node):
        trees = [trees]

    builder = _YamlBuilder()
    ynodes = [builder.build(tree) for tree in trees]

    getvalue = None
    if stream is None:
        stream = io.StringIO()
        getvalue = stream.getvalue

    dumper = _AnchorPreservingDumper(
        stream,
        builder.anchor_names,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
    try:
        dumper.open()
        for ynode in ynodes:
            dumper.serialize(ynode)
        dumper.close()
    finally:
        dumper.dispose()

    if getvalue is not None:
        return getvalue()
    return None


# ---------------------------------------------------------------------------
# Árvore ⇄ dados Python
# ---------------------------------------------------------------------------

def to_python(tree: Node) -> Any:
    """
    Constrói dados Python puros a partir de uma árvore.

    Usa o construtor seguro do PyYAML, portanto tags customizadas sem
    construtor registrado são rejeitadas.

    Raises:
        DecodeError: Se algum nó não puder ser construído.
    """
    ynode = _YamlBuilder().build(tree)
    loader = yaml.SafeLoader("")
    try:
        return loader.construct_document(ynode)
    except yaml.YAMLError as e:
        raise DecodeError(f"Árvore não pode ser convertida em dados: {e}") from e
    finally:
        loader.dispose()


def from_python(data: Any) -> Node:
    """Representa dados Python puros como uma árvore DOCUMENT."""
    dumper = yaml.SafeDumper(io.StringIO(), sort_keys=False)
    try:
        ynode = dumper.represent_data(data)
    except yaml.YAMLError as e:
        raise DecodeError(f"Valor não representável em YAML: {e}") from e
    finally:
        dumper.dispose()
    return Node.document(_TreeBuilder({}, {}).build(ynode))
