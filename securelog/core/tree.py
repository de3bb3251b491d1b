"""
SecureLog Content Tree

Two parallel structures are inspected together:

- the logical tree: plain ``str`` text nodes and ``Element`` nodes
  (a type, a props mapping and children), and
- the mirrored output tree: ``OutputText`` / ``OutputElement`` nodes a
  host renders from the logical tree. Only text nodes of the output tree
  are ever rewritten, when masking is on.

Children line up by position: the i-th logical child of an element maps
to the i-th output child of its mirrored element.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

UNKNOWN_COMPONENT = "Unknown"


@dataclass
class Element:
    type: Any
    props: dict[str, Any] = field(default_factory=dict)
    children: Any = None

    @property
    def name(self) -> str:
        return resolve_type_name(self.type)


@dataclass
class OutputText:
    text: str


@dataclass
class OutputElement:
    tag: str
    children: list[OutputNode] = field(default_factory=list)

    def child(self, index: int) -> Optional[OutputNode]:
        if 0 <= index < len(self.children):
            return self.children[index]
        return None

    def text_content(self) -> str:
        """Concatenated text of every descendant text node."""
        return "".join(
            node.text if isinstance(node, OutputText) else node.text_content()
            for node in self.children
        )

    def to_data(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "children": [
                node.text if isinstance(node, OutputText) else node.to_data()
                for node in self.children
            ],
        }


OutputNode = Union[OutputText, OutputElement]


def resolve_type_name(node_type: Any) -> str:
    """Name reported for an element type: the tag itself, or the construct's name."""
    if isinstance(node_type, str):
        return node_type
    return (
        getattr(node_type, "display_name", None)
        or getattr(node_type, "__name__", None)
        or UNKNOWN_COMPONENT
    )


def iter_children(children: Any) -> Iterator[Any]:
    """
    Flatten a children value into the ordered child list.

    Nested lists/tuples are flattened; ``None`` and booleans render
    nothing and are dropped.
    """
    if children is None or isinstance(children, bool):
        return
    if isinstance(children, (list, tuple)):
        for child in children:
            yield from iter_children(child)
        return
    yield children


def render(children: Any, tag: str = "secure-log-container") -> OutputElement:
    """Build the mirrored output tree for ``children`` inside a container element."""
    container = OutputElement(tag=tag)
    for child in iter_children(children):
        container.children.append(_render_node(child))
    return container


def _render_node(node: Any) -> OutputNode:
    if isinstance(node, Element):
        return render(node.children, tag=node.name)
    return OutputText(str(node))


def tree_from_data(data: Any) -> Any:
    """
    Build a logical tree from plain data (a parsed YAML/JSON document).

    Strings become text nodes, mappings with a ``type`` key become
    elements and lists become child sequences.
    """
    if isinstance(data, list):
        return [tree_from_data(item) for item in data]
    if isinstance(data, dict):
        return element_from_dict(data)
    return data


def element_from_dict(data: dict[str, Any]) -> Element:
    if "type" not in data:
        raise ValueError(f"Element is missing a 'type': {data!r}")
    return Element(
        type=data["type"],
        props=dict(data.get("props") or {}),
        children=tree_from_data(data.get("children")),
    )
