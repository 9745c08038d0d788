"""Hiccup-style tree to HTML serialization.

A tree is plain Python data:

* ``None`` and ``False`` render to nothing;
* ``str`` renders HTML-escaped (``&``, ``<`` and ``>``);
* numbers render through ``str`` without escaping;
* ``RawHTML`` (see :func:`raw`) renders verbatim;
* an :class:`Element`, or a ``list`` whose first item is a ``str`` tag
  selector, renders as markup: ``["a.link#home", {"href": "/"}, "Home"]``;
* any other re-iterable collection (tuple, list not headed by a string) is a
  sequence of siblings and is flattened into its parent. One-shot iterators
  such as generators are not sequences; :func:`h` copies them into tuples.

Anything else is coerced with ``str`` and escaped. Note that a list of plain
strings reads as an element, so build text sequences as tuples.

Caller obligations: trees must be acyclic (a cycle ends in ``RecursionError``),
attribute values must stringify meaningfully, and ``raw`` must only ever wrap
trusted markup since it bypasses escaping entirely.
"""

from __future__ import annotations

import html
import numbers
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from .tags import parse_tag

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Attribute key whose value replaces the element content, unescaped.
INNER_HTML = "innerHTML"

DOCTYPE = "<!DOCTYPE html>"


@dataclass(frozen=True)
class RawHTML:
    """Markup that is inserted into the output without escaping."""

    html: str

    def __str__(self) -> str:
        return self.html


def raw(markup: Any) -> RawHTML:
    """Mark ``markup`` as trusted HTML.

    Never wrap user supplied text: the content is written out as-is, so
    anything inside it can inject markup or script.
    """

    return RawHTML("" if markup is None else str(markup))


@dataclass(frozen=True)
class Element:
    tag: str
    attrs: Optional[Mapping[str, Any]] = None
    children: Tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


Node = Any


def h(tag: str, *content: Node) -> Element:
    """Build an :class:`Element`; a leading mapping is taken as attributes."""

    attrs, children = split_content(content)
    return Element(tag, attrs, tuple(_freeze(child) for child in children))


def _freeze(child: Node) -> Node:
    if isinstance(child, Iterator):
        return tuple(child)
    return child


def split_content(content: Sequence[Node]) -> Tuple[Optional[Mapping[str, Any]], Sequence[Node]]:
    if content and isinstance(content[0], Mapping):
        return content[0], content[1:]
    return None, content


def escape_text(text: str) -> str:
    return html.escape(text, quote=False)


def escape_attr(value: str) -> str:
    return html.escape(value, quote=True)


def _class_value(value: Any) -> str:
    if value is None or value is False:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value if item)
    return str(value)


def _render_attr(name: str, value: Any) -> Optional[str]:
    if value is True:
        return name
    if value is None or value is False:
        return None
    if isinstance(value, RawHTML):
        return f'{name}="{value.html}"'
    return f'{name}="{escape_attr(str(value))}"'


def render_attrs(
    attrs: Optional[Mapping[str, Any]],
    tag_id: Optional[str] = None,
    classes: Sequence[str] = (),
) -> str:
    """Render attributes merged with the id and classes from a tag selector.

    Selector classes come before the ``class`` attribute and a selector id
    wins over the ``id`` attribute. Remaining attributes keep their mapping
    order; ``class`` and ``id`` follow them.
    """

    remaining = {str(key): value for key, value in (attrs or {}).items()}
    attr_class = remaining.pop("class", None)
    attr_id = remaining.pop("id", None)
    remaining.pop(INNER_HTML, None)

    merged_class = f"{' '.join(classes)} {_class_value(attr_class)}".strip()
    if merged_class:
        remaining["class"] = merged_class
    merged_id = tag_id if tag_id is not None else attr_id
    if merged_id is not None and merged_id is not False:
        remaining["id"] = merged_id

    parts = [_render_attr(name, value) for name, value in remaining.items()]
    rendered = [part for part in parts if part is not None]
    if not rendered:
        return ""
    return " " + " ".join(rendered)


def render_element(tag: Any, attrs: Optional[Mapping[str, Any]], children: Iterable[Node]) -> str:
    descriptor = parse_tag(str(tag))
    name = descriptor.name
    start = f"<{name}{render_attrs(attrs, descriptor.id, descriptor.classes)}>"
    if name.lower() in VOID_ELEMENTS:
        return start

    inner = attrs.get(INNER_HTML) if attrs else None
    if inner is not None and inner is not False:
        # Trusted content: written as-is, children are ignored.
        body = str(inner)
    else:
        body = "".join(render(child) for child in children)
    return f"{start}{body}</{name}>"


def render(node: Node) -> str:
    """Serialize a hiccup tree to an HTML string.

    Pure and total: the same tree always yields the same string and unknown
    values fall back to escaped ``str`` coercion instead of raising.
    One-shot iterators are not sequences and take the fallback; pass them
    through :func:`h` or materialize them first.
    """

    if node is None or node is False:
        return ""
    if isinstance(node, RawHTML):
        return node.html
    if isinstance(node, str):
        return escape_text(node)
    if isinstance(node, numbers.Number) and not isinstance(node, bool):
        return str(node)
    if isinstance(node, Element):
        return render_element(node.tag, node.attrs, node.children)
    if isinstance(node, list) and node and isinstance(node[0], str):
        attrs, children = split_content(node[1:])
        return render_element(node[0], attrs, children)
    if isinstance(node, Iterable) and not isinstance(node, (bytes, bytearray, Mapping, Iterator)):
        return "".join(render(child) for child in node)
    return escape_text(str(node))


def document(node: Node, doctype: str = DOCTYPE) -> str:
    """Render ``node`` as a full document prefixed with ``doctype``."""

    return doctype + render(node)


__all__ = [
    "DOCTYPE",
    "INNER_HTML",
    "VOID_ELEMENTS",
    "Element",
    "Node",
    "RawHTML",
    "document",
    "escape_attr",
    "escape_text",
    "h",
    "raw",
    "render",
    "render_attrs",
    "render_element",
    "split_content",
]
