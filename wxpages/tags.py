"""Tag selector parsing for hiccup-style element vectors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_TAG = "div"

_NAME_END = re.compile(r"[.#]")
_FRAGMENT = re.compile(r"([.#])([^.#\s]+)")


@dataclass(frozen=True)
class TagDescriptor:
    """Element name plus the id and classes encoded in a selector."""

    name: str
    id: Optional[str] = None
    classes: Tuple[str, ...] = ()


def parse_tag(selector: str) -> TagDescriptor:
    """Split a selector like ``div.card.wide#main`` into its parts.

    The element name is everything before the first ``.`` or ``#`` and falls
    back to ``div`` when empty. Classes keep their order (duplicates included);
    when several ``#id`` fragments are given the last one wins.
    """

    name = _NAME_END.split(selector, maxsplit=1)[0]
    tag_id: Optional[str] = None
    classes: list[str] = []
    for marker, token in _FRAGMENT.findall(selector[len(name):]):
        if marker == "#":
            tag_id = token
        else:
            classes.append(token)
    return TagDescriptor(name=name or DEFAULT_TAG, id=tag_id, classes=tuple(classes))


__all__ = ["DEFAULT_TAG", "TagDescriptor", "parse_tag"]
