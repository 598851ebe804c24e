"""
Structural fingerprints of JSX subtrees.

Two subtrees share a digest when they render the same tags with the same
attribute names, the same string attribute values and the same static text.
Embedded expressions are reduced to a placeholder, so markup that differs
only in the data it renders still counts as duplicated.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from tree_sitter import Node

from reactsmells.analyze.context import FileContext
from reactsmells.core.findings import JsxBlock, Location
from reactsmells.extract.component_extractor import JSX_TYPES

_WS = re.compile(r"\s+")


@dataclass
class _Shape:
    text: str
    elements: int


def fingerprint_file(ctx: FileContext, min_elements: int) -> List[Tuple[Node, JsxBlock]]:
    """Every JSX subtree inside a component with at least `min_elements` elements."""
    memo: Dict[Tuple[int, int], _Shape] = {}
    blocks: List[Tuple[Node, JsxBlock]] = []

    stack = [ctx.root]
    while stack:
        node = stack.pop()
        if node.type in JSX_TYPES:
            comp = ctx.component_at(node)
            if comp is not None:
                shape = _shape(node, ctx.source, memo)
                if shape.elements >= min_elements:
                    digest = hashlib.sha1(shape.text.encode("utf-8")).hexdigest()[:16]
                    blocks.append(
                        (node, JsxBlock(digest=digest, element_count=shape.elements,
                                        component=comp.name, location=ctx.location(node)))
                    )
        stack.extend(reversed(node.children))
    return blocks


def maximal_duplicates(
    groups: Dict[str, List[JsxBlock]],
    distinct_key,
) -> Dict[str, List[JsxBlock]]:
    """
    Keep digests whose blocks span at least two distinct owners (as given by
    `distinct_key`). Each returned list starts with the reference occurrence,
    the first one in source order, followed by the occurrences to report.
    An occurrence sitting inside another duplicated block is never reported,
    since the outer duplicate already covers it.
    """
    duplicated = {
        digest: sorted(blocks, key=lambda b: (b.location.path, b.location.line, b.location.column))
        for digest, blocks in groups.items()
        if len({distinct_key(b) for b in blocks}) >= 2
    }

    every = [b for blocks in duplicated.values() for b in blocks]
    out: Dict[str, List[JsxBlock]] = {}
    for digest, blocks in duplicated.items():
        reference = blocks[0]
        outermost = [
            b for b in blocks[1:]
            if not any(_strictly_inside(b.location, o.location) for o in every)
        ]
        if outermost:
            out[digest] = [reference] + outermost
    return out


def _strictly_inside(inner: Location, outer: Location) -> bool:
    if inner.path != outer.path or inner == outer:
        return False
    starts_after = (outer.line, outer.column) <= (inner.line, inner.column)
    ends_before = (inner.end_line, inner.end_column) <= (outer.end_line, outer.end_column)
    return starts_after and ends_before


def _shape(node: Node, source: bytes, memo: Dict[Tuple[int, int], _Shape]) -> _Shape:
    key = (node.start_byte, node.end_byte)
    cached = memo.get(key)
    if cached is not None:
        return cached

    if node.type == "jsx_element":
        open_tag = node.child_by_field_name("open_tag")
        parts = [_tag(open_tag, source) if open_tag is not None else "<>"]
        elements = 1
        for child in node.named_children:
            if child.type in ("jsx_opening_element", "jsx_closing_element"):
                continue
            sub = _child_shape(child, source, memo)
            if sub.text:
                parts.append(sub.text)
            elements += sub.elements
        shape = _Shape(text="(" + " ".join(parts) + ")", elements=elements)
    elif node.type == "jsx_self_closing_element":
        shape = _Shape(text="(" + _tag(node, source) + ")", elements=1)
    else:
        shape = _child_shape(node, source, memo)

    memo[key] = shape
    return shape


def _child_shape(node: Node, source: bytes, memo) -> _Shape:
    if node.type in JSX_TYPES:
        return _shape(node, source, memo)
    if node.type == "jsx_text":
        text = _WS.sub(" ", _text(node, source)).strip()
        return _Shape(text=repr(text) if text else "", elements=0)
    if node.type == "jsx_expression":
        inner = [c for c in node.named_children if c.type != "comment"]
        if not inner:
            return _Shape(text="", elements=0)
        nested = [_shape(c, source, memo) for c in _jsx_descendants(inner)]
        return _Shape(
            text="{" + " ".join(s.text for s in nested) + "}",
            elements=sum(s.elements for s in nested),
        )
    return _Shape(text="", elements=0)


def _jsx_descendants(nodes: Sequence[Node]) -> List[Node]:
    """Outermost JSX elements below `nodes` (for `{cond && <X/>}` or `{items.map(...)}`)."""
    found: List[Node] = []
    stack = list(reversed(nodes))
    while stack:
        n = stack.pop()
        if n.type in JSX_TYPES:
            found.append(n)
            continue
        stack.extend(reversed(n.children))
    return found


def _tag(element: Node, source: bytes) -> str:
    name = element.child_by_field_name("name")
    parts = [_text(name, source) if name is not None else ""]
    for attr in element.named_children:
        if attr.type != "jsx_attribute":
            continue
        named = attr.named_children
        if not named:
            continue
        attr_name = _text(named[0], source)
        if len(named) > 1 and named[1].type == "string":
            parts.append(f"{attr_name}={_text(named[1], source)}")
        elif len(named) > 1:
            parts.append(f"{attr_name}={{}}")
        else:
            parts.append(attr_name)
    return "<" + " ".join(p for p in parts if p) + ">"


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
