"""
Locate React components in a parsed tree.

Recognised shapes:
  function Card(props) { return <div/> }
  const Card = ({ title }) => <h1>{title}</h1>
  const Card = React.memo(function Card() { ... })  /  forwardRef((props, ref) => ...)
  class Card extends React.Component { ... }  /  PureComponent
  export default function () { return <div/> }
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from reactsmells.extract.jsx_parser import node_text

FUNCTION_TYPES = {"function_declaration", "function_expression", "function", "arrow_function"}
CLASS_TYPES = {"class_declaration", "class"}
JSX_TYPES = {"jsx_element", "jsx_self_closing_element"}
COMPONENT_WRAPPERS = {"memo", "forwardRef", "observer"}

_COMPONENT_NAME = re.compile(r"^[A-Z][A-Za-z0-9_$]*$")
_COMPONENT_BASE = re.compile(r"\b(Component|PureComponent)\b")


@dataclass(frozen=True)
class PropBinding:
    prop: str        # name of the prop as passed by the parent
    local: str       # identifier bound inside the component
    line: int
    column: int
    start_byte: int
    end_byte: int


@dataclass
class Component:
    name: str
    kind: str                         # "function" | "class"
    node: Node
    props_name: Optional[str] = None  # identifier bound to the whole props object
    prop_bindings: List[PropBinding] = field(default_factory=list)
    has_rest_props: bool = False
    params_range: Optional[Tuple[int, int]] = None

    @property
    def start_byte(self) -> int:
        return self.node.start_byte

    @property
    def end_byte(self) -> int:
        return self.node.end_byte

    @property
    def start_line(self) -> int:
        return self.node.start_point[0] + 1

    @property
    def end_line(self) -> int:
        return self.node.end_point[0] + 1

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def contains(self, node: Node) -> bool:
        return self.start_byte <= node.start_byte and node.end_byte <= self.end_byte


def extract_components(root: Node, source: bytes) -> List[Component]:
    components: List[Component] = []
    for node in _walk(root):
        comp = component_for_definition(node, source)
        if comp is not None:
            components.append(comp)
    components.sort(key=lambda c: (c.start_byte, -c.end_byte))
    return components


def component_for_definition(node: Node, source: bytes) -> Optional[Component]:
    """Return the component defined by `node`, if `node` is a component definition site."""
    if node.type == "function_declaration":
        name = _field_text(node, "name", source)
        if name and is_component_name(name) and contains_jsx(node):
            return _function_component(name, node, source)
        return None

    if node.type == "class_declaration":
        name = _field_text(node, "name", source)
        if name and extends_react_component(node, source):
            return Component(name=name, kind="class", node=node)
        return None

    if node.type == "variable_declarator":
        name_node = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name_node is None or value is None or name_node.type != "identifier":
            return None
        name = node_text(name_node, source)
        if not is_component_name(name):
            return None
        target = unwrap_component_value(value, source)
        if target is None:
            return None
        if target.type in CLASS_TYPES:
            if extends_react_component(target, source):
                return Component(name=name, kind="class", node=target)
            return None
        if contains_jsx(target):
            return _function_component(name, target, source)
        return None

    if node.type == "export_statement":
        value = node.child_by_field_name("value")
        if value is None:
            return None
        target = unwrap_component_value(value, source)
        if target is None:
            return None
        if target.type in CLASS_TYPES and extends_react_component(target, source):
            return Component(name="(default export)", kind="class", node=target)
        if target.type in FUNCTION_TYPES and contains_jsx(target):
            return _function_component("(default export)", target, source)
        return None

    return None


def is_component_name(name: str) -> bool:
    return bool(_COMPONENT_NAME.match(name))


def extends_react_component(node: Node, source: bytes) -> bool:
    for child in node.children:
        if child.type == "class_heritage":
            return bool(_COMPONENT_BASE.search(node_text(child, source)))
    return False


def unwrap_component_value(value: Node, source: bytes) -> Optional[Node]:
    """Strip parentheses and memo/forwardRef wrappers down to a function or class node."""
    node: Optional[Node] = value
    while node is not None:
        if node.type in FUNCTION_TYPES or node.type in CLASS_TYPES:
            return node
        if node.type == "parenthesized_expression":
            node = node.named_children[0] if node.named_children else None
            continue
        if node.type == "call_expression":
            callee = node.child_by_field_name("function")
            if callee is None or callee_name(callee, source) not in COMPONENT_WRAPPERS:
                return None
            args = node.child_by_field_name("arguments")
            node = _first_argument(args)
            continue
        return None
    return None


def callee_name(callee: Node, source: bytes) -> Optional[str]:
    """`useState` for both `useState(...)` and `React.useState(...)`."""
    if callee.type == "identifier":
        return node_text(callee, source)
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        return node_text(prop, source) if prop is not None else None
    return None


def contains_jsx(node: Node) -> bool:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in JSX_TYPES:
            return True
        stack.extend(current.children)
    return False


def first_parameter(func: Node) -> Optional[Node]:
    single = func.child_by_field_name("parameter")
    if single is not None:
        return single
    params = func.child_by_field_name("parameters")
    if params is None:
        return None
    for child in params.named_children:
        if child.type == "comment":
            continue
        if child.type in ("required_parameter", "optional_parameter"):
            return child.child_by_field_name("pattern")
        return child
    return None


def _function_component(name: str, func: Node, source: bytes) -> Component:
    comp = Component(name=name, kind="function", node=func)
    param = first_parameter(func)
    if param is None:
        return comp

    comp.params_range = (param.start_byte, param.end_byte)
    if param.type == "assignment_pattern":
        param = param.child_by_field_name("left") or param

    if param.type == "identifier":
        comp.props_name = node_text(param, source)
    elif param.type == "object_pattern":
        comp.prop_bindings, comp.has_rest_props = _object_pattern_bindings(param, source)
    return comp


def _object_pattern_bindings(pattern: Node, source: bytes) -> Tuple[List[PropBinding], bool]:
    bindings: List[PropBinding] = []
    has_rest = False

    for child in pattern.named_children:
        if child.type == "shorthand_property_identifier_pattern":
            name = node_text(child, source)
            bindings.append(_binding(name, child, source))
        elif child.type == "object_assignment_pattern":
            left = child.child_by_field_name("left")
            if left is not None and left.type in ("shorthand_property_identifier_pattern", "identifier"):
                bindings.append(_binding(node_text(left, source), left, source))
        elif child.type == "pair_pattern":
            key = child.child_by_field_name("key")
            value = child.child_by_field_name("value")
            if value is not None and value.type == "assignment_pattern":
                value = value.child_by_field_name("left")
            if key is not None and value is not None and value.type == "identifier":
                bindings.append(_binding(node_text(value, source), value, source, prop=node_text(key, source)))
        elif child.type == "rest_pattern":
            has_rest = True

    return bindings, has_rest


def _binding(local: str, node: Node, source: bytes, prop: Optional[str] = None) -> PropBinding:
    return PropBinding(
        prop=prop or local,
        local=local,
        line=node.start_point[0] + 1,
        column=node.start_point[1] + 1,
        start_byte=node.start_byte,
        end_byte=node.end_byte,
    )


def _first_argument(args: Optional[Node]) -> Optional[Node]:
    if args is None:
        return None
    for child in args.named_children:
        if child.type != "comment":
            return child
    return None


def _field_text(node: Node, field_name: str, source: bytes) -> Optional[str]:
    child = node.child_by_field_name(field_name)
    return node_text(child, source) if child is not None else None


def _walk(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))
