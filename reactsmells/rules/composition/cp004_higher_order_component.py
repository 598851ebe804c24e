import re

from reactsmells.extract.component_extractor import (
    CLASS_TYPES,
    FUNCTION_TYPES,
    JSX_TYPES,
    extends_react_component,
    first_parameter,
)
from reactsmells.rules.base import Rule

HOC_NAME = re.compile(r"^with[A-Z]\w*$")


class CP004(Rule):
    rule_id = "CP004"
    name = "higher-order-component"
    title = "Higher-order component"
    category = "composition"
    severity = "info"
    description = (
        "A withX(Component) factory wraps components to inject behaviour. Wrappers stack up, "
        "hide where props come from and clash on prop names."
    )
    recommendation = "Replace the higher-order component with a custom hook that the wrapped components call directly."
    node_types = ("function_declaration", "variable_declarator")

    def visit(self, node, ctx):
        if node.type == "function_declaration":
            name_node = node.child_by_field_name("name")
            func = node
        else:
            name_node = node.child_by_field_name("name")
            func = node.child_by_field_name("value")
            if func is None or func.type not in FUNCTION_TYPES:
                return []
        if name_node is None:
            return []
        name = ctx.text(name_node)
        if not HOC_NAME.match(name):
            return []

        param = first_parameter(func)
        if param is None or param.type != "identifier":
            return []
        wrapped = ctx.text(param)
        if not self._wraps(func, wrapped, ctx):
            return []

        return [self.finding(
            ctx,
            node,
            f"'{name}' is a higher-order component wrapping '{wrapped}'.",
            evidence={"hoc": name, "parameter": wrapped},
        )]

    def _wraps(self, func, wrapped, ctx):
        body = func.child_by_field_name("body")
        if body is None:
            return False
        stack = [body]
        while stack:
            n = stack.pop()
            if n.type in CLASS_TYPES and extends_react_component(n, ctx.source):
                return True
            if n.type in JSX_TYPES or n.type == "jsx_opening_element":
                tag = n.child_by_field_name("name")
                if tag is not None and ctx.text(tag) == wrapped:
                    return True
            stack.extend(n.children)
        return False
