import re

from reactsmells.extract.component_extractor import callee_name
from reactsmells.rules.base import Rule

STATE_HOOKS = {"useState", "useReducer"}

# initialValue / defaultOpen are seeds on purpose: the parent opts into an uncontrolled component
SEED_PROP = re.compile(r"^(initial|default)[A-Z_]")


class ST001(Rule):
    rule_id = "ST001"
    name = "props-in-initial-state"
    title = "Props copied into initial state"
    category = "state"
    severity = "warning"
    description = (
        "State initialized from a prop is only read on the first render; later prop "
        "changes are silently ignored and the two copies drift apart."
    )
    recommendation = (
        "Replace State with Props: compute the value from props during render, or make "
        "the component fully controlled (or keyed) instead of mirroring the prop."
    )
    node_types = ("assignment_expression", "field_definition", "public_field_definition", "call_expression")

    def visit(self, node, ctx):
        comp = ctx.component_at(node)
        if comp is None:
            return []

        if node.type == "call_expression":
            if comp.kind != "function":
                return []
            callee = node.child_by_field_name("function")
            if callee is None or callee_name(callee, ctx.source) not in STATE_HOOKS:
                return []
            args = node.child_by_field_name("arguments")
            init = _initial_argument(args, callee_name(callee, ctx.source))
            if init is None:
                return []
            prop = self._function_prop_reference(init, comp, ctx)
            where = f"{callee_name(callee, ctx.source)}()"
        else:
            if comp.kind != "class":
                return []
            value = _class_state_value(node, ctx)
            if value is None:
                return []
            prop = self._class_prop_reference(value, ctx)
            where = "this.state"

        if prop is None or SEED_PROP.match(prop):
            return []

        return [self.finding(
            ctx,
            node,
            f"{where} in '{comp.name}' is initialized from prop '{prop}'; the state will not follow later prop changes.",
            evidence={"component": comp.name, "prop": prop},
        )]

    def _function_prop_reference(self, init, comp, ctx):
        locals_to_props = {b.local: b.prop for b in comp.prop_bindings}
        for n in _descendants(init):
            if n.type == "member_expression" and comp.props_name:
                obj = n.child_by_field_name("object")
                prop = n.child_by_field_name("property")
                if obj is not None and obj.type == "identifier" and ctx.text(obj) == comp.props_name and prop is not None:
                    return ctx.text(prop)
            elif n.type in ("identifier", "shorthand_property_identifier") and ctx.text(n) in locals_to_props:
                return locals_to_props[ctx.text(n)]
        return None

    def _class_prop_reference(self, value, ctx):
        for n in _descendants(value):
            if n.type != "member_expression":
                continue
            obj = n.child_by_field_name("object")
            prop = n.child_by_field_name("property")
            if obj is None or prop is None:
                continue
            # this.props.x  or  props.x (constructor argument)
            if ctx.text(obj) in ("this.props", "props"):
                return ctx.text(prop)
        return None


def _initial_argument(args, hook):
    if args is None:
        return None
    values = [c for c in args.named_children if c.type != "comment"]
    if hook == "useReducer":
        # useReducer(reducer, initialArg, init?)
        return values[1] if len(values) > 1 else None
    return values[0] if values else None


def _class_state_value(node, ctx):
    if node.type == "assignment_expression":
        left = node.child_by_field_name("left")
        if left is not None and ctx.text(left).replace(" ", "") == "this.state":
            return node.child_by_field_name("right")
        return None
    name = node.child_by_field_name("property") or node.child_by_field_name("name")
    if name is not None and ctx.text(name) == "state":
        return node.child_by_field_name("value")
    return None


def _descendants(node):
    stack = [node]
    while stack:
        n = stack.pop()
        yield n
        stack.extend(reversed(n.children))
