from collections import defaultdict

from reactsmells.core.findings import Location
from reactsmells.extract.component_extractor import FUNCTION_TYPES
from reactsmells.rules.base import Rule

PATTERN_PARENTS = {
    "formal_parameters",
    "required_parameter",
    "optional_parameter",
    "array_pattern",
    "rest_pattern",
}
# parent type -> fields whose identifier is a binding, not a read
BINDING_FIELDS = {
    "variable_declarator": ("name",),
    "assignment_pattern": ("left",),
    "object_assignment_pattern": ("left",),
    "pair_pattern": ("value",),
    "arrow_function": ("parameter",),
    "function_declaration": ("name",),
    "function_expression": ("name",),
    "class_declaration": ("name",),
    "catch_clause": ("parameter",),
}


class PR001(Rule):
    rule_id = "PR001"
    name = "unused-props"
    title = "Destructured prop is never used"
    category = "props"
    severity = "warning"
    description = (
        "A prop destructured in the component signature is not referenced anywhere in the "
        "component body, which widens its interface for nothing."
    )
    recommendation = "Remove Unused Props from the component signature and from its call sites."
    node_types = ("identifier", "shorthand_property_identifier")

    def visit(self, node, ctx):
        if node.type == "identifier" and _is_binding(node):
            return []
        used = ctx.rule_state(self.rule_id, lambda: defaultdict(set))
        name = ctx.text(node)
        for comp in ctx.components_containing(node):
            if not comp.prop_bindings or _shadowed(node, name, comp, ctx):
                continue
            used[comp.start_byte].add(name)
        return []

    def finish(self, ctx):
        used = ctx.rule_state(self.rule_id, lambda: defaultdict(set))
        findings = []
        for comp in ctx.components:
            # ...rest forwards everything it did not name, so named-but-unused props are intentional there
            if comp.kind != "function" or not comp.prop_bindings or comp.has_rest_props:
                continue
            seen = used.get(comp.start_byte, set())
            for binding in comp.prop_bindings:
                if binding.local in seen:
                    continue
                width = binding.end_byte - binding.start_byte
                loc = Location(
                    path=ctx.path,
                    line=binding.line,
                    column=binding.column,
                    end_line=binding.line,
                    end_column=binding.column + width,
                )
                findings.append(self.finding_at(
                    loc,
                    f"Prop '{binding.prop}' of '{comp.name}' is destructured but never used.",
                    evidence={"component": comp.name, "prop": binding.prop},
                ))
        return findings


def _is_binding(node):
    parent = node.parent
    if parent is None:
        return False
    if parent.type in PATTERN_PARENTS:
        return True
    for field_name in BINDING_FIELDS.get(parent.type, ()):
        child = parent.child_by_field_name(field_name)
        if child is not None and child.start_byte == node.start_byte and child.end_byte == node.end_byte:
            return True
    return False


def _shadowed(node, name, comp, ctx):
    """True when a function nested in `comp` declares a parameter named `name` around `node`."""
    current = node.parent
    while current is not None and current.start_byte >= comp.start_byte:
        if current.type in FUNCTION_TYPES and not (
            current.start_byte == comp.start_byte and current.end_byte == comp.end_byte
        ):
            if name in _parameter_names(current, ctx):
                return True
        current = current.parent
    return False


def _parameter_names(func, ctx):
    names = set()
    single = func.child_by_field_name("parameter")
    roots = [single] if single is not None else []
    params = func.child_by_field_name("parameters")
    if params is not None:
        roots.append(params)
    stack = list(roots)
    while stack:
        n = stack.pop()
        if n.type in ("identifier", "shorthand_property_identifier_pattern"):
            names.add(ctx.text(n))
            continue
        if n.type in ("assignment_pattern", "object_assignment_pattern"):
            # default values are reads in the enclosing scope
            left = n.child_by_field_name("left")
            if left is not None:
                stack.append(left)
            continue
        if n.type == "pair_pattern":
            value = n.child_by_field_name("value")
            if value is not None:
                stack.append(value)
            continue
        stack.extend(n.named_children)
    return names
