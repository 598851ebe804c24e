from reactsmells.rules.base import Rule

LEGACY_METHODS = {
    "componentWillMount": "componentDidMount",
    "componentWillReceiveProps": "componentDidUpdate or derive the value during render",
    "componentWillUpdate": "componentDidUpdate or getSnapshotBeforeUpdate",
}


class LC002(Rule):
    rule_id = "LC002"
    name = "legacy-lifecycle"
    title = "Legacy lifecycle method"
    category = "lifecycle"
    severity = "warning"
    description = (
        "componentWillMount, componentWillReceiveProps and componentWillUpdate (and their "
        "UNSAFE_ aliases) may run several times per update and are removed in strict mode."
    )
    recommendation = "Replace the legacy lifecycle, or convert the class to a function component with hooks."
    node_types = ("method_definition",)

    def visit(self, node, ctx):
        comp = ctx.component_at(node)
        if comp is None or comp.kind != "class":
            return []

        name_node = node.child_by_field_name("name")
        if name_node is None:
            return []
        method = ctx.text(name_node)
        base = method[len("UNSAFE_"):] if method.startswith("UNSAFE_") else method
        if base not in LEGACY_METHODS:
            return []

        return [self.finding(
            ctx,
            name_node,
            f"'{comp.name}' implements {method}; use {LEGACY_METHODS[base]} instead.",
            evidence={"component": comp.name, "method": method},
        )]
