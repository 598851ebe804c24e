from reactsmells.extract.component_extractor import callee_name
from reactsmells.rules.base import Rule


class LC001(Rule):
    rule_id = "LC001"
    name = "force-update"
    title = "forceUpdate used to trigger rendering"
    category = "lifecycle"
    severity = "warning"
    description = (
        "forceUpdate bypasses React's data flow: the component renders from values React "
        "does not track, so it can show stale data after the next ordinary render."
    )
    recommendation = "Move the changing value into state or props so that React re-renders when it changes."
    node_types = ("call_expression",)

    def visit(self, node, ctx):
        callee = node.child_by_field_name("function")
        if callee is None or callee_name(callee, ctx.source) != "forceUpdate":
            return []

        comp = ctx.component_at(node)
        if comp is None:
            return []

        return [self.finding(
            ctx,
            node,
            f"'{comp.name}' forces a re-render with {ctx.text(callee)}().",
            evidence={"component": comp.name},
        )]
