from reactsmells.extract.component_extractor import callee_name
from reactsmells.rules.base import Rule

DOM_QUERIES = {
    "getElementById",
    "getElementsByClassName",
    "getElementsByTagName",
    "getElementsByName",
    "querySelector",
    "querySelectorAll",
}
MARKUP_PROPERTIES = {"innerHTML", "outerHTML"}


class DM001(Rule):
    rule_id = "DM001"
    name = "direct-dom-manipulation"
    title = "Direct DOM manipulation inside a component"
    category = "dom"
    severity = "warning"
    description = (
        "Querying or rewriting the DOM behind React's back breaks reconciliation: React "
        "may overwrite the change, or keep references to nodes it already removed."
    )
    recommendation = "Replace DOM access with a ref (useRef / createRef) and let React own the markup."
    node_types = ("call_expression", "assignment_expression", "augmented_assignment_expression")

    def visit(self, node, ctx):
        comp = ctx.component_at(node)
        if comp is None:
            return []

        if node.type == "call_expression":
            callee = node.child_by_field_name("function")
            if callee is None:
                return []
            what = self._dom_call(callee, ctx)
        else:
            what = self._markup_write(node, ctx)

        if what is None:
            return []

        return [self.finding(
            ctx,
            node,
            f"'{comp.name}' manipulates the DOM directly via {what}.",
            evidence={"component": comp.name, "api": what},
        )]

    def _dom_call(self, callee, ctx):
        name = callee_name(callee, ctx.source)
        if name == "findDOMNode":
            return "findDOMNode"
        if callee.type != "member_expression" or name not in DOM_QUERIES:
            return None
        obj = callee.child_by_field_name("object")
        if obj is not None and ctx.text(obj) == "document":
            return f"document.{name}"
        return None

    def _markup_write(self, node, ctx):
        left = node.child_by_field_name("left")
        if left is None or left.type != "member_expression":
            return None
        prop = left.child_by_field_name("property")
        if prop is not None and ctx.text(prop) in MARKUP_PROPERTIES:
            return ctx.text(prop)
        return None
