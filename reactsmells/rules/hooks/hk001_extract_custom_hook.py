from collections import Counter

from reactsmells.extract.component_extractor import callee_name
from reactsmells.rules.base import Rule

STATEFUL_HOOKS = {
    "useState",
    "useReducer",
    "useEffect",
    "useLayoutEffect",
    "useMemo",
    "useCallback",
    "useRef",
}


class HK001(Rule):
    rule_id = "HK001"
    name = "extract-custom-hook"
    title = "Stateful logic crowding a component"
    category = "hooks"
    severity = "info"
    description = (
        "The component wires up many state, effect and memo hooks itself. The stateful "
        "logic is mixed with rendering and cannot be reused by other components."
    )
    recommendation = "Extract Custom Hook: move related state and effects into a useSomething() hook."
    node_types = ("call_expression",)

    def visit(self, node, ctx):
        callee = node.child_by_field_name("function")
        if callee is None or callee_name(callee, ctx.source) not in STATEFUL_HOOKS:
            return []
        comp = ctx.component_at(node)
        if comp is not None and comp.kind == "function":
            counts = ctx.rule_state(self.rule_id, dict)
            counts.setdefault(comp.start_byte, Counter())[callee_name(callee, ctx.source)] += 1
        return []

    def finish(self, ctx):
        limit = ctx.config.thresholds.max_hooks
        counts = ctx.rule_state(self.rule_id, dict)
        findings = []
        for comp in ctx.components:
            per_hook = counts.get(comp.start_byte)
            if not per_hook:
                continue
            total = sum(per_hook.values())
            if total < limit:
                continue
            breakdown = ", ".join(f"{name} x{n}" for name, n in sorted(per_hook.items()))
            findings.append(self.finding(
                ctx,
                comp.node,
                f"'{comp.name}' calls {total} stateful hooks ({breakdown}); extract related logic into a custom hook.",
                evidence={"component": comp.name, "hooks": dict(per_hook), "limit": limit},
            ))
        return findings
