from collections import Counter

from reactsmells.extract.component_extractor import JSX_TYPES
from reactsmells.rules.base import Rule


class CP003(Rule):
    rule_id = "CP003"
    name = "oversized-component"
    title = "Component is too large"
    category = "composition"
    severity = "info"
    description = (
        "A very long component, or one rendering a very large element tree, usually owns "
        "several responsibilities at once and is hard to read and test."
    )
    recommendation = "Split Component: move self-contained sections of the markup and their logic into child components."
    node_types = tuple(sorted(JSX_TYPES))

    def visit(self, node, ctx):
        comp = ctx.component_at(node)
        if comp is not None:
            ctx.rule_state(self.rule_id, Counter)[comp.start_byte] += 1
        return []

    def finish(self, ctx):
        limits = ctx.config.thresholds
        elements = ctx.rule_state(self.rule_id, Counter)
        findings = []
        for comp in ctx.components:
            reasons = []
            if comp.line_count > limits.max_component_lines:
                reasons.append(f"{comp.line_count} lines (limit {limits.max_component_lines})")
            count = elements.get(comp.start_byte, 0)
            if count > limits.max_jsx_elements:
                reasons.append(f"{count} JSX elements (limit {limits.max_jsx_elements})")
            if not reasons:
                continue
            findings.append(self.finding(
                ctx,
                comp.node,
                f"'{comp.name}' is oversized: {' and '.join(reasons)}.",
                evidence={"component": comp.name, "lines": comp.line_count, "jsxElements": count},
            ))
        return findings
