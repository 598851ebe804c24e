from collections import defaultdict

from reactsmells.analyze.jsx_fingerprint import fingerprint_file, maximal_duplicates
from reactsmells.rules.base import Rule


class CP001(Rule):
    rule_id = "CP001"
    name = "duplicated-jsx"
    title = "JSX duplicated across components"
    category = "composition"
    severity = "info"
    description = (
        "The same block of markup is rendered by several components in this file, so every "
        "visual change has to be made in more than one place."
    )
    recommendation = "Extract Component: render the shared markup from one component and pass the differences as props."

    def finish(self, ctx):
        blocks = ctx.rule_state("jsx_blocks", lambda: fingerprint_file(ctx, ctx.config.thresholds.min_duplicate_jsx_elements))

        groups = defaultdict(list)
        for _, block in blocks:
            groups[block.digest].append(block)

        findings = []
        for digest, dupes in maximal_duplicates(groups, distinct_key=lambda b: b.component).items():
            first = dupes[0]
            for block in dupes[1:]:
                if block.component == first.component:
                    continue
                findings.append(self.finding_at(
                    block.location,
                    f"{block.element_count} JSX elements in '{block.component}' duplicate the markup of "
                    f"'{first.component}' at line {first.location.line}.",
                    evidence={
                        "component": block.component,
                        "duplicateOf": first.component,
                        "duplicateLine": first.location.line,
                        "elements": block.element_count,
                        "digest": digest,
                    },
                ))
        return findings
