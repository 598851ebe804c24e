from reactsmells.analyze.cross_file import group_blocks_by_digest
from reactsmells.analyze.jsx_fingerprint import maximal_duplicates
from reactsmells.rules.base import ProjectRule


class CP002(ProjectRule):
    rule_id = "CP002"
    name = "duplicated-jsx-across-files"
    title = "JSX duplicated across files"
    category = "composition"
    severity = "info"
    description = (
        "Components in different files render the same block of markup. The copies will "
        "drift apart as soon as one of them is edited."
    )
    recommendation = "Extract Component into a shared module and import it from every file that renders the markup."

    def finish_project(self, results, config):
        groups = group_blocks_by_digest(results)
        findings = []
        for digest, dupes in maximal_duplicates(groups, distinct_key=lambda b: b.location.path).items():
            first = dupes[0]
            for block in dupes[1:]:
                if block.location.path == first.location.path:
                    continue
                findings.append(self.finding_at(
                    block.location,
                    f"{block.element_count} JSX elements in '{block.component}' duplicate the markup of "
                    f"'{first.component}' in {first.location.path}:{first.location.line}.",
                    evidence={
                        "component": block.component,
                        "duplicateOf": first.component,
                        "duplicatePath": first.location.path,
                        "duplicateLine": first.location.line,
                        "elements": block.element_count,
                        "digest": digest,
                    },
                ))
        return findings
