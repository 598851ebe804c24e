from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional, Set

from reactsmells.core.findings import Finding

# `codes` is None when the directive silences every rule.
_DIRECTIVE = re.compile(
    r"reactsmells-disable(?P<kind>-file|-next-line|-line)\b(?P<codes>[ \t]+[A-Za-z0-9_\-, \t]+)?"
)

ALL = None


@dataclass
class Suppressions:
    file_codes: Optional[Set[str]] = field(default_factory=set)
    line_codes: Dict[int, Optional[Set[str]]] = field(default_factory=dict)
    file_wide: bool = False

    def is_suppressed(self, finding: Finding) -> bool:
        if self.file_wide and _covers(self.file_codes, finding.rule_id):
            return True
        line = finding.location.line
        if line in self.line_codes:
            return _covers(self.line_codes[line], finding.rule_id)
        return False

    def __bool__(self) -> bool:
        return self.file_wide or bool(self.line_codes)


def parse_suppressions(
    text: str,
    resolve: Callable[[str], Iterable[str]],
) -> Suppressions:
    """
    Scan source text for disable directives.

    `resolve` maps a selector written in a comment (rule id, rule name,
    category) to rule ids. Unknown selectors resolve to nothing and are ignored.
    """
    result = Suppressions()

    for lineno, line in enumerate(text.splitlines(), start=1):
        if "reactsmells-disable" not in line:
            continue
        for m in _DIRECTIVE.finditer(line):
            codes = _resolve_codes(m.group("codes"), resolve)
            kind = m.group("kind")
            if kind == "-file":
                result.file_codes = _merge(result.file_codes, codes) if result.file_wide else codes
                result.file_wide = True
            elif kind == "-line":
                _add_line(result, lineno, codes)
            else:
                _add_line(result, lineno + 1, codes)

    return result


def _resolve_codes(raw: Optional[str], resolve: Callable[[str], Iterable[str]]) -> Optional[Set[str]]:
    if raw is None:
        return ALL
    # "-- reason" ends the code list
    raw = raw.split("--", 1)[0]
    tokens = [t for t in re.split(r"[\s,]+", raw.strip()) if t]
    if not tokens:
        return ALL
    ids: Set[str] = set()
    for token in tokens:
        matched = set(resolve(token))
        if not matched:
            # first word that names no rule starts free text
            break
        ids.update(matched)
    return ids


def _add_line(result: Suppressions, line: int, codes: Optional[Set[str]]) -> None:
    if line in result.line_codes:
        result.line_codes[line] = _merge(result.line_codes[line], codes)
    else:
        result.line_codes[line] = codes


def _merge(a: Optional[Set[str]], b: Optional[Set[str]]) -> Optional[Set[str]]:
    if a is ALL or b is ALL:
        return ALL
    return a | b


def _covers(codes: Optional[Set[str]], rule_id: str) -> bool:
    return codes is ALL or rule_id in codes
