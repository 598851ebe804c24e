from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

from reactsmells.core.findings import AnalysisResult, JsxBlock


def group_blocks_by_digest(results: Sequence[AnalysisResult]) -> Dict[str, List[JsxBlock]]:
    groups: Dict[str, List[JsxBlock]] = defaultdict(list)
    for result in results:
        for block in result.jsx_blocks:
            groups[block.digest].append(block)
    return groups
