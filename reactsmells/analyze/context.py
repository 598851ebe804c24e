from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from tree_sitter import Node

from reactsmells.core.config import LintConfig
from reactsmells.core.findings import Location
from reactsmells.extract.component_extractor import Component
from reactsmells.extract.jsx_parser import ParsedSource, node_text


def node_key(node: Node) -> Tuple[int, int, str]:
    return (node.start_byte, node.end_byte, node.type)


@dataclass
class FileContext:
    """Everything a rule may look at while one file is being analysed."""

    path: str
    parsed: ParsedSource
    components: List[Component]
    config: LintConfig
    state: Dict[str, Any] = field(default_factory=dict)
    _by_node: Dict[Tuple[int, int, str], Component] = field(default_factory=dict, init=False)

    def __post_init__(self):
        self._by_node = {node_key(c.node): c for c in self.components}

    @property
    def source(self) -> bytes:
        return self.parsed.source

    @property
    def language(self) -> str:
        return self.parsed.language

    @property
    def root(self) -> Node:
        return self.parsed.root

    def text(self, node: Node) -> str:
        return node_text(node, self.parsed.source)

    def snippet(self, node: Node, max_chars: int = 200) -> str:
        first = self.text(node).strip().splitlines()
        line = first[0].strip() if first else ""
        return line if len(line) <= max_chars else line[:max_chars] + "..."

    def location(self, node: Node) -> Location:
        return Location(
            path=self.path,
            line=node.start_point[0] + 1,
            column=node.start_point[1] + 1,
            end_line=node.end_point[0] + 1,
            end_column=node.end_point[1] + 1,
        )

    def component_defined_by(self, node: Node) -> Optional[Component]:
        return self._by_node.get(node_key(node))

    def components_containing(self, node: Node) -> List[Component]:
        return [c for c in self.components if c.contains(node)]

    def component_at(self, node: Node) -> Optional[Component]:
        """Innermost component whose definition encloses `node`."""
        best: Optional[Component] = None
        for comp in self.components:
            if comp.contains(node) and (best is None or comp.start_byte >= best.start_byte):
                best = comp
        return best

    def rule_state(self, rule_id: str, factory: Callable[[], Any]) -> Any:
        """Per-file scratch space for a rule; discarded with the context."""
        if rule_id not in self.state:
            self.state[rule_id] = factory()
        return self.state[rule_id]
