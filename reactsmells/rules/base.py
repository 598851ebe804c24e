from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from tree_sitter import Node

from reactsmells.analyze.context import FileContext
from reactsmells.core.config import LintConfig
from reactsmells.core.findings import AnalysisResult, Category, Finding, Location, Severity


class Rule(ABC):
    """
    One catalogued smell.

    The engine calls `visit` for every node whose type is listed in
    `node_types`, then `finish` once per file. Rules keep nothing between
    files; per-file bookkeeping goes through `ctx.rule_state`.
    """

    rule_id: str
    name: str
    title: str
    category: Category
    severity: Severity = "warning"
    description: str = ""
    recommendation: str = ""
    node_types: Tuple[str, ...] = ()
    scope: str = "file"

    def visit(self, node: Node, ctx: FileContext) -> List[Finding]:
        return []

    def finish(self, ctx: FileContext) -> List[Finding]:
        return []

    def finding(
        self,
        ctx: FileContext,
        node: Node,
        message: str,
        evidence: Optional[Dict[str, Any]] = None,
    ) -> Finding:
        ev = {"snippet": ctx.snippet(node)}
        ev.update(evidence or {})
        return self.finding_at(ctx.location(node), message, ev)

    def finding_at(self, location: Location, message: str, evidence: Optional[Dict[str, Any]] = None) -> Finding:
        return Finding(
            rule_id=self.rule_id,
            category=self.category,
            severity=self.severity,
            title=self.title,
            message=message,
            location=location,
            recommendation=self.recommendation,
            evidence=evidence or {},
        )

    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.rule_id,
            "name": self.name,
            "title": self.title,
            "category": self.category,
            "severity": self.severity,
            "scope": self.scope,
            "description": self.description,
            "recommendation": self.recommendation,
        }


class ProjectRule(Rule):
    """Rule evaluated once over the results of every analysed file."""

    scope = "project"

    @abstractmethod
    def finish_project(self, results: Sequence[AnalysisResult], config: LintConfig) -> List[Finding]:
        ...
