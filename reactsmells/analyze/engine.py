from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from reactsmells.analyze.context import FileContext
from reactsmells.analyze.jsx_fingerprint import fingerprint_file
from reactsmells.analyze.suppressions import Suppressions, parse_suppressions
from reactsmells.core.config import LintConfig
from reactsmells.core.findings import AnalysisResult, Finding, Location, severity_rank
from reactsmells.extract.component_extractor import extract_components
from reactsmells.extract.jsx_parser import JsxParser, language_for
from reactsmells.rules.base import Rule
from reactsmells.rules.registry import PARSE_ERROR_ID, RuleRegistry

logger = logging.getLogger(__name__)


class DetectorEngine:
    """Runs the file-scope rules of a registry over one file at a time."""

    def __init__(self, registry: RuleRegistry, config: Optional[LintConfig] = None, parser: Optional[JsxParser] = None):
        self.registry = registry
        self.config = config or LintConfig()
        self.parser = parser or JsxParser()
        self.file_rules: List[Rule] = [r for r in registry.rules if r.scope == "file"]
        self._dispatch: Dict[str, List[Rule]] = defaultdict(list)
        for rule in self.file_rules:
            for node_type in rule.node_types:
                self._dispatch[node_type].append(rule)
        self._severity_overrides = self._resolve_overrides(self.config.severity_overrides)

    def analyze_file(self, path: Path, display_path: Optional[str] = None) -> AnalysisResult:
        shown = display_path or str(path)
        language = language_for(path)
        if language is None:
            # extension listed in `extensions` but with no grammar behind it
            return self._failed(shown, None, f"unsupported file type: {Path(path).suffix}", Location(shown, 1, 1, 1, 1))
        try:
            raw = Path(path).read_bytes()
            raw.decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s: %s", shown, exc)
            return self._failed(shown, language, f"cannot read file: {exc}", Location(shown, 1, 1, 1, 1))
        return self.analyze_source(raw, shown, language)

    def analyze_source(self, source: bytes | str, path: str, language: Optional[str] = None) -> AnalysisResult:
        parsed = self.parser.parse(source, path, language)
        text = parsed.source.decode("utf-8", errors="replace")
        suppressions = parse_suppressions(text, self.registry.resolve)

        if parsed.has_error:
            bad = parsed.first_error()
            loc = Location(
                path=path,
                line=bad.start_point[0] + 1,
                column=bad.start_point[1] + 1,
                end_line=bad.end_point[0] + 1,
                end_column=bad.end_point[1] + 1,
            )
            what = "missing token" if bad.is_missing else "unexpected syntax"
            logger.warning("Parse error in %s at %d:%d", path, loc.line, loc.column)
            return self._failed(path, parsed.language, f"{what} at line {loc.line}, column {loc.column}", loc,
                                suppressions=suppressions)

        ctx = FileContext(
            path=path,
            parsed=parsed,
            components=extract_components(parsed.root, parsed.source),
            config=self.config,
        )

        findings: List[Finding] = []
        stack = [parsed.root]
        while stack:
            node = stack.pop()
            for rule in self._dispatch.get(node.type, ()):
                findings.extend(rule.visit(node, ctx))
            stack.extend(reversed(node.children))

        for rule in self.file_rules:
            findings.extend(rule.finish(ctx))

        blocks = ctx.state.get("jsx_blocks")
        if blocks is None:
            blocks = fingerprint_file(ctx, self.config.thresholds.min_duplicate_jsx_elements)

        kept, suppressed = self.postprocess(findings, suppressions)
        logger.debug("%s: %d components, %d findings, %d suppressed", path, len(ctx.components), len(kept), suppressed)
        return AnalysisResult(
            path=path,
            language=parsed.language,
            findings=kept,
            suppressed=suppressed,
            jsx_blocks=[block for _, block in blocks],
            suppressions=suppressions,
        )

    def run_project_rules(self, results: List[AnalysisResult]) -> List[Finding]:
        """
        Evaluate project-scope rules once over every analysed file and merge
        their findings back into the per-file results, honouring each file's
        suppressions and the severity settings.
        """
        by_path = {r.path: r for r in results}
        added: List[Finding] = []

        for rule in self.registry.project_rules:
            raw = rule.finish_project(results, self.config)
            logger.debug("%s produced %d project findings", rule.rule_id, len(raw))

            per_file: Dict[str, List[Finding]] = defaultdict(list)
            for f in raw:
                per_file[f.location.path].append(f)

            for path, findings in per_file.items():
                result = by_path.get(path)
                suppressions = result.suppressions if result is not None else None
                kept, suppressed = self.postprocess(findings, suppressions)
                if result is not None:
                    result.findings = sorted(result.findings + kept, key=lambda f: f.sort_key)
                    result.suppressed += suppressed
                added.extend(kept)

        return added

    def postprocess(
        self,
        findings: Iterable[Finding],
        suppressions: Optional[Suppressions] = None,
    ) -> Tuple[List[Finding], int]:
        """Apply suppressions, severity overrides and the minimum severity; sort."""
        min_rank = severity_rank(self.config.min_severity)
        kept: List[Finding] = []
        suppressed = 0
        for f in findings:
            if suppressions and suppressions.is_suppressed(f):
                suppressed += 1
                continue
            override = self._severity_overrides.get(f.rule_id)
            if override and override != f.severity:
                f = replace(f, severity=override)
            if severity_rank(f.severity) < min_rank:
                continue
            kept.append(f)
        kept.sort(key=lambda f: f.sort_key)
        return kept, suppressed

    def _failed(
        self,
        path: str,
        language: Optional[str],
        message: str,
        loc: Location,
        suppressions: Optional[Suppressions] = None,
    ) -> AnalysisResult:
        findings: List[Finding] = []
        rule = self.registry.get(PARSE_ERROR_ID)
        if rule is not None:
            findings.append(rule.finding_at(loc, f"Cannot parse file: {message}"))
        kept, suppressed = self.postprocess(findings, suppressions)
        return AnalysisResult(
            path=path,
            language=language,
            findings=kept,
            parse_error=message,
            suppressed=suppressed,
            suppressions=suppressions,
        )

    def _resolve_overrides(self, overrides: Dict[str, str]) -> Dict[str, str]:
        resolved: Dict[str, str] = {}
        for selector, level in overrides.items():
            for rule_id in self.registry.resolve(selector, strict=True):
                resolved[rule_id] = level
        return resolved
