from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from reactsmells.analyze.engine import DetectorEngine
from reactsmells.core.config import LintConfig
from reactsmells.core.findings import AnalysisResult, Finding, severity_rank
from reactsmells.extract.source_loader import discover_sources
from reactsmells.report.render import render_html_report, render_json, summarize
from reactsmells.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)


@dataclass
class LintRun:
    results: List[AnalysisResult] = field(default_factory=list)
    ai: Optional[Dict[str, Any]] = None

    @property
    def findings(self) -> List[Finding]:
        return [f for r in self.results for f in r.findings]

    @property
    def files_scanned(self) -> int:
        return len(self.results)

    @property
    def parse_errors(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    def summary(self) -> Dict[str, Any]:
        return summarize(self.results)

    def fails(self, fail_on: str) -> bool:
        if fail_on == "never":
            return False
        threshold = severity_rank(fail_on)
        return any(severity_rank(f.severity) >= threshold for f in self.findings)


def run_pipeline(
    paths: Sequence[Path],
    config: Optional[LintConfig] = None,
    out_dir: Optional[Path] = None,
    run_ai: bool = False,
    registry: Optional[RuleRegistry] = None,
) -> LintRun:
    config = config or LintConfig()
    registry = (registry or RuleRegistry.default()).select(config.select, config.ignore)

    # fail before any work is done
    if run_ai and not os.environ.get("OPENAI_API_KEY"):
        raise RuntimeError(
            "OPENAI_API_KEY not set. .env is not loaded or env var missing.\n"
            "Fix: add OPENAI_API_KEY to .env in the working directory or export it."
        )

    engine = DetectorEngine(registry, config)
    sources = discover_sources(paths, config)
    logger.debug("Discovered %d source files", len(sources))

    run = LintRun()
    for src in sources:
        run.results.append(engine.analyze_file(src.path, src.display_path))

    engine.run_project_rules(run.results)

    s = run.summary()
    logger.info(
        "Analysed %d files: %d findings, %d suppressed, %d parse errors",
        s["files"], s["findings"], s["suppressed"], s["parseErrors"],
    )

    if run_ai:
        from reactsmells.ai.refactor_ai import generate_refactor_advice
        run.ai = generate_refactor_advice(findings=run.findings, summary=s)

    if out_dir is not None:
        write_artifacts(out_dir, run)

    return run


def write_artifacts(out_dir: Path, run: LintRun) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)

    (out_dir / "findings.json").write_text(render_json(run.results), encoding="utf-8")

    if run.ai is not None:
        (out_dir / "ai_refactor.json").write_text(json.dumps(run.ai, indent=2), encoding="utf-8")

    render_html_report(out_dir=out_dir, results=run.results, ai=run.ai)
    logger.info("Artifacts written to %s", out_dir)
