from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from reactsmells.core.findings import SEVERITY_ORDER, AnalysisResult, Finding


def summarize(results: Sequence[AnalysisResult]) -> Dict[str, Any]:
    findings = [f for r in results for f in r.findings]
    by_severity = Counter(f.severity for f in findings)
    by_rule = Counter(f.rule_id for f in findings)
    return {
        "files": len(results),
        "parseErrors": sum(1 for r in results if not r.ok),
        "findings": len(findings),
        "suppressed": sum(r.suppressed for r in results),
        "bySeverity": {s: by_severity.get(s, 0) for s in sorted(SEVERITY_ORDER, key=SEVERITY_ORDER.get, reverse=True)},
        "byRule": dict(sorted(by_rule.items())),
    }


def render_text(results: Sequence[AnalysisResult]) -> str:
    lines: List[str] = []
    for result in results:
        if not result.findings:
            continue
        lines.append(result.path)
        for f in result.findings:
            loc = f.location
            lines.append(f"  {loc.line}:{loc.column}  {f.severity.upper():<7}  {f.rule_id}  {f.message}")
        lines.append("")

    s = summarize(results)
    sev = s["bySeverity"]
    lines.append(
        f"{s['findings']} finding(s) in {s['files']} file(s): "
        f"{sev['error']} error, {sev['warning']} warning, {sev['info']} info"
        + (f" ({s['suppressed']} suppressed)" if s["suppressed"] else "")
    )
    return "\n".join(lines)


def render_json(results: Sequence[AnalysisResult]) -> str:
    payload = {
        "summary": summarize(results),
        "files": [r.to_dict() for r in results],
    }
    return json.dumps(payload, indent=2)


_GITHUB_LEVEL = {"error": "error", "warning": "warning", "info": "notice"}


def render_github(results: Sequence[AnalysisResult]) -> str:
    lines = []
    for result in results:
        for f in result.findings:
            lines.append(_github_annotation(f))
    return "\n".join(lines)


def _github_annotation(f: Finding) -> str:
    loc = f.location
    props = (
        f"file={_escape_property(loc.path)},line={loc.line},endLine={loc.end_line},"
        f"col={loc.column},title={_escape_property(f.rule_id)}"
    )
    return f"::{_GITHUB_LEVEL[f.severity]} {props}::{_escape_data(f.message)}"


# workflow command escaping, see the GitHub Actions toolkit
def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def render_html_report(
    out_dir: Path,
    results: Sequence[AnalysisResult],
    ai: Optional[Dict[str, Any]] = None,
) -> Path:
    templates_dir = Path(__file__).parent / "templates"
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "j2"]),
    )
    template = env.get_template("report.html.j2")
    html = template.render(results=results, summary=summarize(results), ai=ai)

    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / "report.html"
    target.write_text(html, encoding="utf-8")
    return target
