from __future__ import annotations

import json
import logging
import os
from collections import Counter
from typing import Any, Dict, List

from openai import OpenAI

from reactsmells.core.findings import Finding

logger = logging.getLogger(__name__)

# findings sent to the model, most severe first
MAX_PROMPT_FINDINGS = 60


def _model_name() -> str:
    return os.environ.get("OPENAI_MODEL", "gpt-5")


def _compact(f: Finding) -> Dict[str, Any]:
    return {
        "rule": f.rule_id,
        "severity": f.severity,
        "where": f"{f.location.path}:{f.location.line}",
        "message": f.message,
        "refactoring": f.recommendation,
    }


def build_prompt(findings: List[Finding], summary: Dict[str, Any]) -> str:
    rank = {"error": 0, "warning": 1, "info": 2}
    ordered = sorted(findings, key=lambda f: (rank.get(f.severity, 3), f.sort_key))
    sample = [_compact(f) for f in ordered[:MAX_PROMPT_FINDINGS]]
    by_rule = Counter(f.rule_id for f in findings)

    return f"""
You are a senior React engineer reviewing a codebase for refactoring opportunities.
Given the rule-based smell findings below, produce a prioritised refactoring plan.

OUTPUT STRICT JSON with keys:
- "summary" (1 paragraph)
- "priorities" (array of objects: {{refactoring, why, locations[], steps[]}})
- "quick_wins" (array of short action bullets)
- "risks" (array of things to watch while refactoring)

SUMMARY:
files={summary.get("files")}
findings={summary.get("findings")}
by_severity={summary.get("bySeverity")}
by_rule={dict(sorted(by_rule.items()))}

FINDINGS (first {len(sample)} of {len(findings)}):
{json.dumps(sample, indent=1)}

Be practical. Prefer catalogue refactorings (Extract Component, Extract Custom Hook,
Replace State with Props, Replace DOM access with a ref) and group related findings.
"""


def generate_refactor_advice(findings: List[Finding], summary: Dict[str, Any]) -> Dict[str, Any]:
    """
    Ask the model for a refactoring plan built on the rule-based findings.
    Returns a JSON-safe dict. Output that is not a JSON object is kept under "raw".
    """
    client = OpenAI(api_key=os.environ.get("OPENAI_API_KEY"))
    model = _model_name()
    logger.info("Requesting refactoring advice from %s for %d findings", model, len(findings))

    resp = client.responses.create(
        model=model,
        input=[
            {
                "role": "user",
                "content": [{"type": "input_text", "text": build_prompt(findings, summary)}],
            }
        ],
    )

    text = getattr(resp, "output_text", None)
    if not text:
        text = str(resp)

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Model returned non-JSON output; keeping raw text")
        return {"raw": text}

    if not isinstance(parsed, dict):
        return {"raw": text}
    parsed.setdefault("summary", "")
    parsed.setdefault("priorities", [])
    parsed.setdefault("quick_wins", [])
    parsed.setdefault("risks", [])
    return parsed
