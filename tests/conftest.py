from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from reactsmells.analyze.engine import DetectorEngine
from reactsmells.core.config import LintConfig
from reactsmells.rules.registry import RuleRegistry


def write_source(tmp_path: Path, code: str, name: str = "App.jsx") -> Path:
    p = tmp_path / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(code), encoding="utf-8")
    return p


def rule_ids(result):
    return [f.rule_id for f in result.findings]


@pytest.fixture
def analyze():
    """Analyse a snippet in memory: analyze(code, path="App.jsx", select=None, config=None)."""

    def _analyze(code, path="App.jsx", select=None, config=None):
        registry = RuleRegistry.default()
        if select:
            registry = registry.select(select)
        engine = DetectorEngine(registry, config or LintConfig())
        return engine.analyze_source(textwrap.dedent(code), path)

    return _analyze
