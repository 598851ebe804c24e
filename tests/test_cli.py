import json

import pytest
from typer.testing import CliRunner

from reactsmells.cli import app

from conftest import write_source

CLOCK = """\
    class Clock extends React.Component {
      tick() {
        this.forceUpdate();
      }
      render() {
        return <div />;
      }
    }
"""

CLEAN = """\
    export function Greeting({ name }) {
      return <p>Hello {name}</p>;
    }
"""


@pytest.fixture
def runner():
    return CliRunner()


def test_check_clean_file_exits_zero(runner, tmp_path):
    path = write_source(tmp_path, CLEAN, name="Greeting.jsx")
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 0, result.output
    assert "0 finding(s) in 1 file(s)" in result.output


def test_check_warning_exits_one(runner, tmp_path):
    path = write_source(tmp_path, CLOCK)
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 1
    assert "LC001" in result.output


def test_fail_on_never(runner, tmp_path):
    path = write_source(tmp_path, CLOCK)
    result = runner.invoke(app, ["check", str(path), "--fail-on", "never"])
    assert result.exit_code == 0


def test_ignore_option_accepts_commas(runner, tmp_path):
    path = write_source(tmp_path, CLOCK)
    result = runner.invoke(app, ["check", str(path), "--ignore", "LC001,DM001"])
    assert result.exit_code == 0
    assert "LC001" not in result.output


def test_json_format(runner, tmp_path):
    path = write_source(tmp_path, CLOCK)
    result = runner.invoke(app, ["check", str(path), "--format", "json"])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["summary"]["findings"] == 1
    assert payload["files"][0]["findings"][0]["rule_id"] == "LC001"


def test_config_file_is_honoured(runner, tmp_path):
    (tmp_path / ".reactsmells.toml").write_text('fail_on = "error"\n', encoding="utf-8")
    path = write_source(tmp_path, CLOCK)
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 0


def test_unknown_selector_exits_two(runner, tmp_path):
    path = write_source(tmp_path, CLOCK)
    result = runner.invoke(app, ["check", str(path), "--select", "NOPE1"])
    assert result.exit_code == 2


def test_bad_config_exits_two(runner, tmp_path):
    (tmp_path / ".reactsmells.toml").write_text('min_severity = "loud"\n', encoding="utf-8")
    path = write_source(tmp_path, CLOCK)
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 2


def test_missing_path_exits_two(runner, tmp_path):
    result = runner.invoke(app, ["check", str(tmp_path / "missing.jsx")])
    assert result.exit_code == 2


def test_ai_without_key_exits_two(runner, tmp_path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    path = write_source(tmp_path, CLOCK)
    result = runner.invoke(app, ["check", str(path), "--ai"])
    assert result.exit_code == 2


def test_out_directory(runner, tmp_path):
    path = write_source(tmp_path, CLOCK, name="src/Clock.jsx")
    out = tmp_path / "report"
    result = runner.invoke(app, ["check", str(path), "--out", str(out), "--fail-on", "never"])
    assert result.exit_code == 0
    assert (out / "findings.json").exists()
    assert (out / "report.html").exists()


def test_rules_listing(runner):
    result = runner.invoke(app, ["rules", "--format", "json"])
    assert result.exit_code == 0
    rules = json.loads(result.stdout)
    assert [r["id"] for r in rules][:3] == ["SX001", "ST001", "LC001"]
    assert len(rules) == 11

    text = runner.invoke(app, ["rules"])
    assert "props-in-initial-state" in text.output
