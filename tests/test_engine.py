from reactsmells.analyze.engine import DetectorEngine
from reactsmells.analyze.suppressions import parse_suppressions
from reactsmells.core.config import LintConfig
from reactsmells.rules.registry import RuleRegistry

from conftest import rule_ids, write_source

CLOCK = """\
    class Clock extends React.Component {
      componentWillMount() {}
      tick() {
        this.forceUpdate();
      }
      render() {
        return <div />;
      }
    }
"""


def test_findings_are_ordered_by_position(analyze):
    result = analyze(CLOCK)
    assert rule_ids(result) == ["LC002", "LC001"]
    assert [f.location.line for f in result.findings] == [2, 4]
    assert result.ok
    assert result.language == "javascript"


def test_parse_error_skips_other_rules(analyze):
    result = analyze("""\
        function App({ unused }) {
          this.forceUpdate();
          return <div>;
        }
    """)
    assert rule_ids(result) == ["SX001"]
    assert not result.ok
    assert result.parse_error
    assert result.findings[0].severity == "error"


def test_unreadable_file_is_reported_as_parse_error(tmp_path):
    path = tmp_path / "broken.js"
    path.write_bytes(b"const x = '\xff\xfe';\n")
    engine = DetectorEngine(RuleRegistry.default())
    result = engine.analyze_file(path, "broken.js")
    assert rule_ids(result) == ["SX001"]
    assert "cannot read file" in result.parse_error


def test_next_line_suppression(analyze):
    code = CLOCK.replace("        this.forceUpdate();", "        // reactsmells-disable-next-line LC001\n        this.forceUpdate();")
    result = analyze(code)
    assert rule_ids(result) == ["LC002"]
    assert result.suppressed == 1


def test_same_line_suppression_by_name(analyze):
    code = CLOCK.replace("componentWillMount() {}", "componentWillMount() {} // reactsmells-disable-line legacy-lifecycle")
    result = analyze(code)
    assert rule_ids(result) == ["LC001"]
    assert result.suppressed == 1


def test_suppression_for_other_rule_does_not_apply(analyze):
    code = CLOCK.replace("componentWillMount() {}", "componentWillMount() {} // reactsmells-disable-line DM001")
    result = analyze(code)
    assert rule_ids(result) == ["LC002", "LC001"]
    assert result.suppressed == 0


def test_file_suppression(analyze):
    result = analyze("/* reactsmells-disable-file */\n" + CLOCK)
    assert result.findings == []
    assert result.suppressed == 2


def test_jsx_comment_suppression(analyze):
    result = analyze("""\
        function Widget() {
          return (
            <div>
              {/* reactsmells-disable-next-line */}
              <span ref={() => document.querySelector(".x")} />
            </div>
          );
        }
    """, select=["DM001"])
    assert result.findings == []
    assert result.suppressed == 1


def test_severity_override_and_min_severity(analyze):
    config = LintConfig(severity_overrides={"LC001": "error"}, min_severity="error")
    result = analyze(CLOCK, config=config)
    assert rule_ids(result) == ["LC001"]
    assert result.findings[0].severity == "error"


def test_parse_suppressions_merges_directives():
    text = (
        "// reactsmells-disable-file ST001\n"
        "// reactsmells-disable-file\n"
        "x(); // reactsmells-disable-line LC001, DM001\n"
    )
    resolve = lambda token: {token.upper()}
    sup = parse_suppressions(text, resolve)
    assert sup.file_wide
    assert sup.file_codes is None
    assert sup.line_codes[3] == {"LC001", "DM001"}


def test_analyze_file_uses_display_path(tmp_path):
    path = write_source(tmp_path, CLOCK, name="src/Clock.jsx")
    engine = DetectorEngine(RuleRegistry.default())
    result = engine.analyze_file(path, "src/Clock.jsx")
    assert result.path == "src/Clock.jsx"
    assert {f.location.path for f in result.findings} == {"src/Clock.jsx"}


def test_reason_after_codes_is_not_a_selector(analyze):
    result = analyze("""\
        function Editor(props) {
          const [value] = useState(props.value); // reactsmells-disable-line DM001 because of state
          const [other] = useState(props.other); // reactsmells-disable-line DM001 -- state is seeded on purpose
          return <p>{value}{other}</p>;
        }
    """, select=["ST001"])
    assert rule_ids(result) == ["ST001", "ST001"]
    assert result.suppressed == 0


def test_reason_after_separator_keeps_codes(analyze):
    code = CLOCK.replace("componentWillMount() {}", "componentWillMount() {} // reactsmells-disable-line LC002 -- removed next sprint")
    result = analyze(code)
    assert rule_ids(result) == ["LC001"]
    assert result.suppressed == 1
