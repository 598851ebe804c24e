"""One block of tests per catalogued smell."""

from reactsmells.core.config import LintConfig, Thresholds

from conftest import rule_ids


# ---------------------------------------------------------------------------
# ST001 props-in-initial-state
# ---------------------------------------------------------------------------


def test_use_state_from_props_member(analyze):
    result = analyze("""\
        function Editor(props) {
          const [value, setValue] = useState(props.value);
          return <input value={value} onChange={(e) => setValue(e.target.value)} />;
        }
    """, select=["ST001"])
    assert rule_ids(result) == ["ST001"]
    finding = result.findings[0]
    assert finding.evidence["prop"] == "value"
    assert finding.location.line == 2


def test_use_state_from_destructured_prop(analyze):
    result = analyze("""\
        function Editor({ text }) {
          const [draft] = useState(() => text.trim());
          return <p>{draft}</p>;
        }
    """, select=["ST001"])
    assert rule_ids(result) == ["ST001"]
    assert result.findings[0].evidence["prop"] == "text"


def test_seed_props_are_not_reported(analyze):
    result = analyze("""\
        function Editor({ initialText, defaultOpen }) {
          const [draft] = useState(initialText);
          const [open] = useState(defaultOpen);
          return <p hidden={!open}>{draft}</p>;
        }
    """, select=["ST001"])
    assert result.findings == []


def test_class_constructor_state_from_props(analyze):
    result = analyze("""\
        class Profile extends React.Component {
          constructor(props) {
            super(props);
            this.state = { name: props.name };
          }
          render() {
            return <h1>{this.state.name}</h1>;
          }
        }
    """, select=["ST001"])
    assert rule_ids(result) == ["ST001"]
    assert result.findings[0].evidence == {
        "snippet": "this.state = { name: props.name }",
        "component": "Profile",
        "prop": "name",
    }


def test_class_field_state_from_this_props(analyze):
    result = analyze("""\
        class Counter extends Component {
          state = { count: this.props.start };
          render() {
            return <span>{this.state.count}</span>;
          }
        }
    """, select=["ST001"])
    assert rule_ids(result) == ["ST001"]
    assert result.findings[0].evidence["prop"] == "start"


def test_state_from_constant_is_fine(analyze):
    result = analyze("""\
        function Toggle() {
          const [on, setOn] = useState(false);
          return <button onClick={() => setOn(!on)}>{String(on)}</button>;
        }
    """, select=["ST001"])
    assert result.findings == []


# ---------------------------------------------------------------------------
# LC001 / LC002 lifecycle
# ---------------------------------------------------------------------------


def test_force_update_in_component(analyze):
    result = analyze("""\
        class Clock extends React.Component {
          tick() {
            this.forceUpdate();
          }
          render() {
            return <div />;
          }
        }
    """, select=["LC001"])
    assert rule_ids(result) == ["LC001"]
    assert result.findings[0].location.line == 3
    assert "this.forceUpdate()" in result.findings[0].message


def test_force_update_outside_component_is_ignored(analyze):
    result = analyze("""\
        const store = { forceUpdate() {} };
        store.forceUpdate();
    """, select=["LC001"])
    assert result.findings == []


def test_legacy_lifecycle_methods(analyze):
    result = analyze("""\
        class Feed extends React.PureComponent {
          componentWillMount() {}
          UNSAFE_componentWillReceiveProps(next) {}
          componentDidMount() {}
          render() {
            return <ul />;
          }
        }
    """, select=["LC002"])
    assert rule_ids(result) == ["LC002", "LC002"]
    assert [f.evidence["method"] for f in result.findings] == [
        "componentWillMount",
        "UNSAFE_componentWillReceiveProps",
    ]
    assert result.findings[0].location.column == 3


# ---------------------------------------------------------------------------
# DM001 direct DOM manipulation
# ---------------------------------------------------------------------------


def test_dom_access_inside_component_only(analyze):
    result = analyze("""\
        function Widget() {
          useEffect(() => {
            document.getElementById("chart").innerHTML = "";
          }, []);
          return <div id="chart" />;
        }
        const root = createRoot(document.getElementById("root"));
    """, select=["DM001"])
    assert rule_ids(result) == ["DM001", "DM001"]
    assert {f.evidence["api"] for f in result.findings} == {"document.getElementById", "innerHTML"}
    assert all(f.location.line == 3 for f in result.findings)


def test_find_dom_node(analyze):
    result = analyze("""\
        class Legacy extends React.Component {
          componentDidMount() {
            ReactDOM.findDOMNode(this).focus();
          }
          render() {
            return <input />;
          }
        }
    """, select=["DM001"])
    assert [f.evidence["api"] for f in result.findings] == ["findDOMNode"]


# ---------------------------------------------------------------------------
# PR001 unused props
# ---------------------------------------------------------------------------


def test_unused_destructured_prop(analyze):
    result = analyze("""\
        function Card({ title, subtitle, onClose }) {
          return <h2 onClick={onClose}>{title}</h2>;
        }
    """, select=["PR001"])
    assert rule_ids(result) == ["PR001"]
    finding = result.findings[0]
    assert finding.evidence == {"component": "Card", "prop": "subtitle"}
    assert (finding.location.line, finding.location.column) == (1, 24)


def test_rest_props_disable_unused_check(analyze):
    result = analyze("""\
        function Card({ title, extra, ...rest }) {
          return <h2 {...rest}>{title}</h2>;
        }
    """, select=["PR001"])
    assert result.findings == []


def test_renamed_prop_reports_the_public_name(analyze):
    result = analyze("""\
        const Card = ({ title: heading }) => <h2 />;
    """, select=["PR001"])
    assert [f.evidence["prop"] for f in result.findings] == ["title"]


# ---------------------------------------------------------------------------
# HK001 extract custom hook
# ---------------------------------------------------------------------------

DASHBOARD = """\
    function Dashboard() {
      const [a, setA] = useState(0);
      const [b, setB] = useState(0);
      const ref = useRef(null);
      useEffect(() => {}, []);
      const total = useMemo(() => a + b, [a, b]);
      const reset = useCallback(() => setA(0), []);
      return <div ref={ref} onClick={reset}>{total}</div>;
    }
"""


def test_many_hooks_suggest_custom_hook(analyze):
    result = analyze(DASHBOARD, select=["HK001"])
    assert rule_ids(result) == ["HK001"]
    assert result.findings[0].severity == "info"
    assert sum(result.findings[0].evidence["hooks"].values()) == 6


def test_hook_threshold_is_configurable(analyze):
    config = LintConfig(thresholds=Thresholds(max_hooks=7))
    result = analyze(DASHBOARD, select=["HK001"], config=config)
    assert result.findings == []


# ---------------------------------------------------------------------------
# CP001 / CP003 / CP004 composition
# ---------------------------------------------------------------------------


def test_duplicated_jsx_between_components(analyze):
    result = analyze("""\
        function A() {
          return (
            <ul className="list">
              <li><b>One</b></li>
              <li><b>Two</b></li>
            </ul>
          );
        }
        function B() {
          return (
            <ul className="list">
              <li><b>One</b></li>
              <li><b>Two</b></li>
            </ul>
          );
        }
    """, select=["CP001"])
    assert rule_ids(result) == ["CP001"]
    finding = result.findings[0]
    assert finding.location.line == 11
    assert finding.evidence["component"] == "B"
    assert finding.evidence["duplicateOf"] == "A"
    assert finding.evidence["elements"] == 5


def test_different_static_text_is_not_a_duplicate(analyze):
    result = analyze("""\
        function A() {
          return <ul><li><b>One</b></li><li><b>Two</b></li></ul>;
        }
        function B() {
          return <ul><li><b>One</b></li><li><b>Three</b></li></ul>;
        }
    """, select=["CP001"])
    assert result.findings == []


def test_expressions_do_not_change_the_fingerprint(analyze):
    result = analyze("""\
        function A({ user }) {
          return <div><img src={user.avatar} /><span>{user.name}</span><em>admin</em></div>;
        }
        function B({ owner }) {
          return <div><img src={owner.photo} /><span>{owner.login}</span><em>admin</em></div>;
        }
    """, select=["CP001"])
    assert rule_ids(result) == ["CP001"]


def test_oversized_component(analyze):
    config = LintConfig(thresholds=Thresholds(max_component_lines=5, max_jsx_elements=2))
    result = analyze("""\
        function Page() {
          const a = 1;
          const b = 2;
          return (
            <main>
              <h1>{a}</h1>
              <p>{b}</p>
            </main>
          );
        }
    """, select=["CP003"], config=config)
    assert rule_ids(result) == ["CP003"]
    finding = result.findings[0]
    assert "10 lines" in finding.message
    assert "3 JSX elements" in finding.message
    assert finding.evidence["jsxElements"] == 3


def test_higher_order_components(analyze):
    result = analyze("""\
        function withLogger(Wrapped) {
          return function Logged(props) {
            return <Wrapped {...props} />;
          };
        }
        const withTheme = (Inner) => (props) => <Inner theme="dark" {...props} />;
        function withData(Target) {
          return class extends React.Component {
            render() {
              return <div />;
            }
          };
        }
        function withDefaults(options) {
          return { ...options, debug: false };
        }
    """, select=["CP004"])
    assert [f.evidence["hoc"] for f in result.findings] == ["withLogger", "withTheme", "withData"]


def test_dom_markup_append_inside_component(analyze):
    result = analyze("""\
        function W() {
          const ref = useRef(null);
          useEffect(() => {
            ref.current.innerHTML += "<b>x</b>";
          });
          return <div ref={ref} />;
        }
    """, select=["DM001"])
    assert [f.evidence["api"] for f in result.findings] == ["innerHTML"]
    assert result.findings[0].location.line == 4


def test_prop_read_in_another_default_is_used(analyze):
    result = analyze("""\
        function Box({ size, width = size }) {
          return <div style={{ width }} />;
        }
    """, select=["PR001"])
    assert result.findings == []


def test_shadowing_parameter_is_not_a_use(analyze):
    result = analyze("""\
        const Item = ({ label }) => <li>{[1].map((label) => label)}</li>;
    """, select=["PR001"])
    assert [f.evidence["prop"] for f in result.findings] == ["label"]


def test_nested_callback_reading_prop_is_a_use(analyze):
    result = analyze("""\
        const List = ({ items, label }) => <ul>{items.map((item) => <li key={item}>{label}</li>)}</ul>;
    """, select=["PR001"])
    assert result.findings == []


SECTION = """\
<section>
        <h2>Title</h2>
        <p>Body</p>
        <p>Footer</p>
        <a href="/more">More</a>
      </section>"""

PAGE = """\
function {name}() {{
  return (
    <main>
      <nav />
      <nav />
      {section}
    </main>
  );
}}
"""

PANEL = """\
function {name}() {{
  return (
    {section}
  );
}}
"""


def _cp001(analyze, *parts, config=None):
    result = analyze("\n".join(parts), select=["CP001"], config=config)
    return [(f.evidence["component"], f.evidence["elements"], f.evidence["duplicateOf"]) for f in result.findings]


def test_nested_duplicate_is_covered_by_outer_duplicate(analyze):
    found = _cp001(
        analyze,
        PAGE.format(name="A", section=SECTION),
        PAGE.format(name="B", section=SECTION),
    )
    assert found == [("B", 8, "A")]


def test_partially_nested_duplicate_reports_only_outermost_occurrences(analyze):
    found = _cp001(
        analyze,
        PAGE.format(name="A", section=SECTION),
        PAGE.format(name="B", section=SECTION),
        PANEL.format(name="C", section=SECTION),
    )
    assert found == [("B", 8, "A"), ("C", 5, "A")]


def test_duplicate_size_threshold_is_configurable(analyze):
    parts = (
        PAGE.format(name="A", section=SECTION),
        PAGE.format(name="B", section=SECTION),
        PANEL.format(name="C", section=SECTION),
    )
    larger = LintConfig(thresholds=Thresholds(min_duplicate_jsx_elements=6))
    assert _cp001(analyze, *parts, config=larger) == [("B", 8, "A")]

    too_large = LintConfig(thresholds=Thresholds(min_duplicate_jsx_elements=9))
    assert _cp001(analyze, *parts, config=too_large) == []
