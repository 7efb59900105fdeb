import pytest

from tagflow.constants import Section
from tagflow.exceptions import NotConfiguredError
from tagflow.rendering import VariableRenderer, collapse_value, escape_variable_name
from tagflow.vars import NullVariableSet, VariableSet


@pytest.fixture
def source():
    variables = VariableSet("js", "1")
    variables.set_code_snippet('s.prop1="x";')
    variables.set_all_sections(
        {
            "header": {"s.pageName": "[node:title]"},
            "variables": {"s.channel": ["module", "admin"], "s.prop2": "0", "s.prop3": "   "},
            "footer": {"s.events": ""},
        }
    )
    return variables


class TestHelpers:
    @pytest.mark.parametrize(
        "value,expected",
        [("single", "single"), (["a", "b", "c"], "c"), (("x",), "x"), ([], "")],
    )
    def test_collapse_value(self, value, expected):
        assert collapse_value(value) == expected

    def test_escape_variable_name_keeps_quotes(self):
        assert escape_variable_name("s.prop<1>&'\"") == "s.prop&lt;1&gt;&amp;'\""


class TestVariableRenderer:
    """Test suite for rendering a variable set."""

    def test_render_section_filters_empty_values(self, mock_resolver):
        renderer = VariableRenderer(mock_resolver)

        rendered = renderer.render_section({"a": "1", "b": "", "c": " \t", "d": "0", "e": " 0 "})

        assert rendered == {"a": "1", "d": "0", "e": " 0 "}

    def test_last_candidate_wins(self, mock_resolver):
        rendered = VariableRenderer(mock_resolver).render_section({"s.channel": ["first", "last"]})

        assert rendered == {"s.channel": "last"}

    def test_only_the_last_candidate_is_resolved(self, mock_resolver):
        VariableRenderer(mock_resolver).render_section({"s.channel": ["[node:a]", "[node:b]"]})

        mock_resolver.resolve.assert_called_once_with("[node:b]", {})

    def test_values_cleared_by_resolution_are_dropped(self, mock_resolver):
        mock_resolver.resolve.side_effect = lambda text, overrides=None: ""

        assert VariableRenderer(mock_resolver).render_section({"s.pageName": "[node:title]"}) == {}

    def test_names_are_escaped(self, mock_resolver):
        rendered = VariableRenderer(mock_resolver).render_section({"s.prop<1>": "x"})

        assert rendered == {"s.prop&lt;1&gt;": "x"}

    def test_overrides_are_passed_to_resolver(self, mock_resolver):
        overrides = {"node": {"title": "Forced"}}

        VariableRenderer(mock_resolver, overrides).render_section({"s.pageName": "[node:title]"})

        mock_resolver.resolve.assert_called_once_with("[node:title]", overrides)

    def test_render_returns_new_set(self, mock_resolver, source):
        rendered = VariableRenderer(mock_resolver).render(source)

        assert rendered is not source
        assert rendered.get_variables() == {
            Section.HEADER: {"s.pageName": "[node:title]"},
            Section.VARIABLES: {"s.channel": "admin", "s.prop2": "0"},
            Section.FOOTER: {},
        }
        assert rendered.code_snippet == 's.prop1="x";'
        assert source.get_section("variables")["s.channel"] == ["module", "admin"]

    def test_render_null_set_raises(self, mock_resolver):
        with pytest.raises(NotConfiguredError, match="VariableRenderer: "):
            VariableRenderer(mock_resolver).render(NullVariableSet())
