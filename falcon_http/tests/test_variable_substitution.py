"""
Property-based tests for the variable substitution service.

Covers plain placeholders, positional and named arguments, and the
passthrough of unknown keys.
"""

import pytest
from hypothesis import given, strategies as st, settings

from falcon_http.schemas.environment import Environment
from falcon_http.services.variable_substitution import (
    extract_variables,
    parse_arguments,
    replace_variables,
    resolve_template,
    substitute,
    substitute_pairs,
)


# Keys are upper case letters, digits and underscore
variable_name_strategy = st.text(
    alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"),
    min_size=1,
    max_size=20,
)

# Values free of placeholder and template syntax
variable_value_strategy = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789:/.?=&-"),
    max_size=50,
)

plain_text_strategy = st.text(max_size=20).filter(lambda s: "{" not in s and "}" not in s)


class TestPlaceholderExtraction:
    """extract_variables finds every placeholder key, with or without arguments."""

    @given(var_names=st.lists(variable_name_strategy, min_size=1, max_size=5, unique=True))
    @settings(max_examples=100)
    def test_extracts_all_variables_from_template(self, var_names: list[str]):
        template = " ".join("{{" + name + "}}" for name in var_names)

        assert set(extract_variables(template)) == set(var_names)

    def test_extracts_variables_with_arguments(self):
        assert extract_variables("{{HOST[www]}}/users/{{ID}}") == ["HOST", "ID"]

    def test_lower_case_names_are_not_placeholders(self):
        assert extract_variables("{{host}}") == []

    @given(text=plain_text_strategy)
    @settings(max_examples=100)
    def test_returns_empty_for_no_placeholders(self, text: str):
        assert extract_variables(text) == []


class TestPlainSubstitution:
    """A {{KEY}} placeholder is replaced by the variable's value verbatim."""

    @given(
        var_name=variable_name_strategy,
        var_value=variable_value_strategy,
        prefix=plain_text_strategy,
        suffix=plain_text_strategy,
    )
    @settings(max_examples=100)
    def test_substitution_preserves_surrounding_text(self, var_name, var_value, prefix, suffix):
        template = prefix + "{{" + var_name + "}}" + suffix

        result, unmatched = substitute(template, {var_name: var_value})

        assert result == prefix + var_value + suffix
        assert unmatched == []

    def test_value_template_used_verbatim_without_arguments(self):
        variables = {"API_PATH": "https://$0.example.com"}

        assert replace_variables("{{API_PATH}}/x", variables) == "https://$0.example.com/x"

    def test_empty_argument_list_uses_value_verbatim(self):
        variables = {"API_PATH": "https://$0.example.com"}

        assert replace_variables("{{API_PATH[]}}/x", variables) == "https://$0.example.com/x"

    def test_every_occurrence_is_replaced(self):
        assert replace_variables("{{A}}-{{A}}", {"A": "x"}) == "x-x"

    def test_substituted_values_are_not_rescanned(self):
        assert replace_variables("{{A}}", {"A": "{{B}}", "B": "b"}) == "{{B}}"


class TestArgumentSubstitution:
    """Placeholder arguments fill $0, $1, ... and $name in the value template."""

    def test_positional_arguments(self):
        env = Environment(items=[("API_PATH", "https://$0.example.com/v$1"), ("", "")])

        result = env.replace_variables("{{API_PATH[www,3]}}/users")

        assert result == "https://www.example.com/v3/users"

    def test_named_arguments(self):
        env = Environment(items=[("API_PATH", "https://$sub.example.com/v$version"), ("", "")])

        result = env.replace_variables("{{API_PATH[version: 2, sub: app]}}/users")

        assert result == "https://app.example.com/v2/users"

    def test_arguments_are_trimmed_and_unquoted(self):
        variables = {"GREETING": "$0 $1"}

        assert replace_variables('{{GREETING[ "hello" ,  world ]}}', variables) == "hello world"

    def test_unmatched_tokens_are_left_untouched(self):
        variables = {"PATH": "/$0/$1/$missing"}

        assert replace_variables("{{PATH[a]}}", variables) == "/a/$1/$missing"

    def test_url_argument_is_positional(self):
        positional, named = parse_arguments("https://api.test, v1")

        assert positional == ["https://api.test", "v1"]
        assert named == {}

    def test_mixed_arguments(self):
        positional, named = parse_arguments("www, version: 2")

        assert positional == ["www"]
        assert named == {"version": "2"}

    def test_double_digit_positions(self):
        args = ",".join(str(i) for i in range(11))

        assert resolve_template("$10-$1", args) == "10-1"

    @given(values=st.lists(st.text(alphabet="abc123", min_size=1, max_size=5), min_size=1, max_size=5))
    @settings(max_examples=100)
    def test_positional_order_is_left_to_right(self, values: list[str]):
        template = "|".join(f"${i}" for i in range(len(values)))

        assert resolve_template(template, ",".join(values)) == "|".join(values)


class TestUnknownKeyPassthrough:
    """Unknown keys stay in the output and are reported."""

    @given(var_name=variable_name_strategy)
    @settings(max_examples=100)
    def test_undefined_variable_placeholder_is_preserved(self, var_name: str):
        template = "{{" + var_name + "}}"

        result, unmatched = substitute(template, {})

        assert result == template
        assert unmatched == [var_name]

    def test_undefined_in_environment(self):
        env = Environment(items=[("HOST", "https://api.test"), ("", "")])

        assert env.replace_variables("{{UNDEFINED}}/x") == "{{UNDEFINED}}/x"

    def test_later_duplicate_key_wins(self):
        env = Environment(items=[("HOST", "a"), ("HOST", "b"), ("", "")])

        assert env.replace_variables("{{HOST}}") == "b"


class TestSubstitutePairs:

    def test_blank_keys_are_dropped_and_duplicates_kept(self):
        pairs = [("id", "{{ID}}"), ("", "ignored"), ("  ", "x"), ("id", "2")]

        result, unmatched = substitute_pairs(pairs, {"ID": "1"})

        assert result == [("id", "1"), ("id", "2")]
        assert unmatched == []

    def test_keys_are_substituted(self):
        result, _ = substitute_pairs([("X-{{NAME}}", "v")], {"NAME": "Trace"})

        assert result == [("X-Trace", "v")]

    @pytest.mark.parametrize("template", ["", None])
    def test_empty_template(self, template):
        assert substitute(template, {"A": "b"}) == (template, [])
