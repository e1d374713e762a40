"""
End-to-end rendering scenarios: substitution, conditionals, loops,
paths and escapes.
"""

import pytest

from templet import ExpressionSyntaxError, InvalidTagError, MissingTagError, render


class TestValueTags:

    def test_unset_values_render_empty(self):
        assert render("hello, {$first_name} {$last_name}", {}) == "hello,  "

    def test_set_values(self):
        values = {"first_name": "John", "last_name": "Doe"}
        assert render("hello, {$first_name} {$last_name}", values) == "hello, John Doe"

    @pytest.mark.parametrize("template", ["{$azAZ09-_}", "{$   azAZ09-_   }"])
    def test_full_name_alphabet(self, template):
        assert render(template, {"azAZ09-_": "ok"}) == "ok"

    @pytest.mark.parametrize("template", ["{$foo&bar}", "{$foo bar}", "{$foo\0bar}"])
    def test_invalid_names(self, template):
        with pytest.raises(InvalidTagError):
            render(template, {})

    def test_list_is_not_printable(self):
        with pytest.raises(InvalidTagError):
            render("{$ items }", {"items": ["a"]})


class TestIgnoredTags:

    @pytest.mark.parametrize("template, expected", [
        ("hello {\\world}", "hello {world}"),
        ("hello {\\\\world}", "hello {\\world}"),
        ("hello {\\\\\\world}", "hello {\\\\world}"),
        ("hello {\\*world}", "hello {*world}"),
        ("hello {\\$world}", "hello {$world}"),
        ("hello {\\% if a %}", "hello {% if a %}"),
    ])
    def test_escapes(self, template, expected):
        assert render(template, {"world": "x"}) == expected

    @pytest.mark.parametrize("tail", ["{", "{$", "{%", "{ foo", "{$ foo", "{% foo"])
    def test_incomplete_tag_is_text(self, tail):
        assert render("hello world " + tail, {"foo": "x"}) == "hello world " + tail

    @pytest.mark.parametrize("template", ["hello {world}", "{% infloop %}world{% endinfloop %}"])
    def test_unrecognized_tags(self, template):
        with pytest.raises(InvalidTagError):
            render(template, {})


class TestIfBlocks:

    def test_unset_and_set(self):
        template = "Hello {% if world %}world{% endif %}"
        assert render(template, {}) == "Hello "
        assert render(template, {"world": "1"}) == "Hello world"

    def test_empty_string_is_true(self):
        assert render("{% if flag %}A{% endif %}", {"flag": ""}) == "A"

    def test_unclosed_block_runs_to_end(self):
        assert render("Hello {% if world %}world", {"world": "1"}) == "Hello world"
        assert render("Hello {% if world %}world", {}) == "Hello "

    def test_text_after_endif(self):
        template = "{% if a %}A{% endif %} and more"
        assert render(template, {}) == " and more"

    def test_same_condition_twice(self):
        template = "{% if a %}1{% endif %}{% if a %}2{% endif %}"
        assert render(template, {"a": "x"}) == "12"

    def test_if_else(self):
        template = "{% if debug %}Debug{% else %}Release{% endif %}"
        assert render(template, {"debug": "1"}) == "Debug"
        assert render(template, {}) == "Release"

    def test_multiple_else_rejected(self):
        with pytest.raises(InvalidTagError):
            render("{% if a %}A{% else %}B{% else %}C{% endif %}", {})

    def test_elif_chain_first_true_wins(self):
        template = "{% if a %}A{% elif b %}B{% elif c %}C{% else %}D{% endif %}"
        assert render(template, {"a": "", "b": "", "c": ""}) == "A"
        assert render(template, {"b": "", "c": ""}) == "B"
        assert render(template, {"c": ""}) == "C"
        assert render(template, {}) == "D"

    def test_if_inside_if(self):
        template = "{% if debug %}Debug mode{% if test %} Test mode{% endif %}{% endif %}"
        assert render(template, {"debug": "1"}) == "Debug mode"
        assert render(template, {"debug": "1", "test": "1"}) == "Debug mode Test mode"
        assert render(template, {"test": "1"}) == ""

    def test_if_inside_elif_and_else(self):
        template = (
            "{% if a %}A"
            "{% elif b %}{% if c %}BC{% else %}B{% endif %}"
            "{% else %}{% if c %}C{% endif %}"
            "{% endif %}!"
        )
        assert render(template, {"b": "1", "c": "1"}) == "BC!"
        assert render(template, {"b": "1"}) == "B!"
        assert render(template, {"c": "1"}) == "C!"
        assert render(template, {}) == "!"

    def test_dot_notation_and_indices(self):
        values = {"config": {"servers": ["a", "b"]}}
        assert render("{% if config.servers[1] %}yes{% endif %}", values) == "yes"
        assert render("{% if config.servers[2] %}yes{% endif %}", values) == ""
        assert render("{% if config.missing.deeper %}yes{% endif %}", values) == ""

    @pytest.mark.parametrize("template", [
        "{% elif a %}x{% endif %}",
        "{% else %}x{% endif %}",
    ])
    def test_continuation_without_if(self, template):
        with pytest.raises(InvalidTagError):
            render(template, {"a": "1"})


class TestArrays:

    def setup_method(self):
        self.values = {
            "items": ["first", "second", "third"],
            "item": "single",
            "matrix": [["a", "b"], ["c", "d"]],
        }

    def test_access(self):
        assert render("{$ items[0] } {$ items[2] }", self.values) == "first third"

    def test_leading_zeros(self):
        assert render("{$ items[00] }{$ items[01] }", self.values) == "firstsecond"

    def test_out_of_range(self):
        assert render("[{$ items[3] }]", self.values) == "[]"

    def test_list_of_lists(self):
        assert render("{$ matrix[1][0] }{$ matrix[0][1] }", self.values) == "cb"

    @pytest.mark.parametrize("template", [
        "{$ items[-1] }",
        "{$ items[x] }",
        "{$ items[1.5] }",
        "{$ items[0x01] }",
        "{$ items[[0]] }",
        "{$ items[] }",
        "{$ items[0 }",
        "{$ items0] }",
        "{$ [0] }",
    ])
    def test_invalid_index_syntax(self, template):
        with pytest.raises(InvalidTagError):
            render(template, self.values)

    @pytest.mark.parametrize("template", ["{$ item[0] }", "{$ items[0][0] }"])
    def test_index_on_non_list(self, template):
        with pytest.raises(InvalidTagError):
            render(template, self.values)


class TestDotNotation:

    def setup_method(self):
        self.values = {
            "config": {
                "hostname": "localhost",
                "servers": [
                    {"hostname": "game-server", "ips": ["10.0.0.1", "10.0.0.2"]},
                    {"hostname": "stream-server", "ips": ["10.0.1.1", "10.0.1.2"]},
                ],
            },
        }

    def test_value(self):
        assert render("{$ config.hostname }", self.values) == "localhost"

    def test_through_lists(self):
        assert render("{$ config.servers[1].hostname }", self.values) == "stream-server"
        assert render("{$ config.servers[0].ips[1] }", self.values) == "10.0.0.2"

    def test_missing_intermediate_is_soft(self):
        assert render("[{$ config.server[1].hostname[1] }]", self.values) == "[]"

    @pytest.mark.parametrize("template", [
        "{$ config..hostname }",
        "{$ .hostname }",
        "{$ config. }",
        "{$ config.[0] }",
        "{$ config }",
        "{$ config.servers[1].hostname[1] }",
        "{$ config.servers.hostname }",
        "{$ config.servers[0]ips[1] }",
    ])
    def test_hard_errors(self, template):
        with pytest.raises(InvalidTagError):
            render(template, self.values)


class TestForLoops:

    def setup_method(self):
        self.values = {
            "users": ["alice", "bob", "carol"],
            "user": "root",
            "groups": [["a", "b"], ["c"]],
            "config": {
                "servers": [
                    {"hostname": "game-server", "ips": ["10.0.0.1", "10.0.0.2"]},
                    {"hostname": "stream-server", "ips": ["10.0.1.1"]},
                ],
            },
        }

    def test_emits_each_element(self):
        assert render("{% for users as u %}{$ u },{% endfor %}", self.values) == "alice,bob,carol,"

    def test_empty_list(self):
        assert render("[{% for xs as x %}{$ x }{% endfor %}]", {"xs": []}) == "[]"

    def test_source_with_dots_and_index(self):
        template = "{% for config.servers[0].ips as ip %}{$ ip } {% endfor %}"
        assert render(template, self.values) == "10.0.0.1 10.0.0.2 "

    def test_alias_index(self):
        template = "{% for groups as g %}{$ g[0] }{% endfor %}"
        assert render(template, self.values) == "ac"

    def test_nested_loops(self):
        template = (
            "{% for config.servers as server %}"
            "{$ server.hostname }:{% for server.ips as ip %} {$ ip }{% endfor %};"
            "{% endfor %}"
        )
        assert render(template, self.values) == (
            "game-server: 10.0.0.1 10.0.0.2;stream-server: 10.0.1.1;"
        )

    def test_nested_loop_over_alias(self):
        template = "{% for groups as _group %}{% for _group as g %}{$ g }{% endfor %}|{% endfor %}"
        assert render(template, self.values) == "ab|c|"

    def test_outer_names_visible_in_body(self):
        template = "{% for users as u %}{$ u }@{$ user } {% endfor %}"
        assert render(template, {"users": ["a"], "user": "root"}) == "a@root "

    def test_alias_not_visible_after_loop(self):
        template = "{% for xs as x %}{$ x }{% endfor %}[{$ x }]"
        assert render(template, {"xs": ["a", "b"]}) == "ab[]"

    def test_alias_collision(self):
        with pytest.raises(InvalidTagError, match="already exists"):
            render("{% for users as user %}{% endfor %}", self.values)

    def test_alias_collision_with_outer_alias(self):
        with pytest.raises(InvalidTagError):
            render("{% for users as u %}{% for users as u %}{% endfor %}{% endfor %}", self.values)

    @pytest.mark.parametrize("template", [
        "{% for users as u.name %}{% endfor %}",
        "{% for users as u[0] %}{% endfor %}",
    ])
    def test_invalid_alias(self, template):
        with pytest.raises(InvalidTagError):
            render(template, self.values)

    @pytest.mark.parametrize("template", [
        "{% for users %}{% endfor %}",
        "{% for users as %}{% endfor %}",
        "{% for users in u %}{% endfor %}",
        "{% for users as u extra %}{% endfor %}",
    ])
    def test_malformed_clause(self, template):
        with pytest.raises(ExpressionSyntaxError):
            render(template, self.values)

    def test_missing_source(self):
        with pytest.raises(MissingTagError):
            render("{% for nobody as n %}{% endfor %}", self.values)

    def test_source_not_a_list(self):
        with pytest.raises(InvalidTagError):
            render("{% for user as u %}{% endfor %}", self.values)

    def test_conditionals_inside_loop(self):
        template = "{% for config.servers as s %}{% if s.ips[1] %}multi{% else %}single{% endif %} {% endfor %}"
        assert render(template, self.values) == "multi single "


class TestTerminators:

    @pytest.mark.parametrize("template", [
        "{% if a %}x{% endfor %}",
        "{% for xs as x %}x{% endif %}",
        "x{% endif %}",
    ])
    def test_mismatched_terminators(self, template):
        with pytest.raises(InvalidTagError):
            render(template, {"a": "1", "xs": ["1"]})
