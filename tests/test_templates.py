# Tests for template extraction
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import sys
import unittest

from wikiscan import (
    ArgumentRecord,
    TemplateRecord,
    parse_template_arguments,
    parse_templates,
)


class TemplateTests(unittest.TestCase):
    def args(self, text: str) -> list[tuple[str, str]]:
        templates = parse_templates(text, recursive=False)
        self.assertEqual(len(templates), 1)
        return [(a.name, a.value) for a in templates[0].arguments]

    def test_empty(self):
        self.assertEqual(parse_templates(""), [])

    def test_no_templates(self):
        self.assertEqual(parse_templates("some {text} [[link|x]] }}"), [])

    def test_single_brace(self):
        self.assertEqual(parse_templates("{a|b} {c}"), [])

    def test_simple(self):
        templates = parse_templates("Hello {{Foo|bar=baz|qux}}")
        self.assertEqual(
            templates,
            [
                TemplateRecord(
                    text="{{Foo|bar=baz|qux}}",
                    name="Foo",
                    arguments=[
                        ArgumentRecord("bar=baz", "bar", "baz"),
                        ArgumentRecord("qux", "1", "qux"),
                    ],
                    nestlevel=0,
                )
            ],
        )

    def test_no_arguments(self):
        templates = parse_templates("{{foo}}")
        self.assertEqual(len(templates), 1)
        self.assertEqual(templates[0].name, "Foo")
        self.assertEqual(templates[0].arguments, [])

    def test_name_capitalized(self):
        templates = parse_templates("{{ fooBar |x}}")
        self.assertEqual(templates[0].name, "FooBar")

    def test_name_multiline(self):
        templates = parse_templates("{{foo\n|a=1\n|b=2\n}}")
        self.assertEqual(templates[0].name, "Foo")
        self.assertEqual(
            [(a.name, a.value) for a in templates[0].arguments],
            [("a", "1"), ("b", "2")],
        )

    def test_several(self):
        templates = parse_templates("{{a}} text {{b|x}} more {{c}}")
        self.assertEqual([t.name for t in templates], ["A", "B", "C"])
        self.assertTrue(all(t.nestlevel == 0 for t in templates))

    def test_nested(self):
        templates = parse_templates("{{a|{{b|1}}}}")
        self.assertEqual(len(templates), 2)
        outer, inner = templates
        self.assertEqual(outer.name, "A")
        self.assertEqual(outer.text, "{{a|{{b|1}}}}")
        self.assertEqual(outer.nestlevel, 0)
        self.assertEqual(
            outer.arguments, [ArgumentRecord("{{b|1}}", "1", "{{b|1}}")]
        )
        self.assertEqual(inner.name, "B")
        self.assertEqual(inner.text, "{{b|1}}")
        self.assertEqual(inner.nestlevel, 1)
        self.assertEqual(inner.arguments, [ArgumentRecord("1", "1", "1")])

    def test_nested_not_recursive(self):
        templates = parse_templates("{{a|{{b|1}}}}", recursive=False)
        self.assertEqual([t.name for t in templates], ["A"])

    def test_nested_config_mapping(self):
        templates = parse_templates(
            "{{a|{{b|1}}}}", {"recursive": False, "unknown": 1}
        )
        self.assertEqual([t.name for t in templates], ["A"])

    def test_nested_pipes_not_split(self):
        self.assertEqual(
            self.args("{{a|x={{b|1|2}}|y}}"),
            [("x", "{{b|1|2}}"), ("1", "y")],
        )

    def test_deeply_nested(self):
        templates = parse_templates("{{a|{{b|{{c|z}}}}|{{d}}}}")
        self.assertEqual(
            [(t.name, t.nestlevel) for t in templates],
            [("A", 0), ("B", 1), ("D", 1), ("C", 2)],
        )
        self.assertEqual(templates[0].arguments[0].value, "{{b|{{c|z}}}}")
        self.assertEqual(templates[0].arguments[1].value, "{{d}}")

    def test_order_of_levels(self):
        templates = parse_templates("{{a|{{b|{{c}}}}}} {{d|{{e}}}}")
        self.assertEqual(
            [t.name for t in templates], ["A", "D", "B", "C", "E"]
        )

    def test_order_of_levels_siblings(self):
        templates = parse_templates("{{a|{{b|{{c}}}}{{d}}}}")
        self.assertEqual([t.name for t in templates], ["A", "B", "D", "C"])
        self.assertEqual([t.nestlevel for t in templates], [0, 1, 1, 2])

    def test_nesting_deeper_than_recursion_limit(self):
        depth = sys.getrecursionlimit() + 100
        templates = parse_templates("{{a|" * depth + "}}" * depth)
        self.assertEqual(len(templates), depth)
        self.assertEqual([t.nestlevel for t in templates], list(range(depth)))
        self.assertEqual(templates[-1].text, "{{a|}}")

    def test_nowiki(self):
        self.assertEqual(parse_templates("<nowiki>{{Fake}}</nowiki>"), [])

    def test_comment(self):
        templates = parse_templates("<!-- {{Fake}} -->{{Real}}")
        self.assertEqual([t.name for t in templates], ["Real"])

    def test_pre_source_syntaxhighlight(self):
        for tag in ("pre", "source", "syntaxhighlight"):
            text = f'<{tag} lang="x">{{{{Fake}}}}</{tag}>{{{{Real}}}}'
            templates = parse_templates(text)
            self.assertEqual([t.name for t in templates], ["Real"], tag)

    def test_verbatim_case_insensitive(self):
        self.assertEqual(parse_templates("<NoWiki>{{Fake}}</NOWIKI>"), [])

    def test_selfclosing_nowiki(self):
        # <nowiki/> does not start a verbatim region
        templates = parse_templates("a<nowiki/>b {{Real}}")
        self.assertEqual([t.name for t in templates], ["Real"])

    def test_verbatim_mismatched_close(self):
        # Only </nowiki> ends a <nowiki> region
        text = "<nowiki>--> {{Fake}}</nowiki>{{Real}}"
        self.assertEqual([t.name for t in parse_templates(text)], ["Real"])

    def test_nowiki_inside_template(self):
        self.assertEqual(
            self.args("{{a|<nowiki>|</nowiki>|b}}"),
            [("1", "<nowiki>|</nowiki>"), ("2", "b")],
        )

    def test_nowiki_pipe_inside_template(self):
        self.assertEqual(
            self.args("{{a|<nowiki>x|y</nowiki>}}"),
            [("1", "<nowiki>x|y</nowiki>")],
        )

    def test_comment_inside_template(self):
        templates = parse_templates("{{a|<!-- }} -->b}}")
        self.assertEqual(len(templates), 1)
        self.assertEqual(templates[0].text, "{{a|<!-- }} -->b}}")

    def test_parameter(self):
        self.assertEqual(parse_templates("{{{1}}}"), [])
        self.assertEqual(parse_templates("{{{1|{{foo}}}}}"), [])

    def test_parameter_in_template(self):
        templates = parse_templates("{{a|{{{1|x}}}|b}}")
        self.assertEqual(len(templates), 1)
        self.assertEqual(
            [(a.name, a.value) for a in templates[0].arguments],
            [("1", "{{{1|x}}}"), ("2", "b")],
        )

    def test_parameter_nested(self):
        templates = parse_templates("{{a|{{{1|{{{2}}}}}}}}")
        self.assertEqual(len(templates), 1)
        self.assertEqual(templates[0].text, "{{a|{{{1|{{{2}}}}}}}}")

    def test_four_braces(self):
        templates = parse_templates("{{{{a}}|b}}", recursive=False)
        self.assertEqual(len(templates), 1)
        self.assertEqual(templates[0].text, "{{{{a}}|b}}")

    def test_unclosed(self):
        self.assertEqual(parse_templates("{{a|b"), [])
        templates = parse_templates("{{a|{{b}}")
        self.assertEqual(templates, [])

    def test_stray_closing_braces(self):
        # Unmatched }} are ignored and do not affect later templates
        templates = parse_templates("}} {{a}} }} {{b|x}}")
        self.assertEqual([t.name for t in templates], ["A", "B"])
        self.assertEqual(templates[1].text, "{{b|x}}")

    def test_name_predicate(self):
        templates = parse_templates(
            "{{a|{{b}}}} {{b}}", name_predicate=lambda x: x == "B"
        )
        self.assertEqual(
            [(t.name, t.nestlevel) for t in templates], [("B", 0), ("B", 1)]
        )

    def test_template_predicate(self):
        templates = parse_templates(
            "{{a|x}} {{a}} {{b|y}}",
            name_predicate=lambda x: x == "A",
            template_predicate=lambda t: len(t.arguments) > 0,
        )
        self.assertEqual([t.text for t in templates], ["{{a|x}}"])

    def test_predicates_in_config(self):
        templates = parse_templates(
            "{{a}} {{b}}", {"name_predicate": lambda x: x == "B"}
        )
        self.assertEqual([t.text for t in templates], ["{{b}}"])

    def test_not_a_string(self):
        with self.assertRaises(TypeError):
            parse_templates(None)
        with self.assertRaises(TypeError):
            parse_templates(b"{{a}}")

    def test_idempotent(self):
        text = "x {{a|b=[[c|d]]|{{e|f}}}} y"
        for template in parse_templates(text):
            again = parse_templates(template.text, recursive=False)
            self.assertEqual(len(again), 1)
            self.assertEqual(again[0].text, template.text)
            self.assertEqual(again[0].name, template.name)
            self.assertEqual(again[0].arguments, template.arguments)

    def test_text_is_exact(self):
        text = "{{ a | b = c |\n d }}"
        templates = parse_templates(text)
        self.assertEqual(templates[0].text, text)
        self.assertEqual(templates[0].arguments[0].text, " b = c ")
        self.assertEqual(templates[0].arguments[1].text, "\n d ")


class ArgumentTests(unittest.TestCase):
    def args(self, text: str) -> list[tuple[str, str]]:
        return [(a.name, a.value) for a in parse_template_arguments(text)]

    def test_not_a_string(self):
        with self.assertRaises(TypeError):
            parse_template_arguments(5)

    def test_no_pipe(self):
        self.assertEqual(parse_template_arguments("{{foo}}"), [])

    def test_positional(self):
        self.assertEqual(
            self.args("{{foo| a |b|}}"), [("1", "a"), ("2", "b"), ("3", "")]
        )

    def test_named(self):
        self.assertEqual(
            self.args("{{foo| x = 1 |y=2}}"), [("x", "1"), ("y", "2")]
        )

    def test_explicit_position_consumed(self):
        self.assertEqual(
            self.args("{{foo|a|2=b|c}}"), [("1", "a"), ("2", "b"), ("3", "c")]
        )

    def test_explicit_first_position(self):
        self.assertEqual(self.args("{{foo|1=a|b}}"), [("1", "a"), ("2", "b")])

    def test_explicit_other_position(self):
        # 3= is not the next position, so it does not consume anything
        self.assertEqual(self.args("{{foo|3=a|b}}"), [("3", "a"), ("1", "b")])

    def test_value_with_equals(self):
        self.assertEqual(self.args("{{foo|a=b=c}}"), [("a", "b=c")])

    def test_escaped_equals(self):
        args = parse_template_arguments("{{foo|a{{=}}b|c{{ = }}d=e}}")
        self.assertEqual(
            [(a.text, a.name, a.value) for a in args],
            [
                ("a{{=}}b", "1", "a{{=}}b"),
                ("c{{ = }}d=e", "c{{ = }}d", "e"),
            ],
        )

    def test_wikilink_pipes(self):
        self.assertEqual(
            self.args("{{foo|[[a|b]]|x=[[c|d]]}}"),
            [("1", "[[a|b]]"), ("x", "[[c|d]]")],
        )

    def test_file_link_pipes(self):
        self.assertEqual(
            self.args("{{foo|[[File:x.jpg|thumb|left|A [[b|c]] d]]|e}}"),
            [("1", "[[File:x.jpg|thumb|left|A [[b|c]] d]]"), ("2", "e")],
        )

    def test_unclosed_link(self):
        self.assertEqual(self.args("{{foo|[[a|b}}"), [("1", "[[a"), ("2", "b")])

    def test_protected_offsets(self):
        # The pipe at offset 9 belongs to a nested template
        self.assertEqual(
            [
                (a.name, a.value)
                for a in parse_template_arguments("{{a|x={{b|c}}}}", {9})
            ],
            [("x", "{{b|c}}")],
        )
