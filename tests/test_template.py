"""Tests for the format template parser."""

from ps_app.modules.photosort.template import (
    Command,
    Literal,
    parse_template,
    split_path_template,
)


class TestParseTemplate:
    def test_plain_text_is_one_literal(self):
        assert parse_template("holiday.jpg") == [Literal("holiday.jpg")]

    def test_empty_template(self):
        assert parse_template("") == [Literal("")]

    def test_literals_and_commands_keep_order(self):
        segments = parse_template("IMG_{date}-x.{ext}")
        assert segments == [
            Literal("IMG_"),
            Command("", "date"),
            Literal("-x."),
            Command("", "ext"),
        ]

    def test_label_is_split_on_first_colon(self):
        assert parse_template("{_:date}") == [Command("_", "date")]
        assert parse_template("{x:date?%H:%M}") == [Command("x", "date?%H:%M")]

    def test_command_with_argument_and_no_label(self):
        assert parse_template("{type?P,V}") == [Command("", "type?P,V")]

    def test_adjacent_commands(self):
        assert parse_template("{name}{-:dup}") == [
            Command("", "name"),
            Command("-", "dup"),
        ]

    def test_empty_braces_produce_empty_command(self):
        assert parse_template("a{}b") == [Literal("a"), Command("", ""), Literal("b")]


class TestSplitPathTemplate:
    def test_one_segment_list_per_component(self):
        parts = split_path_template("{date?%Y}/raw/{name}.{ext}")
        assert len(parts) == 3
        assert parts[0] == [Command("", "date?%Y")]
        assert parts[1] == [Literal("raw")]
        assert parts[2][0] == Command("", "name")
