"""Tests for the line, file and block models."""

import pytest

from duplo.models import Block, SourceFile, SourceLine, line_hash


class TestSourceLine:
    """Test line hashing and equality."""

    def test_hash_is_precomputed_and_stable(self):
        line = SourceLine("return x;", 3)
        assert line.hash == line_hash("return x;")
        assert SourceLine("return x;", 99).hash == line.hash

    def test_equality_ignores_line_number(self):
        assert SourceLine("foo();", 1) == SourceLine("foo();", 42)

    def test_different_text_not_equal(self):
        assert SourceLine("foo();", 1) != SourceLine("bar();", 1)

    def test_hash_collision_falls_back_to_text(self):
        a = SourceLine("alpha", 1)
        b = SourceLine("beta", 1)
        object.__setattr__(b, "hash", a.hash)
        assert a != b

    def test_immutable(self):
        line = SourceLine("x = 1", 1)
        with pytest.raises(AttributeError):
            line.text = "y = 2"

    def test_usable_as_dict_key(self):
        ids = {SourceLine("a", 1): 0}
        assert ids[SourceLine("a", 7)] == 0


class TestSourceFile:
    """Test the file model."""

    def test_num_lines(self, make_source):
        source = make_source("a.c", ["x", "y", "z"])
        assert source.num_lines == 3
        assert len(source) == 3

    def test_lines_are_a_tuple(self):
        source = SourceFile("a.c", [SourceLine("x", 1)])
        assert isinstance(source.lines, tuple)

    def test_identity_equality(self, make_source):
        a = make_source("a.c", ["x"])
        b = make_source("a.c", ["x"])
        assert a == a
        assert a != b


class TestBlock:
    """Test block line numbers and text."""

    def test_line_numbers_are_source_positions(self):
        a = SourceFile("a.c", [SourceLine("p", 2), SourceLine("q", 5), SourceLine("r", 9)])
        b = SourceFile("b.c", [SourceLine("q", 10), SourceLine("r", 11)])
        block = Block(a, 1, b, 0, 2)
        assert block.line_number_a == 5
        assert block.line_number_b == 10
        assert block.filename_a == "a.c"
        assert block.filename_b == "b.c"

    def test_text_lines_come_from_first_file(self, make_source):
        a = make_source("a.c", ["x", "y", "z", "w"])
        b = make_source("b.c", ["y", "z"])
        assert Block(a, 1, b, 0, 2).text_lines() == ["y", "z"]
