"""Tests for diagonal scanning of file pairs and corpora."""

import random

import numpy as np
import pytest

from duplo import scanner
from duplo.aggregator import total
from duplo.config import DuploConfig
from duplo.loader import build_corpus
from duplo.matrix import MatchMatrix
from duplo.models import ProcessResult
from duplo.scanner import (
    diagonal_runs,
    effective_min_block_size,
    find_blocks,
    is_same_filename,
    iter_pairs,
    process_pair,
    scan_corpus,
)

from conftest import SHARED_BLOCK


def _coords(blocks):
    return [(b.start_a, b.start_b, b.length) for b in blocks]


def _scan(a, b, min_block_size, percent=100):
    matrix = MatchMatrix(max(a.num_lines, b.num_lines))
    return find_blocks(a, b, matrix, min_block_size, percent)


def _brute_force_runs(a, b, min_length):
    """Maximal fixed-offset runs found cell by cell."""
    texts_a = [l.text for l in a.lines]
    texts_b = [l.text for l in b.lines]
    found = set()
    for ya in range(len(texts_a)):
        for xb in range(len(texts_b)):
            if texts_a[ya] != texts_b[xb]:
                continue
            if ya > 0 and xb > 0 and texts_a[ya - 1] == texts_b[xb - 1]:
                continue
            length = 0
            while (
                ya + length < len(texts_a)
                and xb + length < len(texts_b)
                and texts_a[ya + length] == texts_b[xb + length]
            ):
                length += 1
            if length >= min_length and not (a is b and ya == xb):
                found.add((ya, xb, length))
    return found


class TestEffectiveMinBlockSize:
    """Test the effective minimum block size."""

    def test_percentage_never_changes_threshold(self):
        for percent in (1, 10, 50, 100):
            for size in (1, 5, 1000):
                assert effective_min_block_size(4, percent, size, size) == 4

    def test_uses_larger_file(self):
        assert effective_min_block_size(7, 100, 2, 3) == 7


class TestDiagonalRuns:
    """Test run detection along one diagonal."""

    def test_runs_at_edges_and_middle(self):
        diagonal = np.array([True, True, False, True, True, True, False, True])
        assert list(diagonal_runs(diagonal, 1)) == [(0, 2), (3, 3), (7, 1)]

    def test_min_length_filters(self):
        diagonal = np.array([True, True, False, True, True, True])
        assert list(diagonal_runs(diagonal, 3)) == [(3, 3)]

    def test_empty(self):
        assert list(diagonal_runs(np.array([], dtype=bool), 1)) == []


class TestProcessPair:
    """Test duplicate detection for one file pair."""

    def test_shared_middle_block(self, make_source):
        a = make_source("a.c", ["x", "a", "b", "c", "y"])
        b = make_source("b.c", ["p", "a", "b", "c", "q"])
        blocks, result = _scan(a, b, min_block_size=3)
        assert _coords(blocks) == [(1, 1, 3)]
        assert result == ProcessResult(1, 3)

    def test_exactly_min_block_size_reported_once(self, make_source):
        a = make_source("a.c", ["u1", "u2"] + SHARED_BLOCK[:4] + ["u3"])
        b = make_source("b.c", ["v1"] + SHARED_BLOCK[:4] + ["v2", "v3", "v4"])
        blocks, result = _scan(a, b, min_block_size=4)
        assert _coords(blocks) == [(2, 1, 4)]
        assert result == ProcessResult(1, 4)

    def test_one_short_of_min_block_size_not_reported(self, make_source):
        a = make_source("a.c", ["u1", "u2"] + SHARED_BLOCK[:3] + ["u3"])
        b = make_source("b.c", ["v1"] + SHARED_BLOCK[:3] + ["v2", "v3", "v4"])
        blocks, result = _scan(a, b, min_block_size=4)
        assert blocks == []
        assert result == ProcessResult(0, 0)

    def test_self_comparison_suppresses_whole_file_match(self, make_source):
        a = make_source("a.c", ["a", "b", "a", "b"])
        blocks, result = _scan(a, a, min_block_size=2)
        assert _coords(blocks) == [(2, 0, 2)]
        assert result == ProcessResult(1, 2)

    def test_self_comparison_never_reports_main_diagonal(self, make_source):
        rng = random.Random(7)
        a = make_source("a.c", [rng.choice("abc") for _ in range(40)])
        blocks, _ = _scan(a, a, min_block_size=2)
        assert blocks
        assert all(b.start_a != b.start_b for b in blocks)

    def test_self_comparison_reports_each_duplicate_once(self, make_source):
        a = make_source("a.c", SHARED_BLOCK + ["unique one"] + SHARED_BLOCK)
        blocks, _ = _scan(a, a, min_block_size=4)
        assert _coords(blocks) == [(6, 0, 5)]

    def test_horizontal_part_finds_block_later_in_second_file(self, make_source):
        a = make_source("a.c", SHARED_BLOCK + ["only in a"])
        b = make_source("b.c", ["b1", "b2", "b3"] + SHARED_BLOCK)
        blocks, _ = _scan(a, b, min_block_size=4)
        assert _coords(blocks) == [(0, 3, 5)]

    def test_vertical_part_finds_block_later_in_first_file(self, make_source):
        a = make_source("a.c", ["a1", "a2"] + SHARED_BLOCK)
        b = make_source("b.c", SHARED_BLOCK + ["b1", "b2", "b3", "b4"])
        blocks, _ = _scan(a, b, min_block_size=4)
        assert _coords(blocks) == [(2, 0, 5)]

    def test_block_runs_to_end_of_both_files(self, make_source):
        a = make_source("a.c", ["a1"] + SHARED_BLOCK)
        b = make_source("b.c", ["b1"] + SHARED_BLOCK)
        blocks, _ = _scan(a, b, min_block_size=4)
        assert _coords(blocks) == [(1, 1, 5)]

    def test_pair_order_swaps_coordinates(self, make_source):
        a = make_source("a.c", ["a1", "a2"] + SHARED_BLOCK + ["a3"])
        b = make_source("b.c", ["b1"] + SHARED_BLOCK)
        ab, _ = _scan(a, b, min_block_size=4)
        ba, _ = _scan(b, a, min_block_size=4)
        assert {(x, y, n) for x, y, n in _coords(ab)} == {(y, x, n) for x, y, n in _coords(ba)}

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_matches_brute_force(self, make_source, seed):
        rng = random.Random(seed)
        a = make_source("a.c", [rng.choice("abcd") for _ in range(30)])
        b = make_source("b.c", [rng.choice("abcd") for _ in range(23)])
        blocks, result = _scan(a, b, min_block_size=2)
        assert set(_coords(blocks)) == _brute_force_runs(a, b, 2)
        assert len(blocks) == len(set(_coords(blocks)))
        assert result.duplicate_lines == sum(b.length for b in blocks)

    def test_self_matches_brute_force_upper_triangle(self, make_source):
        rng = random.Random(11)
        a = make_source("a.c", [rng.choice("abc") for _ in range(35)])
        blocks, _ = _scan(a, a, min_block_size=2)
        expected = {(y, x, n) for y, x, n in _brute_force_runs(a, a, 2) if y > x}
        assert set(_coords(blocks)) == expected

    def test_disjoint_files_scan_no_diagonal(self, make_source, monkeypatch):
        scanned = []

        def counting_runs(diagonal, min_length):
            scanned.append(len(diagonal))
            return iter(())

        monkeypatch.setattr(scanner, "diagonal_runs", counting_runs)
        a = make_source("a.c", [f"a{i}" for i in range(50)])
        b = make_source("b.c", [f"b{i}" for i in range(40)])
        blocks, result = _scan(a, b, min_block_size=1)
        assert blocks == []
        assert result == ProcessResult(0, 0)
        assert scanned == []

    def test_blocks_in_diagonal_order(self, make_source):
        a = make_source("a.c", ["q1", "q2", "s1", "s2", "a4", "t1", "t2", "a7", "r1", "r2"])
        b = make_source("b.c", ["t1", "t2", "q1", "q2", "b4", "b5", "s1", "s2", "r1", "r2"])
        blocks, result = _scan(a, b, min_block_size=2)
        # vertical diagonals 0 and 5, then horizontal diagonals 2 and 4
        assert _coords(blocks) == [(8, 8, 2), (5, 0, 2), (0, 2, 2), (2, 6, 2)]
        assert result == ProcessResult(4, 8)

    def test_generator_streams_blocks(self, make_source):
        a = make_source("a.c", SHARED_BLOCK + ["x"] + SHARED_BLOCK)
        gen = process_pair(a, a, MatchMatrix(a.num_lines), 4)
        first = next(gen)
        assert first.length == 5


class TestPairs:
    """Test pair enumeration and the same-filename rule."""

    def test_each_unordered_pair_once(self, make_source):
        files = [make_source(f"f{i}.c", ["x"]) for i in range(4)]
        pairs = list(iter_pairs(files))
        assert len(pairs) == 10
        assert len(set(pairs)) == 10
        assert all(i <= j for i, j in pairs)

    def test_self_pair_comes_first(self, make_source):
        files = [make_source(f"f{i}.c", ["x"]) for i in range(3)]
        assert list(iter_pairs(files)) == [(0, 0), (0, 1), (0, 2), (1, 1), (1, 2), (2, 2)]

    def test_ignore_same_filename_keeps_self_pairs(self, make_source):
        files = [make_source("src/util.c", ["x"]), make_source("lib/util.c", ["x"])]
        assert list(iter_pairs(files, ignore_same_filename=True)) == [(0, 0), (1, 1)]

    def test_is_same_filename(self):
        assert is_same_filename("a/b/main.c", "c/main.c")
        assert not is_same_filename("a/main.c", "a/main.h")


class TestScanCorpus:
    """Test scanning a whole corpus."""

    def _corpus(self, make_source):
        return build_corpus([
            make_source("one/a.c", ["a1"] + SHARED_BLOCK + ["a2"]),
            make_source("two/b.c", SHARED_BLOCK + ["b1", "b2"]),
            make_source("three/a.c", ["c1", "c2"] + SHARED_BLOCK),
        ])

    def test_totals_equal_sum_of_pairs(self, make_source):
        corpus = self._corpus(make_source)
        matrix = MatchMatrix(corpus.max_lines)
        seen = []
        result = scan_corpus(corpus, matrix, DuploConfig(), seen.append)

        per_pair = []
        for i, j in iter_pairs(corpus.files):
            _, pair_result = find_blocks(corpus.files[i], corpus.files[j], matrix, 4)
            per_pair.append(pair_result)
        assert result == total(per_pair)
        assert result == ProcessResult(3, 15)
        assert len(seen) == 3

    def test_file_done_reports_per_leading_file(self, make_source):
        corpus = self._corpus(make_source)
        done = []
        scan_corpus(
            corpus,
            MatchMatrix(corpus.max_lines),
            DuploConfig(),
            lambda block: None,
            on_file_done=lambda source, result: done.append((source.filename, result.blocks)),
        )
        assert done == [("one/a.c", 2), ("two/b.c", 1), ("three/a.c", 0)]

    def test_ignore_same_filename(self, make_source):
        corpus = self._corpus(make_source)
        result = scan_corpus(
            corpus,
            MatchMatrix(corpus.max_lines),
            DuploConfig(ignore_same_filename=True),
            lambda block: None,
        )
        assert result == ProcessResult(2, 10)

    def test_empty_corpus(self):
        corpus = build_corpus([])
        assert scan_corpus(corpus, MatchMatrix(0), DuploConfig(), lambda b: None) == ProcessResult()
