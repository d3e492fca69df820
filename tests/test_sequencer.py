"""Unit tests for processing order policies.

WHY: Processing order is the order results land in the sidecar and the
order multi-part series are worked through. It must be reproducible
regardless of how the filesystem lists the directory.

HOW: AudioFile lists are built in deliberately scrambled order and fed
to the ordering functions; only names are compared.

RULES:
- Inputs are shuffled so tests never pass by accident of input order
"""

from pathlib import Path

import pytest

from gladia_batch.core.enumerator import AudioFile
from gladia_batch.core.sequencer import (
    OrderPolicy,
    group_series,
    interleave,
    parse_series_name,
    sequence_files,
)


def _files(*names):
    return [AudioFile(Path("/audio") / n) for n in names]


def _names(files):
    return [f.name for f in files]


class TestAscending:
    """ASCENDING is plain lexicographic order of names."""

    def test_sorts_lexicographically(self):
        files = _files("b.mp3", "a.wav", "C.flac", "a.mp3", "10.mp3", "2.mp3")

        result = sequence_files(files, OrderPolicy.ASCENDING)

        assert _names(result.ordered) == sorted(_names(files))
        assert result.dropped == []

    def test_is_default_policy(self):
        files = _files("z.mp3", "y.mp3")

        assert _names(sequence_files(files).ordered) == ["y.mp3", "z.mp3"]


class TestParseSeriesName:

    def test_parses_index_series_and_part(self):
        assert parse_series_name("1. SeriesA - 2.mp3") == (1, "SeriesA", 2)

    def test_series_name_may_contain_spaces_and_dashes(self):
        assert parse_series_name("12. Jean-Luc Picard - 7.wav") == (12, "Jean-Luc Picard", 7)

    @pytest.mark.parametrize("name", ["SeriesA - 1.mp3", "1. SeriesA.mp3", "intro.mp3", "1. A - x.mp3"])
    def test_non_matching_names(self, name):
        assert parse_series_name(name) is None


class TestInterleaved:
    """INTERLEAVED round-robins across series, parts ascending within each."""

    def test_scenario_two_series(self):
        files = _files("1. SeriesA - 2.mp3", "2. SeriesB - 1.mp3", "1. SeriesA - 1.mp3")

        result = sequence_files(files, OrderPolicy.INTERLEAVED)

        assert _names(result.ordered) == [
            "1. SeriesA - 1.mp3",
            "2. SeriesB - 1.mp3",
            "1. SeriesA - 2.mp3",
        ]

    def test_groups_of_three_one_two(self):
        files = _files(
            "3. C - 2.mp3", "1. A - 3.mp3", "2. B - 1.mp3",
            "1. A - 1.mp3", "3. C - 1.mp3", "1. A - 2.mp3",
        )

        result = sequence_files(files, OrderPolicy.INTERLEAVED)

        assert _names(result.ordered) == [
            "1. A - 1.mp3", "2. B - 1.mp3", "3. C - 1.mp3",
            "1. A - 2.mp3", "3. C - 2.mp3",
            "1. A - 3.mp3",
        ]

    def test_parts_sort_numerically_not_lexically(self):
        files = _files("1. A - 10.mp3", "1. A - 9.mp3", "1. A - 1.mp3")

        result = sequence_files(files, OrderPolicy.INTERLEAVED)

        assert _names(result.ordered) == ["1. A - 1.mp3", "1. A - 9.mp3", "1. A - 10.mp3"]

    def test_leading_index_orders_groups_numerically(self):
        files = _files("10. Late - 1.mp3", "2. Early - 1.mp3")

        result = sequence_files(files, OrderPolicy.INTERLEAVED)

        assert _names(result.ordered) == ["2. Early - 1.mp3", "10. Late - 1.mp3"]

    def test_non_matching_files_are_dropped_and_reported(self):
        files = _files("1. A - 1.mp3", "intro.mp3", "outro.wav")

        result = sequence_files(files, OrderPolicy.INTERLEAVED)

        assert _names(result.ordered) == ["1. A - 1.mp3"]
        assert _names(result.dropped) == ["intro.mp3", "outro.wav"]

    def test_order_is_independent_of_input_order(self):
        names = ["1. A - 1.mp3", "1. A - 2.mp3", "2. B - 1.mp3", "2. B - 2.mp3"]
        forward = sequence_files(_files(*names), OrderPolicy.INTERLEAVED)
        backward = sequence_files(_files(*reversed(names)), OrderPolicy.INTERLEAVED)

        assert _names(forward.ordered) == _names(backward.ordered)


class TestGrouping:

    def test_group_entries_are_strictly_ordered_by_part(self):
        groups, dropped = group_series(_files("1. A - 3.mp3", "1. A - 1.mp3", "1. A - 2.mp3"))

        assert dropped == []
        assert [part for _, part in groups[0].entries] == [1, 2, 3]

    def test_interleave_of_no_groups_is_empty(self):
        assert interleave([]) == []
