"""Tests for reference string parsing and workload generation."""

import random

import pytest

from utils import (
    MAX_GENERATED_LENGTH,
    generate_reference_sequence,
    page_color,
    parse_reference_string,
)


class TestParseReferenceString:
    """Verify literal reference string parsing."""

    def test_comma_separated(self) -> None:
        """Comma separated numbers parse in order."""
        assert parse_reference_string("7,0,1,2,0,3") == (7, 0, 1, 2, 0, 3)

    def test_mixed_separators(self) -> None:
        """Commas, spaces, tabs and newlines all separate tokens."""
        assert parse_reference_string(" 7, 0 1\n2\t3,,\r\n4 ") == (7, 0, 1, 2, 3, 4)

    def test_invalid_tokens_dropped(self) -> None:
        """Non-integer and negative tokens are dropped silently."""
        assert parse_reference_string("1, x, -4, 5.5, 2, 0x3, 3") == (1, 2, 3)

    def test_only_plain_ascii_integers(self) -> None:
        """Underscored, non-ASCII and suffixed numbers are dropped; a leading sign is allowed."""
        assert parse_reference_string("1_000 3.5 5abc +4 ٣ -0 12") == (4, 0, 12)

    @pytest.mark.parametrize("text", ["", "   ", ",,,", "a, b, -1", None])
    def test_nothing_valid(self, text) -> None:
        """Empty or fully invalid text gives an empty sequence."""
        assert parse_reference_string(text) == ()

    def test_duplicates_preserved(self) -> None:
        """Repeated pages are kept."""
        assert parse_reference_string("3 3 3") == (3, 3, 3)


class TestGenerateReferenceSequence:
    """Verify the seeded, locality-biased workload generator."""

    @pytest.mark.parametrize("total_pages, length", [
        (1, 2), (5, 10), (20, 40), (25, 50), (100, MAX_GENERATED_LENGTH),
    ])
    def test_length(self, total_pages, length) -> None:
        """The sequence has min(2 * total_pages, 50) references."""
        assert len(generate_reference_sequence(total_pages, seed=1)) == length

    def test_warmup_prefix(self) -> None:
        """The first references are 0, 1, 2, ... up to ten pages."""
        assert generate_reference_sequence(4, seed=3)[:4] == (0, 1, 2, 3)
        assert generate_reference_sequence(30, seed=3)[:10] == tuple(range(10))

    def test_pages_in_range(self) -> None:
        """Every generated page lies in [0, total_pages - 1]."""
        for seed in range(20):
            sequence = generate_reference_sequence(7, seed=seed)
            assert all(0 <= p < 7 for p in sequence)

    def test_single_page(self) -> None:
        """With one page every reference is page 0."""
        assert generate_reference_sequence(1, seed=9) == (0, 0)

    def test_zero_pages(self) -> None:
        """Zero pages give an empty sequence."""
        assert generate_reference_sequence(0, seed=1) == ()

    def test_negative_pages_rejected(self) -> None:
        """A negative page count is an error."""
        with pytest.raises(ValueError):
            generate_reference_sequence(-1)

    def test_same_seed_same_sequence(self) -> None:
        """A fixed seed reproduces the sequence exactly."""
        assert generate_reference_sequence(20, seed=42) == generate_reference_sequence(20, seed=42)

    def test_injected_rng(self) -> None:
        """An injected generator is used in place of the seed."""
        from_rng = generate_reference_sequence(20, rng=random.Random(5))
        assert from_rng == generate_reference_sequence(20, seed=5)

    def test_does_not_touch_global_random(self) -> None:
        """Seeded generation leaves the module-level random state alone."""
        random.seed(123)
        expected = random.random()
        random.seed(123)
        generate_reference_sequence(20, seed=8)
        assert random.random() == expected

    def test_locality(self) -> None:
        """Steps after the warm-up often move by at most two pages."""
        sequence = generate_reference_sequence(25, seed=11)
        tail = sequence[10:]
        near = sum(1 for a, b in zip(tail, tail[1:]) if abs(a - b) <= 2)
        assert near >= len(tail) // 3


class TestPageColor:
    """Verify frame colors."""

    def test_free_frame_is_grey(self) -> None:
        """Free frames are light grey."""
        assert page_color(None) == "#d3d3d3"

    def test_color_is_stable(self) -> None:
        """A page always gets the same color, and neighbours differ."""
        assert page_color(4) == page_color(4)
        assert page_color(4) != page_color(5)
        assert page_color(0).startswith("hsl(")
