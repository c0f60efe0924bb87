# utils.py

import random
import re
from typing import Optional, Tuple

# Longest sequence the generator produces
MAX_GENERATED_LENGTH = 50
# Pages referenced in ascending order before the random walk starts
WARMUP_PAGES = 10
# Probability that the next reference stays near the previous one
LOCALITY = 0.7
LOCALITY_SPAN = 2

_TOKEN_SEPARATORS = re.compile(r"[\s,]+")
# Optional sign and ASCII digits only: no underscores, no other scripts
_PAGE_TOKEN = re.compile(r"[+-]?[0-9]+")


def parse_reference_string(text: str) -> Tuple[int, ...]:
    """
    Parse a reference string such as "7, 0, 1\\n2 0".

    Tokens are separated by commas and/or whitespace. A token counts only if
    it is a plain decimal integer written with ASCII digits and is not
    negative. Anything else, such as "-4", "1_000" or "3.5", is dropped
    without raising; empty or fully invalid text gives an empty sequence.
    """
    pages = []
    for token in _TOKEN_SEPARATORS.split(text or ""):
        if not _PAGE_TOKEN.fullmatch(token):
            continue
        page_no = int(token)
        if page_no >= 0:
            pages.append(page_no)
    return tuple(pages)


def generate_reference_sequence(total_pages: int, seed: Optional[int] = None,
                                rng: Optional[random.Random] = None) -> Tuple[int, ...]:
    """
    Generate a reference sequence with locality of reference.

    The sequence has min(2 * total_pages, 50) entries. It starts with pages
    0, 1, 2, ... (at most 10 of them), then each further page is, with
    probability 0.7, the previous page moved by -2..+2 and clamped to the
    valid range, and otherwise a uniformly random page.

    Args:
        total_pages (int): Number of distinct pages, referenced as 0..total_pages-1
        seed (Optional[int]): Seed for a private random generator. The same
            seed always gives the same sequence.
        rng (Optional[random.Random]): Generator to draw from instead of
            seeding one. Takes precedence over seed.

    If neither seed nor rng is given the output is NOT reproducible: a fresh
    generator seeded from the operating system is used.

    Raises:
        ValueError: If total_pages is negative
    """
    if total_pages < 0:
        raise ValueError("total_pages must be non-negative")
    if rng is None:
        rng = random.Random(seed)

    length = min(total_pages * 2, MAX_GENERATED_LENGTH)
    sequence = list(range(min(total_pages, WARMUP_PAGES, length)))

    while len(sequence) < length:
        if rng.random() < LOCALITY:
            offset = rng.randint(-LOCALITY_SPAN, LOCALITY_SPAN)
            page_no = min(max(sequence[-1] + offset, 0), total_pages - 1)
        else:
            page_no = rng.randint(0, total_pages - 1)
        sequence.append(page_no)

    return tuple(sequence)


def page_color(page_no: Optional[int]) -> str:
    """Return a color for a frame holding page_no (grey for free frames)."""
    if page_no is None:
        return "#d3d3d3"  # light grey
    # pastel hue spread by the golden angle so neighbouring pages differ
    return f"hsl({(page_no * 137) % 360}, 70%, 75%)"
