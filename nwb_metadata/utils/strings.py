"""String helpers for form input that ends up in the metadata document.

Bad channels are typed as comma-separated text but stored as a list of
channel indices; electrode group ids arrive as digit strings or ints.
"""

import re
from typing import List

_INTEGER_RE = re.compile(r'^\d+$')


def is_integer(value: str) -> bool:
    """True if ``value`` is a non-negative integer literal (digits only)."""
    return isinstance(value, str) and bool(_INTEGER_RE.match(value))


def comma_separated_string_to_numbers(string_set: str) -> List[int]:
    """Parse comma-separated integers; floats, negatives and words are dropped.

    Duplicates are removed, keeping first-seen order.

    Examples
    --------
    >>> comma_separated_string_to_numbers('1, 2.5, 3, abc, 3')
    [1, 3]
    """
    items = [s.strip() for s in string_set.split(',')]
    return list(dict.fromkeys(int(s) for s in items if is_integer(s)))
