"""Test form-input string helpers.

Tests for nwb_metadata.utils.strings:
    - is_integer(): digits only, no sign, no decimal point
    - comma_separated_string_to_numbers(): drops non-integers, dedups in order

Run:
    pytest tests/test_strings.py -v
"""

from __future__ import annotations

import pytest

from nwb_metadata.utils.strings import comma_separated_string_to_numbers, is_integer


class TestIsInteger:
    @pytest.mark.parametrize("value", ["0", "7", "0012", "123456"])
    def test_digits(self, value: str) -> None:
        assert is_integer(value)

    @pytest.mark.parametrize("value", ["", "-1", "+1", "1.0", "1e3", " 1", "one", "1 2"])
    def test_not_digits(self, value: str) -> None:
        assert not is_integer(value)

    def test_non_string(self) -> None:
        assert not is_integer(3)  # type: ignore[arg-type]


class TestCommaSeparated:
    def test_mixed_input(self) -> None:
        assert comma_separated_string_to_numbers("1, 2.5, 3, abc, 3") == [1, 3]

    def test_order_kept(self) -> None:
        assert comma_separated_string_to_numbers("3,1,2,1") == [3, 1, 2]

    def test_whitespace_tolerated(self) -> None:
        assert comma_separated_string_to_numbers("  4 ,5  ,\t6") == [4, 5, 6]

    @pytest.mark.parametrize("text", ["", ",,,", "a, b", "-1, -2"])
    def test_nothing_usable(self, text: str) -> None:
        assert comma_separated_string_to_numbers(text) == []
