from __future__ import annotations

import pytest

from kiosk_print.layout import center, pad_end, pad_start, rule, two_column


@pytest.mark.parametrize("text", ["", "QTY", "x" * 21, "x" * 22, "Benne Masala Dosa With Extra Butter"])
def test_pad_end_always_returns_exact_width(text):
    assert len(pad_end(text, 22)) == 22


def test_pad_end_pads_on_the_right_and_truncates():
    assert pad_end("QTY", 5) == "QTY  "
    assert pad_end("Benne Masala Dosa With Extra Butter", 10) == "Benne Masa"


def test_pad_start_pads_on_the_left_and_truncates():
    assert pad_start("Rs 40.00", 14) == "      Rs 40.00"
    assert pad_start("abcdef", 3) == "abc"
    assert len(pad_start("", 14)) == 14


def test_padding_coerces_non_strings():
    assert pad_end(2, 4) == "2   "
    assert pad_start(7, 3) == "  7"


def test_two_column_fills_the_line():
    row = two_column("Subtotal:", "Rs 100.00")
    assert row == "Subtotal:" + " " * 22 + "Rs 100.00\n"
    assert len(row) == 41


def test_two_column_overflow_keeps_both_sides_with_one_space():
    left = "L" * 30
    right = "R" * 15
    row = two_column(left, right)
    assert row == f"{left} {right}\n"


@pytest.mark.parametrize(
    ("left", "right"),
    [("", ""), ("TOTAL:", "Rs 110"), ("a" * 20, "b" * 20), ("a" * 39, "b"), ("a" * 50, "b" * 50)],
)
def test_two_column_body_is_never_shorter_than_both_sides_plus_one(left, right):
    body = two_column(left, right, 40)[:-1]
    assert len(body) >= len(left) + len(right) + 1
    assert body.startswith(left)
    assert body.endswith(right)


def test_center_uses_floor_of_half_the_slack():
    assert center("KTR") == " " * 18 + "KTR\n"
    assert center("ab", 5) == " ab\n"


def test_center_leaves_full_width_text_unmodified():
    text = "x" * 40
    assert center(text, 40) == text + "\n"
    assert center("y" * 45, 40) == "y" * 45 + "\n"


def test_rule_is_a_full_width_dashed_line():
    assert rule() == "-" * 40 + "\n"
