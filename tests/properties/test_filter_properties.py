import html

from hypothesis import given, strategies as st

from flake.filters import escape
from flake.filters._builtin import substr


@given(value=st.text())
def test_escape_leaves_no_markup_characters(value: str) -> None:
    result = escape(value)

    assert not set("<>\"'") & set(result)


@given(value=st.text())
def test_escape_is_reversible(value: str) -> None:
    assert html.unescape(escape(value)) == value


@given(value=st.text())
def test_escaping_without_double_encode_is_idempotent(value: str) -> None:
    once = escape(value)

    assert escape(once, double_encode=False) == once


@given(value=st.text(max_size=20), start=st.integers(-30, 30))
def test_substr_start_matches_slicing(value: str, start: int) -> None:
    assert substr(value, str(start)) == value[start:]


@given(
    value=st.text(max_size=20),
    start=st.integers(0, 30),
    length=st.integers(0, 30),
)
def test_substr_length_matches_slicing(value: str, start: int, length: int) -> None:
    assert substr(value, str(start), str(length)) == value[start : start + length]
