from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from scaffoldkit.domain.substitution import substitute

BRACE_FREE = st.text(alphabet=st.characters(blacklist_characters="{}"))
IDENTIFIER = st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,12}", fullmatch=True)


@settings(max_examples=100)
@given(text=BRACE_FREE)
def test_token_free_text_is_unchanged(text: str) -> None:
    assert substitute(text, {}) == text


@settings(max_examples=100)
@given(prefix=BRACE_FREE, suffix=BRACE_FREE, key=IDENTIFIER, value=BRACE_FREE)
def test_single_token_replaced_exactly_once(prefix: str, suffix: str, key: str, value: str) -> None:
    result = substitute(f"{prefix}{{{{{key}}}}}{suffix}", {key: value})
    assert result == prefix + value + suffix


@settings(max_examples=50)
@given(key=IDENTIFIER, value=st.text())
def test_substituted_values_are_not_rescanned(key: str, value: str) -> None:
    assert substitute("{{" + key + "}}", {key: value}) == value
