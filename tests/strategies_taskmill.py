# taskmill:header:start
#
#   project      : TaskMill
#   file         : strategies_taskmill.py
#   file_relpath : tests/strategies_taskmill.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Hypothesis strategies for context keys, status tokens and halt sequences."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from hypothesis import strategies as st

Draw = Callable[[st.SearchStrategy[Any]], Any]

HaltKind = Literal["skip", "fail"]

IDENTIFIER_ALPHABET: str = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"


def s_context_key() -> st.SearchStrategy[str]:
    """ASCII identifier-like keys, so case folding round-trips through `upper()`."""
    return st.text(alphabet=IDENTIFIER_ALPHABET, min_size=1, max_size=24)


@st.composite
def s_key_spelling(draw: Draw) -> tuple[str, str]:
    """A key and another spelling of it (case and surrounding blanks changed)."""
    key: str = draw(s_context_key())
    swapped: str = "".join(c.upper() if draw(st.booleans()) else c.lower() for c in key)
    left: str = draw(st.sampled_from(["", " ", "\t"]))
    right: str = draw(st.sampled_from(["", " ", "  "]))
    return key, f"{left}{swapped}{right}"


@st.composite
def s_status_token(draw: Draw, value: str) -> str:
    """Spell a status value with random case and surrounding blanks."""
    spelled: str = "".join(c.upper() if draw(st.booleans()) else c for c in value)
    return f"{draw(st.sampled_from(['', ' ']))}{spelled}{draw(st.sampled_from(['', ' ']))}"


@st.composite
def s_breakpoint_tokens(draw: Draw) -> tuple[list[str], set[str]]:
    """A non-empty list of spelled breakpoint tokens and the set of values they name."""
    values: list[str] = draw(
        st.lists(st.sampled_from(["skipped", "failed"]), min_size=1, max_size=4)
    )
    tokens: list[str] = [draw(s_status_token(value)) for value in values]
    return tokens, set(values)


def s_halt_ops() -> st.SearchStrategy[list[tuple[HaltKind, str]]]:
    """Sequences of non-halting ``skip``/``fail`` calls with reasons."""
    return st.lists(
        st.tuples(
            st.sampled_from(["skip", "fail"]),
            st.text(alphabet=IDENTIFIER_ALPHABET, min_size=1, max_size=12),
        ),
        min_size=1,
        max_size=8,
    )
