"""
Model formula serialization.

Formulas use the compact ``label ~ features`` notation understood by the
backend. Only the ``~ . : + -`` operators are supported; column names that
contain other characters must be quoted with backticks.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from mlbridge.errors import InvalidConfiguration

_QUOTED = re.compile(r"`[^`]*`")
_ALLOWED = re.compile(r"^[\w.\s~:+\-()]*$")


@dataclass(frozen=True)
class Formula:
    """
    Formula built from column names.

    Attributes:
        label: Label column.
        features: Feature terms; ``"."`` selects all remaining columns.
    """

    label: str
    features: Sequence[str] = (".",)

    def __str__(self) -> str:
        terms = " + ".join(_quote(f) for f in self.features) or "."
        return f"{_quote(self.label)} ~ {terms}"


def _quote(name: str) -> str:
    """Backtick-quote a column name that is not a plain identifier."""
    if name == "." or re.fullmatch(r"[A-Za-z_.][\w.]*", name):
        return name
    return f"`{name}`"


def serialize_formula(formula: "str | Formula") -> str:
    """
    Serialize a formula into the single-line string sent to the backend.

    Args:
        formula: Formula string or Formula instance.

    Returns:
        Formula with whitespace collapsed to single spaces.

    Raises:
        InvalidConfiguration: If the formula has no label, more than one
            ``~`` or an unsupported operator.
    """
    text = " ".join(str(formula).split())

    unquoted = _QUOTED.sub("x", text)
    if not _ALLOWED.match(unquoted):
        msg = (
            f"Unsupported formula {text!r}: only the '~', '.', ':', '+' and '-' "
            "operators are supported"
        )
        raise InvalidConfiguration(msg)

    if unquoted.count("~") != 1:
        msg = f"Formula must contain exactly one '~', got: {text!r}"
        raise InvalidConfiguration(msg)

    label, rhs = unquoted.split("~")
    if not label.strip() or not rhs.strip():
        msg = f"Formula needs both a label and feature terms, got: {text!r}"
        raise InvalidConfiguration(msg)

    return text
