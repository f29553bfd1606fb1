"""Parsing of enumerated user input."""

from enum import Enum
from typing import TypeVar

from ..errors import ValidationError
from .text import fold_text

E = TypeVar("E", bound=Enum)

# Spellings accepted for the "all" sentinel
ALL_SENTINELS = ("", "all", "todos")


def coerce_choice(enum_cls: type[E], value) -> E | None:
    """Turn user input into an enum member, or None for "all"/unset."""
    if value is None or isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    if text.lower() in ALL_SENTINELS:
        return None
    folded = fold_text(text)
    for member in enum_cls:
        # Values match ignoring case and accents ("abdomen"), names too ("CHEST")
        if fold_text(member.value) == folded or member.name == text.upper():
            return member
    choices = ", ".join(member.value for member in enum_cls)
    raise ValidationError(f"Invalid {enum_cls.__name__}: {text!r}. Choose from: {choices}")


def choice_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]
