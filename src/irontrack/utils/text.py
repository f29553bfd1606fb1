"""Text normalization used for searching and ordering by name."""

import re
import unicodedata


def fold_text(text: str) -> str:
    """Fold text for accent- and case-insensitive comparison.

    Decomposes accented characters, drops the combining marks, casefolds and
    collapses runs of whitespace, so "Abdómen" and "abdomen" fold the same.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", stripped.casefold()).strip()


def name_sort_key(name: str, record_id: str | None = None) -> tuple[str, str, str]:
    """Sort key for lists ordered by name.

    Orders by the folded name, then by the raw name so "press" and "Press"
    land in a fixed order, then by id for exact duplicates.
    """
    return (fold_text(name), name, record_id or "")


def escape_like(text: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so user text matches as a literal substring."""
    return (
        text.replace(escape, escape * 2)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )
