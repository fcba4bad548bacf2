"""Text cleanup helpers for extracted page content."""

from __future__ import annotations

import re

_WHITESPACE_RUN = re.compile(r"\s+")


def collapse_separators(text: str) -> str:
    """Collapse every run of whitespace into one space and trim the ends.

    For example::

        Lorem       ipsum
             dolor   sit
           amet

    becomes ``"Lorem ipsum dolor sit amet"``.

    Args:
        text: The text to clean up.

    Returns:
        The text with all separators collapsed.
    """
    return _WHITESPACE_RUN.sub(" ", text).strip()
