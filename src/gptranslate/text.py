from __future__ import annotations

import re

LINE_BREAK = re.compile(r"\r\n|\r|\n")


def normalize_text(text: str) -> str:
    """Trim every line while keeping blank lines as paragraph breaks.

    Only CR, LF and CRLF end a line; form feeds and Unicode separators stay inside it.
    """
    return "\n".join(line.strip() for line in LINE_BREAK.split(text))
