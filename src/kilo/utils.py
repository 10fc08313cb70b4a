"""Terminal text utilities: display-width measurement and clipping."""

from __future__ import annotations

import wcwidth as _wcwidth


def char_width(ch: str) -> int:
    """Return the number of terminal columns *ch* occupies (0 for controls)."""
    w = _wcwidth.wcwidth(ch)
    return max(w, 0)


def visible_width(text: str) -> int:
    """Return the display width of *text* in terminal columns."""
    w = _wcwidth.wcswidth(text)
    if w >= 0:
        return w
    # wcswidth gives up on control characters; count the printable ones
    return sum(char_width(ch) for ch in text)


def truncate_to_width(text: str, max_width: int) -> str:
    """Clip *text* so that it fits into *max_width* terminal columns.

    Wide characters that would straddle the limit are dropped whole.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    out: list[str] = []
    width = 0
    for ch in text:
        w = char_width(ch)
        if width + w > max_width:
            break
        out.append(ch)
        width += w
    return "".join(out)
