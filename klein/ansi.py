"""Removal of terminal escape sequences from captured output."""

from __future__ import annotations

import re

_ESC = "\x1b"
_CSI = re.compile(r"\[[^\x40-\x7e]*[\x40-\x7e]")
_OSC = re.compile(r"\].*?(?:\x07|\x1b\\)", re.DOTALL)
_CHARSET_INTRODUCERS = frozenset("()*+-./")


def strip_ansi(s: str) -> str:
    """Return ``s`` as plain text.

    CSI, OSC and charset sequences are removed, backspace deletes the
    previous character, carriage returns and other control characters
    except newline and tab are dropped. An unfinished sequence at the end
    truncates the text there.
    """
    out: list[str] = []
    pos = 0
    end = len(s)
    while pos < end:
        ch = s[pos]
        if ch == _ESC:
            pos += 1
            if pos >= end:
                break
            kind = s[pos]
            if kind == "[":
                match = _CSI.match(s, pos)
                if match is None:
                    break
                pos = match.end()
            elif kind == "]":
                match = _OSC.match(s, pos)
                if match is None:
                    break
                pos = match.end()
            elif kind in _CHARSET_INTRODUCERS:
                if pos + 1 >= end:
                    break
                pos += 2
            else:
                pos += 1
        elif ch == "\x08":
            if out:
                out.pop()
            pos += 1
        else:
            if ch != "\r" and (ord(ch) >= 32 or ch in "\n\t"):
                out.append(ch)
            pos += 1
    return "".join(out)