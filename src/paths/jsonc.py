"""Comment and trailing-comma stripping for JSONC compiler configs."""

from __future__ import annotations

from typing import Any

import orjson


def strip_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments outside of string literals.

    Block comments are replaced by a single space so tokens on either side
    stay separated. An unterminated block comment swallows the rest of
    the text.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False

    while i < length:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = length if newline == -1 else newline
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
            out.append(" ")
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede a closing ``}`` or ``]``.

    Expects comment-free input.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False

    while i < length:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < length and text[j].isspace():
                j += 1
            if j < length and text[j] in "}]":
                i += 1
                continue
        out.append(ch)
        i += 1

    return "".join(out)


def loads_jsonc(text: str) -> Any:
    """Parse JSON-with-comments text.

    Raises:
        orjson.JSONDecodeError: If the cleaned text is still not valid JSON.
    """
    return orjson.loads(strip_trailing_commas(strip_comments(text)))
