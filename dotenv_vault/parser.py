"""
Dotenv grammar — parses ``KEY=value`` text into an ordered mapping.

Used for plaintext ``.env`` files, for the plaintext recovered from a vault,
and (without expansion) for the vault file itself.

Usage:
    from dotenv_vault.parser import parse
    parse('A=1\\nB="${A}2"')     # {"A": "1", "B": "12"}
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Mapping
from pathlib import Path

from dotenv_vault.errors import MalformedEnvFile

Lookup = Callable[[str], "str | None"]

_ASSIGNMENT = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=[ \t]*(.*)$")
_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

_DOUBLE_QUOTE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
}


class _Expander:
    """Resolves ``$NAME`` references against the parse so far, then ``lookup``."""

    def __init__(self, assigned: Mapping[str, str], lookup: Lookup | None) -> None:
        self.assigned = assigned
        self.lookup = lookup

    def value_of(self, name: str) -> str:
        if name in self.assigned:
            return self.assigned[name]
        if self.lookup is not None:
            found = self.lookup(name)
            if found is not None:
                return found
        return ""

    def reference(self, text: str, start: int) -> tuple[str, int] | None:
        """Read a reference at ``text[start] == '$'``. Returns (value, end) or None."""
        nxt = start + 1
        if nxt < len(text) and text[nxt] == "{":
            close = text.find("}", nxt + 1)
            if close == -1:
                return None
            name = text[nxt + 1 : close]
            if not _NAME.fullmatch(name):
                return None
            return self.value_of(name), close + 1
        match = _NAME.match(text, nxt)
        if not match:
            return None
        return self.value_of(match.group(0)), match.end()


def _unquoted(raw: str, expander: _Expander | None) -> str:
    # A '#' only starts a comment at the beginning or after whitespace.
    comment = re.search(r"(^|\s)#", raw)
    if comment:
        raw = raw[: comment.start()]
    raw = raw.strip()

    out: list[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\\" and raw.startswith("$", i + 1):
            out.append("$")
            i += 2
            continue
        if ch == "$" and expander is not None:
            ref = expander.reference(raw, i)
            if ref is not None:
                out.append(ref[0])
                i = ref[1]
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def _check_trailer(trailer: str, line_no: int) -> None:
    trailer = trailer.strip()
    if trailer and not trailer.startswith("#"):
        raise MalformedEnvFile(line_no, "unexpected characters after closing quote")


def _single_quoted(raw: str, line_no: int) -> str:
    out: list[str] = []
    i = 1
    while i < len(raw):
        ch = raw[i]
        if ch == "\\" and raw.startswith("'", i + 1):
            out.append("'")
            i += 2
            continue
        if ch == "'":
            _check_trailer(raw[i + 1 :], line_no)
            return "".join(out)
        out.append(ch)
        i += 1
    raise MalformedEnvFile(line_no, "unterminated single-quoted value")


def _double_quoted(
    lines: list[str], index: int, raw: str, expander: _Expander | None
) -> tuple[str, int]:
    """Scan a double-quoted value that may continue onto later lines.

    Returns the value and the index of the line holding the closing quote.
    """
    start_line = index + 1
    out: list[str] = []
    text = raw
    i = 1
    while True:
        while i < len(text):
            ch = text[i]
            if ch == "\\" and i + 1 < len(text):
                nxt = text[i + 1]
                if nxt in _DOUBLE_QUOTE_ESCAPES:
                    out.append(_DOUBLE_QUOTE_ESCAPES[nxt])
                    i += 2
                    continue
                if nxt == "$":
                    out.append("$")
                    i += 2
                    continue
            if ch == '"':
                _check_trailer(text[i + 1 :], index + 1)
                return "".join(out), index
            if ch == "$" and expander is not None:
                ref = expander.reference(text, i)
                if ref is not None:
                    out.append(ref[0])
                    i = ref[1]
                    continue
            out.append(ch)
            i += 1
        index += 1
        if index >= len(lines):
            raise MalformedEnvFile(start_line, "unterminated double-quoted value")
        out.append("\n")
        text = lines[index]
        i = 0


def parse(
    text: str,
    *,
    expand: bool = True,
    lookup: Lookup | None = os.environ.get,
) -> dict[str, str]:
    """Parse dotenv text into an ordered ``{name: value}`` mapping.

    ``lookup`` supplies values for ``$NAME`` references not assigned earlier
    in the same text (the process environment by default). Raises
    MalformedEnvFile with the 1-based line number of the first bad line.
    """
    lines = _LINE_BREAK.split(text)
    mapping: dict[str, str] = {}
    expander = _Expander(mapping, lookup) if expand else None

    index = 0
    while index < len(lines):
        line_no = index + 1
        stripped = lines[index].lstrip()
        if not stripped.rstrip() or stripped.startswith("#"):
            index += 1
            continue

        match = _ASSIGNMENT.match(stripped)
        if not match:
            raise MalformedEnvFile(line_no)
        name, raw = match.group(1), match.group(2)

        if raw.startswith("'"):
            value = _single_quoted(raw, line_no)
        elif raw.startswith('"'):
            value, index = _double_quoted(lines, index, raw, expander)
        else:
            value = _unquoted(raw, expander)

        if "\x00" in value:
            raise MalformedEnvFile(line_no, "NUL character in value")

        mapping[name] = value
        index += 1

    return mapping


def parse_file(path: str | Path, **kwargs) -> dict[str, str]:
    """Read a UTF-8 dotenv file and parse it. IO errors propagate."""
    return parse(Path(path).read_text(encoding="utf-8"), **kwargs)


def _quote(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("$", "\\$")
    )
    return f'"{escaped}"'


def serialize(mapping: Mapping[str, str]) -> str:
    """Render a mapping as dotenv text that parses back to the same mapping."""
    return "".join(f"{name}={_quote(value)}\n" for name, value in mapping.items())


__all__ = ["parse", "parse_file", "serialize"]
