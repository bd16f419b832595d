"""Splitting of a single command-line string into argument tokens."""

from __future__ import annotations

from typing import List, Sequence


def tokenize(command_line: str) -> List[str]:
    """
    Split a command line into tokens.

    A string without whitespace outside double quotes is kept as a single
    token, so a bare or quoted executable path is never broken up. Otherwise
    the string is split on whitespace. Text between double quotes belongs to
    the surrounding token, and the quotes themselves are always removed. An
    unterminated quote runs to the end of the string.

    Examples:
        >>> tokenize('"/opt/My App/run"')
        ['/opt/My App/run']
        >>> tokenize('code --goto "${resource_path}"')
        ['code', '--goto', '${resource_path}']
    """
    if not command_line or not command_line.strip():
        return []

    tokens: List[str] = []
    current: List[str] = []
    in_quotes = False
    # A pair of quotes produces a token even when empty
    started = False

    for ch in command_line:
        if ch == '"':
            in_quotes = not in_quotes
            started = True
        elif ch.isspace() and not in_quotes:
            if started:
                tokens.append("".join(current))
                current = []
                started = False
        else:
            current.append(ch)
            started = True

    if started:
        tokens.append("".join(current))

    return tokens


def join_tokens(tokens: Sequence[str]) -> str:
    """Join tokens into one command line, quoting those with whitespace."""
    parts = []
    for token in tokens:
        if not token or any(ch.isspace() for ch in token):
            parts.append(f'"{token}"')
        else:
            parts.append(token)
    return " ".join(parts)
