"""Parsing of ``name=value`` token strings as used in texture scripts."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

_WHITESPACE = frozenset(" \t\n\v\f\r")


class TokenString:
    """A set of ``name=value`` pairs with case-insensitive names.

    Values may be put in double quotes to hold whitespace. A name given
    more than once keeps the last value. A name without a value, or with
    an empty one, has the value ``""``.
    """

    def __init__(self, text: str) -> None:
        self._tokens: Dict[str, Tuple[str, str]] = {}
        self._parse(text or "")

    def _parse(self, text: str) -> None:
        size = len(text)
        i = 0
        while i < size:
            while i < size and text[i] in _WHITESPACE:
                i += 1

            name_start = i
            while i < size and text[i] != "=" and text[i] not in _WHITESPACE:
                i += 1
            name = text[name_start:i]

            while i < size and text[i] in _WHITESPACE:
                i += 1

            value = []
            if i < size and text[i] == "=":
                i += 1
                while i < size and text[i] in " \t":
                    i += 1
                quoted = False
                while i < size:
                    char = text[i]
                    if char in _WHITESPACE and not quoted:
                        break
                    i += 1
                    if char == '"':
                        quoted = not quoted
                        continue
                    value.append(char)

            if name:
                self._set(name, "".join(value))

    def _set(self, name: str, value: str) -> None:
        key = name.lower()
        stored_name = self._tokens[key][0] if key in self._tokens else name
        self._tokens[key] = (stored_name, value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of ``name``, or ``default`` if it is not present."""
        token = self._tokens.get(name.lower())
        return default if token is None else token[1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._tokens.values())

    def __repr__(self) -> str:
        pairs = " ".join(f'{name}="{value}"' for name, value in self._tokens.values())
        return f"TokenString({pairs!r})"