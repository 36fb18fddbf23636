"""Parse and reorder the tagged token stream used by text normalisation.

A tagged stream looks like ``date { day: "5" month: "8" }``: a sequence of
named tokens, each holding ``key: "value"`` members. Reordering rewrites
each token with its members in the canonical order for the token name so
that a verbalizer sees them in a fixed sequence.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import IntEnum

EOS = "<EOS>"
UTF8_WHITESPACE = frozenset({" ", "\t", "\n", "\r", "\x0b\x0c"})
ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")

TN_ORDERS: dict[str, list[str]] = {
    "date": ["year", "month", "day"],
    "fraction": ["denominator", "numerator"],
    "measure": ["denominator", "numerator", "value"],
    "money": ["value", "currency"],
    "time": ["noon", "hour", "minute", "second"],
}

ITN_ORDERS: dict[str, list[str]] = {
    "date": ["year", "month", "day"],
    "fraction": ["sign", "numerator", "denominator"],
    "measure": ["numerator", "denominator", "value"],
    "money": ["currency", "value"],
    "time": ["hour", "minute", "second", "noon"],
}


class ParseType(IntEnum):
    """Direction of normalisation the token stream belongs to."""

    TN = 0x00  # text normalisation
    ITN = 0x01  # inverse text normalisation


@dataclass
class Token:
    """One named token with its members in the order they were read."""

    name: str
    order: list[str] = field(default_factory=list)
    members: dict[str, str] = field(default_factory=dict)

    def append(self, key: str, value: str) -> None:
        """Record a member; a repeated key keeps its last value."""
        self.order.append(key)
        self.members[key] = value

    def render(self, orders: Mapping[str, Sequence[str]]) -> str:
        """Serialise the token, using the canonical order for its name if known."""
        if self.name in orders:
            self.order = list(orders[self.name])
        parts = [
            f' {key}: "{self.members[key]}"'
            for key in self.order
            if key in self.members
        ]
        return f"{self.name} {{{''.join(parts)} }}"


class TokenParser:
    """Reads a tagged token stream and rewrites it in canonical member order."""

    def __init__(self, parse_type: ParseType = ParseType.ITN) -> None:
        self.parse_type = ParseType(parse_type)
        self.orders = TN_ORDERS if self.parse_type is ParseType.TN else ITN_ORDERS
        self._text = ""
        self._index = 0
        self._ch = EOS
        self.tokens: list[Token] = []

    def _load(self, text: str) -> None:
        if not text:
            raise ValueError("cannot parse an empty token stream")
        self._text = text
        self._index = 0
        self._ch = text[0]

    def _read(self) -> bool:
        if self._index < len(self._text) - 1:
            self._index += 1
            self._ch = self._text[self._index]
            return True
        self._ch = EOS
        return False

    def _parse_ws(self) -> bool:
        not_eos = self._ch != EOS
        while not_eos and self._ch == " ":
            not_eos = self._read()
        return not_eos

    def _parse_char(self, expected: str) -> bool:
        if self._ch == expected:
            self._read()
            return True
        return False

    def _parse_chars(self, expected: str) -> bool:
        matched = False
        for char in expected:
            matched |= self._parse_char(char)
        return matched

    def _parse_key(self) -> str:
        if self._ch == EOS:
            raise ValueError("unexpected end of input while reading a key")
        if self._ch in UTF8_WHITESPACE:
            raise ValueError(
                f"unexpected whitespace {self._ch!r} at position {self._index}"
            )
        key = []
        while self._ch in ASCII_LETTERS:
            key.append(self._ch)
            self._read()
        return "".join(key)

    def _parse_value(self) -> str:
        if self._ch == EOS:
            raise ValueError("unexpected end of input while reading a value")
        value = []
        escape = False
        while self._ch != '"':
            if self._ch == EOS:
                raise ValueError("unterminated value in token stream")
            value.append(self._ch)
            escape = self._ch == "\\" and not escape
            self._read()
            if escape:
                if self._ch == EOS:
                    raise ValueError("unterminated escape in token stream")
                value.append(self._ch)
                self._read()
        return "".join(value)

    def _parse(self, text: str) -> None:
        self._load(text)
        self.tokens = []
        while self._parse_ws():
            token = Token(self._parse_key())
            self._parse_chars(" { ")
            while self._parse_ws():
                if self._ch == "}":
                    self._parse_char("}")
                    break
                key = self._parse_key()
                self._parse_chars(': "')
                value = self._parse_value()
                self._parse_char('"')
                token.append(key, value)
            self.tokens.append(token)

    def reorder(self, text: str) -> str:
        """Parse ``text`` and return it with each token's members reordered."""
        self._parse(text)
        return " ".join(token.render(self.orders) for token in self.tokens).strip()