"""Shared dataclasses for tokens and help requests."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path


class TokenKind(Enum):
    """Lexical role of one token in a PowerShell line."""

    COMMAND = "command"
    COMMAND_PARAMETER = "command_parameter"
    COMMAND_ARGUMENT = "command_argument"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    VARIABLE = "variable"
    STRING = "string"
    NUMBER = "number"
    COMMENT = "comment"
    GROUP_START = "group_start"
    GROUP_END = "group_end"
    STATEMENT_SEPARATOR = "statement_separator"
    OTHER = "other"


@dataclass(frozen=True)
class Token:
    """One classified token.

    ``start`` is the 1-based column of the first character and ``end`` the
    1-based column just past the last one.
    """

    kind: TokenKind
    content: str
    start: int
    end: int


@dataclass(frozen=True)
class ParseError:
    """Non-fatal tokenizer diagnostic."""

    message: str
    offset: int


@dataclass(frozen=True)
class TokenizeResult:
    """Tokens of one line plus the errors met while scanning it."""

    tokens: tuple[Token, ...] = ()
    errors: tuple[ParseError, ...] = ()


@dataclass(frozen=True)
class HelpRequest:
    """Templated help lookup.

    ``arguments[0]`` is reserved for the output destination and stays ``None``
    until the caller picks one with :meth:`with_output`.
    """

    template: str
    arguments: tuple[str | None, ...] = (None,)
    title: str = "Help"

    @property
    def output(self) -> str | None:
        return self.arguments[0] if self.arguments else None

    def with_output(self, path: Path | str) -> HelpRequest:
        return replace(self, arguments=(str(path), *self.arguments[1:]))
