"""PowerShell line tokenizer."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal, Protocol

from pshelp.types import ParseError, Token, TokenizeResult, TokenKind

# start: beginning of a statement, pipeline: after a pipe or chain operator,
# invoke: after the & or . call operators, command: after a command name,
# expression: after an operand, name: after a naming keyword such as function.
Mode = Literal["start", "pipeline", "invoke", "command", "expression", "name"]
COMMAND_POSITIONS: frozenset[Mode] = frozenset({"start", "pipeline", "invoke"})

KEYWORDS = frozenset(
    {
        "begin",
        "break",
        "catch",
        "class",
        "configuration",
        "continue",
        "data",
        "do",
        "dynamicparam",
        "else",
        "elseif",
        "end",
        "enum",
        "exit",
        "filter",
        "finally",
        "for",
        "foreach",
        "function",
        "hidden",
        "if",
        "in",
        "param",
        "process",
        "return",
        "static",
        "switch",
        "throw",
        "trap",
        "try",
        "until",
        "using",
        "while",
    }
)
NAMING_KEYWORDS = frozenset({"class", "configuration", "enum", "filter", "function", "using"})

_NUMBER_BODY = r"(?:0x[0-9a-f]+|\d+(?:\.\d+)?(?:e[+-]?\d+)?)(?:[dl]|kb|mb|gb|tb|pb)?"
_WORD_CHARS = r"[^\s;|(){},'\"&<>]"

NEWLINE_RE = re.compile(r"\r\n|\n|\r")
BLANK_RE = re.compile(r"(?:[ \t\f]|`(?:\r\n|\n))+")
BLOCK_COMMENT_RE = re.compile(r"<#.*?(?:#>|\Z)", re.DOTALL)
LINE_COMMENT_RE = re.compile(r"#[^\r\n]*")
GROUP_START_RE = re.compile(r"\$\(|@[({]|[({]")
REDIRECTION_RE = re.compile(r"[1-6*]?>>|[1-6*]?>(?:&[12])?")
CHAIN_RE = re.compile(r"&&|\|\||\||&")
VARIABLE_RE = re.compile(r"[$@](?:\{[^}]*\}|[A-Za-z0-9_?:]+|\$|\^)")
NUMBER_RE = re.compile(_NUMBER_BODY + r"(?!\w)", re.IGNORECASE)
ARGUMENT_NUMBER_RE = re.compile(r"-?" + _NUMBER_BODY + rf"(?!{_WORD_CHARS})", re.IGNORECASE)
PARAMETER_RE = re.compile(r"--?[A-Za-z_?][\w-]*:?")
DASH_OPERATOR_RE = re.compile(
    r"-(?:[ci]?(?:eq|ne|gt|ge|lt|le|like|notlike|match|notmatch|contains|notcontains|in|notin|replace|split)"
    r"|and|or|xor|not|band|bor|bxor|bnot|shl|shr|is|isnot|as|f|join)(?![\w-])",
    re.IGNORECASE,
)
ASSIGNMENT_RE = re.compile(r"[-+*/%]?=")
SYMBOL_OPERATOR_RE = re.compile(r"\+\+|--|\.\.|::|[-+*/%!,.]")
TYPE_LITERAL_RE = re.compile(r"\[[^\]\r\n]*\]")
DOT_SOURCE_RE = re.compile(r"\.(?=[ \t])")
COMMAND_WORD_RE = re.compile(_WORD_CHARS + "+")
EXPRESSION_WORD_RE = re.compile(r"[A-Za-z_]\w*")


class Tokenizer(Protocol):
    """Anything that splits a line into classified tokens."""

    def tokenize(self, text: str) -> TokenizeResult: ...


@dataclass
class _Scan:
    text: str
    pos: int = 0
    mode: Mode = "start"
    groups: list[Mode] = field(default_factory=list)
    tokens: list[Token] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)

    def match(self, pattern: re.Pattern[str]) -> re.Match[str] | None:
        return pattern.match(self.text, self.pos)

    def at(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def emit(self, kind: TokenKind, length: int, mode: Mode | None = None) -> None:
        content = self.text[self.pos : self.pos + length]
        self.tokens.append(Token(kind=kind, content=content, start=self.pos + 1, end=self.pos + length + 1))
        self.pos += length
        if mode is not None:
            self.mode = mode

    def operand_mode(self) -> Mode:
        return "command" if self.mode in ("command", "invoke") else "expression"


class PowerShellTokenizer:
    """Regex scanner following PowerShell's command and expression modes.

    Never raises: malformed input produces ``ParseError`` entries next to the
    tokens scanned so far, so callers can still use a partial token list.
    """

    def tokenize(self, text: str) -> TokenizeResult:
        scan = _Scan(text)
        while scan.pos < len(text):
            self._step(scan)
        return TokenizeResult(tokens=tuple(scan.tokens), errors=tuple(scan.errors))

    def _step(self, scan: _Scan) -> None:
        if blank := scan.match(BLANK_RE):
            scan.pos = blank.end()
            return
        if newline := scan.match(NEWLINE_RE):
            scan.emit(TokenKind.STATEMENT_SEPARATOR, len(newline.group()), "start")
            return
        if scan.at(";"):
            scan.emit(TokenKind.STATEMENT_SEPARATOR, 1, "start")
            return
        if comment := scan.match(BLOCK_COMMENT_RE):
            content = comment.group()
            if len(content) < 4 or not content.endswith("#>"):
                scan.errors.append(ParseError("unterminated block comment", scan.pos))
            scan.emit(TokenKind.COMMENT, len(content))
            return
        if comment := scan.match(LINE_COMMENT_RE):
            scan.emit(TokenKind.COMMENT, len(comment.group()))
            return
        if group := scan.match(GROUP_START_RE):
            scan.groups.append(scan.mode)
            scan.emit(TokenKind.GROUP_START, len(group.group()), "start")
            return
        if scan.at(")") or scan.at("}"):
            outer = scan.groups.pop() if scan.groups else "expression"
            scan.emit(TokenKind.GROUP_END, 1, "command" if outer in ("command", "invoke") else "expression")
            return
        if redirection := scan.match(REDIRECTION_RE):
            scan.emit(TokenKind.OPERATOR, len(redirection.group()))
            return
        if chain := scan.match(CHAIN_RE):
            operator = chain.group()
            scan.emit(TokenKind.OPERATOR, len(operator), "invoke" if operator == "&" else "pipeline")
            return
        if scan.at("'") or scan.at('"'):
            self._string(scan, scan.text[scan.pos])
            return
        if variable := scan.match(VARIABLE_RE):
            scan.emit(TokenKind.VARIABLE, len(variable.group()), scan.operand_mode())
            return

        if scan.mode == "command":
            self._command_step(scan)
        elif scan.mode == "name" and (word := scan.match(COMMAND_WORD_RE)):
            scan.emit(TokenKind.COMMAND_ARGUMENT, len(word.group()), "expression")
        else:
            self._expression_step(scan)

    @staticmethod
    def _command_step(scan: _Scan) -> None:
        if number := scan.match(ARGUMENT_NUMBER_RE):
            scan.emit(TokenKind.NUMBER, len(number.group()))
        elif parameter := scan.match(PARAMETER_RE):
            scan.emit(TokenKind.COMMAND_PARAMETER, len(parameter.group()))
        elif scan.at(","):
            scan.emit(TokenKind.OPERATOR, 1)
        elif word := scan.match(COMMAND_WORD_RE):
            scan.emit(TokenKind.COMMAND_ARGUMENT, len(word.group()))
        else:
            scan.emit(TokenKind.OTHER, 1)

    def _expression_step(self, scan: _Scan) -> None:
        at_start = scan.mode in COMMAND_POSITIONS
        if operator := scan.match(DASH_OPERATOR_RE):
            scan.emit(TokenKind.OPERATOR, len(operator.group()), "expression")
        elif operator := scan.match(ASSIGNMENT_RE):
            scan.emit(TokenKind.OPERATOR, len(operator.group()), "start")
        elif number := scan.match(NUMBER_RE):
            scan.emit(TokenKind.NUMBER, len(number.group()), "expression")
        elif at_start and scan.mode != "invoke" and scan.match(DOT_SOURCE_RE):
            scan.emit(TokenKind.OPERATOR, 1, "invoke")
        elif literal := scan.match(TYPE_LITERAL_RE):
            scan.emit(TokenKind.OTHER, len(literal.group()), "expression")
        elif at_start and not scan.at("-") and (word := scan.match(COMMAND_WORD_RE)):
            self._statement_word(scan, word.group())
        elif operator := scan.match(SYMBOL_OPERATOR_RE):
            scan.emit(TokenKind.OPERATOR, len(operator.group()), "expression")
        elif word := scan.match(EXPRESSION_WORD_RE):
            if word.group().lower() in KEYWORDS:
                scan.emit(TokenKind.KEYWORD, len(word.group()), "start")
            else:
                scan.emit(TokenKind.OTHER, len(word.group()), "expression")
        else:
            scan.emit(TokenKind.OTHER, 1)

    @staticmethod
    def _statement_word(scan: _Scan, word: str) -> None:
        lowered = word.lower()
        if scan.mode != "start":
            scan.emit(TokenKind.COMMAND, len(word), "command")
        elif lowered in NAMING_KEYWORDS:
            scan.emit(TokenKind.KEYWORD, len(word), "name")
        elif lowered in KEYWORDS:
            scan.emit(TokenKind.KEYWORD, len(word), "start")
        else:
            scan.emit(TokenKind.COMMAND, len(word), "command")

    @staticmethod
    def _string(scan: _Scan, quote: str) -> None:
        text = scan.text
        index = scan.pos + 1
        while index < len(text):
            current = text[index]
            if quote == '"' and current == "`":
                index += 2
                continue
            if current == quote:
                if text.startswith(quote, index + 1):
                    index += 2
                    continue
                scan.emit(TokenKind.STRING, index + 1 - scan.pos, scan.operand_mode())
                return
            index += 1
        scan.errors.append(ParseError("unterminated string", scan.pos))
        scan.emit(TokenKind.STRING, len(text) - scan.pos, scan.operand_mode())


def tokenize(text: str) -> TokenizeResult:
    """Tokenize one line with the default tokenizer."""

    return PowerShellTokenizer().tokenize(text)
