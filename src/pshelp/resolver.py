"""Contextual help resolution for the token under the cursor."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from pshelp.tokenizer import PowerShellTokenizer, Tokenizer
from pshelp.types import HelpRequest, Token, TokenKind

COMMAND_HELP_TEMPLATE = "Get-Help $args[1] -Full > $args[0]"
PARAMETER_HELP_TEMPLATE = "Get-Help $args[1] -Parameter $args[2] > $args[0]"
TOPIC_HELP_TEMPLATE = "Get-Help $args[1] > $args[0]"
COMMON_PARAMETERS_TEMPLATE = "Get-Help about_CommonParameters > $args[0]"
OPERATORS_TEMPLATE = "Get-Help about_operators > $args[0]"
TOPIC_PREFIX = "about_"

COMMON_PARAMETERS = frozenset(
    {
        "VERBOSE",
        "DEBUG",
        "ERRORACTION",
        "ERRORVARIABLE",
        "WARNINGACTION",
        "WARNINGVARIABLE",
        "OUTVARIABLE",
        "OUTBUFFER",
        "WHATIF",
        "CONFIRM",
    }
)


def normalize_parameter(content: str) -> str:
    """Turn ``-ErrorAction:`` into ``ERRORACTION``."""

    return content.lstrip("-").rstrip(":").upper()


def token_contains(token: Token, cursor_offset: int) -> bool:
    """Whether a 0-based cursor offset touches the token, edges included."""

    return token.start - 1 <= cursor_offset <= token.end


def resolve_tokens(tokens: Iterable[Token], cursor_offset: int) -> HelpRequest | None:
    """Build the help request for the first token under the cursor."""

    command: str | None = None
    for token in tokens:
        if token.kind is TokenKind.COMMAND:
            command = token.content
        if token_contains(token, cursor_offset):
            return build_request(token, command)
    return None


def build_request(token: Token, command: str | None) -> HelpRequest | None:
    """Map one classified token to a help request, ``None`` for other kinds."""

    if token.kind is TokenKind.COMMAND:
        return HelpRequest(COMMAND_HELP_TEMPLATE, (None, command))
    if token.kind is TokenKind.COMMAND_PARAMETER:
        parameter = normalize_parameter(token.content)
        if parameter in COMMON_PARAMETERS:
            return HelpRequest(COMMON_PARAMETERS_TEMPLATE, (None,))
        return HelpRequest(PARAMETER_HELP_TEMPLATE, (None, command, parameter))
    if token.kind is TokenKind.KEYWORD:
        return HelpRequest(TOPIC_HELP_TEMPLATE, (None, f"{TOPIC_PREFIX}{token.content}"))
    if token.kind is TokenKind.OPERATOR:
        return HelpRequest(OPERATORS_TEMPLATE, (None,))
    return None


class ContextualHelpResolver:
    """Resolve the help request for a cursor position in one line of text."""

    def __init__(self, tokenizer: Tokenizer | None = None) -> None:
        self._tokenizer = tokenizer or PowerShellTokenizer()

    def resolve(self, line_text: str, cursor_offset: int) -> HelpRequest | None:
        """Return the help request for the token under ``cursor_offset``, if any."""

        if not line_text or cursor_offset < 0 or cursor_offset > len(line_text):
            return None

        result = self._tokenizer.tokenize(line_text)
        for error in result.errors:
            logger.debug("help.tokenize_error offset={} message={}", error.offset, error.message)

        request = resolve_tokens(result.tokens, cursor_offset)
        if request is None:
            logger.debug("help.unresolved offset={} tokens={}", cursor_offset, len(result.tokens))
        else:
            logger.debug("help.resolved template={!r} arguments={}", request.template, request.arguments[1:])
        return request
