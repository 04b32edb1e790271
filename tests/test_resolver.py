import pytest

from pshelp.resolver import (
    COMMAND_HELP_TEMPLATE,
    COMMON_PARAMETERS_TEMPLATE,
    OPERATORS_TEMPLATE,
    PARAMETER_HELP_TEMPLATE,
    TOPIC_HELP_TEMPLATE,
    ContextualHelpResolver,
    normalize_parameter,
    resolve_tokens,
    token_contains,
)
from pshelp.types import HelpRequest, ParseError, Token, TokenizeResult, TokenKind


@pytest.fixture
def resolver() -> ContextualHelpResolver:
    return ContextualHelpResolver()


class _FixedTokenizer:
    def __init__(self, *tokens: Token, errors: tuple[ParseError, ...] = ()) -> None:
        self.result = TokenizeResult(tokens=tokens, errors=errors)

    def tokenize(self, text: str) -> TokenizeResult:
        _ = text
        return self.result


def test_cursor_inside_command_requests_full_help(resolver: ContextualHelpResolver) -> None:
    request = resolver.resolve("Get-Item -Force", 3)

    assert request == HelpRequest(COMMAND_HELP_TEMPLATE, (None, "Get-Item"))


def test_cursor_inside_parameter_requests_parameter_help(resolver: ContextualHelpResolver) -> None:
    request = resolver.resolve("Get-Item -Force", 11)

    assert request == HelpRequest(PARAMETER_HELP_TEMPLATE, (None, "Get-Item", "FORCE"))


@pytest.mark.parametrize("parameter", ["-Verbose", "-whatif", "-ErrorAction:", "-OUTBUFFER", "-WarningVariable"])
def test_common_parameters_have_no_command_argument(resolver: ContextualHelpResolver, parameter: str) -> None:
    line = f"Remove-Item foo {parameter}"

    request = resolver.resolve(line, len(line))

    assert request == HelpRequest(COMMON_PARAMETERS_TEMPLATE, (None,))


def test_parameter_belongs_to_most_recent_command(resolver: ContextualHelpResolver) -> None:
    line = "Get-Process | Sort-Object -Property CPU"

    request = resolver.resolve(line, line.index("-Property") + 2)

    assert request is not None
    assert request.arguments == (None, "Sort-Object", "PROPERTY")


def test_keyword_requests_about_topic(resolver: ContextualHelpResolver) -> None:
    request = resolver.resolve("Foreach ($x in $y) {}", 2)

    assert request == HelpRequest(TOPIC_HELP_TEMPLATE, (None, "about_Foreach"))


def test_operator_request_ignores_content(resolver: ContextualHelpResolver) -> None:
    line = "$a -eq 1 -or $b | Out-Null"

    requests = {
        resolver.resolve(line, line.index("-eq") + 1),
        resolver.resolve(line, line.index("-or") + 1),
        resolver.resolve(line, line.index("|") + 1),
    }

    assert requests == {HelpRequest(OPERATORS_TEMPLATE, (None,))}


def test_other_token_kinds_resolve_to_none(resolver: ContextualHelpResolver) -> None:
    assert resolver.resolve("$value", 2) is None
    assert resolver.resolve("Write-Host 'text'", 14) is None


@pytest.mark.parametrize("offset", [-1, 16, 100])
def test_out_of_range_cursor_resolves_to_none(resolver: ContextualHelpResolver, offset: int) -> None:
    assert resolver.resolve("Get-Item -Force", offset) is None


def test_empty_line_resolves_to_none(resolver: ContextualHelpResolver) -> None:
    assert resolver.resolve("", 0) is None


def test_cursor_past_last_token_resolves_to_none(resolver: ContextualHelpResolver) -> None:
    assert resolver.resolve("Get-Date      ", 12) is None


def test_boundary_offsets_follow_column_convention() -> None:
    token = Token(TokenKind.COMMAND, "Get-Item", 1, 9)

    assert token_contains(token, 0)
    assert token_contains(token, 9)
    assert not token_contains(token, 10)
    assert not token_contains(token, -1)


def test_first_enclosing_token_wins_at_shared_boundary(resolver: ContextualHelpResolver) -> None:
    # Offset 9 touches the end of Get-Item and the start of -Force.
    request = resolver.resolve("Get-Item -Force", 9)

    assert request is not None
    assert request.template == COMMAND_HELP_TEMPLATE


def test_overlapping_tokens_pick_the_first() -> None:
    tokens = [
        Token(TokenKind.KEYWORD, "if", 1, 5),
        Token(TokenKind.OPERATOR, "-eq", 2, 5),
    ]

    assert resolve_tokens(tokens, 3) == HelpRequest(TOPIC_HELP_TEMPLATE, (None, "about_if"))


def test_parameter_without_command_keeps_null_command() -> None:
    tokens = [Token(TokenKind.COMMAND_PARAMETER, "-Path", 1, 6)]

    assert resolve_tokens(tokens, 2) == HelpRequest(PARAMETER_HELP_TEMPLATE, (None, None, "PATH"))


def test_parse_errors_do_not_stop_resolution() -> None:
    tokenizer = _FixedTokenizer(
        Token(TokenKind.COMMAND, "Write-Host", 1, 11),
        Token(TokenKind.STRING, "'oops", 12, 17),
        errors=(ParseError("unterminated string", 11),),
    )
    resolver = ContextualHelpResolver(tokenizer)

    assert resolver.resolve("Write-Host 'oops", 4) == HelpRequest(COMMAND_HELP_TEMPLATE, (None, "Write-Host"))


def test_resolve_is_idempotent(resolver: ContextualHelpResolver) -> None:
    first = resolver.resolve("Get-Item -Force", 11)
    second = resolver.resolve("Get-Item -Force", 11)

    assert first == second
    assert first is not second


def test_normalize_parameter() -> None:
    assert normalize_parameter("-Force") == "FORCE"
    assert normalize_parameter("--path:") == "PATH"


def test_with_output_fills_reserved_slot() -> None:
    request = HelpRequest(PARAMETER_HELP_TEMPLATE, (None, "Get-Item", "FORCE"))

    filled = request.with_output("/tmp/help.txt")

    assert filled.arguments == ("/tmp/help.txt", "Get-Item", "FORCE")
    assert filled.output == "/tmp/help.txt"
    assert request.output is None


def test_keyword_named_pipeline_command_gets_command_help(resolver: ContextualHelpResolver) -> None:
    request = resolver.resolve("Get-ChildItem | foreach { $_ }", 18)

    assert request == HelpRequest(COMMAND_HELP_TEMPLATE, (None, "foreach"))


def test_parameter_after_called_string_gets_parameter_help(resolver: ContextualHelpResolver) -> None:
    line = "& 'C:\\a b\\x.exe' -Foo"

    request = resolver.resolve(line, line.index("-Foo") + 1)

    assert request == HelpRequest(PARAMETER_HELP_TEMPLATE, (None, None, "FOO"))


def test_parameter_after_called_command_uses_that_command(resolver: ContextualHelpResolver) -> None:
    line = "& git log -n 5"

    request = resolver.resolve(line, line.index("-n") + 1)

    assert request == HelpRequest(PARAMETER_HELP_TEMPLATE, (None, "git", "N"))


def test_class_keyword_requests_about_topic(resolver: ContextualHelpResolver) -> None:
    assert resolver.resolve("class Foo {}", 2) == HelpRequest(TOPIC_HELP_TEMPLATE, (None, "about_class"))
