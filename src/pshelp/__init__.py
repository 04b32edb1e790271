"""pshelp - contextual help for PowerShell command lines."""

from .resolver import ContextualHelpResolver, resolve_tokens
from .tokenizer import PowerShellTokenizer, tokenize
from .types import HelpRequest, Token, TokenizeResult, TokenKind

__version__ = "0.1.0"

__all__ = [
    "ContextualHelpResolver",
    "HelpRequest",
    "PowerShellTokenizer",
    "Token",
    "TokenKind",
    "TokenizeResult",
    "resolve_tokens",
    "tokenize",
]
