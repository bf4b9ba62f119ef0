from __future__ import annotations

import re
from typing import Any, Optional

from lark import Token

from ..runtime import CalqRuntimeError, InvalidLiteral
from ..tree import is_token

# Accepted float spellings: optional sign, then digits with optional fraction
# and exponent, or inf/infinity/nan. No whitespace, no '_' separators.
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

def token_kind(node: Any) -> Optional[str]:
    if not is_token(node):
        return None
    tok: Token = node
    return str(tok.type)

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    raise CalqRuntimeError(f"{context} must be an identifier")

def ident_token_value(node: Any) -> Optional[str]:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    return None

def parse_number(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise InvalidLiteral(text)

    return float(text)

def token_number(token: Any) -> float:
    text = token.value if is_token(token) else str(token)
    return parse_number(text)
