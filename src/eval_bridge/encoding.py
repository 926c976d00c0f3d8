from __future__ import annotations

import base64
import binascii


def encode_source(code: str) -> str:
    """Encode source text into a base64 literal safe to embed in generated code.

    The alphabet is limited to `A-Z a-z 0-9 + / =`, so the literal can sit
    inside a plain quoted string without any escaping.

    Example:
        ```python
        literal = encode_source("print('hi')")
        ```
    """
    return base64.b64encode(code.encode("utf-8")).decode("ascii")


def decode_source(literal: str) -> str:
    """Decode a literal produced by `encode_source` back to source text.

    Example:
        ```python
        assert decode_source(encode_source("x = 1")) == "x = 1"
        ```
    """
    try:
        raw = base64.b64decode(literal.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"Invalid transport literal: {exc}") from exc
    return raw.decode("utf-8")
