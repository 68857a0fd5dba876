"""Verbatim slicing of JSON arrays and objects.

``json.loads`` discards the source text of nested values. Decoders that need
to keep a record exactly as it arrived (so a later pass can reinterpret it
against a different schema) use these helpers to pair every element or field
with the raw text it was parsed from.

Usage:
    from devops.event.rawjson import scan_array, scan_object

    for value, raw in scan_array('[{"_class": "a"}, {"x": 1}]'):
        ...

    fields = scan_object('{"type": "run.started", "data": {"x": 1}}')
    value, raw = fields["data"]  # raw == '{"x": 1}'
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

_WHITESPACE = " \t\n\r"

_decoder = json.JSONDecoder()

# (parsed value, verbatim source text)
RawValue = Tuple[Any, str]


def _skip_whitespace(text: str, idx: int) -> int:
    while idx < len(text) and text[idx] in _WHITESPACE:
        idx += 1
    return idx


def _expect(text: str, idx: int, chars: str) -> str:
    if idx >= len(text) or text[idx] not in chars:
        raise json.JSONDecodeError(f"Expecting one of {chars!r}", text, idx)
    return text[idx]


def _check_trailing(text: str, idx: int) -> None:
    idx = _skip_whitespace(text, idx)
    if idx != len(text):
        raise json.JSONDecodeError("Extra data", text, idx)


def scan_array(text: str) -> List[RawValue]:
    """Split a JSON array into ``(value, raw)`` pairs, in array order.

    Args:
        text: JSON text whose top-level value must be an array.

    Returns:
        One pair per element; ``raw`` is the element's exact source text.

    Raises:
        json.JSONDecodeError: If the text is not a well-formed JSON array.
        RecursionError: If the text nests deeper than the parser allows.
    """
    idx = _skip_whitespace(text, 0)
    _expect(text, idx, "[")
    idx = _skip_whitespace(text, idx + 1)

    elements: List[RawValue] = []
    if idx < len(text) and text[idx] == "]":
        _check_trailing(text, idx + 1)
        return elements

    while True:
        value, end = _decoder.raw_decode(text, idx)
        elements.append((value, text[idx:end]))
        idx = _skip_whitespace(text, end)
        sep = _expect(text, idx, ",]")
        idx = _skip_whitespace(text, idx + 1)
        if sep == "]":
            break

    _check_trailing(text, idx)
    return elements


def scan_object(text: str) -> Dict[str, RawValue]:
    """Split a JSON object into ``name -> (value, raw)``.

    A repeated name keeps its last occurrence, as ``json.loads`` does.

    Raises:
        json.JSONDecodeError: If the text is not a well-formed JSON object.
        RecursionError: If the text nests deeper than the parser allows.
    """
    idx = _skip_whitespace(text, 0)
    _expect(text, idx, "{")
    idx = _skip_whitespace(text, idx + 1)

    fields: Dict[str, RawValue] = {}
    if idx < len(text) and text[idx] == "}":
        _check_trailing(text, idx + 1)
        return fields

    while True:
        _expect(text, idx, '"')
        name, end = _decoder.raw_decode(text, idx)
        idx = _skip_whitespace(text, end)
        _expect(text, idx, ":")
        idx = _skip_whitespace(text, idx + 1)
        value, end = _decoder.raw_decode(text, idx)
        fields[name] = (value, text[idx:end])
        idx = _skip_whitespace(text, end)
        sep = _expect(text, idx, ",}")
        idx = _skip_whitespace(text, idx + 1)
        if sep == "}":
            break

    _check_trailing(text, idx)
    return fields
