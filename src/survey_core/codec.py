"""Answer codec — string encoding of wizard answers.

Every answer travels and is stored as a string.  Multi-select answers are
encoded as a JSON array of the selected option labels; all other kinds keep
the raw text.

There are two decoders with deliberately different fallbacks:

  - ``decode()`` is used when feeding a stored value back into an input
    (e.g. the wizard's checkbox state or its validation).  Malformed
    multi-select content decodes to ``[]``, i.e. "no selection".
  - ``decode_for_display()`` is used when rendering stored responses.  It
    does not know the question kind, so anything that does not parse as
    JSON is shown as the raw string unchanged.

The same malformed value therefore reads as "nothing selected" in the
wizard and as its literal text on the results page.  Keep the two apart:
an input must never be pre-filled with garbage, while a results page must
never hide what was actually stored.
"""

from __future__ import annotations

import json
from typing import Any

from survey_core.constants import KIND_MULTISELECT

# Sentinel distinguishing "did not parse" from a parsed JSON ``null``.
_UNPARSABLE = object()


def _parse_json(raw: str) -> Any:
    """Parse *raw* as JSON, returning ``_UNPARSABLE`` on malformed input."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return _UNPARSABLE


def encode(kind: str, value: str | list[str]) -> str:
    """Encode an answer for the draft / wire.

    Multi-select values are an ordered list of selected option labels and
    become a JSON array string.  Other kinds are returned unchanged.
    """
    if kind == KIND_MULTISELECT and not isinstance(value, str):
        return json.dumps([str(v) for v in value], ensure_ascii=False)
    return value


def decode(kind: str, raw: str | None) -> str | list[str]:
    """Decode a stored answer for input context.

    Multi-select: the JSON array as a list of strings, or ``[]`` when *raw*
    is missing, malformed, or not an array.  Other kinds: *raw* unchanged
    (``""`` when missing).
    """
    if kind != KIND_MULTISELECT:
        return raw if raw is not None else ""
    if not raw:
        return []
    parsed = _parse_json(raw)
    if not isinstance(parsed, list):
        return []
    return [str(item) for item in parsed]


def decode_for_display(raw: str) -> str | list[str]:
    """Decode a stored answer for display context.

    A JSON array becomes a list of strings; anything else, including
    malformed JSON and JSON scalars, is returned as the raw string.
    """
    parsed = _parse_json(raw)
    if isinstance(parsed, list):
        return [str(item) for item in parsed]
    return raw
