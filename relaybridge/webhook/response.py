"""Reply extraction from workflow webhook responses.

Two envelopes are recognised:

* ``{"output": "..."}`` — a "Respond to Webhook" node returning an object.
* ``[{"json": {"output": "..."}}, ...]`` — the raw item list of a workflow.

When both are somehow present the top-level ``output`` wins. Anything else,
including a non-string or empty ``output``, is unrecognised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ObjectWithOutput:
    output: str


@dataclass(frozen=True)
class ArrayOfObjectsWithOutput:
    output: str


@dataclass(frozen=True)
class Unrecognized:
    pass


RelayResponse = ObjectWithOutput | ArrayOfObjectsWithOutput | Unrecognized


def _usable(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def parse_relay_response(data: Any) -> RelayResponse:
    if isinstance(data, dict) and _usable(data.get("output")):
        return ObjectWithOutput(data["output"])

    if isinstance(data, list) and data:
        first = data[0]
        nested = first.get("json") if isinstance(first, dict) else None
        if isinstance(nested, dict) and _usable(nested.get("output")):
            return ArrayOfObjectsWithOutput(nested["output"])

    return Unrecognized()


def extract_reply(data: Any) -> str | None:
    """Return the reply text carried by a webhook response, if any."""
    parsed = parse_relay_response(data)
    if isinstance(parsed, ObjectWithOutput | ArrayOfObjectsWithOutput):
        return parsed.output
    return None
