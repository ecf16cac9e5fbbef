"""
Recovery of machine-readable payloads from LLM completions.

The extraction service is asked for bare JSON but regularly wraps it in
Markdown code fences or surrounds it with prose. Every call site goes
through ``extract_payload_span`` + ``parse_payload`` instead of doing its
own string surgery.
"""

import json
import re
from typing import Any, Literal

from hackflow.ingestion.errors import ParseError

PayloadShape = Literal["object", "array"]

_LEADING_FENCE = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```lang marker and a trailing ``` marker if present."""
    text = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", text, count=1)


def extract_payload_span(raw: str, shape: PayloadShape = "object") -> str:
    """
    Isolate the JSON payload inside a raw completion.

    Steps:
        1. strip code fences
        2. trim whitespace
        3. array shape only: keep the first ``[`` .. last ``]`` span

    Args:
        raw: Untrusted completion text
        shape: Expected top-level JSON shape

    Returns:
        Candidate JSON text (not yet parsed)
    """
    text = strip_code_fences(raw or "").strip()

    if shape == "array":
        start = text.find("[")
        end = text.rfind("]")
        if start != -1 and end >= start:
            text = text[start : end + 1]

    return text


def _parse_object_span(text: str) -> Any:
    # Prose around an object: retry on the outermost {...} span
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None


def parse_payload(raw: str, shape: PayloadShape = "object") -> Any:
    """
    Parse a raw completion into JSON data of the expected shape.

    Raises:
        ParseError: malformed JSON or wrong top-level type; ``raw`` is
            attached for logging
    """
    text = extract_payload_span(raw, shape)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        data = _parse_object_span(text) if shape == "object" else None
        if data is None:
            raise ParseError(f"Invalid JSON payload: {e}", raw=text) from e

    expected = dict if shape == "object" else list
    if not isinstance(data, expected):
        raise ParseError(
            f"Expected JSON {shape}, got {type(data).__name__}", raw=text
        )
    return data
