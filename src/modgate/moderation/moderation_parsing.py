"""Parse and validate raw classifier responses."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Union

import jsonschema
from jsonschema import ValidationError

from modgate.datatypes.enums import ModerationLabel
from modgate.datatypes.errors import InvalidClassifierResponse
from modgate.datatypes.moderation_datatypes import ModerationResponse
from modgate.util.logger import get_logger

logger = get_logger("moderation_parsing")

# Label codes are checked by ModerationLabel.parse so unknown codes surface as UnknownVariant
MODERATION_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "flagged": {"type": "boolean"},
        "labels": {"type": "array", "items": {"type": "string"}},
        "scores": {
            "type": "object",
            "additionalProperties": {"type": "number"},
        },
        "needs_context": {"type": ["boolean", "null"]},
        "context_labels": {
            "anyOf": [
                {"type": "array", "items": {"type": "string"}},
                {"type": "null"},
            ]
        },
    },
    "required": ["flagged", "labels", "scores"],
}


def _extract_json_payload(raw: str) -> Any:
    try:
        return json.loads(raw.strip())
    except json.JSONDecodeError as exc:
        logger.warning("[PARSE] Classifier response is not JSON: %s", exc)
        raise InvalidClassifierResponse("Classifier response is not valid JSON") from exc


def parse_moderation_response(raw: Union[str, bytes, Mapping[str, Any]]) -> ModerationResponse:
    """Turn a classifier payload into a :class:`ModerationResponse`.

    Args:
        raw: JSON text, or an already decoded mapping.

    Raises:
        InvalidClassifierResponse: If the payload is not JSON or fails schema validation.
        UnknownVariant: If a label code is not recognised.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("[PARSE] Classifier response is not valid UTF-8: %s", exc)
            raise InvalidClassifierResponse("Classifier response is not valid UTF-8") from exc
    payload = _extract_json_payload(raw) if isinstance(raw, str) else dict(raw)

    try:
        jsonschema.validate(instance=payload, schema=MODERATION_RESPONSE_SCHEMA)
    except ValidationError as exc:
        logger.error("[PARSE] Classifier response failed schema validation: %s", exc.message)
        raise InvalidClassifierResponse(f"Invalid classifier response: {exc.message}") from exc

    context_labels = payload.get("context_labels")
    response = ModerationResponse(
        flagged=payload["flagged"],
        labels=frozenset(ModerationLabel.parse(code) for code in payload["labels"]),
        scores={ModerationLabel.parse(code): float(score) for code, score in payload["scores"].items()},
        needs_context=payload.get("needs_context"),
        context_labels=(
            frozenset(ModerationLabel.parse(code) for code in context_labels)
            if context_labels is not None else None
        ),
    )
    logger.debug(
        "[PARSE] Parsed classifier response: flagged=%s labels=%d scores=%d",
        response.flagged, len(response.labels), len(response.scores),
    )
    return response
