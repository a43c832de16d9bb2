"""
Classifier contracts and the decision produced for one moderation event.

Key types:
- `ModerationRequest` / `BatchModerationRequest`: outbound call to the external classifier.
- `ModerationResponse`: what the classifier returned (labels, scores, context signal).
- `ModerationDecision`: immutable engine output consumed by the caller that applies actions.
- `ModerationLogEntry`: record handed to the external moderation log.

Parsing raw classifier payloads is handled by modgate.moderation.moderation_parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from modgate.datatypes.enums import ModerationAction, ModerationLabel, ModerationModel


def _labels_to_wire(labels) -> List[str]:
    return [label.to_wire_string() for label in ModerationLabel if label in labels]


@dataclass(slots=True)
class ModerationRequest:
    """Single-text classifier request.

    ``model`` must already be resolved when the request is sent; ``None``
    leaves the choice to the classifier's own default.
    """

    text: str
    model: Optional[ModerationModel] = None
    enabled_labels: Optional[FrozenSet[ModerationLabel]] = None
    include_context: bool = False

    @property
    def byte_length(self) -> int:
        return len(self.text.encode("utf-8"))

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"text": self.text, "include_context": self.include_context}
        if self.model is not None:
            payload["model"] = self.model.to_wire_string()
        if self.enabled_labels is not None:
            payload["enabled_labels"] = _labels_to_wire(self.enabled_labels)
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModerationRequest":
        model = data.get("model")
        labels = data.get("enabled_labels")
        return cls(
            text=str(data["text"]),
            model=ModerationModel.parse(model) if model is not None else None,
            enabled_labels=frozenset(ModerationLabel.parse(l) for l in labels) if labels is not None else None,
            include_context=bool(data.get("include_context", False)),
        )


@dataclass(slots=True)
class BatchModerationRequest:
    """Classifier request covering several texts with shared options."""

    texts: List[str]
    model: Optional[ModerationModel] = None
    enabled_labels: Optional[FrozenSet[ModerationLabel]] = None
    include_context: bool = False

    @property
    def byte_length(self) -> int:
        return sum(len(text.encode("utf-8")) for text in self.texts)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"texts": list(self.texts), "include_context": self.include_context}
        if self.model is not None:
            payload["model"] = self.model.to_wire_string()
        if self.enabled_labels is not None:
            payload["enabled_labels"] = _labels_to_wire(self.enabled_labels)
        return payload


@dataclass(frozen=True, slots=True)
class ModerationResponse:
    """Classifier output for one text.

    Attributes:
        flagged: The classifier's own verdict; the engine recomputes it against config.
        labels: Labels the classifier considered over their activation threshold.
        scores: Per-label scores.
        needs_context: Ambiguity signal; ``None`` when the classifier did not report it.
        context_labels: Labels the ambiguity applies to, when reported.
    """

    flagged: bool
    labels: FrozenSet[ModerationLabel] = frozenset()
    scores: Mapping[ModerationLabel, float] = field(default_factory=dict)
    needs_context: Optional[bool] = None
    context_labels: Optional[FrozenSet[ModerationLabel]] = None

    def __post_init__(self) -> None:
        # Label collections may arrive as lists, matching the wire shape
        object.__setattr__(self, "labels", frozenset(self.labels))
        if self.context_labels is not None:
            object.__setattr__(self, "context_labels", frozenset(self.context_labels))

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "flagged": self.flagged,
            "labels": _labels_to_wire(self.labels),
            "scores": {label.to_wire_string(): score for label, score in self.scores.items()},
        }
        if self.needs_context is not None:
            payload["needs_context"] = self.needs_context
        if self.context_labels is not None:
            payload["context_labels"] = _labels_to_wire(self.context_labels)
        return payload


@dataclass(frozen=True, slots=True)
class ModerationDecision:
    """Outcome of interpreting a classifier response against a guild config.

    Constructed once per classification call and never mutated.
    """

    flagged: bool
    labels: FrozenSet[ModerationLabel] = frozenset()
    scores: Mapping[ModerationLabel, float] = field(default_factory=dict)
    actions: FrozenSet[ModerationAction] = frozenset()
    needs_context: Optional[bool] = None
    context_labels: Optional[FrozenSet[ModerationLabel]] = None

    @classmethod
    def not_flagged(cls) -> "ModerationDecision":
        return cls(flagged=False)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "flagged": self.flagged,
            "labels": _labels_to_wire(self.labels),
            "scores": {label.to_wire_string(): score for label, score in self.scores.items()},
            "actions": [a.to_wire_string() for a in ModerationAction if a in self.actions],
        }
        if self.needs_context is not None:
            payload["needs_context"] = self.needs_context
        if self.context_labels is not None:
            payload["context_labels"] = _labels_to_wire(self.context_labels)
        return payload


@dataclass(slots=True)
class ModerationLogEntry:
    """A moderated text and its verdict, stamped in UTC."""

    text: str
    result: str
    timestamp: str

    @classmethod
    def now(cls, text: str, result: str) -> "ModerationLogEntry":
        return cls(text=text, result=result, timestamp=datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "result": self.result, "timestamp": self.timestamp}
