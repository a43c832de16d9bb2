"""
Error kinds raised by the moderation decision core.

Recoverable conditions (``UnknownVariant``, ``InsufficientCredits``,
``InvalidConfig``, ``InvalidClassifierResponse``) derive from
:class:`ModgateError`. ``UnresolvedModelError`` sits outside that
hierarchy: it signals a caller bug and is not caught alongside validation
errors.
"""

from __future__ import annotations


class ModgateError(Exception):
    """Base class for recoverable modgate errors."""


class UnknownVariant(ModgateError, ValueError):
    """Raised when a string does not name any variant of an enum.

    Attributes:
        enum_name: Name of the enum that was being parsed.
        raw: The offending input.
    """

    def __init__(self, enum_name: str, raw: object) -> None:
        self.enum_name = enum_name
        self.raw = raw
        super().__init__(f"Unknown {enum_name} variant: {raw!r}")


class InsufficientCredits(ModgateError):
    """Raised when a charge would take the balance below zero.

    The balance is left unchanged. Callers may deny the moderation call or
    retry with a cheaper model.

    Attributes:
        required: Credits the call would cost.
        remaining: Credits available when the charge was attempted.
    """

    def __init__(self, required: int, remaining: int) -> None:
        self.required = required
        self.remaining = remaining
        super().__init__(f"Insufficient credits: required {required}, remaining {remaining}")


class InvalidConfig(ModgateError, ValueError):
    """Raised when a guild configuration payload is structurally invalid."""


class InvalidClassifierResponse(ModgateError, ValueError):
    """Raised when a classifier response cannot be parsed or fails validation."""


class UnresolvedModelError(RuntimeError):
    """Raised when a cost lookup is attempted on the ``Auto`` placeholder model."""
