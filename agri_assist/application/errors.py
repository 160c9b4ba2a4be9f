"""
Error hierarchy for the inference core.

Every error carries a machine-readable code and structured details so the
calling layer can map it to a transport status without string matching.
"""
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from agri_assist.application.cascade import CascadeAttempt


class AgriAssistError(Exception):
    """Base exception for all agri-assist errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class TierError(AgriAssistError):
    """A single model tier did not produce a usable result."""

    def __init__(
        self,
        message: str,
        tier: str = "unknown",
        code: str = "TIER_FAILED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, details={"tier": tier, **(details or {})})
        self.tier = tier


class TransientUnavailable(TierError):
    """The remote model reported it is still loading (cold start)."""

    def __init__(self, message: str = "Model is loading", tier: str = "unknown", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, tier=tier, code="MODEL_LOADING", details=details)


class HardFailure(TierError):
    """The remote model rejected the request or returned unusable output."""

    def __init__(self, message: str, tier: str = "unknown", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, tier=tier, code="TIER_FAILED", details=details)


class NoUsableResult(AgriAssistError):
    """Every tier of a cascade was exhausted.

    ``all_transient`` is True when each tier was merely cold-starting, in which
    case retrying after a short delay is expected to succeed.
    """

    def __init__(self, purpose: str, attempts: "List[CascadeAttempt]"):
        self.purpose = purpose
        self.attempts = list(attempts)
        self.all_transient = bool(self.attempts) and all(a.is_transient for a in self.attempts)

        if self.all_transient:
            message = f"All {purpose} models are loading. Please try again in 20-30 seconds."
            code = "MODEL_LOADING"
        elif not self.attempts:
            message = f"No {purpose} models are configured."
            code = "NO_USABLE_RESULT"
        else:
            message = f"No {purpose} model produced a usable result. Check the model configuration."
            code = "NO_USABLE_RESULT"

        super().__init__(
            message=message,
            code=code,
            details={
                "purpose": purpose,
                "attempts": [a.to_dict() for a in self.attempts],
                "retryable": self.all_transient,
            },
        )

    @property
    def retryable(self) -> bool:
        return self.all_transient


class ServiceNotConfiguredError(AgriAssistError):
    def __init__(self, message: str, service: str = "unknown"):
        super().__init__(message=message, code="SERVICE_NOT_CONFIGURED", details={"service": service})
        self.service = service


class InvalidRequestError(AgriAssistError):
    """The caller supplied input the core cannot work with."""

    def __init__(self, message: str, code: str = "INVALID_REQUEST", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=code, details=details)
