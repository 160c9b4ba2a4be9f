import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from agri_assist.application.errors import HardFailure, NoUsableResult, TransientUnavailable


logger = logging.getLogger(__name__)

T = TypeVar("T")


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    TRANSIENT_UNAVAILABLE = "transient_unavailable"
    HARD_FAILURE = "hard_failure"


@dataclass(frozen=True)
class Tier(Generic[T]):
    """One remote model endpoint, in order of preference."""
    model: str
    invoke: Callable[..., Awaitable[T]]


@dataclass(frozen=True)
class CascadeAttempt:
    tier: str
    outcome: AttemptOutcome
    reason: Optional[str] = None

    @property
    def is_transient(self) -> bool:
        return self.outcome is AttemptOutcome.TRANSIENT_UNAVAILABLE

    def to_dict(self) -> Dict[str, Any]:
        return {"tier": self.tier, "outcome": self.outcome.value, "reason": self.reason}


class FallbackCascade(Generic[T]):
    """Calls tiers in order and returns the first usable result.

    A tier is attempted at most once per run. Cold starts and hard failures both
    move on to the next tier; when none is left a NoUsableResult is raised that
    tells the caller whether waiting and retrying is worthwhile.
    """

    def __init__(self, tiers: Sequence[Tier[T]], purpose: str):
        self.tiers = list(tiers)
        self.purpose = purpose

    @property
    def models(self) -> List[str]:
        return [tier.model for tier in self.tiers]

    async def run(self, *payload: Any) -> T:
        attempts: List[CascadeAttempt] = []

        for index, tier in enumerate(self.tiers):
            logger.info("%s: trying tier %d (%s)", self.purpose, index, tier.model)
            try:
                result = await tier.invoke(*payload)
            except TransientUnavailable as e:
                logger.warning("%s: %s is loading (%s)", self.purpose, tier.model, e.message)
                attempts.append(CascadeAttempt(tier.model, AttemptOutcome.TRANSIENT_UNAVAILABLE, e.message))
                continue
            except HardFailure as e:
                logger.warning("%s: %s failed (%s)", self.purpose, tier.model, e.message)
                attempts.append(CascadeAttempt(tier.model, AttemptOutcome.HARD_FAILURE, e.message))
                continue

            attempts.append(CascadeAttempt(tier.model, AttemptOutcome.SUCCESS))
            logger.info("%s: %s succeeded after %d attempt(s)", self.purpose, tier.model, len(attempts))
            return result

        error = NoUsableResult(self.purpose, attempts)
        logger.error("%s: all tiers exhausted (%s)", self.purpose, error.code)
        raise error
