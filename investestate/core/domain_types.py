"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId and InvestmentId are sequential integers; ProjectId and ModelId are slugs
    - All valid states encoded as Enums: no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum, IntEnum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
InvestmentId = NewType("InvestmentId", int)
ProjectId = NewType("ProjectId", str)
ModelId = NewType("ModelId", str)
SessionToken = NewType("SessionToken", str)


# ─── Enums ───────────────────────────────────────────────────────

class InvestmentStatus(str, Enum):
    """Investment lifecycle. Every investment is created ACTIVE."""
    ACTIVE = "active"
    COMPLETED = "completed"


class WizardStep(IntEnum):
    """Investment wizard steps, in the order the client walks them."""
    EXPLORE_PROJECT = 0
    CHOOSE_MODEL = 1
    SELECT_SLOTS = 2
    SUMMARY = 3


class DraftStatus(str, Enum):
    """Outcome of reconciling a stored draft against the current catalog."""
    RESUMABLE = "resumable"
    MODEL_MISSING = "model_missing"
    SLOTS_ADJUSTED = "slots_adjusted"
    EXPIRED = "expired"
    OUTDATED = "outdated"
    PROJECT_MISSING = "project_missing"
    NOT_FOUND = "not_found"

    @property
    def discarded(self) -> bool:
        return self in (
            DraftStatus.EXPIRED, DraftStatus.OUTDATED, DraftStatus.PROJECT_MISSING,
        )
