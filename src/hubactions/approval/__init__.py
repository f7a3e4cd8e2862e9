"""Collection approval (staging -> published)."""

from hubactions.approval.models import CollectionRef, PollBudget
from hubactions.approval.strategies import (
    ApprovalStrategy,
    PlatformApproval,
    StandaloneApproval,
    approve_collection,
    select_strategy,
)

__all__ = [
    "ApprovalStrategy",
    "CollectionRef",
    "PlatformApproval",
    "PollBudget",
    "StandaloneApproval",
    "approve_collection",
    "select_strategy",
]
