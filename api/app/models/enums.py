"""
Model enums.
"""
from enum import Enum


class SubscriptionPlan(str, Enum):
    """Subscription tiers written by the billing integration."""
    FREE = "free"
    HOBBY = "hobby"
    PRO = "pro"
    LIFETIME = "lifetime"


class ProgressStatus(str, Enum):
    """Status enum for UserProgress."""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class LessonAccess(str, Enum):
    """Content fidelity a user gets for a lesson."""
    FULL = "full"
    REDACTED = "redacted"
