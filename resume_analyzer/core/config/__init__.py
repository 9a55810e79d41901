from .scoring import ScoringPolicy, get_scoring_policy, get_scoring_value, load_scoring_policy
from .settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
    "ScoringPolicy",
    "get_scoring_policy",
    "get_scoring_value",
    "load_scoring_policy",
]
