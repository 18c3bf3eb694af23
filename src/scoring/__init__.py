"""Category scoring: rubric-driven LLM assessment of recent journal and chat content."""

from .categories import CATEGORIES, Category, get_all_categories, get_category
from .engine import ScoringEngine, period_bounds, score_selected_categories
from .models import CategoryScore, CategoryScoreResult, PersistedScoreResult
from .summary import calculate_weekly_summary

__all__ = [
    "CATEGORIES",
    "Category",
    "CategoryScore",
    "CategoryScoreResult",
    "PersistedScoreResult",
    "ScoringEngine",
    "calculate_weekly_summary",
    "get_all_categories",
    "get_category",
    "period_bounds",
    "score_selected_categories",
]
