"""Quiz Engines - Logica de negocios."""

from .scoring_engine import QuizScoringEngine, normalize_selection, score

__all__ = ["QuizScoringEngine", "normalize_selection", "score"]
