"""Module de vérification des avis."""

from reviewmatch.matching.matcher import ReviewMatcher, eligible_reviews
from reviewmatch.matching.schema import ExternalReview, GeneratedReview, MatchResult

__all__ = ["ReviewMatcher", "eligible_reviews", "ExternalReview", "GeneratedReview", "MatchResult"]
