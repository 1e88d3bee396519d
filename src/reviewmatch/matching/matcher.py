"""Moteur de vérification : rapprochement des avis générés avec les avis importés."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from reviewmatch.config import MatchConfig
from reviewmatch.matching.schema import (
    STATUS_CONFIRMED,
    STATUS_NOT_FOUND,
    STATUS_ORDER,
    STATUS_PROBABLE,
    ExternalReview,
    GeneratedReview,
    MatchResult,
)
from reviewmatch.matching.scorers import jaccard_from_tokens, token_set

logger = logging.getLogger(__name__)


def eligible_reviews(generated: Iterable[GeneratedReview]) -> list[GeneratedReview]:
    """Avis avec un texte et dont le client est allé sur la marketplace."""
    return [g for g in generated if g.submitted_to_marketplace and g.text]


def sort_results(results: list[MatchResult]) -> list[MatchResult]:
    """Trie par statut (confirmed, probable, not_found) puis score décroissant."""
    return sorted(results, key=lambda r: (STATUS_ORDER[r.status], -r.score))


class ReviewMatcher:
    """Rapproche chaque avis généré de l'avis importé le plus proche."""

    def __init__(self, config: MatchConfig | None = None) -> None:
        self.config = config or MatchConfig()
        self.confirmed_threshold = self.config.confirmed_threshold
        self.probable_threshold = self.config.probable_threshold
        self.min_token_length = self.config.min_token_length

    def classify(self, score: float) -> str:
        if score >= self.confirmed_threshold:
            return STATUS_CONFIRMED
        if score >= self.probable_threshold:
            return STATUS_PROBABLE
        return STATUS_NOT_FOUND

    def run(
        self,
        generated: Iterable[GeneratedReview],
        external: Sequence[ExternalReview],
    ) -> list[MatchResult]:
        """
        Exécute la vérification pour tous les avis générés éligibles.

        Les avis sans texte ou non soumis à la marketplace sont exclus. Sans
        avis importé, chaque avis est not_found avec un score de 0.

        Returns:
            Liste de MatchResult triée pour la présentation.
        """
        generated = list(generated)
        candidates = eligible_reviews(generated)
        # Chaque avis n'est tokenisé qu'une fois, hors de la boucle G x E
        external_tokens = [(e, token_set(e.text, self.min_token_length)) for e in external]

        results: list[MatchResult] = []
        for review in candidates:
            tokens = token_set(review.text, self.min_token_length)
            best_match: ExternalReview | None = None
            best_score = 0.0
            for ext, ext_tokens in external_tokens:
                score = jaccard_from_tokens(tokens, ext_tokens)
                if score > best_score:  # égalité : le premier rencontré est gardé
                    best_score = score
                    best_match = ext

            stars_match: bool | None = None
            if best_match is not None and best_match.rating is not None and review.stars is not None:
                stars_match = review.stars == best_match.rating

            results.append(
                MatchResult(
                    generated_review=review,
                    best_match=best_match,
                    score=best_score,
                    status=self.classify(best_score),
                    stars_match=stars_match,
                )
            )

        logger.info(
            "%d avis vérifiés contre %d avis importés (%d exclus)",
            len(candidates),
            len(external_tokens),
            len(generated) - len(candidates),
        )
        return sort_results(results)
