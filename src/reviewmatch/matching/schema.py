"""Schémas et types pour la vérification des avis."""

from __future__ import annotations

from dataclasses import dataclass

STATUS_CONFIRMED = "confirmed"
STATUS_PROBABLE = "probable"
STATUS_NOT_FOUND = "not_found"

# Ordre de présentation des résultats
STATUS_ORDER = {STATUS_CONFIRMED: 0, STATUS_PROBABLE: 1, STATUS_NOT_FOUND: 2}


@dataclass(frozen=True)
class GeneratedReview:
    """Avis rédigé dans le tunnel (éventuellement modifié par le client)."""

    customer_id: str
    text: str
    stars: int | None = None
    submitted_to_marketplace: bool = False


@dataclass(frozen=True)
class ExternalReview:
    """Avis issu d'un export de la marketplace (fichier importé)."""

    text: str
    rating: int | None = None
    title: str | None = None
    date: str | None = None


@dataclass
class MatchResult:
    """Résultat de vérification pour un avis généré."""

    generated_review: GeneratedReview
    best_match: ExternalReview | None
    score: float
    status: str  # confirmed, probable, not_found
    stars_match: bool | None = None  # None = inconnu

    def __repr__(self) -> str:
        return (
            f"MatchResult(customer={self.generated_review.customer_id!r}, "
            f"score={self.score:.2f}, status={self.status})"
        )

    @property
    def stars_match_label(self) -> str:
        if self.stars_match is None:
            return "unknown"
        return "yes" if self.stars_match else "no"
