"""Statistiques du tunnel (taux de passage vers la marketplace, cadeaux, notes)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from reviewmatch.customers import CustomerRecord


@dataclass
class FunnelAnalytics:
    total: int = 0
    reached_review_page: int = 0
    went_to_amazon: int = 0
    claimed_gifts: int = 0
    claimed_after_amazon: int = 0
    claimed_without_amazon: int = 0
    likely_submitted_to_amazon: int = 0
    avg_stars: float = 0.0
    tone_distribution: dict[str, int] = field(default_factory=dict)
    conversion_rate: float = 0.0
    gifts_claim_rate: float = 0.0
    amazon_submission_rate: float = 0.0


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total > 0 else 0.0


def compute_funnel_analytics(customers: Sequence[CustomerRecord]) -> FunnelAnalytics:
    """
    Calcule les indicateurs du tableau de bord pour une liste de clients.

    Les taux sont en pourcentage, arrondis à une décimale (0 sans client).
    """
    total = len(customers)
    went = sum(1 for c in customers if c.went_to_amazon)
    claimed = sum(1 for c in customers if c.claimed_gifts)
    likely_submitted = sum(1 for c in customers if c.review_generated and c.went_to_amazon)

    stars = [c.review_stars for c in customers if c.review_stars]
    avg_stars = round(sum(stars) / len(stars), 1) if stars else 0.0

    tones: dict[str, int] = {}
    for c in customers:
        if c.review_tone:
            tones[c.review_tone] = tones.get(c.review_tone, 0) + 1

    return FunnelAnalytics(
        total=total,
        reached_review_page=sum(1 for c in customers if c.review_generated),
        went_to_amazon=went,
        claimed_gifts=claimed,
        claimed_after_amazon=sum(1 for c in customers if c.went_to_amazon and c.claimed_gifts),
        claimed_without_amazon=sum(1 for c in customers if not c.went_to_amazon and c.claimed_gifts),
        likely_submitted_to_amazon=likely_submitted,
        avg_stars=avg_stars,
        tone_distribution=tones,
        conversion_rate=_rate(went, total),
        gifts_claim_rate=_rate(claimed, total),
        amazon_submission_rate=_rate(likely_submitted, total),
    )


def print_analytics_console(analytics: FunnelAnalytics) -> None:
    """Affiche les statistiques du tunnel en console."""
    print("\n=== Funnel Analytics ===")
    print(f"  Clients:                {analytics.total}")
    print(f"  Page avis atteinte:     {analytics.reached_review_page}")
    print(f"  Allés sur Amazon:       {analytics.went_to_amazon} ({analytics.conversion_rate}%)")
    print(f"  Cadeaux réclamés:       {analytics.claimed_gifts} ({analytics.gifts_claim_rate}%)")
    print(f"    après Amazon:         {analytics.claimed_after_amazon}")
    print(f"    sans Amazon:          {analytics.claimed_without_amazon}")
    print(
        f"  Avis probablement soumis: {analytics.likely_submitted_to_amazon}"
        f" ({analytics.amazon_submission_rate}%)"
    )
    print(f"  Note moyenne:           {analytics.avg_stars}")
    for tone, count in sorted(analytics.tone_distribution.items()):
        print(f"    {tone}: {count}")
    print("========================\n")
