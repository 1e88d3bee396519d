"""Génération du rapport de vérification (onglets MATCHES et REPORT)."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from reviewmatch import __version__
from reviewmatch.config import MatchConfig
from reviewmatch.matching.schema import (
    STATUS_CONFIRMED,
    STATUS_NOT_FOUND,
    STATUS_PROBABLE,
    MatchResult,
)

DETAIL_COLUMNS = [
    "customer_id",
    "status",
    "score",
    "stars",
    "matched_rating",
    "stars_match",
    "generated_text",
    "matched_text",
    "matched_title",
    "matched_date",
]


def count_by_status(results: list[MatchResult]) -> dict[str, int]:
    """Nombre de résultats par statut (les trois statuts sont toujours présents)."""
    counts = {STATUS_CONFIRMED: 0, STATUS_PROBABLE: 0, STATUS_NOT_FOUND: 0}
    for r in results:
        counts[r.status] += 1
    return counts


def build_report_df(
    results: list[MatchResult],
    config: MatchConfig,
    *,
    n_external: int | None = None,
) -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : nb avis vérifiés, nb par statut, accord des notes, paramètres,
    horodatage, version.
    """
    counts = count_by_status(results)
    rows = [
        ("Metric", "Value"),
        ("nb_checked_reviews", len(results)),
        ("nb_external_reviews", n_external if n_external is not None else ""),
        ("nb_confirmed", counts[STATUS_CONFIRMED]),
        ("nb_probable", counts[STATUS_PROBABLE]),
        ("nb_not_found", counts[STATUS_NOT_FOUND]),
        ("nb_stars_match", sum(1 for r in results if r.stars_match is True)),
        ("nb_stars_mismatch", sum(1 for r in results if r.stars_match is False)),
        ("nb_stars_unknown", sum(1 for r in results if r.stars_match is None)),
        ("", ""),
        ("Parameters", ""),
        ("confirmed_threshold", config.confirmed_threshold),
        ("probable_threshold", config.probable_threshold),
        ("min_token_length", config.min_token_length),
        ("region", config.region or ""),
        ("product_slug", config.product_slug or ""),
        ("", ""),
        ("timestamp", datetime.now().isoformat()),
        ("version", __version__),
    ]
    return pd.DataFrame(rows, columns=["Key", "Value"])


def build_detail_df(results: list[MatchResult]) -> pd.DataFrame:
    """Une ligne par avis vérifié : meilleur avis importé, score, accord des notes, statut."""
    rows = []
    for r in results:
        g = r.generated_review
        m = r.best_match
        rows.append(
            {
                "customer_id": g.customer_id,
                "status": r.status,
                "score": round(r.score, 4),
                "stars": g.stars if g.stars is not None else "",
                "matched_rating": m.rating if m is not None and m.rating is not None else "",
                "stars_match": r.stars_match_label,
                "generated_text": g.text,
                "matched_text": m.text if m is not None else "",
                "matched_title": (m.title or "") if m is not None else "",
                "matched_date": (m.date or "") if m is not None else "",
            }
        )
    return pd.DataFrame(rows, columns=DETAIL_COLUMNS)


def print_report_console(results: list[MatchResult]) -> None:
    """Affiche un résumé du rapport en console."""
    counts = count_by_status(results)

    print("\n=== ReviewMatch Report ===")
    print(f"  Avis vérifiés:    {len(results)}")
    print(f"  Confirmés:        {counts[STATUS_CONFIRMED]}")
    print(f"  Probables:        {counts[STATUS_PROBABLE]}")
    print(f"  Non trouvés:      {counts[STATUS_NOT_FOUND]}")
    print(f"  Notes identiques: {sum(1 for r in results if r.stars_match is True)}")
    print(f"  Version:          {__version__}")
    print(f"  Timestamp:        {datetime.now().isoformat()}")
    print("==========================\n")
    for r in results:
        if r.status == STATUS_NOT_FOUND:
            continue
        print(f"  [{r.status}] {r.generated_review.customer_id} score={r.score:.2f} stars={r.stars_match_label}")
