"""Clients du tunnel : lecture des exports, conversion en avis générés, export CSV."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd

from reviewmatch.io_tabular import TabularFileError, load_table
from reviewmatch.matching.schema import GeneratedReview
from reviewmatch.normalize import parse_bool, parse_rating, safe_str

logger = logging.getLogger(__name__)

# Colonnes de l'export CSV du tableau de bord, dans l'ordre
EXPORT_HEADERS = [
    "ID",
    "Created At",
    "First Name",
    "Last Name",
    "Email",
    "Opt-in Surveys",
    "Review Generated",
    "Review Stars",
    "Review Tone",
    "Review Text",
    "Went to Amazon",
    "Claimed Gifts",
]

# champ -> noms acceptés (colonne de la base, puis en-tête de l'export)
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "ID", "customer_id"),
    "created_at": ("created_at", "Created At"),
    "first_name": ("first_name", "First Name"),
    "last_name": ("last_name", "Last Name"),
    "email": ("email", "Email"),
    "opt_in_surveys": ("opt_in_surveys", "Opt-in Surveys"),
    "review_generated": ("review_generated", "Review Generated"),
    "review_stars": ("review_stars", "Review Stars"),
    "review_tone": ("review_tone", "Review Tone"),
    "review_text": ("review_text", "Review Text"),
    "went_to_amazon": ("went_to_amazon", "Went to Amazon"),
    "claimed_gifts": ("claimed_gifts", "Claimed Gifts"),
    "region": ("region", "Region"),
    "product_slug": ("product_slug", "Product"),
}


def _field(record: Mapping[str, Any], name: str) -> Any:
    for alias in FIELD_ALIASES[name]:
        if alias in record:
            return record[alias]
    return None


@dataclass
class CustomerRecord:
    """Une soumission client du tunnel."""

    id: str
    created_at: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    opt_in_surveys: bool = False
    review_generated: bool = False
    review_stars: int | None = None
    review_tone: str = ""
    review_text: str = ""
    went_to_amazon: bool = False
    claimed_gifts: bool = False
    region: str = ""
    product_slug: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> CustomerRecord:
        """Construit un client depuis une ligne de la base ou de l'export CSV."""

        def text(name: str) -> str:
            return safe_str(_field(record, name)).strip()

        return cls(
            id=text("id"),
            created_at=text("created_at"),
            first_name=text("first_name"),
            last_name=text("last_name"),
            email=text("email"),
            opt_in_surveys=parse_bool(_field(record, "opt_in_surveys")),
            review_generated=parse_bool(_field(record, "review_generated")),
            review_stars=parse_rating(_field(record, "review_stars")),
            review_tone=text("review_tone"),
            review_text=safe_str(_field(record, "review_text")),
            went_to_amazon=parse_bool(_field(record, "went_to_amazon")),
            claimed_gifts=parse_bool(_field(record, "claimed_gifts")),
            region=text("region"),
            product_slug=text("product_slug"),
        )

    def to_generated_review(self) -> GeneratedReview:
        return GeneratedReview(
            customer_id=self.id,
            text=self.review_text,
            stars=self.review_stars,
            submitted_to_marketplace=self.went_to_amazon,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def filter_customers(
    customers: Iterable[CustomerRecord],
    *,
    region: str | None = None,
    product_slug: str | None = None,
) -> list[CustomerRecord]:
    """Filtre par région et produit ; un client sans valeur n'est pas exclu."""
    out = []
    for c in customers:
        if region and c.region and c.region != region:
            continue
        if product_slug and product_slug != "all" and c.product_slug and c.product_slug != product_slug:
            continue
        out.append(c)
    return out


def load_customers(
    filepath: str | Path,
    *,
    region: str | None = None,
    product_slug: str | None = None,
) -> list[CustomerRecord]:
    """
    Charge les clients depuis un export (CSV, XLSX ou JSON de la base).

    Raises:
        TabularFileError: Si le fichier est absent ou illisible.
    """
    df = load_table(filepath)
    customers = [CustomerRecord.from_record(r) for r in df.to_dict(orient="records")]
    filtered = filter_customers(customers, region=region, product_slug=product_slug)
    logger.info("%d clients chargés (%d après filtres)", len(customers), len(filtered))
    return filtered


def _yes_no(val: bool) -> str:
    return "Yes" if val else "No"


def to_iso_utc(value: Any) -> str:
    """
    Horodatage au format ISO 8601 UTC avec millisecondes (2024-05-01T10:00:00.000Z).

    Une date sans fuseau est lue en UTC. Une valeur vide donne "" et une valeur
    non reconnue est renvoyée telle quelle.
    """
    text = safe_str(value).strip()
    if not text:
        return ""
    try:
        ts = pd.to_datetime(text, utc=True)
    except (ValueError, OverflowError):
        logger.debug("Date non reconnue: %r", text)
        return text
    if pd.isna(ts):
        return ""
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def build_export_df(customers: Iterable[CustomerRecord]) -> pd.DataFrame:
    """Construit le tableau de l'export clients (mêmes colonnes que le tableau de bord)."""
    rows = [
        [
            c.id,
            to_iso_utc(c.created_at),
            c.first_name,
            c.last_name,
            c.email,
            _yes_no(c.opt_in_surveys),
            _yes_no(c.review_generated),
            c.review_stars if c.review_stars is not None else "",
            c.review_tone,
            c.review_text,
            _yes_no(c.went_to_amazon),
            _yes_no(c.claimed_gifts),
        ]
        for c in customers
    ]
    return pd.DataFrame(rows, columns=EXPORT_HEADERS)


def export_customers_csv(customers: Iterable[CustomerRecord], output_path: str | Path) -> int:
    """
    Écrit l'export CSV des clients.

    Returns:
        Nombre de clients exportés.

    Raises:
        TabularFileError: Si le fichier ne peut pas être écrit.
    """
    df = build_export_df(customers)
    try:
        df.to_csv(output_path, index=False, encoding="utf-8")
    except OSError as e:
        raise TabularFileError(f"Impossible d'écrire {output_path}: {e}") from e
    return len(df)


def default_export_name(region: str, day: date | None = None) -> str:
    """Nom de fichier par défaut de l'export : goatzy_customers_<region>_<date>.csv."""
    day = day or date.today()
    return f"goatzy_customers_{region}_{day.isoformat()}.csv"
