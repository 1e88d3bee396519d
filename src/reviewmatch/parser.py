"""Conversion d'un export de la marketplace en avis importés (ExternalReview)."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from reviewmatch.config import ReviewMatchError
from reviewmatch.delimited import scan_rows
from reviewmatch.io_tabular import (
    FORMAT_DELIMITED,
    FORMAT_SPREADSHEET,
    decode_text,
    read_spreadsheet_records,
)
from reviewmatch.matching.schema import ExternalReview
from reviewmatch.normalize import parse_rating, safe_str

logger = logging.getLogger(__name__)

# Fragments recherchés (sans casse) dans les en-têtes, par rôle de colonne
TEXT_FRAGMENTS = ("reviewdescription", "review_text", "review text", "body", "content")
RATING_FRAGMENTS = ("ratingscore", "rating", "stars")
TITLE_FRAGMENTS = ("reviewtitle", "title")
DATE_FRAGMENTS = ("date",)


class ParseError(ReviewMatchError):
    """Erreur de lecture d'un fichier d'avis importé."""


class EmptyInputError(ParseError):
    """Le fichier ne contient aucune ligne de données."""

    def __init__(self, message: str = "Aucune donnée trouvée dans le fichier.") -> None:
        super().__init__(message)


class MissingColumnError(ParseError):
    """Une colonne requise n'a pas été trouvée parmi les en-têtes."""

    def __init__(self, role: str, found_columns: Sequence[str], expected: Sequence[str]) -> None:
        self.role = role
        self.found_columns = list(found_columns)
        self.expected = list(expected)
        super().__init__(
            f"Colonne '{role}' introuvable. Attendu: {', '.join(self.expected)}. "
            f"Colonnes trouvées: {', '.join(self.found_columns) or '(aucune)'}"
        )


@dataclass(frozen=True)
class ColumnMapping:
    """En-têtes retenus pour chaque rôle (None si absent)."""

    text: str
    rating: str | None = None
    title: str | None = None
    date: str | None = None


def find_column(headers: Sequence[str], fragments: Sequence[str]) -> str | None:
    """
    Premier en-tête (dans l'ordre du fichier) contenant l'un des fragments.

    L'ordre de recherche détermine la colonne choisie quand plusieurs en-têtes
    conviennent ; il ne doit pas être modifié.
    """
    for header in headers:
        lowered = header.lower()
        if any(frag in lowered for frag in fragments):
            return header
    return None


def resolve_columns(headers: Sequence[str]) -> ColumnMapping:
    """
    Associe les en-têtes aux rôles texte, note, titre et date.

    Raises:
        MissingColumnError: Si aucune colonne de texte d'avis n'est trouvée.
    """
    text_col = find_column(headers, TEXT_FRAGMENTS)
    if text_col is None:
        raise MissingColumnError("review_text", headers, TEXT_FRAGMENTS)
    mapping = ColumnMapping(
        text=text_col,
        rating=find_column(headers, RATING_FRAGMENTS),
        title=find_column(headers, TITLE_FRAGMENTS),
        date=find_column(headers, DATE_FRAGMENTS),
    )
    logger.debug("Colonnes retenues: %s", mapping)
    return mapping


def _optional(record: Mapping[str, Any], col: str | None) -> str | None:
    if col is None:
        return None
    value = safe_str(record.get(col)).strip()
    return value or None


def parse_records(records: Sequence[Mapping[str, Any]]) -> list[ExternalReview]:
    """
    Convertit des enregistrements {en-tête: valeur} en avis importés.

    Les en-têtes sont ceux du premier enregistrement. Les lignes sans texte
    sont ignorées ; une note illisible devient None.

    Raises:
        EmptyInputError: Si aucun enregistrement n'est fourni.
        MissingColumnError: Si la colonne de texte est introuvable.
    """
    if not records:
        raise EmptyInputError()
    headers = [str(k) for k in records[0].keys()]
    mapping = resolve_columns(headers)

    reviews: list[ExternalReview] = []
    skipped = 0
    for record in records:
        text = safe_str(record.get(mapping.text)).strip()
        if not text:
            skipped += 1
            continue
        reviews.append(
            ExternalReview(
                text=text,
                rating=parse_rating(record.get(mapping.rating)) if mapping.rating else None,
                title=_optional(record, mapping.title),
                date=_optional(record, mapping.date),
            )
        )
    if skipped:
        logger.debug("%d lignes sans texte ignorées", skipped)
    return reviews


def rows_to_records(rows: Sequence[Sequence[str]]) -> list[dict[str, str]]:
    """
    Transforme des lignes brutes (la première étant l'en-tête) en enregistrements.

    Raises:
        EmptyInputError: S'il n'y a pas de ligne de données après l'en-tête.
    """
    if len(rows) < 2:
        raise EmptyInputError()
    headers = [h.strip() for h in rows[0]]
    return [
        {h: (row[i] if i < len(row) else "").strip() for i, h in enumerate(headers)}
        for row in rows[1:]
    ]


def parse_rows(rows: Sequence[Sequence[str]]) -> list[ExternalReview]:
    """Convertit des lignes brutes avec en-tête (texte délimité) en avis importés."""
    return parse_records(rows_to_records(rows))


def parse_upload(
    data: bytes,
    fmt: str,
    *,
    delimiter: str = ",",
    engine: str | None = "openpyxl",
) -> list[ExternalReview]:
    """
    Lit un fichier importé (contenu brut + format) et retourne les avis.

    Args:
        data: Contenu du fichier.
        fmt: "delimited" ou "spreadsheet".
        delimiter: Séparateur pour le texte délimité.
        engine: Moteur pandas pour les classeurs.

    Raises:
        EmptyInputError: Fichier vide ou sans ligne de données.
        MissingColumnError: Colonne de texte introuvable.
        TabularFileError: Classeur illisible.
    """
    if not data:
        raise EmptyInputError()
    if fmt == FORMAT_SPREADSHEET:
        records = read_spreadsheet_records(data, engine=engine)
        reviews = parse_records(records)
    elif fmt == FORMAT_DELIMITED:
        rows = list(scan_rows(decode_text(data), delimiter))
        reviews = parse_rows(rows)
    else:
        raise ValueError(f"Format inconnu: {fmt!r}")
    logger.info("%d avis importés", len(reviews))
    return reviews
