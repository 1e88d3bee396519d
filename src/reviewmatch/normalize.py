"""Normalisation de texte et de cellules de tableur."""

from __future__ import annotations

import re
import unicodedata
from typing import Any

_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def norm_text(
    s: str | float | int | None,
    *,
    lower: bool = True,
    strip: bool = True,
) -> str:
    """
    Normalise un texte : NFKC, espaces multiples → espace simple, lower, strip.

    Args:
        s: Valeur à normaliser (convertie en str si numérique).
        lower: Mettre en minuscules.
        strip: Supprimer espaces en début/fin.

    Returns:
        Chaîne normalisée.
    """
    if s is None or (isinstance(s, float) and (s != s or s == float("inf"))):
        return ""
    text = str(s).strip() if strip else str(s)
    text = unicodedata.normalize("NFKC", text)
    text = _WHITESPACE.sub(" ", text)
    if strip:
        text = text.strip()
    if lower:
        text = text.lower()
    return text


def normalize_review_text(s: str | None) -> str:
    """
    Normalise un avis pour la comparaison lexicale.

    Minuscules, suppression de tout caractère autre que a-z, 0-9 et espaces
    (les lettres accentuées disparaissent), espaces multiples → espace simple.
    """
    if not s:
        return ""
    text = str(s).lower()
    text = _NON_TOKEN_CHARS.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def safe_str(val: Any) -> str:
    """Convertit une valeur en chaîne pour affichage/stockage."""
    if val is None or (isinstance(val, float) and (val != val or val == float("inf"))):
        return ""
    return str(val)


def parse_int_prefix(val: Any) -> int | None:
    """
    Lit l'entier en tête d'une cellule ("5", "5.0", "4 out of 5" → 5, 5, 4).

    Retourne None si la cellule ne commence pas par un entier.
    """
    if isinstance(val, bool):
        return None
    if isinstance(val, int):
        return val
    m = _LEADING_INT.match(safe_str(val))
    if not m:
        return None
    return int(m.group(1))


def parse_rating(val: Any) -> int | None:
    """Note 1-5 depuis une cellule ; None si absente, illisible ou hors bornes."""
    rating = parse_int_prefix(val)
    if rating is None or not 1 <= rating <= 5:
        return None
    return rating


def parse_bool(val: Any) -> bool:
    """Interprète Yes/No, true/false, 1/0 (cellules d'export ou colonnes booléennes)."""
    if isinstance(val, bool):
        return val
    text = norm_text(safe_str(val))
    return text in {"yes", "y", "true", "1", "oui", "t"}
