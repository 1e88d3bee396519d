"""Calcul de la similarité lexicale entre deux avis."""

from __future__ import annotations

from reviewmatch.normalize import normalize_review_text


def token_set(text: str | None, min_length: int = 3) -> frozenset[str]:
    """
    Ensemble des mots normalisés d'un avis.

    Les mots plus courts que min_length ("a", "is", "to"...) sont ignorés.
    """
    normalized = normalize_review_text(text)
    if not normalized:
        return frozenset()
    return frozenset(w for w in normalized.split(" ") if len(w) >= min_length)


def jaccard_from_tokens(tokens_a: frozenset[str], tokens_b: frozenset[str]) -> float:
    """Indice de Jaccard |A ∩ B| / |A ∪ B| ; 0 si l'un des ensembles est vide."""
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def jaccard_similarity(text_a: str | None, text_b: str | None, min_length: int = 3) -> float:
    """
    Score (0-1) de recouvrement lexical entre deux textes.

    Insensible à l'ordre des mots et aux répétitions ; symétrique.

    Args:
        text_a: Premier texte.
        text_b: Second texte.
        min_length: Longueur minimale des mots retenus.

    Returns:
        Score entre 0 et 1.
    """
    return jaccard_from_tokens(token_set(text_a, min_length), token_set(text_b, min_length))
