"""Lecture en un seul passage des fichiers texte délimités (CSV, TSV)."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum

logger = logging.getLogger(__name__)

BOM = "\ufeff"


class ScanState(Enum):
    """État du scanner pour le caractère courant."""

    UNQUOTED = "unquoted"
    QUOTED = "quoted"
    QUOTE_IN_QUOTED = "quote_in_quoted"  # guillemet lu dans un champ entre guillemets


def scan_rows(text: str, delimiter: str = ",") -> Iterator[list[str]]:
    """
    Découpe un texte délimité en lignes de cellules (style RFC 4180).

    - Les champs entre guillemets peuvent contenir le séparateur, des retours
      à la ligne et des guillemets doublés ("" → ").
    - CRLF, LF seul et CR seul terminent une ligne hors guillemets.
    - Les lignes vides sont ignorées ; un BOM initial est retiré.
    - Un champ entre guillemets non refermé en fin de texte est conservé tel quel.

    Args:
        text: Contenu décodé du fichier.
        delimiter: Séparateur de champs (un caractère).

    Yields:
        Liste des cellules (non nettoyées) de chaque ligne.
    """
    if text.startswith(BOM):
        text = text[1:]

    state = ScanState.UNQUOTED
    row: list[str] = []
    field: list[str] = []
    row_started = False
    skip_lf = False

    for ch in text:
        if skip_lf:
            skip_lf = False
            if ch == "\n":
                continue

        if state is ScanState.QUOTED:
            if ch == '"':
                state = ScanState.QUOTE_IN_QUOTED
            else:
                field.append(ch)
            continue

        if state is ScanState.QUOTE_IN_QUOTED:
            if ch == '"':
                field.append('"')
                state = ScanState.QUOTED
                continue
            state = ScanState.UNQUOTED
            # sinon : le guillemet fermait le champ, on traite ch hors guillemets

        if ch == '"':
            state = ScanState.QUOTED
            row_started = True
        elif ch == delimiter:
            row.append("".join(field))
            field = []
            row_started = True
        elif ch == "\r" or ch == "\n":
            if row_started:
                row.append("".join(field))
                yield row
            row, field, row_started = [], [], False
            skip_lf = ch == "\r"
        else:
            field.append(ch)
            row_started = True

    if state is ScanState.QUOTED:
        logger.warning("Champ entre guillemets non refermé en fin de fichier")
    if row_started:
        row.append("".join(field))
        yield row
