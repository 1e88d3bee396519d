"""I/O tableurs : lecture des fichiers importés et des exports clients, sauvegarde xlsx."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from reviewmatch.config import ReviewMatchError

logger = logging.getLogger(__name__)

FORMAT_DELIMITED = "delimited"
FORMAT_SPREADSHEET = "spreadsheet"

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls", ".ods")


class TabularFileError(ReviewMatchError):
    """Erreur de chargement d'un fichier (fichier absent, format illisible)."""


def _get_engine(path: Path) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix == ".ods":
        return "odf"
    return None


def _engine_error(path: Path, e: ImportError) -> TabularFileError:
    ext = path.suffix.lower()
    if ext == ".xls":
        return TabularFileError(f"Format .xls requis: pip install xlrd. Détail: {e}")
    if ext == ".ods":
        return TabularFileError(f"Format ODS requis: pip install odfpy. Détail: {e}")
    return TabularFileError(f"Impossible de lire {path}: {e}")


def detect_format(filepath: str | Path) -> str:
    """Indique le format d'un fichier importé : tableur ou texte délimité."""
    if Path(filepath).suffix.lower() in SPREADSHEET_EXTENSIONS:
        return FORMAT_SPREADSHEET
    return FORMAT_DELIMITED


def delimiter_for(filepath: str | Path, default: str = ",") -> str:
    """Séparateur selon l'extension (.tsv → tabulation)."""
    if Path(filepath).suffix.lower() == ".tsv":
        return "\t"
    return default


def decode_text(data: bytes) -> str:
    """Décode un fichier texte : UTF-8 (BOM accepté), sinon latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("Fichier non UTF-8, décodage en latin-1")
        return data.decode("latin-1")


def read_bytes(filepath: str | Path) -> bytes:
    """
    Lit le contenu brut d'un fichier importé.

    Raises:
        TabularFileError: Si le fichier est absent ou illisible.
    """
    path = Path(filepath)
    if not path.exists():
        raise TabularFileError(f"Fichier introuvable: {path}")
    try:
        return path.read_bytes()
    except OSError as e:
        raise TabularFileError(f"Impossible de lire {path}: {e}") from e


def read_spreadsheet_records(
    data: bytes,
    *,
    engine: str | None = "openpyxl",
) -> list[dict[str, Any]]:
    """
    Lit la première feuille d'un classeur et la retourne en enregistrements {en-tête: valeur}.

    Les cellules sont lues en texte ; les cellules vides valent "".

    Raises:
        TabularFileError: Si le classeur est illisible.
    """
    try:
        df = pd.read_excel(io.BytesIO(data), sheet_name=0, dtype=str, engine=engine)
    except ImportError as e:
        raise TabularFileError(f"Moteur tableur manquant ({engine}): {e}") from e
    except Exception as e:
        raise TabularFileError(f"Impossible de lire le classeur: {e}") from e
    df = df.fillna("")
    df.columns = [str(c) for c in df.columns]
    return df.to_dict(orient="records")  # type: ignore[return-value]


def spreadsheet_engine(filepath: str | Path) -> str | None:
    """Moteur pandas à utiliser pour un classeur importé."""
    return _get_engine(Path(filepath))


def load_table(filepath: str | Path) -> pd.DataFrame:
    """
    Charge un export tabulaire (CSV, TSV, XLSX, XLS, ODS ou JSON) en préservant le texte.

    Utilisé pour les exports de clients ; les cellules vides valent "".

    Raises:
        TabularFileError: Si le fichier est absent ou illisible.
    """
    path = Path(filepath)
    if not path.exists():
        raise TabularFileError(f"Fichier introuvable: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
        elif suffix in SPREADSHEET_EXTENSIONS:
            engine = _get_engine(path)
            df = pd.read_excel(path, sheet_name=0, dtype=str, engine=engine)
        else:
            try:
                df = pd.read_csv(path, dtype=str, sep=delimiter_for(path), encoding="utf-8-sig")
            except UnicodeDecodeError:
                df = pd.read_csv(path, dtype=str, sep=delimiter_for(path), encoding="latin-1")
    except ImportError as e:
        raise _engine_error(path, e) from e
    except ValueError as e:
        raise TabularFileError(f"Contenu invalide dans {path}: {e}") from e
    except Exception as e:
        raise TabularFileError(f"Impossible de lire le fichier {path}: {e}") from e

    logger.debug("%s: %d lignes, colonnes %s", path.name, len(df), list(df.columns))
    return df.astype(object).where(df.notna(), "")


def save_xlsx(
    filepath: str | Path,
    dataframes: dict[str, pd.DataFrame],
    *,
    index: bool = False,
) -> None:
    """
    Sauvegarde plusieurs DataFrames dans un fichier xlsx (une feuille par DataFrame).

    Args:
        filepath: Chemin de sortie.
        dataframes: Dict {nom_feuille: DataFrame}.

    Raises:
        TabularFileError: Si le fichier ne peut pas être écrit.
    """
    try:
        with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
            for sheet_name, df in dataframes.items():
                # Nettoyer le nom de feuille (Excel limite à 31 caractères)
                safe_name = str(sheet_name)[:31]
                df.to_excel(writer, sheet_name=safe_name, index=index)
    except OSError as e:
        raise TabularFileError(f"Impossible d'écrire {filepath}: {e}") from e
