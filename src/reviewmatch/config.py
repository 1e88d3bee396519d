"""Configuration et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class ReviewMatchError(Exception):
    """Exception de base pour ReviewMatch."""


class ConfigError(ReviewMatchError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(ReviewMatchError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


@dataclass
class MatchConfig:
    """Paramètres de la vérification des avis."""

    confirmed_threshold: float = 0.7
    probable_threshold: float = 0.4
    min_token_length: int = 3  # les mots de 1-2 lettres sont ignorés
    delimiter: str = ","
    # Filtres des clients (comme le tableau de bord)
    region: str | None = None
    product_slug: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> MatchConfig:
        try:
            confirmed = float(d.get("confirmed_threshold", 0.7))
            probable = float(d.get("probable_threshold", 0.4))
            min_token_length = int(d.get("min_token_length", 3))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Valeur numérique invalide: {e}") from e
        delimiter = d.get("delimiter", ",")

        if not 0 <= confirmed <= 1:
            raise ConfigError(f"confirmed_threshold doit être entre 0 et 1 (got {confirmed})")
        if not 0 <= probable <= 1:
            raise ConfigError(f"probable_threshold doit être entre 0 et 1 (got {probable})")
        if probable > confirmed:
            raise ConfigError(
                f"probable_threshold ({probable}) doit être <= confirmed_threshold ({confirmed})"
            )
        if min_token_length < 1:
            raise ConfigError(f"min_token_length doit être >= 1 (got {min_token_length})")
        if not isinstance(delimiter, str) or len(delimiter) != 1 or delimiter in "\"\r\n":
            raise ConfigError(f"delimiter invalide: {delimiter!r}")

        return cls(
            confirmed_threshold=confirmed,
            probable_threshold=probable,
            min_token_length=min_token_length,
            delimiter=delimiter,
            region=d.get("region"),
            product_slug=d.get("product_slug"),
        )

    @classmethod
    def load(cls, path: str | Path) -> MatchConfig:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        return cls.from_dict(d)
