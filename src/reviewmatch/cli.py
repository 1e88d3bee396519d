"""Interface en ligne de commande ReviewMatch."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from reviewmatch import __version__
from reviewmatch.analytics import compute_funnel_analytics, print_analytics_console
from reviewmatch.config import MatchConfig, ReviewMatchError
from reviewmatch.customers import export_customers_csv, load_customers
from reviewmatch.io_tabular import (
    delimiter_for,
    detect_format,
    read_bytes,
    save_xlsx,
    spreadsheet_engine,
)
from reviewmatch.matching.matcher import ReviewMatcher
from reviewmatch.parser import MissingColumnError, parse_upload
from reviewmatch.report import build_detail_df, build_report_df, print_report_console

logger = logging.getLogger(__name__)


def _load_config(
    config_path: str | None,
    *,
    region: str | None = None,
    product_slug: str | None = None,
    delimiter: str | None = None,
) -> MatchConfig:
    """Charge la config (ou les valeurs par défaut) ; les options de la ligne de commande priment."""
    config = MatchConfig.load(config_path) if config_path else MatchConfig()
    if region:
        config.region = region
    if product_slug:
        config.product_slug = product_slug
    if delimiter:
        config = MatchConfig.from_dict({**asdict(config), "delimiter": delimiter})
    return config


def cmd_verify(
    customers_path: str,
    upload_path: str,
    *,
    config_path: str | None = None,
    output_path: str | None = None,
    delimiter: str | None = None,
    region: str | None = None,
    product_slug: str | None = None,
) -> int:
    """Vérifie les avis générés contre un export de la marketplace."""
    try:
        config = _load_config(config_path, region=region, product_slug=product_slug, delimiter=delimiter)
        logger.debug("Configuration: %s", config)
        customers = load_customers(customers_path, region=config.region, product_slug=config.product_slug)
        data = read_bytes(upload_path)
        external = parse_upload(
            data,
            detect_format(upload_path),
            delimiter=delimiter or delimiter_for(upload_path, config.delimiter),
            engine=spreadsheet_engine(upload_path),
        )
    except MissingColumnError as e:
        print(f"Erreur: {e}", file=sys.stderr)
        print("Colonnes trouvées:", file=sys.stderr)
        for col in e.found_columns:
            print(f"  - {col}", file=sys.stderr)
        return 1
    except ReviewMatchError as e:
        print(f"Erreur: {e}", file=sys.stderr)
        return 1

    matcher = ReviewMatcher(config)
    results = matcher.run([c.to_generated_review() for c in customers], external)
    print_report_console(results)

    if output_path:
        sheets = {
            "MATCHES": build_detail_df(results),
            "REPORT": build_report_df(results, config, n_external=len(external)),
        }
        try:
            save_xlsx(output_path, sheets)
        except ReviewMatchError as e:
            print(f"Erreur: {e}", file=sys.stderr)
            return 1
        print(f"Fichier de sortie: {output_path}")
    return 0


def cmd_analytics(
    customers_path: str,
    *,
    region: str | None = None,
    product_slug: str | None = None,
) -> int:
    """Affiche les statistiques du tunnel."""
    try:
        customers = load_customers(customers_path, region=region, product_slug=product_slug)
    except ReviewMatchError as e:
        print(f"Erreur: {e}", file=sys.stderr)
        return 1
    print_analytics_console(compute_funnel_analytics(customers))
    return 0


def cmd_export(
    customers_path: str,
    output_path: str,
    *,
    region: str | None = None,
    product_slug: str | None = None,
) -> int:
    """Exporte les clients au format CSV du tableau de bord."""
    try:
        customers = load_customers(customers_path, region=region, product_slug=product_slug)
    except ReviewMatchError as e:
        print(f"Erreur: {e}", file=sys.stderr)
        return 1
    if not customers:
        print("Aucun client à exporter.")
        return 1
    try:
        n = export_customers_csv(customers, Path(output_path))
    except ReviewMatchError as e:
        print(f"Erreur: {e}", file=sys.stderr)
        return 1
    print(f"{n} clients exportés: {output_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="reviewmatch",
        description="Vérification des avis clients publiés sur la marketplace",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Journalisation détaillée")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    def add_filters(p: argparse.ArgumentParser) -> None:
        p.add_argument("--customers", required=True, help="Export clients (csv, xlsx, json)")
        p.add_argument("--region", help="Filtrer par région")
        p.add_argument("--product", help="Filtrer par produit (slug)")

    # verify
    p_verify = subparsers.add_parser("verify", help="Vérifier les avis contre un export marketplace")
    add_filters(p_verify)
    p_verify.add_argument("--upload", "-u", required=True, help="Export des avis (csv, tsv, xlsx)")
    p_verify.add_argument("--config", "-c", help="Fichier config JSON")
    p_verify.add_argument("--output", "-o", help="Fichier xlsx de sortie")
    p_verify.add_argument("--delimiter", "-d", help="Séparateur du fichier texte")

    # analytics
    p_analytics = subparsers.add_parser("analytics", help="Statistiques du tunnel")
    add_filters(p_analytics)

    # export
    p_export = subparsers.add_parser("export", help="Exporter les clients en CSV")
    add_filters(p_export)
    p_export.add_argument("--output", "-o", required=True, help="Fichier CSV de sortie")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "verify":
        return cmd_verify(
            args.customers,
            args.upload,
            config_path=args.config,
            output_path=args.output,
            delimiter=args.delimiter,
            region=args.region,
            product_slug=args.product,
        )

    if args.command == "analytics":
        return cmd_analytics(args.customers, region=args.region, product_slug=args.product)

    if args.command == "export":
        return cmd_export(args.customers, args.output, region=args.region, product_slug=args.product)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
