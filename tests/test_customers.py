"""Tests des clients du tunnel."""

import json
from datetime import date
from pathlib import Path

import pandas as pd

from reviewmatch.customers import (
    EXPORT_HEADERS,
    CustomerRecord,
    default_export_name,
    export_customers_csv,
    filter_customers,
    load_customers,
    to_iso_utc,
)


def test_from_record_database_columns() -> None:
    c = CustomerRecord.from_record(
        {
            "id": "abc",
            "first_name": "John",
            "last_name": "Miller",
            "review_generated": True,
            "review_stars": 5,
            "review_text": "Best goat stand",
            "went_to_amazon": True,
            "claimed_gifts": False,
            "region": "US",
            "product_slug": "goat-stand",
        }
    )
    assert c.id == "abc"
    assert c.full_name == "John Miller"
    assert c.review_stars == 5
    assert c.went_to_amazon is True
    assert c.claimed_gifts is False


def test_from_record_export_headers() -> None:
    c = CustomerRecord.from_record(
        {"ID": "7", "Review Stars": "4", "Review Text": "ok", "Went to Amazon": "Yes", "Claimed Gifts": "No"}
    )
    assert c.id == "7"
    assert c.review_stars == 4
    assert c.went_to_amazon is True
    assert c.claimed_gifts is False


def test_to_generated_review() -> None:
    c = CustomerRecord(id="1", review_text="text", review_stars=3, went_to_amazon=True)
    g = c.to_generated_review()
    assert g.customer_id == "1"
    assert g.text == "text"
    assert g.stars == 3
    assert g.submitted_to_marketplace is True


def test_filter_customers() -> None:
    customers = [
        CustomerRecord(id="1", region="US", product_slug="goat-stand"),
        CustomerRecord(id="2", region="UK", product_slug="goat-stand"),
        CustomerRecord(id="3", region="US", product_slug="hay-feeder"),
        CustomerRecord(id="4"),
    ]
    assert [c.id for c in filter_customers(customers, region="US")] == ["1", "3", "4"]
    assert [c.id for c in filter_customers(customers, product_slug="goat-stand")] == ["1", "2", "4"]
    assert len(filter_customers(customers, product_slug="all")) == 4


def test_load_customers_json_with_filters(tmp_path: Path) -> None:
    path = tmp_path / "customers.json"
    path.write_text(
        json.dumps(
            [
                {"id": "1", "region": "US", "review_text": "a", "went_to_amazon": True, "review_stars": 5},
                {"id": "2", "region": "UK", "review_text": "b", "went_to_amazon": False, "review_stars": None},
            ]
        ),
        encoding="utf-8",
    )
    customers = load_customers(path, region="US")
    assert [c.id for c in customers] == ["1"]
    assert customers[0].review_stars == 5


def test_export_customers_csv(tmp_path: Path) -> None:
    out = tmp_path / "export.csv"
    customers = [
        CustomerRecord(id="1", first_name="Sarah", review_text='Said "wow", then left', went_to_amazon=True),
        CustomerRecord(id="2", review_stars=4),
    ]
    n = export_customers_csv(customers, out)
    assert n == 2
    df = pd.read_csv(out, dtype=str, keep_default_na=False)
    assert list(df.columns) == EXPORT_HEADERS
    assert df.iloc[0]["Review Text"] == 'Said "wow", then left'
    assert df.iloc[0]["Went to Amazon"] == "Yes"
    assert df.iloc[1]["Review Stars"] == "4"
    assert df.iloc[1]["Went to Amazon"] == "No"


def test_export_round_trip_through_loader(tmp_path: Path) -> None:
    out = tmp_path / "export.csv"
    export_customers_csv([CustomerRecord(id="9", review_text="hi there", review_stars=2, went_to_amazon=True)], out)
    loaded = load_customers(out)
    assert loaded[0].id == "9"
    assert loaded[0].review_stars == 2
    assert loaded[0].went_to_amazon is True


def test_to_iso_utc() -> None:
    assert to_iso_utc("2024-05-01T10:00:00Z") == "2024-05-01T10:00:00.000Z"
    assert to_iso_utc("2024-05-01 12:30:15.250+02:00") == "2024-05-01T10:30:15.250Z"
    assert to_iso_utc("2024-05-01") == "2024-05-01T00:00:00.000Z"
    assert to_iso_utc(pd.Timestamp("2024-05-01 10:00:00")) == "2024-05-01T10:00:00.000Z"
    assert to_iso_utc("") == ""
    assert to_iso_utc(None) == ""
    assert to_iso_utc("last tuesday") == "last tuesday"


def test_export_created_at_iso_utc(tmp_path: Path) -> None:
    out = tmp_path / "export.csv"
    customers = [
        CustomerRecord(id="1", created_at="2024-05-01 12:00:00+02:00"),
        CustomerRecord(id="2"),
    ]
    export_customers_csv(customers, out)
    df = pd.read_csv(out, dtype=str, keep_default_na=False)
    assert df.iloc[0]["Created At"] == "2024-05-01T10:00:00.000Z"
    assert df.iloc[1]["Created At"] == ""


def test_default_export_name() -> None:
    assert default_export_name("US", date(2024, 3, 9)) == "goatzy_customers_US_2024-03-09.csv"
