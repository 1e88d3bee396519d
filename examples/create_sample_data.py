"""Crée des fichiers de démonstration pour ReviewMatch."""

import pandas as pd
from pathlib import Path

DATA_DIR = Path(__file__).parent / "data"
DATA_DIR.mkdir(exist_ok=True)

customers = pd.DataFrame({
    "id": ["mock-1", "mock-2", "mock-3", "mock-4"],
    "created_at": ["2024-05-01T10:00:00Z", "2024-05-01T11:00:00Z", "2024-05-02T09:30:00Z", "2024-05-03T16:45:00Z"],
    "first_name": ["John", "Sarah", "Mike", "Emma"],
    "last_name": ["Miller", "Johnson", "Davis", "Wilson"],
    "email": ["john.miller@example.com", "sarah.j@example.com", "mike.d@example.com", "emma.w@example.com"],
    "review_generated": [True, True, True, False],
    "review_stars": [5, 4, 5, None],
    "review_tone": ["Enthusiastic", "Casual", "Detailed", ""],
    "review_text": [
        "Best goat stand I have ever used. Super sturdy and easy to assemble.",
        "Good stand for my Nigerian Dwarf goats, the headpiece adjusts nicely.",
        "Wheels make it easy to move around the barn, feeder bowl is handy.",
        "",
    ],
    "went_to_amazon": [True, True, False, False],
    "claimed_gifts": [True, False, True, False],
    "region": ["US", "US", "US", "US"],
    "product_slug": ["goat-stand"] * 4,
})

amazon = pd.DataFrame({
    "Date": ["2024-05-02", "2024-05-04", "2024-05-06"],
    "Rating Score": [5, 3, 4],
    "Review Title": ["Sturdy!", "Okay", "Nice"],
    "ReviewDescription": [
        "Best goat stand ever used, super sturdy and easy to assemble",
        "Shipping was slow but the stand works",
        "Headpiece adjusts nicely for my Nigerian Dwarf goats",
    ],
})

customers.to_json(DATA_DIR / "customers.json", orient="records", indent=2)
amazon.to_csv(DATA_DIR / "amazon_reviews.csv", index=False)
amazon.to_excel(DATA_DIR / "amazon_reviews.xlsx", index=False, engine="openpyxl")
print(f"Fichiers créés dans {DATA_DIR}")
