"""fixtures.py — Static pools the mock generators draw from.

Design principles:
    - Deterministic IDs so simulated data is reproducible for a given seed
    - Realistic pharmacy catalogue, payment methods and archive reasons
    - Zero external dependencies

Called by: factory.py
Depends on: Nothing
"""

from __future__ import annotations

from datetime import datetime

# ─── Deterministic IDs ───────────────────────────────────────────────────────
# WHY: Stable prefixes per domain let the front end (and tests) tell
# simulated records apart from live ones at a glance.

_ID_PREFIX = {
    "products": "prd",
    "sales": "sal",
    "archived": "arc",
}


def mock_id(domain: str, number: int) -> str:
    """Return a stable id like ``prd-000017``."""
    return f"{_ID_PREFIX.get(domain, 'mck')}-{number:06d}"


def iso(dt: datetime) -> str:
    """Format a datetime as ISO 8601 string."""
    return dt.isoformat()


# ─── Catalogue ────────────────────────────────────────────────────────────────

PRODUCT_CATEGORIES = (
    "Analgesic",
    "Antibiotic",
    "Antihistamine",
    "Anti-inflammatory",
    "Supplement",
    "First Aid",
    "Cardiovascular",
    "Respiratory",
    "Digestive",
    "Dermatological",
    "Ophthalmic",
    "Otic",
    "Other",
)

# (name, category, base cost price)
PRODUCT_POOL: tuple[tuple[str, str, float], ...] = (
    ("Paracetamol 500mg", "Analgesic", 1.20),
    ("Ibuprofen 400mg", "Anti-inflammatory", 2.10),
    ("Mefenamic Acid 500mg", "Analgesic", 2.75),
    ("Amoxicillin 500mg", "Antibiotic", 6.50),
    ("Cefalexin 500mg", "Antibiotic", 8.40),
    ("Azithromycin 250mg", "Antibiotic", 18.00),
    ("Cetirizine 10mg", "Antihistamine", 3.25),
    ("Loratadine 10mg", "Antihistamine", 4.10),
    ("Vitamin C 500mg", "Supplement", 1.80),
    ("Multivitamins + Iron", "Supplement", 4.60),
    ("Zinc Sulfate 20mg", "Supplement", 2.30),
    ("Elastic Bandage 4in", "First Aid", 35.00),
    ("Povidone-Iodine 60ml", "First Aid", 42.00),
    ("Adhesive Strips (100s)", "First Aid", 55.00),
    ("Amlodipine 5mg", "Cardiovascular", 3.90),
    ("Losartan 50mg", "Cardiovascular", 5.20),
    ("Salbutamol Inhaler", "Respiratory", 180.00),
    ("Carbocisteine 500mg", "Respiratory", 4.80),
    ("Omeprazole 20mg", "Digestive", 5.50),
    ("Loperamide 2mg", "Digestive", 2.60),
    ("Hydrocortisone Cream 1%", "Dermatological", 65.00),
    ("Clotrimazole Cream", "Dermatological", 58.00),
    ("Artificial Tears 15ml", "Ophthalmic", 120.00),
    ("Ear Drops 10ml", "Otic", 95.00),
    ("Oral Rehydration Salts", "Other", 9.50),
)

PAYMENT_METHODS = ("cash", "card", "gcash", "bank_transfer")

SALE_STATUSES = ("completed", "reversed", "pending")

# ─── Archive ──────────────────────────────────────────────────────────────────

ARCHIVE_REASONS = (
    "Discontinued by supplier",
    "Expired stock",
    "Duplicate entry",
    "Recalled by manufacturer",
    "Sale cancellation",
    "Contract ended",
)

SUPPLIER_NAMES = (
    "Unilab Distribution",
    "Pascual Pharma",
    "Metro Drug Inc.",
    "Zuellig Pharma",
)

EMPLOYEE_NAMES = (
    "Maria Santos",
    "Jose Reyes",
    "Ana Cruz",
    "Paolo Garcia",
)

ARCHIVED_BY = "admin@medcure.com"
