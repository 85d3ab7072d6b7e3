"""Mock data package for MedCure.

Simulated products, sales and archived items used when the data mode
resolves to mock. Collections are generated from a seed, live in memory
for the session, and never touch the network or disk.

Contents:
    fixtures.py  — Static pools (catalogue, payment methods, reasons)
    factory.py   — Seeded generators building full entity dicts
    provider.py  — MockDataProvider, the session-owned collections

Called by: services/*
Depends on: core/errors.py
"""

from medcure.mock.provider import DOMAINS, MockDataProvider

__all__ = ["DOMAINS", "MockDataProvider"]
