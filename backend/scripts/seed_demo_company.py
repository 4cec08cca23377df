# backend/scripts/seed_demo_company.py
import argparse
import os
import sys

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from cascade_portal.core.config import SessionLocal, engine
from cascade_portal.models import (
    Base,
    Company,
    ConversionRate,
    DealEconomics,
    HistoricalVolume,
    LeadType,
    Region,
    TimeDistribution,
)

REGIONS = [("NORAM", "North America"), ("EMEA", "Europe & Middle East")]
LEAD_TYPES = [("Inbound", "Inbound"), ("Outbound", "Outbound")]

# quarter volume per (region, lead type), 2024-Q1 .. 2025-Q4
VOLUMES = {
    ("NORAM", "Inbound"): [420, 450, 470, 510, 530, 560, 580, 610],
    ("NORAM", "Outbound"): [180, 175, 190, 200, 210, 205, 220, 230],
    ("EMEA", "Inbound"): [210, 220, 235, 240, 260, 270, 275, 290],
    ("EMEA", "Outbound"): [90, 95, 100, 98, 110, 115, 120, 125],
}


def main():
    p = argparse.ArgumentParser(description="Seed a demo company")
    p.add_argument("--name", default="Demo SaaS Co")
    p.add_argument("--create-tables", action="store_true", help="create tables without alembic")
    args = p.parse_args()

    if args.create_tables:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        company = Company(name=args.name, description="Seeded by seed_demo_company.py")
        db.add(company)
        db.flush()

        regions = {}
        for name, display in REGIONS:
            r = Region(company_id=company.id, name=name, display_name=display)
            db.add(r)
            regions[name] = r
        lead_types = {}
        for name, display in LEAD_TYPES:
            t = LeadType(company_id=company.id, name=name, display_name=display)
            db.add(t)
            lead_types[name] = t
        db.flush()

        for (rname, tname), series in VOLUMES.items():
            for i, volume in enumerate(series):
                db.add(
                    HistoricalVolume(
                        company_id=company.id,
                        region_id=regions[rname].id,
                        lead_type_id=lead_types[tname].id,
                        year=2024 + i // 4,
                        quarter=i % 4 + 1,
                        volume=volume,
                    )
                )
            db.add(
                ConversionRate(
                    company_id=company.id,
                    region_id=regions[rname].id,
                    lead_type_id=lead_types[tname].id,
                    coverage_ratio=600 if tname == "Inbound" else 400,
                    win_rate_new=2500,
                    win_rate_upsell=3000,
                )
            )

        db.add(DealEconomics(company_id=company.id, region_id=regions["NORAM"].id, acv_new=12000000, acv_upsell=6000000))
        db.add(DealEconomics(company_id=company.id, region_id=regions["EMEA"].id, acv_new=9000000, acv_upsell=4500000))
        db.add(TimeDistribution(company_id=company.id, lead_type_id=lead_types["Inbound"].id,
                                same_quarter_pct=8900, next_quarter_pct=1000, two_quarter_pct=100))
        db.add(TimeDistribution(company_id=company.id, lead_type_id=lead_types["Outbound"].id,
                                same_quarter_pct=7000, next_quarter_pct=2500, two_quarter_pct=500))

        db.commit()
        print(f"✓ Seeded company #{company.id} ({company.name})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
