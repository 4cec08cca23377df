# backend/scripts/recalculate_forecasts.py
import argparse
import os
import sys

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from cascade_portal.core.config import SessionLocal, settings
from cascade_portal.forecast.runner import recalculate_company
from cascade_portal.store.sql import SqlForecastStore


def main():
    p = argparse.ArgumentParser(description="Recalculate the cascade forecast of one company")
    p.add_argument("--company", type=int, required=True, help="company id")
    p.add_argument("--start-year", type=int, default=settings.FORECAST_START_YEAR)
    p.add_argument("--start-quarter", type=int, default=settings.FORECAST_START_QUARTER, choices=[1, 2, 3, 4])
    p.add_argument("--years", type=int, default=settings.FORECAST_YEARS)
    args = p.parse_args()

    db = SessionLocal()
    try:
        store = SqlForecastStore(db)
        regions = store.get_regions(args.company)
        lead_types = store.get_lead_types(args.company)
        history = store.get_history(args.company)
        rates = store.get_conversion_rates(args.company)

        print(f"Company #{args.company}")
        print("Data availability:")
        print(f"  Regions:            {len(regions)}")
        print(f"  Lead types:         {len(lead_types)}")
        print(f"  History records:    {len(history)}")
        print(f"  Conversion rates:   {len(rates)}")

        if not history:
            print("⚠️  No historical volume found; nothing to forecast.")
            return 1

        count = recalculate_company(
            store,
            args.company,
            start_year=args.start_year,
            start_quarter=args.start_quarter,
            forecast_years=args.years,
            new_split_bp=settings.NEW_BUSINESS_SPLIT_BP,
            upsell_split_bp=settings.UPSELL_SPLIT_BP,
        )
        print(f"✓ Generated {count} forecast entries")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
