# backend/cascade_portal/forecast/constants.py

# Fixed-point scale: 10000 bp = 100% (also 1.0x for multipliers)
BP_SCALE = 10000

# Stored ForecastRow opportunities are multiplied by this for sub-unit precision
OPPORTUNITY_PRECISION_MULTIPLIER = 100

# ---------------------------
# Defaults when a row is missing
# ---------------------------
DEFAULT_COVERAGE_RATIO_BP = 500      # 5%
DEFAULT_WIN_RATE_NEW_BP = 2500       # 25%
DEFAULT_WIN_RATE_UPSELL_BP = 3000    # 30%

DEFAULT_SAME_QUARTER_PCT = 8900      # 89%
DEFAULT_NEXT_QUARTER_PCT = 1000      # 10%
DEFAULT_TWO_QUARTER_PCT = 100        # 1%

DEFAULT_ACV_NEW_CENTS = 10_000_000   # $100,000
DEFAULT_ACV_UPSELL_CENTS = 5_000_000  # $50,000
