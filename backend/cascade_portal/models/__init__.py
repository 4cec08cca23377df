# [BEGIN FILE] backend/cascade_portal/models/__init__.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Index,
    CheckConstraint,
    func,
    Boolean,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# =========================
# Company & dimensions
# =========================
class Company(Base):
    __tablename__ = "companies"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    regions = relationship("Region", back_populates="company", cascade="all, delete-orphan", lazy="selectin")
    lead_types = relationship("LeadType", back_populates="company", cascade="all, delete-orphan", lazy="selectin")


class Region(Base):
    __tablename__ = "regions"
    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)          # NORAM, EMEA North ...
    display_name = Column(String(100), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime, server_default=func.now())

    company = relationship("Company", back_populates="regions", lazy="selectin")

    __table_args__ = (UniqueConstraint("company_id", "name", name="uix_region_company_name"),)


class LeadType(Base):
    __tablename__ = "lead_types"
    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)          # Inbound, Outbound, Partner ...
    display_name = Column(String(100), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime, server_default=func.now())

    company = relationship("Company", back_populates="lead_types", lazy="selectin")

    __table_args__ = (UniqueConstraint("company_id", "name", name="uix_lead_type_company_name"),)


# =========================
# Cascade inputs
# =========================
class HistoricalVolume(Base):
    __tablename__ = "historical_volumes"
    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=False)
    lead_type_id = Column(Integer, ForeignKey("lead_types.id", ondelete="CASCADE"), nullable=False)
    year = Column(Integer, nullable=False)
    quarter = Column(Integer, nullable=False)  # 1..4
    volume = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("company_id", "region_id", "lead_type_id", "year", "quarter", name="uix_history_period"),
        CheckConstraint("quarter >= 1 AND quarter <= 4", name="ck_history_quarter"),
        Index("ix_history_company", "company_id"),
    )


class ConversionRate(Base):
    __tablename__ = "conversion_rates"
    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=False)
    lead_type_id = Column(Integer, ForeignKey("lead_types.id", ondelete="CASCADE"), nullable=False)
    coverage_ratio = Column(Integer, nullable=False, default=500)    # bp (5.0% = 500)
    win_rate_new = Column(Integer, nullable=False, default=2500)     # bp
    win_rate_upsell = Column(Integer, nullable=False, default=3000)  # bp
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("company_id", "region_id", "lead_type_id", name="uix_conversion_rate"),
    )


class DealEconomics(Base):
    __tablename__ = "deal_economics"
    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=False)
    acv_new = Column(Integer, nullable=False, default=10000000)    # cents
    acv_upsell = Column(Integer, nullable=False, default=5000000)  # cents
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint("company_id", "region_id", name="uix_deal_economics"),)


class TimeDistribution(Base):
    __tablename__ = "time_distributions"
    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    lead_type_id = Column(Integer, ForeignKey("lead_types.id", ondelete="CASCADE"), nullable=False)
    same_quarter_pct = Column(Integer, nullable=False, default=8900)  # bp
    next_quarter_pct = Column(Integer, nullable=False, default=1000)  # bp
    two_quarter_pct = Column(Integer, nullable=False, default=100)    # bp
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # toplamın 10000 olması zorunlu değil (okuma tarafında loglanıyor)
    __table_args__ = (UniqueConstraint("company_id", "lead_type_id", name="uix_time_distribution"),)


# =========================
# Cascade outputs
# =========================
class Forecast(Base):
    __tablename__ = "forecasts"
    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    region_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=False)
    lead_type_id = Column(Integer, ForeignKey("lead_types.id", ondelete="CASCADE"), nullable=False)
    year = Column(Integer, nullable=False)
    quarter = Column(Integer, nullable=False)
    predicted_leads = Column(Integer, nullable=False, default=0)
    predicted_opportunities = Column(Integer, nullable=False, default=0)  # x100
    predicted_revenue_new = Column(Integer, nullable=False, default=0)     # cents
    predicted_revenue_upsell = Column(Integer, nullable=False, default=0)  # cents
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("company_id", "region_id", "lead_type_id", "year", "quarter", name="uix_forecast_period"),
        Index("ix_forecasts_company", "company_id"),
    )


class Scenario(Base):
    """Saved what-if: adjustment parameters + impact totals only."""

    __tablename__ = "scenarios"
    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    conversion_rate_multiplier = Column(Integer, nullable=True)  # 10000 = 1.0x
    acv_new_delta = Column(Integer, nullable=True)               # cents
    acv_upsell_delta = Column(Integer, nullable=True)            # cents
    same_quarter_delta = Column(Integer, nullable=True)          # bp
    next_quarter_delta = Column(Integer, nullable=True)          # bp
    two_quarter_delta = Column(Integer, nullable=True)           # bp

    total_revenue_change = Column(Integer, nullable=False, default=0)                # cents
    total_revenue_change_percent = Column(Integer, nullable=False, default=0)        # bp
    total_opportunities_change = Column(Integer, nullable=False, default=0)
    total_opportunities_change_percent = Column(Integer, nullable=False, default=0)  # bp

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (Index("ix_scenarios_company", "company_id"),)
