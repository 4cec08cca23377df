"""cascade_tables

Revision ID: 7c3e91a4d2b0
Revises:
Create Date: 2026-10-18 10:02:41.118204
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "7c3e91a4d2b0"
down_revision = None
branch_labels = None
depends_on = None


def _company_fk():
    return sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE")


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )

    for table, uix in (("regions", "uix_region_company_name"), ("lead_types", "uix_lead_type_company_name")):
        op.create_table(
            table,
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("company_id", sa.Integer, nullable=False),
            sa.Column("name", sa.String(100), nullable=False),
            sa.Column("display_name", sa.String(100), nullable=False),
            sa.Column("enabled", sa.Boolean, nullable=False, server_default=sa.text("1")),
            sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
            _company_fk(),
            sa.UniqueConstraint("company_id", "name", name=uix),
        )

    op.create_table(
        "historical_volumes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("company_id", sa.Integer, nullable=False),
        sa.Column("region_id", sa.Integer, nullable=False),
        sa.Column("lead_type_id", sa.Integer, nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("quarter", sa.Integer, nullable=False),
        sa.Column("volume", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        _company_fk(),
        sa.ForeignKeyConstraint(["region_id"], ["regions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["lead_type_id"], ["lead_types.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("company_id", "region_id", "lead_type_id", "year", "quarter", name="uix_history_period"),
        sa.CheckConstraint("quarter >= 1 AND quarter <= 4", name="ck_history_quarter"),
    )
    op.create_index("ix_history_company", "historical_volumes", ["company_id"], unique=False)

    op.create_table(
        "conversion_rates",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("company_id", sa.Integer, nullable=False),
        sa.Column("region_id", sa.Integer, nullable=False),
        sa.Column("lead_type_id", sa.Integer, nullable=False),
        sa.Column("coverage_ratio", sa.Integer, nullable=False, server_default=sa.text("500")),
        sa.Column("win_rate_new", sa.Integer, nullable=False, server_default=sa.text("2500")),
        sa.Column("win_rate_upsell", sa.Integer, nullable=False, server_default=sa.text("3000")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        _company_fk(),
        sa.ForeignKeyConstraint(["region_id"], ["regions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["lead_type_id"], ["lead_types.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("company_id", "region_id", "lead_type_id", name="uix_conversion_rate"),
    )

    op.create_table(
        "deal_economics",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("company_id", sa.Integer, nullable=False),
        sa.Column("region_id", sa.Integer, nullable=False),
        sa.Column("acv_new", sa.Integer, nullable=False, server_default=sa.text("10000000")),
        sa.Column("acv_upsell", sa.Integer, nullable=False, server_default=sa.text("5000000")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        _company_fk(),
        sa.ForeignKeyConstraint(["region_id"], ["regions.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("company_id", "region_id", name="uix_deal_economics"),
    )

    op.create_table(
        "time_distributions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("company_id", sa.Integer, nullable=False),
        sa.Column("lead_type_id", sa.Integer, nullable=False),
        sa.Column("same_quarter_pct", sa.Integer, nullable=False, server_default=sa.text("8900")),
        sa.Column("next_quarter_pct", sa.Integer, nullable=False, server_default=sa.text("1000")),
        sa.Column("two_quarter_pct", sa.Integer, nullable=False, server_default=sa.text("100")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        _company_fk(),
        sa.ForeignKeyConstraint(["lead_type_id"], ["lead_types.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("company_id", "lead_type_id", name="uix_time_distribution"),
    )

    op.create_table(
        "forecasts",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("company_id", sa.Integer, nullable=False),
        sa.Column("region_id", sa.Integer, nullable=False),
        sa.Column("lead_type_id", sa.Integer, nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("quarter", sa.Integer, nullable=False),
        sa.Column("predicted_leads", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("predicted_opportunities", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("predicted_revenue_new", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("predicted_revenue_upsell", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        _company_fk(),
        sa.ForeignKeyConstraint(["region_id"], ["regions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["lead_type_id"], ["lead_types.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("company_id", "region_id", "lead_type_id", "year", "quarter", name="uix_forecast_period"),
    )
    op.create_index("ix_forecasts_company", "forecasts", ["company_id"], unique=False)

    # Kaydedilen what-if: sadece parametreler + toplam etki
    op.create_table(
        "scenarios",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("company_id", sa.Integer, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("conversion_rate_multiplier", sa.Integer, nullable=True),
        sa.Column("acv_new_delta", sa.Integer, nullable=True),
        sa.Column("acv_upsell_delta", sa.Integer, nullable=True),
        sa.Column("same_quarter_delta", sa.Integer, nullable=True),
        sa.Column("next_quarter_delta", sa.Integer, nullable=True),
        sa.Column("two_quarter_delta", sa.Integer, nullable=True),
        sa.Column("total_revenue_change", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("total_revenue_change_percent", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("total_opportunities_change", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("total_opportunities_change_percent", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        _company_fk(),
    )
    op.create_index("ix_scenarios_company", "scenarios", ["company_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_scenarios_company", table_name="scenarios")
    op.drop_table("scenarios")
    op.drop_index("ix_forecasts_company", table_name="forecasts")
    op.drop_table("forecasts")
    op.drop_table("time_distributions")
    op.drop_table("deal_economics")
    op.drop_table("conversion_rates")
    op.drop_index("ix_history_company", table_name="historical_volumes")
    op.drop_table("historical_volumes")
    op.drop_table("lead_types")
    op.drop_table("regions")
    op.drop_table("companies")
