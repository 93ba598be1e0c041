"""Initial schema: reference data, routes with comments and audits, weekly routes, ZIP cache"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers, used by Alembic.
revision = "20261019_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade():
    # --- 1) Reference data ---
    op.create_table(
        "dispatchers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("dispatcher_id", sa.Integer(), sa.ForeignKey("dispatchers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("truck", sa.String(), nullable=True),
        sa.Column("trailer", sa.String(), nullable=True),
        sa.Column("emergency_contact_name", sa.String(), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "divisions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("mc", sa.String(), nullable=True),
        sa.Column("dot", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("phone_number", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "trucks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("number", sa.String(), nullable=False, unique=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("make", sa.String(), nullable=True),
        sa.Column("model", sa.String(), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("vin", sa.String(), nullable=True),
        sa.Column("license_plate", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "trailers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("number", sa.String(), nullable=False, unique=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("type", sa.String(), nullable=True),
        sa.Column("length", sa.String(), nullable=True),
        sa.Column("vin", sa.String(), nullable=True),
        sa.Column("license_plate", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "zip_codes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("zip_code", sa.String(5), nullable=False, unique=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("county", sa.String(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "route_statuses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("extension", sa.String(), nullable=True),
        sa.Column("group", sa.String(), nullable=True),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("deactivated_at", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "user_permissions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("section", sa.String(), nullable=False),
        sa.Column("can_read", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("can_write", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "section", name="uq_user_permissions_user_section"),
    )

    # --- 2) Routes, comments, audits ---
    op.create_table(
        "routes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("driver_id", sa.Integer(), sa.ForeignKey("drivers.id"), nullable=False),
        sa.Column("division_id", sa.Integer(), sa.ForeignKey("divisions.id", ondelete="SET NULL"), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("pickup_zip", sa.String(5), nullable=False),
        sa.Column("pickup_city", sa.String(), nullable=True),
        sa.Column("pickup_state", sa.String(), nullable=True),
        sa.Column("pickup_county", sa.String(), nullable=True),
        sa.Column("delivery_zip", sa.String(5), nullable=False),
        sa.Column("delivery_city", sa.String(), nullable=True),
        sa.Column("delivery_state", sa.String(), nullable=True),
        sa.Column("delivery_county", sa.String(), nullable=True),
        sa.Column("mileage", sa.Integer(), nullable=True),
        sa.Column("mileage_source", sa.String(), nullable=True),
        sa.Column("rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("sold_for", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("status_color", sa.String(7), nullable=True),
        sa.Column("status_start_date", sa.Date(), nullable=True),
        sa.Column("status_end_date", sa.Date(), nullable=True),
        sa.Column("customer_load_number", sa.String(), nullable=True),
        sa.Column("previous_route_ids", sa.JSON(), nullable=False),
        sa.Column("last_comment_by", sa.String(), nullable=True),
        sa.Column("last_comment_at", sa.DateTime(), nullable=True),
        sa.Column("last_edited_by", sa.String(), nullable=True),
        sa.Column("last_edited_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("rate >= 0", name="ck_routes_rate_nonneg"),
        sa.CheckConstraint("sold_for IS NULL OR sold_for >= 0", name="ck_routes_sold_for_nonneg"),
    )
    op.create_index("idx_routes_driver_date", "routes", ["driver_id", "date"])

    op.create_table(
        "route_comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("route_id", sa.Integer(), sa.ForeignKey("routes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_route_comments_route", "route_comments", ["route_id"])

    # route_id is not a foreign key: audit rows outlive their route
    op.create_table(
        "route_audits",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("route_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("comment", sa.String(), nullable=True),
        sa.Column("user_name", sa.String(), nullable=True),
        sa.Column("changed_fields", sa.JSON(), nullable=False),
        sa.Column("old_values", sa.JSON(), nullable=True),
        sa.Column("new_values", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_route_audits_route", "route_audits", ["route_id"])

    # --- 3) Weekly routes ---
    op.create_table(
        "weekly_routes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("driver_id", sa.Integer(), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("division_id", sa.Integer(), sa.ForeignKey("divisions.id", ondelete="SET NULL"), nullable=True),
        sa.Column("dispatcher_id", sa.Integer(), sa.ForeignKey("dispatchers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("week_start_date", sa.Date(), nullable=False),
        sa.Column("week_end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_weekly_routes_week", "weekly_routes", ["week_start_date", "week_end_date"])
    op.create_index("idx_weekly_routes_driver", "weekly_routes", ["driver_id"])

    op.create_table(
        "weekly_route_details",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "weekly_route_id", sa.Integer(), sa.ForeignKey("weekly_routes.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("route_id", sa.Integer(), sa.ForeignKey("routes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("sequence_number", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_weekly_route_details_day"),
    )
    op.create_index(
        "idx_weekly_route_details_week",
        "weekly_route_details",
        ["weekly_route_id", "day_of_week", "sequence_number"],
    )

    op.create_table(
        "weekly_route_audits",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("weekly_route_id", sa.Integer(), nullable=False),
        sa.Column("user_name", sa.String(), nullable=True),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_weekly_route_audits_week", "weekly_route_audits", ["weekly_route_id"])


def downgrade():
    op.drop_index("idx_weekly_route_audits_week", table_name="weekly_route_audits")
    op.drop_table("weekly_route_audits")
    op.drop_index("idx_weekly_route_details_week", table_name="weekly_route_details")
    op.drop_table("weekly_route_details")
    op.drop_index("idx_weekly_routes_driver", table_name="weekly_routes")
    op.drop_index("idx_weekly_routes_week", table_name="weekly_routes")
    op.drop_table("weekly_routes")
    op.drop_index("idx_route_audits_route", table_name="route_audits")
    op.drop_table("route_audits")
    op.drop_index("idx_route_comments_route", table_name="route_comments")
    op.drop_table("route_comments")
    op.drop_index("idx_routes_driver_date", table_name="routes")
    op.drop_table("routes")
    for table in (
        "user_permissions", "users", "route_statuses", "zip_codes",
        "trailers", "trucks", "divisions", "drivers", "dispatchers",
    ):
        op.drop_table(table)
