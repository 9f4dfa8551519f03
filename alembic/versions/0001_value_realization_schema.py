"""create clouds, snapshots, devices, tests, recommendations tables

Revision ID: 0001_value_realization_schema
Revises:
Create Date: 2024-01-08
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_value_realization_schema"
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        nullable=False,
        server_default=sa.text("gen_random_uuid()"),
    )


def _snapshot_fk() -> sa.Column:
    return sa.Column(
        "snapshot_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("snapshots.id"),
        nullable=False,
        comment="Foreign key to snapshot record",
    )


def upgrade() -> None:
    # gen_random_uuid()
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    # ---------------------------------------------------------------------
    # clouds
    # ---------------------------------------------------------------------
    op.create_table(
        "clouds",
        _id(),
        sa.Column("fqdn", sa.String(255), nullable=True, comment="Fully-qualified domain name of the Perfecto cloud"),
        sa.Column(
            "email_recipients",
            sa.String(4000),
            nullable=True,
            comment="Comma-separated list of email recipients for the report (typically Champion, VRC, BB, and DAs)",
        ),
        sa.UniqueConstraint("fqdn", name="clouds_fqdn_key"),
    )

    # ---------------------------------------------------------------------
    # snapshots
    # ---------------------------------------------------------------------
    op.create_table(
        "snapshots",
        _id(),
        sa.Column(
            "cloud_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("clouds.id"),
            nullable=False,
            comment="Foreign key to cloud",
        ),
        sa.Column("snapshot_date", sa.Date, nullable=True),
        sa.Column(
            "success_last24h",
            sa.SmallInteger,
            nullable=True,
            comment="Success rate for last 24 hours expressed as an integer between 0 and 100 (not as decimal < 1)",
        ),
        sa.Column(
            "success_last7d",
            sa.SmallInteger,
            nullable=True,
            comment="Success percentage over the last 7 days expressed as an integer from 0 to 100 (not as decimal < 1)",
        ),
        sa.Column(
            "success_last30d",
            sa.SmallInteger,
            nullable=True,
            comment="Success percentage over the last 30 days expressed as an integer from 0 to 100 (not as decimal < 1)",
        ),
        sa.Column(
            "lab_issues",
            sa.BigInteger,
            nullable=True,
            comment="The number of script failures due to device or browser issues in the lab over the last 24 hours",
        ),
        sa.Column(
            "orchestration_issues",
            sa.BigInteger,
            nullable=True,
            comment="The number of script failures due to attempts to use the same device",
        ),
        sa.Column(
            "scripting_issues",
            sa.BigInteger,
            nullable=True,
            comment="The number of script failures due to a problem with the script or framework over the past 24 hours",
        ),
        sa.UniqueConstraint("cloud_id", "snapshot_date", name="uq_snapshots_cloud_id_snapshot_date"),
    )
    op.create_index("ix_snapshots_cloud_id", "snapshots", ["cloud_id"])

    # ---------------------------------------------------------------------
    # devices
    # ---------------------------------------------------------------------
    op.create_table(
        "devices",
        _id(),
        _snapshot_fk(),
        sa.Column(
            "rank",
            sa.SmallInteger,
            server_default=sa.text("1"),
            nullable=False,
            comment="Report ranking of the importance of the problematic device",
        ),
        sa.Column(
            "model",
            sa.String(255),
            nullable=False,
            comment='Model of the device such as "iPhone X" (manufacturer not needed)',
        ),
        sa.Column(
            "os",
            sa.String(255),
            nullable=False,
            comment='Name of operating system and version number such as "iOS 11.3"',
        ),
        sa.Column(
            "device_id",
            sa.String(255),
            nullable=False,
            comment="The device ID such as the UUID of an Apple iOS device or the serial number of an Android device",
        ),
        sa.Column(
            "errors_last7d",
            sa.BigInteger,
            nullable=False,
            comment="The number of times the device has gone into error over the last 7 days",
        ),
        sa.UniqueConstraint("snapshot_id", "rank", name="uq_devices_snapshot_id_rank"),
    )
    op.create_index("ix_devices_snapshot_id", "devices", ["snapshot_id"])

    # ---------------------------------------------------------------------
    # recommendations
    # ---------------------------------------------------------------------
    op.create_table(
        "recommendations",
        _id(),
        _snapshot_fk(),
        sa.Column(
            "rank",
            sa.SmallInteger,
            server_default=sa.text("1"),
            nullable=False,
            comment="Report ranking of the importance of the recommendation",
        ),
        sa.Column(
            "recommendation",
            sa.String(2000),
            nullable=False,
            comment='Specific recommendation such as "Replace top 5 failing devices" or "Remediate TransferMoney test"',
        ),
        sa.Column(
            "impact_percentage",
            sa.SmallInteger,
            server_default=sa.text("0"),
            nullable=False,
            comment="Percentage of improvement to success rate if the recommendation is implemented (use 0 to 100 rather than decimal < 1)",
        ),
        sa.Column(
            "impact_message",
            sa.String(2000),
            nullable=True,
            comment='For recommendations that do not have a clear impact such as "Ensure tests use Digitalzoom API" (impact should equal 0 for those)',
        ),
        sa.UniqueConstraint("snapshot_id", "rank", name="uq_recommendations_snapshot_id_rank"),
    )
    op.create_index("ix_recommendations_snapshot_id", "recommendations", ["snapshot_id"])

    # ---------------------------------------------------------------------
    # tests
    # ---------------------------------------------------------------------
    op.create_table(
        "tests",
        _id(),
        _snapshot_fk(),
        sa.Column(
            "rank",
            sa.SmallInteger,
            server_default=sa.text("1"),
            nullable=False,
            comment="Report ranking of the importance of the problematic test",
        ),
        sa.Column("test_name", sa.String(4000), nullable=False, comment="Name of the test having issues"),
        sa.Column(
            "age",
            sa.BigInteger,
            nullable=False,
            comment="How many days Digitalzoom has known about this test (used to select out tests that are newly created)",
        ),
        sa.Column(
            "failures_last7d",
            sa.BigInteger,
            nullable=False,
            comment="Number of failures of the test for the last 7 days",
        ),
        sa.Column(
            "passes_last7d",
            sa.BigInteger,
            nullable=False,
            comment="The number of times the test has passed over the last 7 days",
        ),
        sa.UniqueConstraint("snapshot_id", "rank", name="uq_tests_snapshot_id_rank"),
    )
    op.create_index("ix_tests_snapshot_id", "tests", ["snapshot_id"])


def downgrade() -> None:
    op.drop_index("ix_tests_snapshot_id", table_name="tests")
    op.drop_table("tests")

    op.drop_index("ix_recommendations_snapshot_id", table_name="recommendations")
    op.drop_table("recommendations")

    op.drop_index("ix_devices_snapshot_id", table_name="devices")
    op.drop_table("devices")

    op.drop_index("ix_snapshots_cloud_id", table_name="snapshots")
    op.drop_table("snapshots")

    op.drop_table("clouds")
