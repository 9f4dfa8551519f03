import uuid
from sqlalchemy import Column, Date, SmallInteger, BigInteger, ForeignKey, UniqueConstraint, Uuid
from vrdb.db.base import Base

class Snapshot(Base):
    __tablename__ = "snapshots"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cloud_id = Column(Uuid, ForeignKey("clouds.id"), nullable=False, index=True, comment="Foreign key to cloud")
    snapshot_date = Column(Date)
    # percentages are whole numbers 0..100, not fractions; nothing below enforces the range
    success_last24h = Column(
        SmallInteger,
        comment="Success rate for last 24 hours expressed as an integer between 0 and 100 (not as decimal < 1)",
    )
    success_last7d = Column(
        SmallInteger,
        comment="Success percentage over the last 7 days expressed as an integer from 0 to 100 (not as decimal < 1)",
    )
    success_last30d = Column(
        SmallInteger,
        comment="Success percentage over the last 30 days expressed as an integer from 0 to 100 (not as decimal < 1)",
    )
    lab_issues = Column(
        BigInteger,
        comment="The number of script failures due to device or browser issues in the lab over the last 24 hours",
    )
    orchestration_issues = Column(
        BigInteger,
        comment="The number of script failures due to attempts to use the same device",
    )
    scripting_issues = Column(
        BigInteger,
        comment="The number of script failures due to a problem with the script or framework over the past 24 hours",
    )

    __table_args__ = (
        UniqueConstraint("cloud_id", "snapshot_date", name="uq_snapshots_cloud_id_snapshot_date"),
    )
