import uuid
from sqlalchemy import Column, String, SmallInteger, ForeignKey, UniqueConstraint, Uuid
from vrdb.db.base import Base

class Recommendation(Base):
    __tablename__ = "recommendations"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    snapshot_id = Column(Uuid, ForeignKey("snapshots.id"), nullable=False, index=True, comment="Foreign key to snapshot record")
    rank = Column(
        SmallInteger,
        nullable=False,
        default=1,
        server_default="1",
        comment="Report ranking of the importance of the recommendation",
    )
    recommendation = Column(
        String(2000),
        nullable=False,
        comment='Specific recommendation such as "Replace top 5 failing devices" or "Remediate TransferMoney test"',
    )
    impact_percentage = Column(
        SmallInteger,
        nullable=False,
        default=0,
        server_default="0",
        comment="Percentage of improvement to success rate if the recommendation is implemented (use 0 to 100 rather than decimal < 1)",
    )
    impact_message = Column(
        String(2000),
        comment='For recommendations that do not have a clear impact such as "Ensure tests use Digitalzoom API" (impact should equal 0 for those)',
    )

    __table_args__ = (
        UniqueConstraint("snapshot_id", "rank", name="uq_recommendations_snapshot_id_rank"),
    )
