import uuid
from sqlalchemy import Column, String, SmallInteger, BigInteger, ForeignKey, UniqueConstraint, Uuid
from vrdb.db.base import Base

class DeviceFinding(Base):
    __tablename__ = "devices"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    snapshot_id = Column(Uuid, ForeignKey("snapshots.id"), nullable=False, index=True, comment="Foreign key to snapshot record")
    rank = Column(
        SmallInteger,
        nullable=False,
        default=1,
        server_default="1",
        comment="Report ranking of the importance of the problematic device",
    )
    model = Column(String(255), nullable=False, comment='Model of the device such as "iPhone X" (manufacturer not needed)')
    os = Column(String(255), nullable=False, comment='Name of operating system and version number such as "iOS 11.3"')
    device_id = Column(
        String(255),
        nullable=False,
        comment="The device ID such as the UUID of an Apple iOS device or the serial number of an Android device",
    )
    errors_last7d = Column(
        BigInteger,
        nullable=False,
        comment="The number of times the device has gone into error over the last 7 days",
    )

    __table_args__ = (
        UniqueConstraint("snapshot_id", "rank", name="uq_devices_snapshot_id_rank"),
    )


class TestFinding(Base):
    __tablename__ = "tests"
    __test__ = False  # keep pytest from collecting the model

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    snapshot_id = Column(Uuid, ForeignKey("snapshots.id"), nullable=False, index=True, comment="Foreign key to snapshot record")
    rank = Column(
        SmallInteger,
        nullable=False,
        default=1,
        server_default="1",
        comment="Report ranking of the importance of the problematic test",
    )
    test_name = Column(String(4000), nullable=False, comment="Name of the test having issues")
    age = Column(
        BigInteger,
        nullable=False,
        comment="How many days Digitalzoom has known about this test (used to select out tests that are newly created)",
    )
    failures_last7d = Column(BigInteger, nullable=False, comment="Number of failures of the test for the last 7 days")
    passes_last7d = Column(BigInteger, nullable=False, comment="The number of times the test has passed over the last 7 days")

    __table_args__ = (
        UniqueConstraint("snapshot_id", "rank", name="uq_tests_snapshot_id_rank"),
    )
