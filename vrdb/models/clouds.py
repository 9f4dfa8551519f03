import uuid
from sqlalchemy import Column, String, Uuid
from vrdb.db.base import Base

class Cloud(Base):
    __tablename__ = "clouds"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    fqdn = Column(
        String(255),
        unique=True,
        comment="Fully-qualified domain name of the Perfecto cloud",
    )
    email_recipients = Column(
        String(4000),
        comment="Comma-separated list of email recipients for the report (typically Champion, VRC, BB, and DAs)",
    )
