from sqlalchemy import Column, String, BigInteger
from database.database import Base

class Keystore(Base):
    """Generic counters, keyed ``user:<uid>:<name>``."""

    __tablename__ = "keystores"

    key   = Column(String(50), primary_key=True)
    value = Column(BigInteger, nullable=True)
