from sqlalchemy import Column, Integer, String
from shorturl_app.database.connection import Base


class Counter(Base):
    """One row per sequence namespace (only "urls" is used)."""
    __tablename__ = "counters"

    name = Column(String, primary_key=True)
    seq = Column(Integer, nullable=False, default=0)
