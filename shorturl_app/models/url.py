from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from shorturl_app.database.connection import Base


class URL(Base):
    """
    Mapping from an original URL to its numeric short URL.

    Rows are written once and never updated. `short_url` comes from the
    `urls` counter and is unique; `original_url` is deliberately not unique,
    de-duplication happens in the service layer.
    """
    __tablename__ = "urls"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    original_url = Column(String, nullable=False, index=True)
    # Note: unique=True automatically creates an index in SQLAlchemy
    short_url = Column(Integer, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
