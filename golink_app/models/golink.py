from sqlalchemy import Column, String
from golink_app.database.connection import Base


class GolinkRecord(Base):
    """
    Row shape of the durable golink table.

    All columns are TEXT. created_at is stored as a fixed-width ISO-8601
    UTC string so that ordering by the column equals ordering by time.
    The UNIQUE constraint on short_link is what detects duplicates.
    """
    __tablename__ = "golinks"

    id = Column(String, primary_key=True)
    short_link = Column(String, unique=True, nullable=False)
    url = Column(String, nullable=False)
    created_at = Column(String, nullable=False)
