"""
SQLAlchemy ORM models.

Defines the single 'items' table backing the relational item repository:
- id: integer primary key assigned by the database
- name: required item name
- description: free text, empty string when not provided
- photo_ref: blob store reference of the item's photo, NULL when the item has none
"""

from sqlalchemy import Column, Integer, String, Text

from ..db.sqlalchemy import Base

# Largest value an INTEGER primary key holds on every supported database.
MAX_ITEM_ID = 2**31 - 1


class ItemRecord(Base):
    """ORM model representing one inventory item row."""
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    photo_ref = Column(String(512), nullable=True)
