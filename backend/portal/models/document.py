from sqlalchemy import JSON, Column, Text
from portal.database import Base


class StoredDocument(Base):
    __tablename__ = "documents"

    collection = Column(Text, primary_key=True)
    id = Column(Text, primary_key=True)
    data = Column(JSON, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
