from sqlalchemy import Column, Text
from portal.database import Base


class Identity(Base):
    __tablename__ = "identities"

    uid = Column(Text, primary_key=True)
    login_id = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
