from sqlalchemy import Column, Integer, BigInteger, DateTime, JSON
from sqlalchemy.sql import func
from skillgap.database import Base


class FormSchema(Base):
    __tablename__ = "form_schemas"

    id = Column(Integer, primary_key=True, index=True)
    fields = Column(JSON, nullable=False, default=list)  # ordered field definitions
    version = Column(BigInteger, nullable=False, index=True)  # epoch millis, last writer wins
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
