from retailpulse.database.database import Base
from sqlalchemy import Column, String, Boolean, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from sqlalchemy.orm import relationship
from retailpulse.common.mixins import BusinessMixin, TimestampMixin


class Business(Base, TimestampMixin):
    __tablename__ = "businesses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(150), nullable=False)
    timezone = Column(String(64), nullable=True)
    is_active = Column(Boolean, default=True)

    stores = relationship("Store", back_populates="business")


class Store(Base, BusinessMixin, TimestampMixin):
    __tablename__ = "stores"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), nullable=False)
    address = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True)

    business = relationship("Business", back_populates="stores")

    __table_args__ = (
        UniqueConstraint("business_id", "name", name="uq_store_business_name"),
    )
