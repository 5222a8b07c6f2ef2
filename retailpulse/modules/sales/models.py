"""
Read-side mapping of sale records.

The sales tables are owned by the point-of-sale application; this service
only queries them to build reports.
"""
import enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from retailpulse.common.mixins import BusinessMixin, TimestampMixin
from retailpulse.database.database import Base


class SaleStatus(str, enum.Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class Category(Base, BusinessMixin, TimestampMixin):
    __tablename__ = "categories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), nullable=False)


class Product(Base, BusinessMixin, TimestampMixin):
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(150), nullable=False)
    sku = Column(String(64), nullable=True, index=True)
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id"), nullable=True)

    category = relationship("Category")


class Customer(Base, TimestampMixin):
    __tablename__ = "customers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    phone = Column(String(30), nullable=True)
    email = Column(String(150), nullable=True)


class StoreUser(Base, BusinessMixin, TimestampMixin):
    """Staff member able to ring up sales (cashiers, store admins)"""
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    username = Column(String(64), nullable=False, unique=True)
    name = Column(String(150), nullable=True)
    role = Column(String(32), nullable=False)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=True)


class Sale(Base, TimestampMixin):
    __tablename__ = "sales"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=False)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False, index=True)
    cashier_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id"), nullable=True)
    receipt_number = Column(String(50), nullable=False)
    status = Column(Enum(SaleStatus, values_callable=lambda e: [m.value for m in e]), nullable=False,
                    default=SaleStatus.COMPLETED)
    payment_method = Column(String(30), nullable=False)
    subtotal = Column(Numeric(14, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(14, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(14, 2), nullable=False, default=0)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    cash_received = Column(Numeric(14, 2), nullable=True)
    change_given = Column(Numeric(14, 2), nullable=True)
    transaction_date = Column(DateTime(timezone=True), nullable=True, index=True)

    store = relationship("Store")
    cashier = relationship("StoreUser")
    customer = relationship("Customer")
    items = relationship("SaleItem", back_populates="sale", order_by="SaleItem.position")

    __table_args__ = (
        UniqueConstraint("business_id", "receipt_number", name="uq_sale_business_receipt"),
    )


class SaleItem(Base, TimestampMixin):
    __tablename__ = "sale_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    sale_id = Column(UUID(as_uuid=True), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False)
    discount_amount = Column(Numeric(14, 2), nullable=False, default=0)

    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")
