# src/ex_order/infrastructure/db_models.py
"""SQLAlchemy ORM models for orders / line_items (DDL reference only — queries use raw SQL)."""
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.ex_common.database import Base


class OrderORM(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    buyer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    buyer_type: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    seller_id: Mapped[str] = mapped_column(String(64), nullable=False)
    seller_type: Mapped[str] = mapped_column(String(20), nullable=False, default="partner")
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    state_reason: Mapped[str | None] = mapped_column(String(50), nullable=True)
    items_total_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    shipping_total_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    commission_fee_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    seller_total_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    buyer_total_cents: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class LineItemORM(Base):
    __tablename__ = "line_items"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    order_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    artwork_id: Mapped[str] = mapped_column(String(64), nullable=False)
    edition_set_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    price_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
