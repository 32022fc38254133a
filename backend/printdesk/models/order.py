from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Boolean, Text, DateTime
from typing import Optional
import uuid

from .admin import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_order_id() -> str:
    return str(uuid.uuid4())


class Order(Base):
    __tablename__ = 'orders'
    # Lifecycle status constants
    STATUS_PENDING = 'pending'
    STATUS_PRINTING = 'printing'
    STATUS_COMPLETED = 'completed'
    STATUS_DELIVERED = 'delivered'
    STATUS_CANCELLED = 'cancelled'
    ALL_STATUSES = (
        STATUS_PENDING,
        STATUS_PRINTING,
        STATUS_COMPLETED,
        STATUS_DELIVERED,
        STATUS_CANCELLED,
    )
    QUEUED_STATUSES = (STATUS_PENDING, STATUS_PRINTING)

    COLOR_BW = 'bw'
    COLOR_COLOR = 'color'
    COLOR_MODES = (COLOR_BW, COLOR_COLOR)

    PAPER_A4 = 'A4'
    PAPER_SIZES = (PAPER_A4,)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_order_id)
    customer_name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    contact: Mapped[str] = mapped_column(String(128), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_path: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    file_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    file_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    payment_proof_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    payment_proof_path: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    payment_proof_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    payment_proof_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    color_mode: Mapped[str] = mapped_column(String(8), nullable=False)
    copies: Mapped[int] = mapped_column(Integer, nullable=False)
    pages: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    paper_size: Mapped[str] = mapped_column(String(8), nullable=False, default=PAPER_A4)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_PENDING, index=True)
    estimated_time: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @staticmethod
    def estimate_minutes(copies: int, color_mode: str) -> int:
        return copies * (3 if color_mode == Order.COLOR_COLOR else 2)
