from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class BalanceOrm(Base):
    __tablename__ = "balances"

    currency: Mapped[str] = mapped_column(String(3), primary_key=True)
    # Fixed-point integer in the currency's minor unit (cents).
    amount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
