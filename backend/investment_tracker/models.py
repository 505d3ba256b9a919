# backend/investment_tracker/models.py
import enum
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, ForeignKey, Enum, Numeric, JSON, Text, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class AssetType(str, enum.Enum):
    EQUITY = "EQUITY"
    FX = "FX"
    PRECIOUS_METAL = "PRECIOUS_METAL"
    FUND = "FUND"


class Asset(Base):
    """
    Global table of assets shared by all users.

    Symbols are stored upper case and are unique. Assets are created lazily
    by the first acquisition that references an unknown symbol.
    """
    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    symbol: Mapped[str] = mapped_column(String(32), unique=True, index=True)  # e.g. "THYAO", "XAU"
    name: Mapped[str] = mapped_column(String)
    asset_type: Mapped[AssetType] = mapped_column(Enum(AssetType), default=AssetType.EQUITY)
    currency: Mapped[str] = mapped_column(String(3), default="USD")  # native trading currency
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    lots: Mapped[list["AcquisitionLot"]] = relationship(back_populates="asset")
    price_snapshots: Mapped[list["PriceSnapshot"]] = relationship(
        back_populates="asset",
        cascade="all, delete-orphan",
    )


class AcquisitionLot(Base):
    """
    A single recorded purchase. Immutable once created.

    The owning user id is an opaque string resolved by the identity layer.
    """
    __tablename__ = "acquisition_lots"
    __table_args__ = (
        Index("ix_acquisition_lots_user_asset", "user_id", "asset_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    asset_id: Mapped[int] = mapped_column(ForeignKey("assets.id"), index=True)

    # Numeric(18, 8) covers fractional units (FX, metals, fund shares)
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    currency: Mapped[str] = mapped_column(String(3))
    fee: Mapped[Decimal] = mapped_column(Numeric(18, 8), default=Decimal("0"))
    acquisition_date: Mapped[date] = mapped_column(Date, index=True)

    # Recorded for reference only, valuation uses the live converter
    fx_rate_at_acquisition: Mapped[Decimal | None] = mapped_column(Numeric(18, 8), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    asset: Mapped["Asset"] = relationship(back_populates="lots")


class PriceSnapshot(Base):
    """
    Append-only price observation for an asset.

    The current price of an asset is the snapshot with the latest as_of.
    """
    __tablename__ = "price_snapshots"
    __table_args__ = (
        Index("ix_price_snapshots_asset_as_of", "asset_id", "as_of"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    asset_id: Mapped[int] = mapped_column(ForeignKey("assets.id"), index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    currency: Mapped[str] = mapped_column(String(3))
    as_of: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    source: Mapped[str] = mapped_column(String(32))  # e.g. "DEFAULT", "REAL_TIME_UPDATE", "MANUAL"

    asset: Mapped["Asset"] = relationship(back_populates="price_snapshots")
