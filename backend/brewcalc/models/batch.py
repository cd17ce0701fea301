from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from brewcalc.core.database import Base


class Batch(Base):
    __tablename__ = "batches"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(140), nullable=False)
    recipe_name: Mapped[str | None] = mapped_column(String(140), nullable=True)
    style: Mapped[str | None] = mapped_column(String(80), nullable=True)
    status: Mapped[str] = mapped_column(String(30), default="fermenting")
    volume_liters: Mapped[float] = mapped_column(Float, nullable=False)
    measured_og: Mapped[float | None] = mapped_column(Float, nullable=True)
    target_fg: Mapped[float | None] = mapped_column(Float, nullable=True)
    bottled_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    conditioning_days_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    conditioning_days_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    readings: Mapped[list[FermentationReading]] = relationship(
        back_populates="batch",
        cascade="all, delete-orphan",
        order_by="FermentationReading.recorded_at",
    )


class FermentationReading(Base):
    """A single gravity measurement. Rows are only ever inserted."""

    __tablename__ = "gravity_readings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    batch_id: Mapped[int] = mapped_column(ForeignKey("batches.id", ondelete="CASCADE"), nullable=False, index=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    gravity: Mapped[float] = mapped_column(Float, nullable=False)
    temp_c: Mapped[float | None] = mapped_column(Float, nullable=True)
    source: Mapped[str] = mapped_column(String(20), default="manual", nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="")

    batch: Mapped[Batch] = relationship(back_populates="readings")
