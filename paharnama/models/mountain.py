"""Mountain and mountain translation models."""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from paharnama.database import Base


class Mountain(Base):
    """Language-independent mountain attributes."""

    __tablename__ = "mountains"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    altitude: Mapped[str | None] = mapped_column(String(50))
    has_death_zone: Mapped[bool] = mapped_column(Boolean, default=False)
    first_climbed_date: Mapped[date | None] = mapped_column(Date)
    mountain_img: Mapped[str | None] = mapped_column(String(500))
    country_flag_img: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    translations: Mapped[list["MountainTranslation"]] = relationship(
        back_populates="mountain", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Mountain(id={self.id}, key='{self.key}')>"


class MountainTranslation(Base):
    """Localized mountain text, one row per (mountain, language)."""

    __tablename__ = "mountain_translations"
    __table_args__ = (
        UniqueConstraint("mountain_id", "language", name="uq_mountain_translation_language"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    mountain_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("mountains.id", ondelete="CASCADE"), index=True
    )
    language: Mapped[str] = mapped_column(String(10))
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(200))
    first_climber: Mapped[str | None] = mapped_column(String(200))

    mountain: Mapped["Mountain"] = relationship(back_populates="translations")

    def __repr__(self) -> str:
        return f"<MountainTranslation(mountain_id={self.mountain_id}, language='{self.language}')>"
