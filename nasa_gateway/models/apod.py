"""Astronomy Picture of the Day storage model."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nasa_gateway.database import Base


class Apod(Base):
    """A saved Astronomy Picture of the Day.

    ``id`` is assigned by the database on first save. ``hdurl`` and
    ``copyright`` are absent on many upstream entries (public-domain or
    video days), everything else is mandatory.
    """

    __tablename__ = "apod"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    copyright: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date: Mapped[str] = mapped_column(String(255), index=True)
    explanation: Mapped[str] = mapped_column(Text)
    hdurl: Mapped[str | None] = mapped_column(String(255), nullable=True)
    title: Mapped[str] = mapped_column(String(255))
    url: Mapped[str] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<Apod id={self.id} date={self.date!r} title={self.title!r}>"
