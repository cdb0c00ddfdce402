"""Storage for saved pictures."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from nasa_gateway.database import get_db
from nasa_gateway.models.apod import Apod
from nasa_gateway.schemas.apod import ApodBase


def apod_from_record(record: ApodBase, apod_id: int | None = None) -> Apod:
    """Build an unsaved entity from a live or submitted record."""
    return Apod(
        id=apod_id,
        date=record.date,
        title=record.title,
        explanation=record.explanation,
        url=record.url,
        hdurl=record.hdurl,
        copyright=record.copyright,
    )


class ApodRepository:
    """Thin gateway over the ``apod`` table.

    :meth:`save` is an upsert keyed on ``id``: an entity without one is
    inserted and gets an id from the database, an entity with one is merged
    over the stored row (or inserted under that id if the row is gone).
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_all(self) -> list[Apod]:
        return list(self.db.scalars(select(Apod).order_by(Apod.id)))

    def find_by_id(self, apod_id: int) -> Apod | None:
        return self.db.get(Apod, apod_id)

    def find_by_date(self, date: str) -> list[Apod]:
        return list(self.db.scalars(select(Apod).where(Apod.date == date).order_by(Apod.id)))

    def find_by_copyright(self, copyright: str) -> Apod | None:
        return self.db.scalars(
            select(Apod).where(Apod.copyright == copyright).order_by(Apod.id)
        ).first()

    def save(self, apod: Apod) -> Apod:
        if apod.id is None:
            self.db.add(apod)
        else:
            apod = self.db.merge(apod)
        self.db.commit()
        self.db.refresh(apod)
        return apod

    def delete_by_id(self, apod_id: int) -> None:
        self.db.execute(delete(Apod).where(Apod.id == apod_id))
        self.db.commit()

    def delete_all(self) -> int:
        result = self.db.execute(delete(Apod))
        self.db.commit()
        return result.rowcount or 0


def get_apod_repository(db: Session = Depends(get_db)) -> ApodRepository:
    return ApodRepository(db)
