"""Operations on saved pictures behind both the API and the pages."""

from __future__ import annotations

import logging

from fastapi import Depends

from nasa_gateway.errors import NasaNotFoundError
from nasa_gateway.models.apod import Apod
from nasa_gateway.schemas.apod import ApodBase, ApodUpdate
from nasa_gateway.services.apod_repository import (
    ApodRepository,
    apod_from_record,
    get_apod_repository,
)

logger = logging.getLogger(__name__)

NO_APODS_MESSAGE = "No Apods Found. Try Adding Apod To The Database"


def apod_not_found(apod_id: int) -> NasaNotFoundError:
    return NasaNotFoundError(f"No Apod Found With Id: {apod_id}")


class ApodService:
    def __init__(self, repository: ApodRepository) -> None:
        self.repository = repository

    def fetch_all(self) -> list[Apod]:
        """Every saved picture; raises when there are none."""
        apods = self.repository.find_all()
        if not apods:
            raise NasaNotFoundError(NO_APODS_MESSAGE)
        return apods

    def fetch_all_or_empty(self) -> list[Apod]:
        """Every saved picture, possibly none. Used by the list page."""
        return self.repository.find_all()

    def find_by_id(self, apod_id: int) -> Apod:
        apod = self.repository.find_by_id(apod_id)
        if apod is None:
            raise apod_not_found(apod_id)
        return apod

    def find_by_date(self, date: str) -> list[Apod]:
        return self.repository.find_by_date(date)

    def save(self, record: ApodBase, apod_id: int | None = None) -> Apod:
        apod = self.repository.save(apod_from_record(record, apod_id))
        logger.info("Saved apod", extra={"apod_id": apod.id, "date": apod.date})
        return apod

    def delete_by_id(self, apod_id: int) -> None:
        # Check and delete are separate statements; a concurrent delete
        # between them is not detected.
        self.find_by_id(apod_id)
        self.repository.delete_by_id(apod_id)
        logger.info("Deleted apod", extra={"apod_id": apod_id})

    def delete_all(self) -> int:
        removed = self.repository.delete_all()
        logger.info("Deleted all apods", extra={"count": removed})
        return removed

    def update(self, apod_id: int, changes: ApodUpdate) -> Apod:
        """Apply a new title and explanation; every other field is kept."""
        apod = self.find_by_id(apod_id)
        apod.title = changes.title
        apod.explanation = changes.explanation
        apod = self.repository.save(apod)
        logger.info("Updated apod", extra={"apod_id": apod_id})
        return apod


def get_apod_service(
    repository: ApodRepository = Depends(get_apod_repository),
) -> ApodService:
    return ApodService(repository)
