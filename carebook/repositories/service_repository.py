# carebook/repositories/service_repository.py
"""Service catalog lookups."""

from sqlalchemy.orm import Session

from ..models.service import Service
from .base_repository import BaseRepository


class ServiceRepository(BaseRepository[Service]):
    def __init__(self, db: Session):
        super().__init__(db, Service)

