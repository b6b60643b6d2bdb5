from __future__ import annotations

import logging

from dukan.domain.errors import StoreNotConfiguredError, ValidationError
from dukan.domain.models import StoreInfo

log = logging.getLogger(__name__)


class StoreService:
    def __init__(self, repo):
        self.repo = repo

    def is_configured(self) -> bool:
        return self.repo.get_store_info() is not None

    def get_store_info(self) -> StoreInfo:
        info = self.repo.get_store_info()
        if info is None:
            raise StoreNotConfiguredError("Store settings are missing. Run the first-time setup.")
        return info

    def setup_store(self, name: str, phone: str) -> StoreInfo:
        name = (name or "").strip()
        phone = (phone or "").strip()
        if not name or not phone:
            raise ValidationError("Store name and phone are required.")
        info = StoreInfo(name=name, phone=phone)
        self.repo.set_store_info(info)
        log.info("store_configured name=%s", name)
        return info
