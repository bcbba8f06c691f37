import logging
import math
import re
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Union

from golink_app.schemas.golink import GolinkResponse, PaginatedGolinks, PaginationInfo
from golink_app.services.exceptions import (
    BackendFailureError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from golink_app.storage.exceptions import (
    AlreadyExistsError,
    BackendFaultError,
    StorageNotFoundError,
)
from golink_app.storage.models import Golink
from golink_app.storage.strategies import GolinkStorage, clamp_pagination

logger = logging.getLogger(__name__)

# Digits are allowed in aliases (go/v2, go/2024-plan)
GOLINK_PATTERN = re.compile(r"^go/[a-zA-Z0-9_-]+$")
INVALID_PATTERN_MESSAGE = "Invalid golink pattern. Must match 'go/[a-zA-Z0-9_-]+'"

DEFAULT_PAGE_SIZE = 10


def validate_pattern(short_link: str) -> None:
    """
    Check that short_link is go/ followed by letters, digits, '_' or '-'.

    Raises:
        ValidationError: short_link does not match
    """
    if not GOLINK_PATTERN.fullmatch(short_link):
        raise ValidationError(INVALID_PATTERN_MESSAGE)


class MonotonicClock:
    """UTC clock whose readings strictly increase within the process"""

    def __init__(self):
        self._lock = threading.Lock()
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        with self._lock:
            current = datetime.now(timezone.utc)
            if self._last is not None and current <= self._last:
                current = self._last + timedelta(microseconds=1)
            self._last = current
            return current


# Shared so creation order survives per-request service instances
_default_clock = MonotonicClock()


class GolinkService:
    """
    Golink service with the storage backend injected.

    This is the only caller of the storage contract. It validates input,
    builds new entities, picks the listing mode, and translates storage
    errors into outward error kinds. No retries: every storage fault ends
    the current request.
    """

    def __init__(
        self,
        storage: GolinkStorage,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        clock: MonotonicClock = _default_clock
    ):
        """
        Initialize golink service.

        Args:
            storage: Storage strategy (built once at startup)
            default_page_size: Page size when only a page number is requested
            clock: Source of creation timestamps
        """
        self.storage = storage
        self.default_page_size = default_page_size
        self.clock = clock

    def _backend_failure(self, operation: str, error: BackendFaultError) -> BackendFailureError:
        logger.error("Storage failure during %s: %s", operation, error.detail)
        return BackendFailureError(error.detail)

    async def create_golink(self, short_link: str, url: str) -> Golink:
        """
        Register a new golink.

        Process:
        1. Validate the alias (nothing touches storage if it is malformed)
        2. Build the entity: fresh UUID4 id, creation timestamp
        3. Store it; a duplicate alias is rejected atomically by the backend

        Raises:
            ValidationError, ConflictError, BackendFailureError
        """
        validate_pattern(short_link)

        golink = Golink(
            id=str(uuid.uuid4()),
            short_link=short_link,
            url=url,
            created_at=self.clock.now(),
        )

        try:
            await self.storage.create(golink)
        except AlreadyExistsError:
            logger.debug("Rejected duplicate golink %s", short_link)
            raise ConflictError()
        except BackendFaultError as e:
            raise self._backend_failure("create", e) from e

        logger.info("Created golink %s -> %s", short_link, url)
        return golink

    async def get_golink(self, short_link: str) -> Golink:
        """Get a single golink by its alias"""
        try:
            return await self.storage.get(short_link)
        except StorageNotFoundError:
            raise NotFoundError()
        except BackendFaultError as e:
            raise self._backend_failure("get", e) from e

    async def list_golinks(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None
    ) -> Union[List[Golink], PaginatedGolinks]:
        """
        List golinks, newest first.

        Dual-mode:
        - no pagination parameters: the bare, complete list
        - page and/or page_size given: one window plus pagination metadata
          (missing page defaults to 1, missing page_size to default_page_size)
        """
        try:
            if page is None and page_size is None:
                return await self.storage.get_all()

            page, page_size, _ = clamp_pagination(
                page if page is not None else 1,
                page_size if page_size is not None else self.default_page_size,
            )
            golinks, total_items = await self.storage.get_paginated(page, page_size)
        except BackendFaultError as e:
            raise self._backend_failure("list", e) from e

        return PaginatedGolinks(
            data=[GolinkResponse.model_validate(golink.model_dump()) for golink in golinks],
            pagination=PaginationInfo(
                page=page,
                page_size=page_size,
                total_items=total_items,
                total_pages=math.ceil(total_items / page_size),
            ),
        )

    async def update_golink(self, short_link: str, url: str) -> Golink:
        """Point an existing golink at a new URL (the only mutable field)"""
        try:
            golink = await self.storage.update(short_link, url)
        except StorageNotFoundError:
            raise NotFoundError()
        except BackendFaultError as e:
            raise self._backend_failure("update", e) from e

        logger.info("Updated golink %s -> %s", short_link, url)
        return golink

    async def delete_golink(self, short_link: str) -> None:
        """Delete a golink (hard delete, irreversible)"""
        try:
            await self.storage.delete(short_link)
        except StorageNotFoundError:
            raise NotFoundError()
        except BackendFaultError as e:
            raise self._backend_failure("delete", e) from e

        logger.info("Deleted golink %s", short_link)
