"""
Code Allocator

This service handles the creation side of URL shortening:
- Validating the submitted URL and the optional custom code
- Minting a random short code when none was requested
- Persisting the new mapping through the store
- Composing the full short URL returned to the client

Design Decisions:
- The store's unique index is the authority on uniqueness. The allocator
  pre-checks to give a fast answer, but still treats a constraint violation
  at insert time (a concurrent request won the race) as a conflict
- Random generation retries in a bounded loop and escalates to
  ExhaustedError instead of looping forever
- All inputs (base URL, prefix, attempt cap) are passed in explicitly; the
  allocator keeps no process-wide state
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shortener.core.exceptions import ConflictError, ExhaustedError
from shortener.core.validators import (
    MAX_URL_LENGTH,
    SHORT_CODE_MAX_LENGTH,
    validate_custom_code,
    validate_url,
)
from shortener.db.models import UrlMapping
from shortener.db.store import UrlMappingStore
from shortener.services.code_generator import ShortCodeGenerator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """
    Build the complete short URL.

    Example:
        build_short_url("abc123", "https://sho.rt/", "/r") -> "https://sho.rt/r/abc123"
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"


@dataclass
class AllocationResult:
    """A freshly persisted mapping together with its public short URL."""
    mapping: UrlMapping
    short_url: str

    @property
    def short_code(self) -> str:
        return self.mapping.short_code


class CodeAllocator:
    """
    Assigns (or validates) a short code for a submitted URL and persists it.
    """

    def __init__(
        self,
        store: UrlMappingStore,
        generator: ShortCodeGenerator,
        base_url: str,
        path_prefix: str = "",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        max_url_length: int = MAX_URL_LENGTH,
        custom_code_max_length: int = SHORT_CODE_MAX_LENGTH,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store
        self.generator = generator
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.max_attempts = max_attempts
        self.max_url_length = max_url_length
        self.custom_code_max_length = custom_code_max_length

    async def allocate(
        self,
        original_url: str,
        custom_code: Optional[str] = None
    ) -> AllocationResult:
        """
        Create a new mapping for original_url.

        Args:
            original_url: The long URL to shorten
            custom_code: Requested short code; blank means "generate one"

        Returns:
            AllocationResult with the persisted mapping and full short URL

        Raises:
            ValidationError: If the URL or custom code is malformed
            ConflictError: If the custom code is already in use
            ExhaustedError: If every generation attempt collided
            StoreUnavailableError: If the store timed out or is unreachable
        """
        url = validate_url(original_url, max_length=self.max_url_length)

        # Whitespace-only means "generate"; anything else is validated as sent
        if custom_code and custom_code.strip():
            mapping = await self._allocate_custom(url, custom_code)
        else:
            mapping = await self._allocate_generated(url)

        short_url = build_short_url(mapping.short_code, self.base_url, self.path_prefix)
        logger.info(f"Allocated short code '{mapping.short_code}' for {url}")
        return AllocationResult(mapping=mapping, short_url=short_url)

    async def _allocate_custom(self, url: str, custom_code: str) -> UrlMapping:
        code = validate_custom_code(custom_code, max_length=self.custom_code_max_length)

        if await self.store.code_exists(code):
            raise ConflictError(code)

        # A concurrent request may still take the code between the check and
        # the insert; the store reports that as ConflictError as well.
        return await self.store.create_mapping(url, code)

    async def _allocate_generated(self, url: str) -> UrlMapping:
        for attempt in range(1, self.max_attempts + 1):
            code = self.generator.generate()

            if await self.store.code_exists(code):
                logger.warning(
                    f"Generated short code '{code}' already taken "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                continue

            try:
                return await self.store.create_mapping(url, code)
            except ConflictError:
                logger.warning(
                    f"Generated short code '{code}' lost an insert race "
                    f"(attempt {attempt}/{self.max_attempts})"
                )

        logger.error(
            f"Short code space looks saturated: {self.max_attempts} attempts "
            f"collided (code space {self.generator.code_space})"
        )
        raise ExhaustedError(self.max_attempts)
