# chainmeta/core/fetcher.py
"""
Batch metadata fetcher.

Queries many entities independently with bounded parallelism and returns
one ``MetadataRecord`` per identifier, in input order. A failing entity
degrades to a record with ``has_accessor=False``; it never aborts the batch.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from chainmeta.contracts.accessor import (
    AccessorResult,
    AccessorUnavailable,
    FailureReason,
    RemoteAccessor,
    URIFound,
)
from chainmeta.contracts.record import EntityIdentifier, MetadataRecord
from chainmeta.core.classifier import is_embedded

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartialBatch:
    """Records collected before a batch was cancelled.

    ``records`` is aligned with the input; slots whose fetch did not finish
    hold ``None``.
    """

    records: list[MetadataRecord | None]
    completed: int

    @property
    def is_partial(self) -> bool:
        return True


class BatchCancelled(Exception):
    """Raised when a batch times out before every fetch completed."""

    def __init__(self, message: str, partial: PartialBatch):
        self.message = message
        self.partial = partial
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class BatchMetadataFetcher:
    """
    Fan-out fetcher over a ``RemoteAccessor``.

    Example:
        fetcher = BatchMetadataFetcher(accessor, max_in_flight=8, timeout=30)
        records = await fetcher.fetch_many(["0xabc...", "0xdef..."])
    """

    def __init__(
        self,
        accessor: RemoteAccessor,
        *,
        max_in_flight: int = 16,
        timeout: float | None = None,
    ) -> None:
        """
        Args:
            accessor: Remote accessor used for every read.
            max_in_flight: Maximum concurrent accessor calls per batch.
            timeout: Default batch timeout in seconds (None = unbounded).
        """
        if max_in_flight < 1:
            raise ValueError(f"max_in_flight must be >= 1, got {max_in_flight}")
        self._accessor = accessor
        self._max_in_flight = max_in_flight
        self._timeout = timeout

    @property
    def accessor(self) -> RemoteAccessor:
        return self._accessor

    @property
    def max_in_flight(self) -> int:
        return self._max_in_flight

    async def aclose(self) -> None:
        """Close the accessor this fetcher reads through."""
        await self._accessor.aclose()

    async def __aenter__(self) -> BatchMetadataFetcher:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def fetch_one(self, identifier: EntityIdentifier) -> MetadataRecord:
        """Fetch and classify the metadata URI of a single entity.

        Never raises for per-entity failures.
        """
        result = await self._read(identifier)

        if isinstance(result, URIFound) and isinstance(result.uri, str):
            uri = result.uri
            try:
                embedded = is_embedded(uri)
            except Exception as exc:
                logger.error(
                    "Entity '%s': cannot classify uri %r: %s", identifier, uri, exc
                )
                return MetadataRecord.unavailable(identifier)

            logger.debug(
                "Entity '%s' uri=%r embedded=%s",
                identifier,
                (uri[:80] + "...") if len(uri) > 80 else uri,
                embedded,
            )
            # Payload decoding is left to a MetadataDecoder.
            return MetadataRecord(
                identifier=identifier,
                uri=uri,
                is_embedded=embedded,
                has_accessor=True,
            )

        if isinstance(result, AccessorUnavailable):
            logger.warning(
                "Entity '%s' has no metadata accessor (%s): %s",
                identifier,
                result.reason.value,
                result.detail,
            )
            return MetadataRecord.unavailable(identifier)

        logger.error("Entity '%s': unexpected accessor result %r", identifier, result)
        return MetadataRecord.unavailable(identifier)

    async def _read(self, identifier: EntityIdentifier) -> AccessorResult:
        try:
            return await self._accessor.read_metadata_uri(identifier)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Accessors should return AccessorUnavailable; a raise is treated the same.
            logger.error(
                "Accessor raised for entity '%s': %s", identifier, exc, exc_info=True
            )
            return AccessorUnavailable(FailureReason.TRANSPORT, str(exc))

    async def fetch_many(
        self,
        identifiers: Sequence[EntityIdentifier],
        *,
        timeout: float | None = None,
    ) -> list[MetadataRecord]:
        """
        Fetch every identifier independently, preserving input order.

        Args:
            identifiers: Entities to query.
            timeout: Batch timeout in seconds, overrides the fetcher default.

        Returns:
            One record per identifier, aligned with ``identifiers``.

        Raises:
            BatchCancelled: If the batch timed out. Carries the records that
                had completed as a ``PartialBatch``.
        """
        ids = list(identifiers)
        slots: list[MetadataRecord | None] = [None] * len(ids)
        if not ids:
            return []

        effective_timeout = timeout if timeout is not None else self._timeout
        semaphore = asyncio.Semaphore(self._max_in_flight)

        async def run(index: int, identifier: EntityIdentifier) -> None:
            async with semaphore:
                slots[index] = await self.fetch_one(identifier)

        logger.info(
            "Fetching metadata for %d entit%s (max_in_flight=%d)",
            len(ids),
            "y" if len(ids) == 1 else "ies",
            self._max_in_flight,
        )

        tasks = [asyncio.ensure_future(run(i, ident)) for i, ident in enumerate(ids)]
        try:
            await asyncio.wait_for(asyncio.gather(*tasks), effective_timeout)
        except asyncio.TimeoutError as exc:
            completed = sum(1 for s in slots if s is not None)
            logger.warning(
                "Batch cancelled after %.2fs: %d/%d fetches completed",
                effective_timeout,
                completed,
                len(ids),
            )
            raise BatchCancelled(
                f"Batch timed out after {effective_timeout}s "
                f"({completed}/{len(ids)} fetches completed)",
                PartialBatch(records=list(slots), completed=completed),
            ) from exc
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        records = [s for s in slots if s is not None]
        unavailable = sum(1 for r in records if not r.has_accessor)
        logger.info(
            "Fetched %d record(s): %d without accessor, %d embedded",
            len(records),
            unavailable,
            sum(1 for r in records if r.is_embedded),
        )
        return records
