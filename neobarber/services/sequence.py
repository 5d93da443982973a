"""Sequence identifier allocation."""

import logging

from neobarber.core.config import settings
from neobarber.services.store import AppointmentStore

logger = logging.getLogger(__name__)


class SequenceAllocator:
    """Issues unique, strictly increasing integer identifiers.

    Backed by a counter row that is only touched through the store's atomic
    increment; the current value is never cached or read on its own. Values
    consumed by a request that later fails are not reused, so ids may have
    gaps but never repeat.
    """

    def __init__(self, store: AppointmentStore):
        self.store = store

    async def next_id(self, namespace: str | None = None) -> int:
        """Allocate the next identifier in a namespace.

        Raises:
            StorageUnavailableError: If the increment could not complete
        """
        namespace = namespace or settings.appointment_sequence_name
        value = await self.store.atomic_increment(namespace)
        logger.debug(f"Allocated {namespace}={value}")
        return value
