"""Remote image processing with cooperative cancellation."""

import logging
import time
from dataclasses import dataclass
from typing import Protocol

from design_customizer.domain.images import ProcessingOperation, ProcessingResult
from design_customizer.services.cancellation import CancellationToken

_logger = logging.getLogger(__name__)


class ProcessingClient(Protocol):
    """Interface for the remote background-removal/enhance endpoints."""

    async def process(
        self, operation: ProcessingOperation, content: bytes, content_type: str
    ) -> ProcessingResult:
        """Send image bytes for processing and return the result."""


@dataclass
class RemoteProcessingService:
    """Runs processing calls under a cancellation token."""

    client: ProcessingClient

    async def process(
        self,
        operation: ProcessingOperation,
        content: bytes,
        content_type: str,
        token: CancellationToken,
    ) -> ProcessingResult:
        """Process image bytes unless the token is cancelled first.

        Raises `ProcessingCancelledError` as soon as the token is cancelled,
        even if the network response arrives afterwards, and lets
        `ProcessingError` from the client propagate.
        """
        started = time.monotonic()
        _logger.info(
            "Processing started",
            extra={"operation": str(operation), "generation": token.generation},
        )
        result = await token.run(self.client.process(operation, content, content_type))
        token.raise_if_cancelled()
        _logger.info(
            "Processing finished",
            extra={
                "operation": str(operation),
                "generation": token.generation,
                "elapsed_s": round(time.monotonic() - started, 3),
            },
        )
        return result
