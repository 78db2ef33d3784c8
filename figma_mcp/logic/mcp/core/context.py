"""Execution context handed to tool and resource handlers."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class RequestContext:
    """Per-request context.

    The server never interrupts a running handler. Long-running handlers
    that want to stop early when the session is being shut down should poll
    :attr:`cancelled` or await :meth:`wait_cancelled`.

    Attributes:
        request_id: Id of the request being served
        method: JSON-RPC method name
        cancel_event: Session-wide cancellation signal
        logger: Logger bound to the request
    """

    request_id: Optional[Union[str, int]]
    method: str
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("figma_mcp.handler"))

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    async def wait_cancelled(self) -> None:
        await self.cancel_event.wait()
