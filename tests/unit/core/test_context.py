"""Unit tests for the request context."""

import asyncio

import pytest

from figma_mcp.logic.mcp.core.context import RequestContext


class TestRequestContext:
    def test_defaults(self):
        ctx = RequestContext(request_id=1, method="tools/call")

        assert ctx.cancelled is False
        assert ctx.logger.name == "figma_mcp.handler"

    @pytest.mark.asyncio
    async def test_wait_cancelled(self):
        event = asyncio.Event()
        ctx = RequestContext(request_id="a", method="tools/call", cancel_event=event)

        waiter = asyncio.create_task(ctx.wait_cancelled())
        await asyncio.sleep(0)
        assert not waiter.done()

        event.set()
        await asyncio.wait_for(waiter, timeout=1)
        assert ctx.cancelled is True
