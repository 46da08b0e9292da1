"""
Caller side of the command bus.

Usage:
    client = CommandClient(await get_redis_pool())
    product = await client.send("product.find-one", product_id)
"""

from __future__ import annotations

import json
import uuid
from typing import Any

import redis.asyncio as aioredis

from shared.config.settings import settings
from shared.utils.exceptions import RpcError
from .envelope import CommandEnvelope


class CommandClient:
    """Sends a command and waits for its reply on a private list key."""

    def __init__(
        self,
        redis_client: aioredis.Redis,
        *,
        stream: str | None = None,
        reply_prefix: str | None = None,
    ):
        self._redis = redis_client
        self._stream = stream or settings.command_stream
        self._reply_prefix = reply_prefix or settings.reply_key_prefix

    async def send(self, pattern: str, data: Any = None, timeout: float = 5.0) -> Any:
        """
        Send a command and return its response.

        Raises:
            RpcError: the service replied with an error.
            TimeoutError: no reply within `timeout` seconds.
        """
        command_id = str(uuid.uuid4())
        envelope = CommandEnvelope(
            id=command_id,
            pattern=pattern,
            data=data,
            reply_to=f"{self._reply_prefix}{command_id}",
        )
        await self._redis.xadd(self._stream, envelope.to_fields())

        popped = await self._redis.blpop([envelope.reply_to], timeout=timeout)
        if popped is None:
            raise TimeoutError(f"No reply for {pattern} within {timeout}s")

        _key, raw = popped
        reply = json.loads(raw)
        if "err" in reply:
            err = reply["err"] or {}
            raise RpcError(err.get("status", 500), err.get("message", "Unknown error"))
        return reply.get("response")
