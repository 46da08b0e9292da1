"""
Redis Stream Consumer for catalog commands.

Reads command envelopes from the command stream through a consumer group,
runs each command in a worker thread and pushes the reply to the caller's
reply list. Every entry is acknowledged after the reply is attempted, even
when the reply cannot be delivered.

Reply shapes pushed to `reply_to`:
    {"id": ..., "response": ...}
    {"id": ..., "err": {"status": ..., "message": ...}}
"""

from __future__ import annotations

import asyncio
import json
import random
from http import HTTPStatus
from typing import Any, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError, ResponseError

from shared.config.settings import settings
from shared.config.logging import get_logger
from .envelope import CommandEnvelope, EnvelopeError, parse_envelope

logger = get_logger(__name__)

# dispatch(pattern, data, command_id) -> {"response": ...} | {"err": {...}}
Dispatch = Callable[[str, Any, str], dict]

# Entries left pending by a crashed consumer are claimed after this idle time
PEL_MIN_IDLE_MS = 60000

# Error backoff configuration
ERROR_BASE_DELAY = 1.0
ERROR_MAX_DELAY = 30.0
ERROR_JITTER_FACTOR = 0.3


def _calculate_error_backoff(error_count: int) -> float:
    """Exponential delay capped at ERROR_MAX_DELAY, plus up to 30% jitter."""
    exponential_delay = min(ERROR_BASE_DELAY * (2 ** (error_count - 1)), ERROR_MAX_DELAY)
    jitter = exponential_delay * ERROR_JITTER_FACTOR * random.random()
    return exponential_delay + jitter


async def ensure_consumer_group(redis_pool: aioredis.Redis) -> None:
    """Create the consumer group (and the stream) if missing."""
    try:
        await redis_pool.xgroup_create(
            name=settings.command_stream,
            groupname=settings.consumer_group,
            id="$",
            mkstream=True,
        )
        logger.info(
            "Created consumer group",
            stream=settings.command_stream,
            group=settings.consumer_group,
        )
    except ResponseError as e:
        if "BUSYGROUP" not in str(e):
            raise
        logger.debug(
            "Consumer group already exists",
            stream=settings.command_stream,
            group=settings.consumer_group,
        )


async def send_reply(redis_pool: aioredis.Redis, reply_to: str, reply: dict) -> None:
    """Push a reply and give the reply list a TTL so abandoned replies expire."""
    await redis_pool.rpush(reply_to, json.dumps(reply, default=str))
    await redis_pool.expire(reply_to, settings.reply_ttl_seconds)


async def _deliver_reply(redis_pool: aioredis.Redis, reply_to: str, reply: dict) -> bool:
    """
    send_reply that logs a Redis failure instead of raising.

    A reply_to naming a non-list key (WRONGTYPE) or a dropped connection
    must not keep the entry pending: the command has already run.
    """
    try:
        await send_reply(redis_pool, reply_to, reply)
    except RedisError as e:
        logger.error(
            "Failed to send reply",
            reply_to=reply_to,
            command_id=reply.get("id"),
            error=str(e),
        )
        return False
    return True


async def _ack(redis_pool: aioredis.Redis, message_id: str) -> None:
    await redis_pool.xack(settings.command_stream, settings.consumer_group, message_id)


async def process_command(
    redis_pool: aioredis.Redis,
    message_id: str,
    fields: dict,
    dispatch: Dispatch,
    semaphore: asyncio.Semaphore,
) -> bool:
    """
    Handle one stream entry: parse, dispatch in a worker thread, reply, ack.

    Returns True if the command was dispatched, False if the entry was dropped.
    """
    try:
        envelope = parse_envelope(message_id, fields)
    except EnvelopeError as e:
        logger.error("Dropping malformed command", msg_id=message_id, error=str(e))
        reply_to = fields.get("reply_to") or fields.get(b"reply_to")
        try:
            if reply_to:
                if isinstance(reply_to, bytes):
                    reply_to = reply_to.decode("utf-8")
                await _deliver_reply(redis_pool, reply_to, {
                    "id": fields.get("id") or message_id,
                    "err": {"status": int(HTTPStatus.BAD_REQUEST), "message": str(e)},
                })
        finally:
            await _ack(redis_pool, message_id)
        return False

    async with semaphore:
        result = await _run_dispatch(envelope, dispatch)

    try:
        if envelope.reply_to:
            await _deliver_reply(redis_pool, envelope.reply_to, {"id": envelope.id, **result})
        else:
            logger.debug("Command has no reply_to, reply discarded", pattern=envelope.pattern)
    finally:
        await _ack(redis_pool, message_id)
    return True


async def _run_dispatch(envelope: CommandEnvelope, dispatch: Dispatch) -> dict:
    try:
        return await asyncio.to_thread(dispatch, envelope.pattern, envelope.data, envelope.id)
    except Exception as e:
        # The router converts handler errors itself; this only trips on router bugs
        logger.error(
            "Command dispatch crashed",
            pattern=envelope.pattern,
            command_id=envelope.id,
            error=str(e),
            exc_info=True,
        )
        return {"err": {"status": int(HTTPStatus.INTERNAL_SERVER_ERROR), "message": str(e)}}


async def _recover_pending_commands(redis_pool: aioredis.Redis) -> int:
    """
    Fail commands left pending by a previous consumer run.

    A pending entry was read but never acknowledged, so the consumer died
    mid-command. Re-running it could repeat a write; the caller gets an
    error reply instead and the entry is acknowledged.
    """
    result = await redis_pool.xautoclaim(
        name=settings.command_stream,
        groupname=settings.consumer_group,
        consumername=settings.consumer_name,
        min_idle_time=PEL_MIN_IDLE_MS,
        start_id="0-0",
        count=settings.command_batch_size,
    )
    claimed = result[1] if result and len(result) > 1 else []

    for message_id, fields in claimed:
        logger.warning("Failing interrupted command", msg_id=message_id)
        try:
            envelope = parse_envelope(message_id, fields or {})
        except EnvelopeError:
            envelope = None
        try:
            if envelope is not None and envelope.reply_to:
                await _deliver_reply(redis_pool, envelope.reply_to, {
                    "id": envelope.id,
                    "err": {
                        "status": int(HTTPStatus.SERVICE_UNAVAILABLE),
                        "message": "Command was interrupted before completion",
                    },
                })
            await _ack(redis_pool, message_id)
        except RedisError as e:
            # Left pending; the next start claims it again
            logger.error("Could not fail interrupted command", msg_id=message_id, error=str(e))

    return len(claimed)


async def run_command_consumer(
    dispatch: Dispatch,
    *,
    redis_pool: aioredis.Redis | None = None,
    stop_event: asyncio.Event | None = None,
) -> None:
    """
    Run the command consumer loop until cancelled or stop_event is set.

    1. Ensures the consumer group exists (MKSTREAM).
    2. Fails commands left pending by a crashed run.
    3. Reads new entries (>) via XREADGROUP.
    4. Dispatches each entry concurrently, bounded by max_concurrent_commands.
    5. Backs off with jitter on Redis errors; recreates the group on NOGROUP.
    """
    if redis_pool is None:
        from shared.infrastructure.events import get_redis_pool
        redis_pool = await get_redis_pool()
    stop_event = stop_event or asyncio.Event()
    semaphore = asyncio.Semaphore(settings.max_concurrent_commands)

    await ensure_consumer_group(redis_pool)
    recovered = await _recover_pending_commands(redis_pool)
    if recovered:
        logger.info("Failed interrupted commands", count=recovered)

    logger.info(
        "Starting command consumer",
        stream=settings.command_stream,
        group=settings.consumer_group,
        consumer=settings.consumer_name,
    )

    error_count = 0
    while not stop_event.is_set():
        try:
            entries = await redis_pool.xreadgroup(
                groupname=settings.consumer_group,
                consumername=settings.consumer_name,
                streams={settings.command_stream: ">"},
                count=settings.command_batch_size,
                block=settings.command_block_ms,
            )
            error_count = 0

            if not entries:
                continue

            # entries is [[stream_name, [[id, fields], ...]]]
            await asyncio.gather(*(
                process_command(redis_pool, message_id, fields, dispatch, semaphore)
                for _stream, messages in entries
                for message_id, fields in messages
            ))

        except asyncio.CancelledError:
            logger.info("Command consumer cancelled")
            raise
        except ResponseError as e:
            if "NOGROUP" in str(e):
                logger.warning(
                    "Consumer group was deleted externally, recreating",
                    stream=settings.command_stream,
                    group=settings.consumer_group,
                )
                await ensure_consumer_group(redis_pool)
                continue
            error_count += 1
            delay = _calculate_error_backoff(error_count)
            logger.error("Redis error in command consumer", error=str(e), delay=round(delay, 2))
            await asyncio.sleep(delay)
        except Exception as e:
            error_count += 1
            delay = _calculate_error_backoff(error_count)
            logger.error("Error in command consumer loop", error=str(e), delay=round(delay, 2))
            await asyncio.sleep(delay)

    logger.info("Command consumer stopped")
