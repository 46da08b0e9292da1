"""
Tests for the Redis Streams command bus.

Redis is replaced by AsyncMock fakes; the tests verify envelope parsing,
reply/ack ordering, interrupted-command recovery and the caller side.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError

from shared.config.settings import settings
from shared.infrastructure.messaging import (
    CommandClient,
    CommandEnvelope,
    EnvelopeError,
    ensure_consumer_group,
    parse_envelope,
    process_command,
)
from shared.infrastructure.messaging.stream_consumer import _recover_pending_commands
from shared.utils.exceptions import RpcError


def fake_redis() -> AsyncMock:
    redis = AsyncMock()
    redis.rpush.return_value = 1
    redis.expire.return_value = True
    redis.xack.return_value = 1
    return redis


def pushed_reply(redis: AsyncMock) -> dict:
    key, raw = redis.rpush.call_args.args
    return {"key": key, **json.loads(raw)}


class TestEnvelope:
    def test_round_trip_fields(self):
        envelope = CommandEnvelope(id="c1", pattern="product.find-one", data="p1", reply_to="r:c1")

        parsed = parse_envelope("1-0", envelope.to_fields())

        assert parsed == envelope

    def test_bytes_fields_are_decoded(self):
        parsed = parse_envelope(
            b"5-0",
            {b"pattern": b"tag.validate", b"data": b'["t1"]'},
        )

        assert parsed.pattern == "tag.validate"
        assert parsed.data == ["t1"]
        # The stream id stands in for a missing correlation id
        assert parsed.id == "5-0"
        assert parsed.reply_to is None

    def test_missing_pattern(self):
        with pytest.raises(EnvelopeError):
            parse_envelope("1-0", {"data": "{}"})

    def test_invalid_json(self):
        with pytest.raises(EnvelopeError):
            parse_envelope("1-0", {"pattern": "x", "data": "{not json"})


class TestProcessCommand:
    @pytest.mark.asyncio
    async def test_dispatches_replies_and_acks(self):
        redis = fake_redis()
        dispatch = MagicMock(return_value={"response": {"ok": True}})
        fields = CommandEnvelope(
            id="c1", pattern="catalog.ping", data={"a": 1}, reply_to="reply:c1"
        ).to_fields()

        handled = await process_command(redis, "1-0", fields, dispatch, asyncio.Semaphore(1))

        assert handled is True
        dispatch.assert_called_once_with("catalog.ping", {"a": 1}, "c1")
        assert pushed_reply(redis) == {"key": "reply:c1", "id": "c1", "response": {"ok": True}}
        redis.expire.assert_awaited_once_with("reply:c1", settings.reply_ttl_seconds)
        redis.xack.assert_awaited_once_with(settings.command_stream, settings.consumer_group, "1-0")

    @pytest.mark.asyncio
    async def test_error_reply_is_forwarded(self):
        redis = fake_redis()
        dispatch = MagicMock(return_value={"err": {"status": 404, "message": "nope"}})
        fields = CommandEnvelope(id="c2", pattern="x", data=None, reply_to="reply:c2").to_fields()

        await process_command(redis, "2-0", fields, dispatch, asyncio.Semaphore(1))

        assert pushed_reply(redis)["err"] == {"status": 404, "message": "nope"}

    @pytest.mark.asyncio
    async def test_malformed_envelope_is_acked_and_answered(self):
        redis = fake_redis()
        dispatch = MagicMock()

        handled = await process_command(
            redis, "3-0", {"id": "c3", "reply_to": "reply:c3"}, dispatch, asyncio.Semaphore(1)
        )

        assert handled is False
        dispatch.assert_not_called()
        assert pushed_reply(redis)["err"]["status"] == 400
        redis.xack.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_malformed_without_reply_to_is_dropped(self):
        redis = fake_redis()

        await process_command(redis, "4-0", {"data": "{}"}, MagicMock(), asyncio.Semaphore(1))

        redis.rpush.assert_not_awaited()
        redis.xack.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dispatch_crash_becomes_500(self):
        redis = fake_redis()
        dispatch = MagicMock(side_effect=RuntimeError("router bug"))
        fields = CommandEnvelope(id="c5", pattern="x", data=None, reply_to="reply:c5").to_fields()

        await process_command(redis, "5-0", fields, dispatch, asyncio.Semaphore(1))

        assert pushed_reply(redis)["err"] == {"status": 500, "message": "router bug"}
        redis.xack.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_undeliverable_reply_still_acks(self):
        redis = fake_redis()
        redis.rpush.side_effect = ResponseError("WRONGTYPE Operation against a key")
        dispatch = MagicMock(return_value={"response": {"ok": True}})
        fields = CommandEnvelope(id="c9", pattern="x", data=None, reply_to="not-a-list").to_fields()

        handled = await process_command(redis, "9-0", fields, dispatch, asyncio.Semaphore(1))

        assert handled is True
        dispatch.assert_called_once()
        redis.xack.assert_awaited_once_with(settings.command_stream, settings.consumer_group, "9-0")

    @pytest.mark.asyncio
    async def test_no_reply_to_still_acks(self):
        redis = fake_redis()
        dispatch = MagicMock(return_value={"response": None})
        fields = CommandEnvelope(id="c6", pattern="x", data=None).to_fields()

        await process_command(redis, "6-0", fields, dispatch, asyncio.Semaphore(1))

        redis.rpush.assert_not_awaited()
        redis.xack.assert_awaited_once()


class TestConsumerGroup:
    @pytest.mark.asyncio
    async def test_existing_group_is_ignored(self):
        redis = fake_redis()
        redis.xgroup_create.side_effect = ResponseError("BUSYGROUP Consumer Group name already exists")

        await ensure_consumer_group(redis)

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        redis = fake_redis()
        redis.xgroup_create.side_effect = ResponseError("WRONGTYPE")

        with pytest.raises(ResponseError):
            await ensure_consumer_group(redis)

    @pytest.mark.asyncio
    async def test_interrupted_commands_get_503(self):
        redis = fake_redis()
        fields = CommandEnvelope(id="c7", pattern="product.update", data={}, reply_to="reply:c7").to_fields()
        redis.xautoclaim.return_value = ["0-0", [("7-0", fields)], []]

        recovered = await _recover_pending_commands(redis)

        assert recovered == 1
        assert pushed_reply(redis)["err"]["status"] == 503
        redis.xack.assert_awaited_once_with(settings.command_stream, settings.consumer_group, "7-0")

    @pytest.mark.asyncio
    async def test_recovery_survives_a_failing_reply(self):
        redis = fake_redis()
        broken = CommandEnvelope(id="c10", pattern="x", data={}, reply_to="not-a-list").to_fields()
        healthy = CommandEnvelope(id="c11", pattern="x", data={}, reply_to="reply:c11").to_fields()
        redis.xautoclaim.return_value = ["0-0", [("10-0", broken), ("11-0", healthy)], []]
        redis.rpush.side_effect = [ResponseError("WRONGTYPE"), 1]

        recovered = await _recover_pending_commands(redis)

        assert recovered == 2
        acked = [c.args[2] for c in redis.xack.await_args_list]
        assert acked == ["10-0", "11-0"]

    @pytest.mark.asyncio
    async def test_recovery_survives_a_failing_ack(self):
        redis = fake_redis()
        fields = CommandEnvelope(id="c12", pattern="x", data={}).to_fields()
        redis.xautoclaim.return_value = ["0-0", [("12-0", fields)], []]
        redis.xack.side_effect = RedisConnectionError("gone")

        assert await _recover_pending_commands(redis) == 1


class TestCommandClient:
    @pytest.mark.asyncio
    async def test_send_returns_response(self):
        redis = fake_redis()
        redis.blpop.return_value = ("reply:x", json.dumps({"id": "x", "response": {"id": "p1"}}))

        result = await CommandClient(redis).send("product.find-one", "p1")

        assert result == {"id": "p1"}
        stream, fields = redis.xadd.call_args.args
        assert stream == settings.command_stream
        assert fields["pattern"] == "product.find-one"
        assert json.loads(fields["data"]) == "p1"
        assert fields["reply_to"].startswith(settings.reply_key_prefix)

    @pytest.mark.asyncio
    async def test_error_reply_raises(self):
        redis = fake_redis()
        redis.blpop.return_value = ("k", json.dumps({"err": {"status": 404, "message": "gone"}}))

        with pytest.raises(RpcError) as exc_info:
            await CommandClient(redis).send("product.find-one", "p1")

        assert exc_info.value.status == 404
        assert exc_info.value.message == "gone"

    @pytest.mark.asyncio
    async def test_timeout(self):
        redis = fake_redis()
        redis.blpop.return_value = None

        with pytest.raises(TimeoutError):
            await CommandClient(redis).send("product.find-one", "p1", timeout=0.1)


class TestConsumerLoop:
    @pytest.mark.asyncio
    async def test_loop_stops_on_event(self):
        from shared.infrastructure.messaging import run_command_consumer

        redis = fake_redis()
        redis.xautoclaim.return_value = ["0-0", [], []]
        stop = asyncio.Event()
        fields = CommandEnvelope(id="c8", pattern="x", data=None, reply_to="reply:c8").to_fields()

        async def read_once(**kwargs):
            stop.set()
            return [[settings.command_stream, [("8-0", fields)]]]

        redis.xreadgroup.side_effect = read_once
        dispatch = MagicMock(return_value={"response": "pong"})

        await asyncio.wait_for(
            run_command_consumer(dispatch, redis_pool=redis, stop_event=stop), timeout=2
        )

        dispatch.assert_called_once_with("x", None, "c8")
        assert pushed_reply(redis)["response"] == "pong"
