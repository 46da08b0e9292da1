"""
Tests for the message router and command dispatcher.

Tests cover:
- Reply envelopes for success and every error class
- Payload parsing helpers
- Full command round trips through the registered handlers
"""

import pytest

from catalog_service.handlers import CommandDispatcher, MessageRouter, build_dispatcher, build_router
from catalog_service.handlers.router import parse_id, parse_ids
from shared.config.constants import (
    HEALTH_PING,
    CatalogEvents,
    IngredientCommands,
    ProductCommands,
    ProductScheduleCommands,
    ProductSizeCommands,
    ProductTagCommands,
    QuestionCommands,
    TagCommands,
)
from shared.utils.exceptions import NotFoundError, ValidationError


@pytest.fixture
def dispatcher(session_factory, events):
    return build_dispatcher(session_factory=session_factory, events=events)


def create_product(dispatcher, name="Burger", price=12.5):
    reply = dispatcher.dispatch(ProductCommands.CREATE, {"name": name, "base_price": price})
    assert "response" in reply, reply
    return reply["response"]


class TestMessageRouter:
    def test_duplicate_registration_fails(self):
        router = MessageRouter()

        @router.register("x.do")
        def first(ctx, data):
            return None

        with pytest.raises(ValueError):
            router.register("x.do")(first)

    def test_every_command_family_is_registered(self):
        patterns = build_router().patterns

        assert ProductCommands.FIND_ONE in patterns
        assert ProductSizeCommands.REPLACE_BY_PRODUCT_ID in patterns
        assert ProductTagCommands.FIND_BY_TAG_ID in patterns
        assert TagCommands.GET_MOST_USED in patterns
        assert QuestionCommands.FIND_BY_TYPE in patterns
        assert HEALTH_PING in patterns


class TestPayloadHelpers:
    def test_parse_id_accepts_string_or_object(self):
        assert parse_id("abc") == "abc"
        assert parse_id({"product_id": "p1"}, "product_id") == "p1"

    @pytest.mark.parametrize("payload", [None, "", "  ", 42, {"id": ""}, {}])
    def test_parse_id_rejects_empty(self, payload):
        with pytest.raises(ValidationError):
            parse_id(payload)

    def test_parse_ids(self):
        assert parse_ids(["a", "b"]) == ["a", "b"]
        assert parse_ids({"ids": ["a"]}) == ["a"]
        with pytest.raises(ValidationError):
            parse_ids([])


class TestDispatcherErrors:
    def test_unknown_pattern(self, dispatcher):
        reply = dispatcher.dispatch("nothing.here", {})

        assert reply == {"err": {"status": 404, "message": "No handler for pattern nothing.here"}}

    def test_schema_violation_is_400(self, dispatcher):
        reply = dispatcher.dispatch(ProductCommands.CREATE, {"name": "", "base_price": -1})

        assert reply["err"]["status"] == 400
        assert "name" in reply["err"]["message"]
        assert "base_price" in reply["err"]["message"]

    def test_app_exception_keeps_status(self, dispatcher):
        reply = dispatcher.dispatch(ProductCommands.FIND_ONE, "missing")

        assert reply == {"err": {"status": 404, "message": "Product with id missing not found"}}

    def test_unique_violation_is_409(self, dispatcher):
        dispatcher.dispatch(IngredientCommands.CREATE, {"name": "Salt", "unit": "g"})

        reply = dispatcher.dispatch(IngredientCommands.CREATE, {"name": "Salt", "unit": "kg"})

        assert reply["err"]["status"] == 409

    def test_null_for_required_field_is_400(self, dispatcher):
        created = create_product(dispatcher)

        reply = dispatcher.dispatch(ProductCommands.UPDATE, {"id": created["id"], "name": None})

        assert reply == {"err": {"status": 400, "message": "name cannot be null"}}

    def test_unexpected_exception_is_500(self, session_factory):
        router = MessageRouter()

        @router.register("boom")
        def boom(ctx, data):
            raise RuntimeError("kaput")

        reply = CommandDispatcher(router, session_factory=session_factory).dispatch("boom", None)

        assert reply == {"err": {"status": 500, "message": "kaput"}}

    def test_handler_sees_session_and_events(self, session_factory, events):
        router = MessageRouter()
        seen = {}

        @router.register("peek")
        def peek(ctx, data):
            seen["db"] = ctx.db
            seen["events"] = ctx.events
            raise NotFoundError("Thing", data)

        reply = CommandDispatcher(router, session_factory=session_factory, events=events)(
            "peek", "t1", "cmd-1"
        )

        assert reply["err"]["status"] == 404
        assert seen["db"] is not None
        assert seen["events"] is events


class TestRoundTrips:
    def test_create_then_find_one(self, dispatcher, events):
        created = create_product(dispatcher)

        reply = dispatcher.dispatch(ProductCommands.FIND_ONE, created["id"])

        detail = reply["response"]
        assert detail["name"] == "Burger"
        assert detail["base_price"] == 12.5
        assert detail["status"] == "ACTIVE"
        assert detail["questions"] == []
        assert detail["sizes"] == []
        events.publish.assert_called_once_with(CatalogEvents.PRODUCT_CREATED, created["id"])

    def test_find_all_envelope(self, dispatcher):
        for name in ("A", "B", "C"):
            create_product(dispatcher, name)

        reply = dispatcher.dispatch(ProductCommands.FIND_ALL, {"page": 2, "limit": 2})

        assert reply["response"]["meta"] == {"total": 3, "page": 2, "last_page": 2}
        assert [p["name"] for p in reply["response"]["list"]] == ["C"]

    def test_update_then_delete(self, dispatcher):
        created = create_product(dispatcher)

        updated = dispatcher.dispatch(
            ProductCommands.UPDATE, {"id": created["id"], "name": "Renamed", "updated_by": "u1"}
        )
        assert updated["response"]["name"] == "Renamed"
        assert updated["response"]["updated_by"] == "u1"

        deleted = dispatcher.dispatch(ProductCommands.DELETE, {"id": created["id"], "deleted_by": "u1"})
        assert deleted["response"]["deleted_by"] == "u1"

        assert dispatcher.dispatch(ProductCommands.FIND_ONE, created["id"])["err"]["status"] == 404

    def test_validate_takes_list(self, dispatcher):
        created = create_product(dispatcher)

        ok = dispatcher.dispatch(ProductCommands.VALIDATE, [created["id"], created["id"]])
        missing = dispatcher.dispatch(ProductCommands.VALIDATE, [created["id"], "ghost"])

        assert [p["id"] for p in ok["response"]] == [created["id"]]
        assert missing["err"] == {"status": 400, "message": "Some products were not found: ghost"}

    def test_size_replace_round_trip(self, dispatcher):
        created = create_product(dispatcher)
        dispatcher.dispatch(
            ProductSizeCommands.BULK_CREATE,
            {"product_id": created["id"], "items": [{"name": "S", "price": 8}]},
        )

        reply = dispatcher.dispatch(
            ProductSizeCommands.REPLACE_BY_PRODUCT_ID,
            {"product_id": created["id"], "items": [{"name": "L", "price": "14.90"}]},
        )
        listed = dispatcher.dispatch(ProductSizeCommands.FIND_BY_PRODUCT_ID, created["id"])

        assert reply["response"]["deleted_count"] == 1
        assert reply["response"]["created_count"] == 1
        assert [(s["name"], s["price"]) for s in listed["response"]] == [("L", 14.9)]

    def test_schedule_time_is_normalized(self, dispatcher):
        created = create_product(dispatcher)
        dispatcher.dispatch(
            ProductScheduleCommands.CREATE,
            {"product_id": created["id"], "day_of_week": 0, "start_time": "9:00", "end_time": "13:30"},
        )

        reply = dispatcher.dispatch(
            ProductScheduleCommands.IS_AVAILABLE_AT_TIME,
            {"product_id": created["id"], "day_of_week": 0, "time": "10:15"},
        )

        assert reply["response"] == {"is_available": True}

    @pytest.mark.parametrize("start,end", [("18:00", "10:00"), ("10:00", "10:00")])
    def test_schedule_rejects_empty_or_inverted_window(self, dispatcher, start, end):
        created = create_product(dispatcher)

        reply = dispatcher.dispatch(
            ProductScheduleCommands.CREATE,
            {"product_id": created["id"], "day_of_week": 0, "start_time": start, "end_time": end},
        )

        assert reply["err"]["status"] == 400
        assert "start_time must be before end_time" in reply["err"]["message"]

    def test_ping(self, dispatcher):
        reply = dispatcher.dispatch(HEALTH_PING, None)
        assert reply["response"]["status"] == "ok"
