"""
Tests for product sub-resource services.

Tests cover:
- Create/update/remove replies and product checks
- Bulk create and atomic replace (including rollback)
- Primary image handling
- Schedule availability
- Tag and question link specifics
- Event publishing after commit
"""

from decimal import Decimal

import pytest

from catalog_service.models import ProductImage, ProductSize, Translation
from catalog_service.services.domain import ProductService
from catalog_service.services.product_resources import (
    ProductImageService,
    ProductQuestionService,
    ProductRecipeService,
    ProductScheduleService,
    ProductSizeService,
    ProductTagService,
)
from shared.config.constants import CatalogEvents, ItemType
from shared.utils.exceptions import (
    MissingEntitiesError,
    NotFoundError,
    ValidationError,
)


def size(name: str, price: str = "10.00", **fields) -> dict:
    return {"name": name, "price": Decimal(price), **fields}


class TestProductSizeService:
    def test_create_reply_shape(self, db_session, seed_product, events):
        reply = ProductSizeService(db_session, events=events).create(
            {"product_id": seed_product.id, **size("Large", "15.50")}
        )

        assert reply["message"] == "Product size was created successfully"
        assert reply["product_id"] == seed_product.id
        assert reply["size"].name == "Large"
        assert reply["size"].price == 15.5
        events.publish.assert_called_once_with(CatalogEvents.PRODUCT_SIZE_CREATED, seed_product.id)

    def test_create_for_missing_product(self, db_session):
        with pytest.raises(NotFoundError):
            ProductSizeService(db_session).create({"product_id": "missing", **size("Small")})

    def test_create_for_deleted_product(self, db_session, seed_product):
        ProductService(db_session).remove(seed_product.id)

        with pytest.raises(NotFoundError):
            ProductSizeService(db_session).create({"product_id": seed_product.id, **size("Small")})

    def test_find_by_product_id_lists_active_sizes_by_name(self, db_session, seed_product):
        service = ProductSizeService(db_session)
        service.bulk_create(
            seed_product.id,
            [size("Medium"), size("Large"), size("Retired", status=False)],
        )

        assert [s.name for s in service.find_by_product_id(seed_product.id)] == ["Large", "Medium"]

    def test_bulk_create_does_not_publish(self, db_session, seed_product, events):
        reply = ProductSizeService(db_session, events=events).bulk_create(
            seed_product.id, [size("S"), size("M")]
        )

        assert reply["created_count"] == 2
        events.publish.assert_not_called()

    def test_update_and_remove(self, db_session, seed_product):
        service = ProductSizeService(db_session)
        created = service.create({"product_id": seed_product.id, **size("Small")})["size"]

        updated = service.update(created.id, {"price": Decimal("11.00")})
        assert updated["size"].price == 11.0

        removed = service.remove(created.id)
        assert removed["deleted_count"] == 1
        assert db_session.get(ProductSize, created.id) is None

    def test_update_missing_raises(self, db_session):
        with pytest.raises(NotFoundError):
            ProductSizeService(db_session).update("missing", {"name": "x"})

    def test_update_with_null_price_is_rejected(self, db_session, seed_product):
        service = ProductSizeService(db_session)
        created = service.create({"product_id": seed_product.id, **size("Small", "8.00")})["size"]

        with pytest.raises(ValidationError) as exc_info:
            service.update(created.id, {"price": None})

        assert exc_info.value.status_code == 400
        db_session.expire_all()
        assert service.find_one(created.id).price == 8.0

    def test_remove_by_product_id(self, db_session, seed_product):
        service = ProductSizeService(db_session)
        service.bulk_create(seed_product.id, [size("S"), size("M"), size("L")])

        reply = service.remove_by_product_id(seed_product.id)

        assert reply["deleted_count"] == 3
        assert service.find_by_product_id(seed_product.id) == []


class TestReplaceByProductId:
    def test_replace_returns_exactly_new_items(self, db_session, seed_product):
        service = ProductSizeService(db_session)
        service.bulk_create(seed_product.id, [size("Old 1"), size("Old 2")])

        reply = service.replace_by_product_id(seed_product.id, [size("New")])

        assert reply["deleted_count"] == 2
        assert reply["created_count"] == 1
        assert [s.name for s in service.find_by_product_id(seed_product.id)] == ["New"]

    def test_replace_with_empty_list_clears(self, db_session, seed_product):
        service = ProductSizeService(db_session)
        service.bulk_create(seed_product.id, [size("Old")])

        reply = service.replace_by_product_id(seed_product.id, [])

        assert reply["created_count"] == 0
        assert service.find_by_product_id(seed_product.id) == []

    def test_failed_insert_keeps_previous_rows(self, db_session, seed_product):
        service = ProductSizeService(db_session)
        service.bulk_create(seed_product.id, [size("Keep me")])

        # name is NOT NULL: the insert fails after the delete ran
        with pytest.raises(ValidationError):
            service.replace_by_product_id(seed_product.id, [{"name": None, "price": Decimal("1")}])

        db_session.expire_all()
        assert [s.name for s in service.find_by_product_id(seed_product.id)] == ["Keep me"]

    def test_invalid_items_rejected_before_delete(self, db_session, seed_product, make_ingredient):
        salt = make_ingredient("Salt")
        service = ProductRecipeService(db_session)
        service.bulk_create(seed_product.id, [{"ingredient_id": salt.id, "quantity": 1, "unit": "g"}])

        with pytest.raises(MissingEntitiesError):
            service.replace_by_product_id(
                seed_product.id, [{"ingredient_id": "missing", "quantity": 1, "unit": "g"}]
            )

        assert len(service.find_by_product_id(seed_product.id)) == 1

    def test_replace_publishes_recipe_event(self, db_session, seed_product, make_ingredient, events):
        salt = make_ingredient("Salt")

        ProductRecipeService(db_session, events=events).replace_by_product_id(
            seed_product.id, [{"ingredient_id": salt.id, "quantity": 2, "unit": "g"}]
        )

        events.publish.assert_called_once_with(CatalogEvents.PRODUCT_RECIPE_CREATED, seed_product.id)

    def test_replace_for_missing_product(self, db_session):
        with pytest.raises(NotFoundError):
            ProductSizeService(db_session).replace_by_product_id("missing", [size("x")])


class TestProductImageService:
    def test_new_primary_clears_previous(self, db_session, seed_product):
        service = ProductImageService(db_session)
        first = service.create({"product_id": seed_product.id, "url": "a.png", "is_primary": True})["image"]
        second = service.create({"product_id": seed_product.id, "url": "b.png", "is_primary": True})["image"]

        db_session.expire_all()
        assert db_session.get(ProductImage, first.id).is_primary is False
        assert db_session.get(ProductImage, second.id).is_primary is True

    def test_set_primary(self, db_session, seed_product):
        service = ProductImageService(db_session)
        service.bulk_create(
            seed_product.id,
            [{"url": "a.png", "is_primary": True}, {"url": "b.png", "is_primary": False}],
        )
        other = next(i for i in service.find_by_product_id(seed_product.id) if i.url == "b.png")

        reply = service.set_primary(seed_product.id, other.id)

        assert reply["image"].is_primary is True
        images = service.find_by_product_id(seed_product.id)
        assert [(i.url, i.is_primary) for i in images][0] == ("b.png", True)
        assert sum(i.is_primary for i in images) == 1

    def test_set_primary_wrong_product(self, db_session, seed_product, make_product):
        other_product = make_product("Other")
        service = ProductImageService(db_session)
        image = service.create({"product_id": other_product.id, "url": "a.png"})["image"]

        with pytest.raises(NotFoundError):
            service.set_primary(seed_product.id, image.id)

    def test_bulk_keeps_single_primary(self, db_session, seed_product):
        service = ProductImageService(db_session)
        service.bulk_create(
            seed_product.id,
            [{"url": "a.png", "is_primary": True}, {"url": "b.png", "is_primary": True}],
        )

        primary = [i.url for i in service.find_by_product_id(seed_product.id) if i.is_primary]
        assert primary == ["b.png"]


class TestProductScheduleService:
    @pytest.fixture
    def scheduled(self, db_session, seed_product):
        ProductScheduleService(db_session).bulk_create(
            seed_product.id,
            [
                {"day_of_week": 1, "start_time": "12:00", "end_time": "15:00"},
                {"day_of_week": 1, "start_time": "19:00", "end_time": "23:00"},
            ],
        )
        return seed_product

    @pytest.mark.parametrize(
        "day,time,expected",
        [
            (1, "12:00", True),
            (1, "15:00", True),
            (1, "16:30", False),
            (1, "20:15", True),
            (2, "13:00", False),
        ],
    )
    def test_is_available_at_time(self, db_session, scheduled, day, time, expected):
        result = ProductScheduleService(db_session).is_available_at_time(scheduled.id, day, time)
        assert result == {"is_available": expected}

    def test_listing_order(self, db_session, scheduled):
        rows = ProductScheduleService(db_session).find_by_product_id(scheduled.id)
        assert [r.start_time for r in rows] == ["12:00", "19:00"]

    def test_update_to_empty_window_is_rejected(self, db_session, scheduled):
        service = ProductScheduleService(db_session)
        first = service.find_by_product_id(scheduled.id)[0]

        with pytest.raises(ValidationError):
            service.update(first.id, {"end_time": "12:00"})


class TestProductTagService:
    def test_bulk_create_deduplicates(self, db_session, seed_product, make_tag, events):
        spicy = make_tag("spicy")

        reply = ProductTagService(db_session, events=events).bulk_create(
            seed_product.id, [{"tag_id": spicy.id}, {"tag_id": spicy.id}]
        )

        assert reply["created_count"] == 1
        events.publish.assert_called_once_with(CatalogEvents.PRODUCT_TAG_CREATED, seed_product.id)

    def test_unknown_tag_rejected(self, db_session, seed_product):
        with pytest.raises(MissingEntitiesError) as exc_info:
            ProductTagService(db_session).bulk_create(seed_product.id, [{"tag_id": "nope"}])
        assert exc_info.value.detail == "Some tags were not found: nope"

    def test_replace_with_overlapping_tags(self, db_session, seed_product, make_tag):
        spicy = make_tag("spicy")
        vegan = make_tag("vegan")
        service = ProductTagService(db_session)
        service.bulk_create(seed_product.id, [{"tag_id": spicy.id}])

        service.replace_by_product_id(seed_product.id, [{"tag_id": spicy.id}, {"tag_id": vegan.id}])

        assert [t.name for t in service.find_by_product_id(seed_product.id)] == ["spicy", "vegan"]

    def test_find_one_and_remove_by_pair(self, db_session, seed_product, make_tag):
        spicy = make_tag("spicy")
        service = ProductTagService(db_session)
        service.create({"product_id": seed_product.id, "tag_id": spicy.id})

        assert service.find_one(seed_product.id, spicy.id).tag_id == spicy.id
        assert service.remove(seed_product.id, spicy.id)["deleted_count"] == 1
        with pytest.raises(NotFoundError):
            service.find_one(seed_product.id, spicy.id)

    def test_find_by_tag_id(self, db_session, seed_product, make_tag):
        spicy = make_tag("spicy")
        ProductTagService(db_session).create({"product_id": seed_product.id, "tag_id": spicy.id})

        products = ProductTagService(db_session).find_by_tag_id(spicy.id)
        assert [p.id for p in products] == [seed_product.id]


class TestProductQuestionService:
    def test_bulk_positions_default_to_index(self, db_session, seed_product, make_question):
        first = make_question("First")
        second = make_question("Second")
        service = ProductQuestionService(db_session)

        service.bulk_create(
            seed_product.id,
            [
                {"question_id": first.id, "item_type": ItemType.QUESTION},
                {"question_id": second.id, "item_type": ItemType.QUESTION},
            ],
        )

        links = service.find_by_product_id(seed_product.id)
        assert [(l.question_id, l.position) for l in links] == [(first.id, 0), (second.id, 1)]

    def test_find_by_product_id_includes_question_translations(
        self, db_session, seed_product, make_question, link
    ):
        question = make_question("Size?")
        link(question, seed_product, ItemType.QUESTION)
        db_session.add(Translation(question_id=question.id, language_code="en", name="Size"))
        db_session.commit()

        [found] = ProductQuestionService(db_session).find_by_product_id(seed_product.id)

        assert found.question.name == "Size?"
        assert [(t.language_code, t.name) for t in found.question.translations] == [("en", "Size")]


    def test_unknown_question_rejected(self, db_session, seed_product):
        with pytest.raises(MissingEntitiesError):
            ProductQuestionService(db_session).create(
                {"product_id": seed_product.id, "question_id": "nope", "item_type": ItemType.QUESTION}
            )

    def test_find_by_product_id_and_type(self, db_session, seed_product, make_question, link):
        asked = make_question("Asked")
        answered = make_question("Answered")
        link(asked, seed_product, ItemType.QUESTION)
        link(answered, seed_product, ItemType.ANSWER)
        service = ProductQuestionService(db_session)

        questions = service.find_by_product_id_and_type(seed_product.id, ItemType.QUESTION)
        answers = service.find_by_product_id_and_type(seed_product.id, ItemType.ANSWER)

        assert [l.question.name for l in questions] == ["Asked"]
        assert questions[0].product is None
        assert [l.product.id for l in answers] == [seed_product.id]

    def test_find_by_question_id(self, db_session, make_product, make_question, link):
        question = make_question("Drink?")
        cola = make_product("Cola")
        ale = make_product("Ale")
        link(question, cola, ItemType.ANSWER)
        link(question, ale, ItemType.ANSWER)

        links = ProductQuestionService(db_session).find_by_question_id(question.id)

        assert [l.product.name for l in links] == ["Ale", "Cola"]
