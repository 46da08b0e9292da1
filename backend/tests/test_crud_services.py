"""
Tests for the uniform CRUD contract shared by catalog entities.

Tests cover:
- 404 on missing and soft-deleted ids (before any write)
- Soft delete and the active-flag filter on listings
- Pagination math and name search
- Uniqueness conflicts and foreign key checks
"""

from decimal import Decimal

import pytest

from catalog_service.models import Product
from catalog_service.services.domain import (
    CategoryService,
    ChainService,
    IngredientService,
    ProductService,
    QuestionService,
    RestaurantService,
    TagService,
)
from shared.config.constants import CatalogEvents, ProductStatus, QuestionType
from shared.utils.exceptions import (
    DuplicateEntityError,
    MissingEntitiesError,
    NotFoundError,
    ValidationError,
)
from shared.utils.pagination import Pagination


class TestFindOne:
    """find_one returns live rows whatever their active flag."""

    def test_missing_id_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            ProductService(db_session).find_one("does-not-exist")
        assert exc_info.value.status_code == 404
        assert "Product with id does-not-exist not found" in exc_info.value.detail

    def test_soft_deleted_raises_not_found(self, db_session, seed_product):
        service = ProductService(db_session)
        service.remove(seed_product.id, deleted_by="admin")

        with pytest.raises(NotFoundError):
            service.find_one(seed_product.id)

    def test_inactive_but_live_is_found(self, db_session, make_product):
        product = make_product("Seasonal", status=ProductStatus.INACTIVE)

        result = ProductService(db_session).find_one(product.id)

        assert result.id == product.id
        assert result.status == ProductStatus.INACTIVE


class TestSoftDelete:
    def test_remove_sets_audit_fields_and_deactivates(self, db_session, seed_product):
        result = ProductService(db_session).remove(seed_product.id, deleted_by="admin")

        assert result.deleted_at is not None
        assert result.deleted_by == "admin"
        assert result.status == ProductStatus.INACTIVE

        # The row is kept
        row = db_session.get(Product, seed_product.id)
        assert row is not None
        assert row.is_deleted

    def test_remove_twice_raises_not_found(self, db_session, seed_product):
        service = ProductService(db_session)
        service.remove(seed_product.id)

        with pytest.raises(NotFoundError):
            service.remove(seed_product.id)

    def test_update_soft_deleted_raises_before_write(self, db_session, seed_product):
        service = ProductService(db_session)
        service.remove(seed_product.id)

        with pytest.raises(NotFoundError):
            service.update(seed_product.id, {"name": "Renamed"})

        db_session.expire_all()
        assert db_session.get(Product, seed_product.id).name == "Burger"

    def test_category_remove_turns_status_off(self, db_session):
        service = CategoryService(db_session)
        category = service.create({"name": "Drinks"})

        removed = service.remove(category.id)

        assert removed.status is False
        assert service.find_all(Pagination())["meta"]["total"] == 0


class TestFindAll:
    """Listings only include live rows that pass the active filter."""

    @pytest.fixture
    def products(self, make_product):
        return [make_product(f"Product {i:02d}") for i in range(1, 26)]

    def test_pagination_meta(self, db_session, products):
        page = ProductService(db_session).find_all(Pagination(page=1, limit=10))

        assert page["meta"] == {"total": 25, "page": 1, "last_page": 3}
        assert len(page["list"]) == 10

    def test_second_page_skips_first_rows(self, db_session, products):
        page = ProductService(db_session).find_all(Pagination(page=2, limit=10))

        assert [p.name for p in page["list"]] == [f"Product {i:02d}" for i in range(11, 21)]

    def test_last_page_is_partial(self, db_session, products):
        page = ProductService(db_session).find_all(Pagination(page=3, limit=10))
        assert len(page["list"]) == 5

    def test_empty_listing_has_zero_last_page(self, db_session):
        page = ProductService(db_session).find_all(Pagination())
        assert page == {"list": [], "meta": {"total": 0, "page": 1, "last_page": 0}}

    def test_inactive_and_deleted_are_excluded(self, db_session, make_product):
        make_product("Visible")
        make_product("Inactive", status=ProductStatus.INACTIVE)
        make_product("Sold out", status=ProductStatus.OUT_OF_STOCK)
        deleted = make_product("Deleted")
        service = ProductService(db_session)
        service.remove(deleted.id)

        page = service.find_all(Pagination())

        assert [p.name for p in page["list"]] == ["Visible"]
        assert page["meta"]["total"] == 1

    def test_chain_without_active_flag_lists_until_deleted(self, db_session):
        service = ChainService(db_session)
        kept = service.create({"name": "Bembos"})
        dropped = service.create({"name": "Astrid"})
        service.remove(dropped.id)

        page = service.find_all(Pagination())
        assert [c.id for c in page["list"]] == [kept.id]


class TestSearchByName:
    def test_case_insensitive_substring(self, db_session, make_product):
        make_product("Cheeseburger")
        make_product("Chicken BURGER")
        make_product("Salad")

        page = ProductService(db_session).search_by_name("burger", Pagination())

        assert sorted(p.name for p in page["list"]) == ["Cheeseburger", "Chicken BURGER"]
        assert page["meta"]["total"] == 2

    def test_search_excludes_soft_deleted(self, db_session, make_ingredient):
        service = IngredientService(db_session)
        tomato = make_ingredient("Tomato")
        make_ingredient("Cherry tomato")
        service.remove(tomato.id)

        page = service.search_by_name("tomato", Pagination())
        assert [i.name for i in page["list"]] == ["Cherry tomato"]

    def test_empty_name_matches_everything(self, db_session, make_tag):
        make_tag("vegan")
        make_tag("spicy")

        page = TagService(db_session).search_by_name("", Pagination())
        assert page["meta"]["total"] == 2

    @pytest.mark.parametrize("term,expected", [("%", ["100% beef"]), ("_", ["half_price"])])
    def test_wildcards_match_literally(self, db_session, make_tag, term, expected):
        make_tag("100% beef")
        make_tag("half_price")
        make_tag("spicy")

        page = TagService(db_session).search_by_name(term, Pagination())

        assert [t.name for t in page["list"]] == expected


class TestCreateAndUpdate:
    def test_create_product_publishes_event(self, db_session, events):
        service = ProductService(db_session, events=events)

        product = service.create({"name": "Lomo", "base_price": Decimal("32.90"), "created_by": "u1"})

        assert product.base_price == 32.9
        assert product.created_by == "u1"
        assert product.status == ProductStatus.ACTIVE
        events.publish.assert_called_once_with(CatalogEvents.PRODUCT_CREATED, product.id)

    def test_update_product_publishes_event(self, db_session, seed_product, events):
        service = ProductService(db_session, events=events)

        updated = service.update(seed_product.id, {"name": "Double Burger"}, updated_by="u2")

        assert updated.name == "Double Burger"
        assert updated.updated_by == "u2"
        events.publish.assert_called_once_with(CatalogEvents.PRODUCT_UPDATED, seed_product.id)

    def test_failed_update_publishes_nothing(self, db_session, events):
        with pytest.raises(NotFoundError):
            ProductService(db_session, events=events).update("missing", {"name": "x"})
        events.publish.assert_not_called()

    def test_duplicate_ingredient_name_conflicts(self, db_session, make_ingredient):
        make_ingredient("Salt")

        with pytest.raises(DuplicateEntityError) as exc_info:
            IngredientService(db_session).create({"name": "Salt", "unit": "g"})
        assert exc_info.value.status_code == 409

    def test_duplicate_sku_conflicts(self, db_session, seed_product):
        with pytest.raises(DuplicateEntityError):
            ProductService(db_session).create(
                {"name": "Other", "sku": seed_product.sku, "base_price": Decimal("1.00")}
            )

    def test_restaurant_requires_live_chain(self, db_session, seed_chain):
        service = RestaurantService(db_session)
        restaurant = service.create({"chain_id": seed_chain.id, "name": "Miraflores"})
        assert restaurant.chain_id == seed_chain.id

        ChainService(db_session).remove(seed_chain.id)
        with pytest.raises(ValidationError):
            service.create({"chain_id": seed_chain.id, "name": "San Isidro"})

    def test_question_update_checks_bounds(self, db_session):
        service = QuestionService(db_session)
        question = service.create(
            {"name": "How many?", "type": QuestionType.NUMBER, "min": 1, "max": 3}
        )

        with pytest.raises(ValidationError):
            service.update(question.id, {"min": 5})

        assert service.update(question.id, {"max": 5}).max == 5

    def test_null_for_required_column_is_rejected(self, db_session, seed_product, events):
        service = ProductService(db_session, events=events)

        with pytest.raises(ValidationError) as exc_info:
            service.update(seed_product.id, {"name": None})

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "name cannot be null"
        db_session.expire_all()
        assert service.find_one(seed_product.id).name == "Burger"
        events.publish.assert_not_called()

    def test_null_for_optional_column_is_applied(self, db_session, seed_product):
        service = ProductService(db_session)
        service.update(seed_product.id, {"description": "Juicy"})

        assert service.update(seed_product.id, {"description": None}).description is None


class TestValidateIds:
    def test_validate_products_collapses_duplicates(self, db_session, make_product):
        a = make_product("A")
        b = make_product("B")

        result = ProductService(db_session).validate_products([b.id, a.id, b.id])

        assert [p.id for p in result] == [b.id, a.id]

    def test_validate_products_lists_missing_ids(self, db_session, seed_product):
        with pytest.raises(MissingEntitiesError) as exc_info:
            ProductService(db_session).validate_products([seed_product.id, "x1", "x2"])

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Some products were not found: x1, x2"

    def test_validate_ingredients_rejects_inactive_with_404(self, db_session, make_ingredient):
        active = make_ingredient("Flour")
        inactive = make_ingredient("Lard", status=False)

        with pytest.raises(MissingEntitiesError) as exc_info:
            IngredientService(db_session).validate_ingredients([active.id, inactive.id])

        assert exc_info.value.status_code == 404
        assert exc_info.value.missing_ids == [inactive.id]

    def test_validate_tags_rejects_deleted(self, db_session, make_tag):
        tag = make_tag("gluten-free")
        service = TagService(db_session)
        service.remove(tag.id)

        with pytest.raises(MissingEntitiesError):
            service.validate_tags([tag.id])
