"""
Centralized constants for the catalog service.
Avoids magic strings for command patterns, events and enum values.

Usage:
    from shared.config.constants import ProductCommands, ProductStatus

    @catalog_router.register(ProductCommands.CREATE)
    def create_product(ctx, data): ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# Domain Enums
# =============================================================================


class ProductStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    OUT_OF_STOCK = "OUT_OF_STOCK"


class QuestionType(str, Enum):
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"


class ItemType(str, Enum):
    """Role of a question-product link: the product asks, or the product answers."""

    QUESTION = "QUESTION"
    ANSWER = "ANSWER"


class Currency(str, Enum):
    PEN = "PEN"
    USD = "USD"
    EUR = "EUR"
    BRL = "BRL"
    COP = "COP"
    CLP = "CLP"
    MXN = "MXN"
    ARS = "ARS"


class LanguageCode(str, Enum):
    ES = "es"
    EN = "en"
    PT = "pt"
    FR = "fr"
    DE = "de"


# Columns a translation can be attached through
TRANSLATION_OWNER_FIELDS: Final[tuple[str, ...]] = ("category_id", "product_id", "question_id")


# =============================================================================
# Limits
# =============================================================================


class Limits:
    """Validation limits shared by payload schemas."""

    MAX_PAGE_SIZE: Final[int] = 100
    DEFAULT_PAGE_SIZE: Final[int] = 10
    MAX_NAME_LENGTH: Final[int] = 255
    MAX_SIZE_NAME_LENGTH: Final[int] = 50
    MAX_INGREDIENT_NAME_LENGTH: Final[int] = 100
    MAX_UNIT_LENGTH: Final[int] = 20
    MAX_SKU_LENGTH: Final[int] = 64
    MAX_URL_LENGTH: Final[int] = 2048
    MAX_BULK_ITEMS: Final[int] = 200
    DEFAULT_MOST_USED_TAGS: Final[int] = 10


# HH:MM, 24h clock
TIME_OF_DAY_PATTERN: Final[str] = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


# =============================================================================
# Command Patterns
# =============================================================================


class ChainCommands:
    CREATE: Final[str] = "chain.create"
    FIND_ALL: Final[str] = "chain.find-all"
    FIND_ONE: Final[str] = "chain.find-one"
    UPDATE: Final[str] = "chain.update"
    DELETE: Final[str] = "chain.delete"


class RestaurantCommands:
    CREATE: Final[str] = "restaurant.create"
    FIND_ALL: Final[str] = "restaurant.find-all"
    FIND_ONE: Final[str] = "restaurant.find-one"
    UPDATE: Final[str] = "restaurant.update"
    DELETE: Final[str] = "restaurant.delete"


class CategoryCommands:
    CREATE: Final[str] = "category.create"
    FIND_ALL: Final[str] = "category.find-all"
    FIND_ONE: Final[str] = "category.find-one"
    UPDATE: Final[str] = "category.update"
    DELETE: Final[str] = "category.delete"


class ProductCommands:
    CREATE: Final[str] = "product.create"
    FIND_ALL: Final[str] = "product.find-all"
    FIND_ONE: Final[str] = "product.find-one"
    UPDATE: Final[str] = "product.update"
    DELETE: Final[str] = "product.delete"
    VALIDATE: Final[str] = "product.validate"
    SEARCH_BY_NAME: Final[str] = "product.search-by-name"


class IngredientCommands:
    CREATE: Final[str] = "ingredient.create"
    FIND_ALL: Final[str] = "ingredient.find-all"
    FIND_ONE: Final[str] = "ingredient.find-one"
    UPDATE: Final[str] = "ingredient.update"
    DELETE: Final[str] = "ingredient.delete"
    VALIDATE: Final[str] = "ingredient.validate"
    SEARCH_BY_NAME: Final[str] = "ingredient.search-by-name"


class TagCommands:
    CREATE: Final[str] = "tag.create"
    FIND_ALL: Final[str] = "tag.find-all"
    FIND_ONE: Final[str] = "tag.find-one"
    UPDATE: Final[str] = "tag.update"
    DELETE: Final[str] = "tag.delete"
    VALIDATE: Final[str] = "tag.validate"
    SEARCH_BY_NAME: Final[str] = "tag.search-by-name"
    FIND_BY_PRODUCT_ID: Final[str] = "tag.find-by-product-id"
    GET_MOST_USED: Final[str] = "tag.get-most-used"


class QuestionCommands:
    CREATE: Final[str] = "question.create"
    FIND_ALL: Final[str] = "question.find-all"
    FIND_ONE: Final[str] = "question.find-one"
    UPDATE: Final[str] = "question.update"
    DELETE: Final[str] = "question.delete"
    VALIDATE: Final[str] = "question.validate"
    SEARCH_BY_NAME: Final[str] = "question.search-by-name"
    FIND_BY_TYPE: Final[str] = "question.find-by-type"
    FIND_BY_PRODUCT_ID: Final[str] = "question.find-by-product-id"


class TranslationCommands:
    CREATE: Final[str] = "translation.create"
    FIND_ALL_BY_ENTITY: Final[str] = "translation.find-all-by-entity"
    FIND_ONE: Final[str] = "translation.find-one"
    UPDATE: Final[str] = "translation.update"
    DELETE: Final[str] = "translation.delete"


class ProductSizeCommands:
    CREATE: Final[str] = "product-size.create"
    FIND_BY_PRODUCT_ID: Final[str] = "product-size.find-by-product-id"
    FIND_ONE: Final[str] = "product-size.find-one"
    UPDATE: Final[str] = "product-size.update"
    REMOVE: Final[str] = "product-size.remove"
    REMOVE_BY_PRODUCT_ID: Final[str] = "product-size.remove-by-product-id"
    BULK_CREATE: Final[str] = "product-size.bulk-create"
    REPLACE_BY_PRODUCT_ID: Final[str] = "product-size.replace-by-product-id"


class ProductImageCommands:
    CREATE: Final[str] = "product-image.create"
    FIND_BY_PRODUCT_ID: Final[str] = "product-image.find-by-product-id"
    FIND_ONE: Final[str] = "product-image.find-one"
    UPDATE: Final[str] = "product-image.update"
    REMOVE: Final[str] = "product-image.remove"
    REMOVE_BY_PRODUCT_ID: Final[str] = "product-image.remove-by-product-id"
    BULK_CREATE: Final[str] = "product-image.bulk-create"
    REPLACE_BY_PRODUCT_ID: Final[str] = "product-image.replace-by-product-id"
    SET_PRIMARY: Final[str] = "product-image.set-primary"


class ProductScheduleCommands:
    CREATE: Final[str] = "product-schedule.create"
    FIND_BY_PRODUCT_ID: Final[str] = "product-schedule.find-by-product-id"
    FIND_ONE: Final[str] = "product-schedule.find-one"
    UPDATE: Final[str] = "product-schedule.update"
    REMOVE: Final[str] = "product-schedule.remove"
    REMOVE_BY_PRODUCT_ID: Final[str] = "product-schedule.remove-by-product-id"
    BULK_CREATE: Final[str] = "product-schedule.bulk-create"
    REPLACE_BY_PRODUCT_ID: Final[str] = "product-schedule.replace-by-product-id"
    IS_AVAILABLE_AT_TIME: Final[str] = "product-schedule.is-available-at-time"


class ProductRecipeCommands:
    CREATE: Final[str] = "product-recipe.create"
    FIND_BY_PRODUCT_ID: Final[str] = "product-recipe.find-by-product-id"
    FIND_ONE: Final[str] = "product-recipe.find-one"
    UPDATE: Final[str] = "product-recipe.update"
    REMOVE: Final[str] = "product-recipe.remove"
    REMOVE_BY_PRODUCT_ID: Final[str] = "product-recipe.remove-by-product-id"
    BULK_CREATE: Final[str] = "product-recipe.bulk-create"
    REPLACE_BY_PRODUCT_ID: Final[str] = "product-recipe.replace-by-product-id"


class ProductTagCommands:
    CREATE: Final[str] = "product-tag.create"
    FIND_BY_PRODUCT_ID: Final[str] = "product-tag.find-by-product-id"
    FIND_ONE: Final[str] = "product-tag.find-one"
    REMOVE: Final[str] = "product-tag.remove"
    REMOVE_BY_PRODUCT_ID: Final[str] = "product-tag.remove-by-product-id"
    BULK_CREATE: Final[str] = "product-tag.bulk-create"
    REPLACE_BY_PRODUCT_ID: Final[str] = "product-tag.replace-by-product-id"
    FIND_BY_TAG_ID: Final[str] = "product-tag.find-by-tag-id"


class ProductQuestionCommands:
    CREATE: Final[str] = "product-question.create"
    FIND_BY_PRODUCT_ID: Final[str] = "product-question.find-by-product-id"
    FIND_ONE: Final[str] = "product-question.find-one"
    UPDATE: Final[str] = "product-question.update"
    REMOVE: Final[str] = "product-question.remove"
    REMOVE_BY_PRODUCT_ID: Final[str] = "product-question.remove-by-product-id"
    BULK_CREATE: Final[str] = "product-question.bulk-create"
    REPLACE_BY_PRODUCT_ID: Final[str] = "product-question.replace-by-product-id"
    FIND_BY_QUESTION_ID: Final[str] = "product-question.find-by-question-id"
    FIND_BY_PRODUCT_ID_AND_TYPE: Final[str] = "product-question.find-by-product-id-and-type"


HEALTH_PING: Final[str] = "catalog.ping"


# =============================================================================
# Events
# =============================================================================


class CatalogEvents:
    """Events published on Redis pub/sub, one channel per event name."""

    PRODUCT_CREATED: Final[str] = "product.created"
    PRODUCT_UPDATED: Final[str] = "product.updated"
    PRODUCT_SIZE_CREATED: Final[str] = "product.size.created"
    PRODUCT_RECIPE_CREATED: Final[str] = "product.recipe.created"
    PRODUCT_TAG_CREATED: Final[str] = "product.tag.created"

    ALL: Final[frozenset[str]] = frozenset({
        PRODUCT_CREATED,
        PRODUCT_UPDATED,
        PRODUCT_SIZE_CREATED,
        PRODUCT_RECIPE_CREATED,
        PRODUCT_TAG_CREATED,
    })
