"""
Command handlers for catalog entities: chains, restaurants, categories,
products, ingredients, tags, questions and translations.

Handlers stay thin: validate the payload, call the service, return its result.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from catalog_service.schemas import (
    CategoryCreate,
    CategoryUpdate,
    ChainCreate,
    ChainUpdate,
    FindByEntityInput,
    FindByTypeInput,
    IngredientCreate,
    IngredientUpdate,
    MostUsedInput,
    ProductCreate,
    ProductUpdate,
    QuestionCreate,
    QuestionUpdate,
    RemoveInput,
    RestaurantCreate,
    RestaurantUpdate,
    SearchByNameInput,
    TagCreate,
    TagUpdate,
    TranslationCreate,
    TranslationUpdate,
)
from catalog_service.services.base_service import BaseCRUDService
from catalog_service.services.domain import (
    CategoryService,
    ChainService,
    IngredientService,
    ProductService,
    QuestionService,
    RestaurantService,
    TagService,
    TranslationService,
)
from shared.config.constants import (
    HEALTH_PING,
    CategoryCommands,
    ChainCommands,
    IngredientCommands,
    ProductCommands,
    QuestionCommands,
    RestaurantCommands,
    TagCommands,
    TranslationCommands,
)
from shared.config.settings import settings
from shared.utils.pagination import Pagination, PaginationInput
from .router import CommandContext, MessageRouter, parse, parse_id, parse_ids

catalog_router = MessageRouter()


def update_fields(dto: BaseModel) -> dict[str, Any]:
    """Fields the caller actually sent, minus the id and the actor."""
    return dto.model_dump(exclude_unset=True, exclude={"id", "updated_by"})


def parse_remove(data: Any) -> RemoveInput:
    if isinstance(data, str):
        data = {"id": data}
    return parse(RemoveInput, data)


def register_crud(
    commands: type,
    service_cls: type[BaseCRUDService],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
) -> None:
    """Register create, find-all, find-one, update and delete for an entity."""

    @catalog_router.register(commands.CREATE)
    def create(ctx: CommandContext, data: Any):
        dto = parse(create_schema, data)
        return service_cls(ctx.db, events=ctx.events).create(dto.model_dump())

    @catalog_router.register(commands.FIND_ALL)
    def find_all(ctx: CommandContext, data: Any):
        pagination = Pagination.from_input(parse(PaginationInput, data))
        return service_cls(ctx.db, events=ctx.events).find_all(pagination)

    @catalog_router.register(commands.FIND_ONE)
    def find_one(ctx: CommandContext, data: Any):
        return service_cls(ctx.db, events=ctx.events).find_one(parse_id(data))

    @catalog_router.register(commands.UPDATE)
    def update(ctx: CommandContext, data: Any):
        dto = parse(update_schema, data)
        return service_cls(ctx.db, events=ctx.events).update(
            dto.id, update_fields(dto), dto.updated_by
        )

    @catalog_router.register(commands.DELETE)
    def remove(ctx: CommandContext, data: Any):
        dto = parse_remove(data)
        return service_cls(ctx.db, events=ctx.events).remove(dto.id, dto.deleted_by)


def register_search(commands: type, service_cls: type[BaseCRUDService]) -> None:
    @catalog_router.register(commands.SEARCH_BY_NAME)
    def search_by_name(ctx: CommandContext, data: Any):
        dto = parse(SearchByNameInput, data)
        return service_cls(ctx.db, events=ctx.events).search_by_name(
            dto.name, Pagination.from_input(dto)
        )


register_crud(ChainCommands, ChainService, ChainCreate, ChainUpdate)
register_crud(RestaurantCommands, RestaurantService, RestaurantCreate, RestaurantUpdate)
register_crud(CategoryCommands, CategoryService, CategoryCreate, CategoryUpdate)
register_crud(ProductCommands, ProductService, ProductCreate, ProductUpdate)
register_crud(IngredientCommands, IngredientService, IngredientCreate, IngredientUpdate)
register_crud(TagCommands, TagService, TagCreate, TagUpdate)
register_crud(QuestionCommands, QuestionService, QuestionCreate, QuestionUpdate)

for _commands, _service in (
    (ProductCommands, ProductService),
    (IngredientCommands, IngredientService),
    (TagCommands, TagService),
    (QuestionCommands, QuestionService),
):
    register_search(_commands, _service)


# =============================================================================
# Entity-specific commands
# =============================================================================


@catalog_router.register(ProductCommands.VALIDATE)
def validate_products(ctx: CommandContext, data: Any):
    return ProductService(ctx.db, events=ctx.events).validate_products(parse_ids(data))


@catalog_router.register(IngredientCommands.VALIDATE)
def validate_ingredients(ctx: CommandContext, data: Any):
    return IngredientService(ctx.db).validate_ingredients(parse_ids(data))


@catalog_router.register(TagCommands.VALIDATE)
def validate_tags(ctx: CommandContext, data: Any):
    return TagService(ctx.db).validate_tags(parse_ids(data))


@catalog_router.register(TagCommands.FIND_BY_PRODUCT_ID)
def find_tags_by_product(ctx: CommandContext, data: Any):
    return TagService(ctx.db).find_by_product_id(parse_id(data, "product_id"))


@catalog_router.register(TagCommands.GET_MOST_USED)
def get_most_used_tags(ctx: CommandContext, data: Any):
    dto = parse(MostUsedInput, data)
    return TagService(ctx.db).get_most_used(dto.limit)


@catalog_router.register(QuestionCommands.VALIDATE)
def validate_questions(ctx: CommandContext, data: Any):
    return QuestionService(ctx.db).validate_questions(parse_ids(data))


@catalog_router.register(QuestionCommands.FIND_BY_TYPE)
def find_questions_by_type(ctx: CommandContext, data: Any):
    dto = parse(FindByTypeInput, data)
    return QuestionService(ctx.db).find_by_type(dto.type, Pagination.from_input(dto))


@catalog_router.register(QuestionCommands.FIND_BY_PRODUCT_ID)
def find_questions_by_product(ctx: CommandContext, data: Any):
    return QuestionService(ctx.db).find_by_product_id(parse_id(data, "product_id"))


# =============================================================================
# Translations
# =============================================================================


@catalog_router.register(TranslationCommands.CREATE)
def create_translation(ctx: CommandContext, data: Any):
    dto = parse(TranslationCreate, data)
    return TranslationService(ctx.db).create(dto.model_dump())


@catalog_router.register(TranslationCommands.FIND_ALL_BY_ENTITY)
def find_translations_by_entity(ctx: CommandContext, data: Any):
    dto = parse(FindByEntityInput, data)
    return TranslationService(ctx.db).find_all_by_entity(dto.entity_type, dto.entity_id)


@catalog_router.register(TranslationCommands.FIND_ONE)
def find_translation(ctx: CommandContext, data: Any):
    return TranslationService(ctx.db).find_one(parse_id(data))


@catalog_router.register(TranslationCommands.UPDATE)
def update_translation(ctx: CommandContext, data: Any):
    dto = parse(TranslationUpdate, data)
    return TranslationService(ctx.db).update(dto.id, update_fields(dto))


@catalog_router.register(TranslationCommands.DELETE)
def delete_translation(ctx: CommandContext, data: Any):
    return TranslationService(ctx.db).delete(parse_id(data))


@catalog_router.register(HEALTH_PING)
def ping(ctx: CommandContext, data: Any):
    return {"status": "ok", "service": settings.service_name}
