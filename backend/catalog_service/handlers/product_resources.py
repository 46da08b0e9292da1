"""
Command handlers for product sub-resources.

Sizes, images, schedules, recipe lines and question links register the
same command family through register_product_resource(); tag links and the
resource-specific commands are registered by hand.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from catalog_service.schemas import (
    FindByProductIdAndTypeInput,
    IsAvailableAtTimeInput,
    ProductImageBulk,
    ProductImageCreate,
    ProductImageUpdate,
    ProductQuestionBulk,
    ProductQuestionCreate,
    ProductQuestionUpdate,
    ProductRecipeBulk,
    ProductRecipeCreate,
    ProductRecipeUpdate,
    ProductScheduleBulk,
    ProductScheduleCreate,
    ProductScheduleUpdate,
    ProductSizeBulk,
    ProductSizeCreate,
    ProductSizeUpdate,
    ProductTagBulk,
    ProductTagCreate,
    ProductTagKey,
    SetPrimaryImageInput,
)
from catalog_service.services.product_resources import (
    ProductImageService,
    ProductQuestionService,
    ProductRecipeService,
    ProductResourceService,
    ProductScheduleService,
    ProductSizeService,
    ProductTagService,
)
from shared.config.constants import (
    ProductImageCommands,
    ProductQuestionCommands,
    ProductRecipeCommands,
    ProductScheduleCommands,
    ProductSizeCommands,
    ProductTagCommands,
)
from .router import CommandContext, MessageRouter, parse, parse_id

product_resources_router = MessageRouter()


def _bulk_items(dto: BaseModel) -> list[dict[str, Any]]:
    return [item.model_dump() for item in dto.items]


def register_product_resource(
    commands: type,
    service_cls: type[ProductResourceService],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    bulk_schema: type[BaseModel],
) -> None:
    """Register the shared command family of a product sub-resource."""

    @product_resources_router.register(commands.CREATE)
    def create(ctx: CommandContext, data: Any):
        dto = parse(create_schema, data)
        return service_cls(ctx.db, events=ctx.events).create(dto.model_dump())

    @product_resources_router.register(commands.FIND_BY_PRODUCT_ID)
    def find_by_product_id(ctx: CommandContext, data: Any):
        return service_cls(ctx.db).find_by_product_id(parse_id(data, "product_id"))

    @product_resources_router.register(commands.FIND_ONE)
    def find_one(ctx: CommandContext, data: Any):
        return service_cls(ctx.db).find_one(parse_id(data))

    @product_resources_router.register(commands.UPDATE)
    def update(ctx: CommandContext, data: Any):
        dto = parse(update_schema, data)
        return service_cls(ctx.db).update(dto.id, dto.model_dump(exclude_unset=True, exclude={"id"}))

    @product_resources_router.register(commands.REMOVE)
    def remove(ctx: CommandContext, data: Any):
        return service_cls(ctx.db).remove(parse_id(data))

    @product_resources_router.register(commands.REMOVE_BY_PRODUCT_ID)
    def remove_by_product_id(ctx: CommandContext, data: Any):
        return service_cls(ctx.db).remove_by_product_id(parse_id(data, "product_id"))

    @product_resources_router.register(commands.BULK_CREATE)
    def bulk_create(ctx: CommandContext, data: Any):
        dto = parse(bulk_schema, data)
        return service_cls(ctx.db, events=ctx.events).bulk_create(dto.product_id, _bulk_items(dto))

    @product_resources_router.register(commands.REPLACE_BY_PRODUCT_ID)
    def replace_by_product_id(ctx: CommandContext, data: Any):
        dto = parse(bulk_schema, data)
        return service_cls(ctx.db, events=ctx.events).replace_by_product_id(
            dto.product_id, _bulk_items(dto)
        )


register_product_resource(
    ProductSizeCommands, ProductSizeService,
    ProductSizeCreate, ProductSizeUpdate, ProductSizeBulk,
)
register_product_resource(
    ProductImageCommands, ProductImageService,
    ProductImageCreate, ProductImageUpdate, ProductImageBulk,
)
register_product_resource(
    ProductScheduleCommands, ProductScheduleService,
    ProductScheduleCreate, ProductScheduleUpdate, ProductScheduleBulk,
)
register_product_resource(
    ProductRecipeCommands, ProductRecipeService,
    ProductRecipeCreate, ProductRecipeUpdate, ProductRecipeBulk,
)
register_product_resource(
    ProductQuestionCommands, ProductQuestionService,
    ProductQuestionCreate, ProductQuestionUpdate, ProductQuestionBulk,
)


@product_resources_router.register(ProductImageCommands.SET_PRIMARY)
def set_primary_image(ctx: CommandContext, data: Any):
    dto = parse(SetPrimaryImageInput, data)
    return ProductImageService(ctx.db).set_primary(dto.product_id, dto.image_id)


@product_resources_router.register(ProductScheduleCommands.IS_AVAILABLE_AT_TIME)
def is_available_at_time(ctx: CommandContext, data: Any):
    dto = parse(IsAvailableAtTimeInput, data)
    return ProductScheduleService(ctx.db).is_available_at_time(
        dto.product_id, dto.day_of_week, dto.time
    )


@product_resources_router.register(ProductQuestionCommands.FIND_BY_QUESTION_ID)
def find_links_by_question(ctx: CommandContext, data: Any):
    return ProductQuestionService(ctx.db).find_by_question_id(parse_id(data, "question_id"))


@product_resources_router.register(ProductQuestionCommands.FIND_BY_PRODUCT_ID_AND_TYPE)
def find_links_by_product_and_type(ctx: CommandContext, data: Any):
    dto = parse(FindByProductIdAndTypeInput, data)
    return ProductQuestionService(ctx.db).find_by_product_id_and_type(dto.product_id, dto.type)


# =============================================================================
# Tag links (keyed by product_id + tag_id, no update)
# =============================================================================


@product_resources_router.register(ProductTagCommands.CREATE)
def create_product_tag(ctx: CommandContext, data: Any):
    dto = parse(ProductTagCreate, data)
    return ProductTagService(ctx.db, events=ctx.events).create(dto.model_dump())


@product_resources_router.register(ProductTagCommands.FIND_BY_PRODUCT_ID)
def find_product_tags(ctx: CommandContext, data: Any):
    return ProductTagService(ctx.db).find_by_product_id(parse_id(data, "product_id"))


@product_resources_router.register(ProductTagCommands.FIND_ONE)
def find_product_tag(ctx: CommandContext, data: Any):
    dto = parse(ProductTagKey, data)
    return ProductTagService(ctx.db).find_one(dto.product_id, dto.tag_id)


@product_resources_router.register(ProductTagCommands.REMOVE)
def remove_product_tag(ctx: CommandContext, data: Any):
    dto = parse(ProductTagKey, data)
    return ProductTagService(ctx.db).remove(dto.product_id, dto.tag_id)


@product_resources_router.register(ProductTagCommands.REMOVE_BY_PRODUCT_ID)
def remove_product_tags(ctx: CommandContext, data: Any):
    return ProductTagService(ctx.db).remove_by_product_id(parse_id(data, "product_id"))


@product_resources_router.register(ProductTagCommands.BULK_CREATE)
def bulk_create_product_tags(ctx: CommandContext, data: Any):
    dto = parse(ProductTagBulk, data)
    items = [{"tag_id": tag_id} for tag_id in dto.tag_ids]
    return ProductTagService(ctx.db, events=ctx.events).bulk_create(dto.product_id, items)


@product_resources_router.register(ProductTagCommands.REPLACE_BY_PRODUCT_ID)
def replace_product_tags(ctx: CommandContext, data: Any):
    dto = parse(ProductTagBulk, data)
    items = [{"tag_id": tag_id} for tag_id in dto.tag_ids]
    return ProductTagService(ctx.db, events=ctx.events).replace_by_product_id(dto.product_id, items)


@product_resources_router.register(ProductTagCommands.FIND_BY_TAG_ID)
def find_products_by_tag(ctx: CommandContext, data: Any):
    return ProductTagService(ctx.db).find_by_tag_id(parse_id(data, "tag_id"))
