"""
Pydantic payload and reply schemas.

Payloads (<X>Create, <X>Update, ...) validate command data before it
reaches a service; outputs are built from ORM rows with from_attributes.
"""

from .common import AuditOutput, CommandInput, IdList, RemoveInput, SearchByNameInput
from .chain import (
    ChainCreate,
    ChainOutput,
    ChainUpdate,
    RestaurantCreate,
    RestaurantOutput,
    RestaurantUpdate,
)
from .translation import FindByEntityInput, TranslationCreate, TranslationOutput, TranslationUpdate
from .question import (
    FindByTypeInput,
    QuestionCreate,
    QuestionDetailOutput,
    QuestionLinkSummary,
    QuestionOutput,
    QuestionUpdate,
    QuestionWithTranslationsOutput,
)
from .product_resources import (
    FindByProductIdAndTypeInput,
    IsAvailableAtTimeInput,
    ProductImageBulk,
    ProductImageCreate,
    ProductImageOutput,
    ProductImageUpdate,
    ProductQuestionBulk,
    ProductQuestionCreate,
    ProductQuestionOutput,
    ProductQuestionUpdate,
    ProductRecipeBulk,
    ProductRecipeCreate,
    ProductRecipeOutput,
    ProductRecipeUpdate,
    ProductScheduleBulk,
    ProductScheduleCreate,
    ProductScheduleOutput,
    ProductScheduleUpdate,
    ProductSizeBulk,
    ProductSizeCreate,
    ProductSizeOutput,
    ProductSizeUpdate,
    ProductTagBulk,
    ProductTagCreate,
    ProductTagKey,
    ProductTagOutput,
    SetPrimaryImageInput,
    normalize_time_of_day,
)
from .catalog import (
    AnswerProductOutput,
    CategoryCreate,
    CategoryOutput,
    CategoryUpdate,
    ProductCreate,
    ProductDetailOutput,
    ProductOutput,
    ProductQuestionDetailOutput,
    ProductResourcesOutput,
    ProductSummary,
    ProductUpdate,
    QuestionNodeOutput,
    RecipeLineOutput,
    TagSummary,
)
from .ingredient import IngredientCreate, IngredientOutput, IngredientUpdate
from .tag import MostUsedInput, TagCreate, TagOutput, TagUpdate, TagUsageOutput, TagWithProductsOutput
