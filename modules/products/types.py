from enum import Enum


class ProductStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    ON_SALE = "on_sale"
    INACTIVE = "inactive"
