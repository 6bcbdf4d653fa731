from src.shared.schemas.base import (
    ApiResponse,
    BaseSchema,
    ReadModel,
    SuccessResponse,
    ErrorResponse,
    ErrorDetail,
)

__all__ = [
    "ApiResponse",
    "BaseSchema",
    "ReadModel",
    "SuccessResponse",
    "ErrorResponse",
    "ErrorDetail",
]
