from pydantic import BaseModel


class ApiErrorResponse(BaseModel):
    success: bool = False
    code: str
    message: str
    details: dict | list | None = None
    trace_id: str | None = None


class ApiValidationErrorItem(BaseModel):
    field: str | None = None
    message: str
    type: str


class ApiValidationErrorDetails(BaseModel):
    errors: list[ApiValidationErrorItem]


class ApiValidationErrorResponse(ApiErrorResponse):
    details: ApiValidationErrorDetails | dict | None = None


COMMON_ERROR_RESPONSES = {
    401: {"model": ApiErrorResponse, "description": "Authentication failed"},
    403: {"model": ApiErrorResponse, "description": "Tenant, identity or permission rejected"},
    422: {"model": ApiValidationErrorResponse, "description": "Validation error"},
    429: {"model": ApiErrorResponse, "description": "Rate limit exceeded"},
}
