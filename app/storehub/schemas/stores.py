from datetime import datetime

from pydantic import BaseModel, Field


class StoreCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class StoreItem(BaseModel):
    id: str
    tenant_id: str
    name: str
    created_at: datetime


class StoreResponse(BaseModel):
    success: bool = True
    store: StoreItem
    trace_id: str


class StoreListResponse(BaseModel):
    success: bool = True
    stores: list[StoreItem]
    total: int
    trace_id: str
