from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime


class GolinkCreate(BaseModel):
    short_link: str = Field(..., description="Alias to register, e.g. go/docs")
    url: str = Field(..., description="Destination URL")


class GolinkUpdate(BaseModel):
    """Only the destination can change; any other field in the body is ignored"""
    url: str = Field(..., description="New destination URL")


class GolinkResponse(BaseModel):
    id: str
    short_link: str
    url: str
    created_at: datetime

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)


class PaginationInfo(BaseModel):
    page: int
    page_size: int
    total_items: int
    total_pages: int


class PaginatedGolinks(BaseModel):
    data: List[GolinkResponse]
    pagination: PaginationInfo

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)
