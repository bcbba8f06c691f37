from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, status

from golink_app.dependencies import get_golink_service, verify_api_token
from golink_app.schemas.golink import GolinkCreate, GolinkResponse, GolinkUpdate, PaginatedGolinks
from golink_app.services.golink_service import GolinkService

router = APIRouter(prefix="/golinks", tags=["golinks"], dependencies=[Depends(verify_api_token)])


@router.post("", response_model=GolinkResponse, status_code=status.HTTP_201_CREATED)
async def create_golink(
    golink_data: GolinkCreate,
    golink_service: GolinkService = Depends(get_golink_service)
):
    """Register a new golink"""
    return await golink_service.create_golink(golink_data.short_link, golink_data.url)


def _parse_query_int(value: Optional[str]) -> Optional[int]:
    # Values that are not plain non-negative integers fall back to the defaults
    if value is None or not (value.isascii() and value.isdigit()):
        return None
    return int(value)


@router.get("", response_model=Union[PaginatedGolinks, List[GolinkResponse]])
async def list_golinks(
    page: Optional[str] = Query(None, description="1-based page number"),
    page_size: Optional[str] = Query(None, description="Items per page (1-100)"),
    golink_service: GolinkService = Depends(get_golink_service)
):
    """
    List golinks, newest first.

    Paginated as soon as page or page_size is present, even if its value
    does not parse (then page 1 and the default page size are used).
    """
    if page is None and page_size is None:
        return await golink_service.list_golinks()

    return await golink_service.list_golinks(
        page=_parse_query_int(page) or 1,
        page_size=_parse_query_int(page_size),
    )


@router.get("/{prefix}/{name}", response_model=GolinkResponse)
async def get_golink(
    prefix: str,
    name: str,
    golink_service: GolinkService = Depends(get_golink_service)
):
    """Get a single golink"""
    return await golink_service.get_golink(f"{prefix}/{name}")


@router.put("/{prefix}/{name}", response_model=GolinkResponse)
async def update_golink(
    prefix: str,
    name: str,
    golink_data: GolinkUpdate,
    golink_service: GolinkService = Depends(get_golink_service)
):
    """Change where a golink points"""
    return await golink_service.update_golink(f"{prefix}/{name}", golink_data.url)


@router.delete("/{prefix}/{name}")
async def delete_golink(
    prefix: str,
    name: str,
    golink_service: GolinkService = Depends(get_golink_service)
):
    """Delete a golink"""
    await golink_service.delete_golink(f"{prefix}/{name}")
    return {"message": "Golink deleted successfully"}
