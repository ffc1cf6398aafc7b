"""
Route definitions for the menu catalogue.

Endpoints under /api/menu:
- GET    /api/menu       : the full catalogue, keyed by category
- POST   /api/menu       : create a listing (201)
- DELETE /api/menu/{id}  : delete a listing and the image it owns

Handlers are ``async`` on purpose even though they never await: they
run one at a time on the event loop, so a read-modify-write of the
catalogue cannot interleave with another request.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from ..errors import CatalogError
from .schemas import Catalog, CreateListingRequest, DeleteListingResponse, Listing
from .store import CatalogStore


router = APIRouter(prefix="/api/menu", tags=["menu"])


def get_catalog(request: Request) -> CatalogStore:
    return request.app.state.catalog


@router.get("", response_model=Catalog)
async def list_menu(catalog: CatalogStore = Depends(get_catalog)) -> Catalog:
    return catalog.get_all()


@router.post("", response_model=Listing, status_code=201)
async def create_menu_item(
    req: Optional[CreateListingRequest] = None,
    catalog: CatalogStore = Depends(get_catalog),
) -> Listing:
    req = req or CreateListingRequest()
    try:
        return catalog.insert(
            name=req.name,
            description=req.description,
            price=req.price,
            category=req.category,
            image=req.image,
        )
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{item_id}", response_model=DeleteListingResponse)
async def delete_menu_item(
    item_id: int,
    catalog: CatalogStore = Depends(get_catalog),
) -> DeleteListingResponse:
    try:
        item = catalog.delete(item_id)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return DeleteListingResponse(message="Menu item deleted successfully", item=item)
