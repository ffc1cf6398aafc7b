"""
Pydantic schema definitions for the menu catalogue.

The ``Listing`` model is both the wire format returned by the API and
the record written to the snapshot file, so the two can never drift
apart. Field names follow the JSON the front-end already consumes,
which is why the creation timestamp travels as ``createdAt``.
``CreateListingRequest`` is deliberately permissive: every field is
optional so that missing values reach the store's own validation and
are reported as a 400 rather than a framework-level 422.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Listing(BaseModel):
    """A single menu entry.

    ``id`` is derived from the creation time in milliseconds and is
    unique across every category. ``image`` is either a URL served by
    this backend under ``/uploads``, an external URL, or ``None``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: str
    price: float = Field(ge=0)
    category: str
    image: Optional[str] = None
    created_at: str = Field(alias="createdAt")


class CreateListingRequest(BaseModel):
    """Body of ``POST /api/menu``. Price may arrive as text (``"12.50"``)."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[float, str]] = None
    category: Optional[str] = None
    image: Optional[str] = None


class DeleteListingResponse(BaseModel):
    message: str
    item: Listing


# Category key -> listings in insertion order.
Catalog = Dict[str, List[Listing]]
