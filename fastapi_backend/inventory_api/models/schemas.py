"""
Pydantic schemas for the inventory service: the internal item record shared by
both repository backends, and the request/response payloads of the HTTP API.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Common/Utility Schemas
# ---------------------------------------------------------------------------

# PUBLIC_INTERFACE
class HealthResponse(BaseModel):
    """Basic health response schema."""
    status: str = Field(..., description="Health status message, e.g., 'ok'")


# PUBLIC_INTERFACE
class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str = Field(..., description="Human-readable confirmation.")


# ---------------------------------------------------------------------------
# Item Schemas
# ---------------------------------------------------------------------------

# PUBLIC_INTERFACE
class InventoryItem(BaseModel):
    """Item record as persisted by a repository.

    `photo_ref` is an opaque blob store reference and must never be sent to clients;
    use ItemOut for API responses.
    """
    id: int = Field(..., ge=1, description="Repository-assigned identifier.")
    name: str = Field(..., description="Item name.")
    description: str = Field(default="", description="Item description.")
    photo_ref: Optional[str] = Field(default=None, description="Blob store reference of the photo.")

    model_config = ConfigDict(from_attributes=True)


# PUBLIC_INTERFACE
class ItemOut(BaseModel):
    """Schema representing an item as returned from the API."""
    id: int = Field(..., description="Item identifier.")
    name: str = Field(..., description="Item name.")
    description: str = Field(default="", description="Item description.")
    photo_url: Optional[str] = Field(
        default=None,
        description="URL of the item's photo, or null when the item has no photo.",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Laptop",
                "description": "Dell",
                "photo_url": "/inventory/1/photo",
            }
        },
    )


# PUBLIC_INTERFACE
class ItemUpdate(BaseModel):
    """Partial update payload. Empty or omitted fields leave stored values unchanged."""
    name: Optional[str] = Field(default=None, description="New item name.")
    description: Optional[str] = Field(default=None, description="New item description.")

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"name": "Laptop", "description": "Dell XPS 13"}},
    )


# PUBLIC_INTERFACE
class SearchRequest(BaseModel):
    """Search-by-id payload. The id is validated by the service, not by the schema."""
    id: Optional[Union[int, float, str]] = Field(default=None, description="Numeric item id.")

    model_config = ConfigDict(extra="ignore", json_schema_extra={"example": {"id": 1}})
