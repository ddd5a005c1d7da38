from contextlib import contextmanager
from typing import BinaryIO, Iterator, List, Optional, Sequence

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from ..core.errors import NotFoundError, RepositoryError, StorageWriteError, ValidationError
from ..core.logger import get_logger
from ..models.schemas import ItemOut, ItemUpdate, MessageResponse, SearchRequest
from ..models.sql_models import MAX_ITEM_ID
from ..services.inventory_service import PHOTO_MEDIA_TYPE, InventoryService, UploadedPhoto

logger = get_logger(__name__)
router = APIRouter(tags=["Inventory"])

_HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
_CHUNK_SIZE = 64 * 1024


# PUBLIC_INTERFACE
def get_inventory_service(request: Request) -> InventoryService:
    """FastAPI dependency returning the service owned by the running application."""
    return request.app.state.inventory_service


@contextmanager
def _service_errors() -> Iterator[None]:
    """Translate inventory errors into HTTP errors. Backend failures stay opaque to clients."""
    try:
        yield
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (StorageWriteError, RepositoryError) as exc:
        logger.error("Inventory backend failure", exc_info=exc)
        raise HTTPException(status_code=500, detail="Internal server error") from exc


def _parse_item_id(raw: str) -> int:
    """Path ids that are not integers in 1..MAX_ITEM_ID cannot name an item."""
    if not raw.isascii() or not raw.isdigit() or not 1 <= int(raw) <= MAX_ITEM_ID:
        raise HTTPException(status_code=404, detail="Item not found")
    return int(raw)


def _read_upload(photo: Optional[UploadFile]) -> Optional[UploadedPhoto]:
    # Browsers send an empty filename when the file input was left blank.
    if photo is None or not photo.filename:
        return None
    return UploadedPhoto(filename=photo.filename, content=photo.file.read())


def _iter_stream(stream: BinaryIO) -> Iterator[bytes]:
    with stream:
        while True:
            chunk = stream.read(_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk


def _method_not_allowed(path: str, allowed: Sequence[str]) -> None:
    """Answer every method not in `allowed` on `path` with 405 and an Allow header."""
    allow_header = ", ".join(allowed)

    def _reject() -> None:
        raise HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail="Method Not Allowed",
            headers={"Allow": allow_header},
        )

    router.add_api_route(
        path,
        _reject,
        methods=[m for m in _HTTP_METHODS if m not in allowed],
        include_in_schema=False,
    )


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=ItemOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new item",
    description="Adds a new item and stores its optional photo (multipart/form-data).",
    responses={400: {"description": "Validation error."}},
)
def register_item(
    name: Optional[str] = Form(default=None, description="Item name (required)."),
    description: Optional[str] = Form(default=None, description="Item description."),
    photo: Optional[UploadFile] = File(default=None, description="Item photo."),
    service: InventoryService = Depends(get_inventory_service),
) -> ItemOut:
    with _service_errors():
        return service.register(name=name, description=description, photo=_read_upload(photo))


# PUBLIC_INTERFACE
@router.get(
    "/inventory",
    response_model=List[ItemOut],
    summary="Get a list of all items",
)
def list_items(service: InventoryService = Depends(get_inventory_service)) -> List[ItemOut]:
    with _service_errors():
        return service.list_items()


# PUBLIC_INTERFACE
@router.get(
    "/inventory/{item_id}",
    response_model=ItemOut,
    summary="Get item by ID",
    responses={404: {"description": "No item with such ID."}},
)
def get_item(item_id: str, service: InventoryService = Depends(get_inventory_service)) -> ItemOut:
    with _service_errors():
        return service.get_item(_parse_item_id(item_id))


# PUBLIC_INTERFACE
@router.put(
    "/inventory/{item_id}",
    response_model=ItemOut,
    summary="Update item",
    description="Replaces name and/or description. Empty or omitted fields are left unchanged.",
    responses={404: {"description": "No item with such ID."}},
)
def update_item(
    item_id: str,
    payload: ItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
) -> ItemOut:
    with _service_errors():
        return service.update_fields(
            _parse_item_id(item_id),
            name=payload.name,
            description=payload.description,
        )


# PUBLIC_INTERFACE
@router.delete(
    "/inventory/{item_id}",
    response_model=MessageResponse,
    summary="Delete item",
    description="Deletes the item and its photo.",
    responses={404: {"description": "Item not found."}},
)
def delete_item(item_id: str, service: InventoryService = Depends(get_inventory_service)) -> MessageResponse:
    with _service_errors():
        removed = service.delete_item(_parse_item_id(item_id))
    return MessageResponse(message=f"Item {removed.id} deleted")


# PUBLIC_INTERFACE
@router.get(
    "/inventory/{item_id}/photo",
    response_class=StreamingResponse,
    summary="Get photo",
    responses={
        200: {"content": {PHOTO_MEDIA_TYPE: {}}, "description": "Photo bytes."},
        404: {"description": "Item or photo not found."},
    },
)
def get_photo(item_id: str, service: InventoryService = Depends(get_inventory_service)) -> StreamingResponse:
    with _service_errors():
        stream = service.get_photo(_parse_item_id(item_id))
    return StreamingResponse(_iter_stream(stream), media_type=PHOTO_MEDIA_TYPE)


# PUBLIC_INTERFACE
@router.put(
    "/inventory/{item_id}/photo",
    response_model=ItemOut,
    summary="Update photo",
    description="Replaces the item's photo; the previous photo file is deleted.",
    responses={
        400: {"description": "Photo file not sent."},
        404: {"description": "Item not found."},
    },
)
def replace_photo(
    item_id: str,
    photo: Optional[UploadFile] = File(default=None, description="New photo."),
    service: InventoryService = Depends(get_inventory_service),
) -> ItemOut:
    with _service_errors():
        return service.replace_photo(_parse_item_id(item_id), _read_upload(photo))


# PUBLIC_INTERFACE
@router.post(
    "/search",
    response_model=ItemOut,
    status_code=status.HTTP_201_CREATED,
    summary="Search by ID",
    description="Looks an item up by the numeric `id` sent as JSON or form data.",
    responses={
        400: {"description": "Invalid ID."},
        404: {"description": "Item not found."},
    },
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {"schema": SearchRequest.model_json_schema()},
                "application/x-www-form-urlencoded": {"schema": SearchRequest.model_json_schema()},
            }
        }
    },
)
async def search_item(request: Request, service: InventoryService = Depends(get_inventory_service)) -> ItemOut:
    content_type = request.headers.get("content-type", "")
    raw_id = None
    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            raw_id = body.get("id")
    elif content_type:
        form = await request.form()
        raw_id = form.get("id")
    with _service_errors():
        return await run_in_threadpool(service.search_by_id, raw_id)


_method_not_allowed("/register", ["POST"])
_method_not_allowed("/inventory", ["GET"])
_method_not_allowed("/inventory/{item_id}", ["GET", "PUT", "DELETE"])
_method_not_allowed("/inventory/{item_id}/photo", ["GET", "PUT"])
_method_not_allowed("/search", ["POST"])
