# app/uploads.py
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from .config import Settings
from .errors import CatalogError, PersistenceError
from .models import MessageResponse, UploadResponse
from .storage import AssetManager


router = APIRouter(prefix="/api/upload", tags=["uploads"])


def get_assets(request: Request) -> AssetManager:
    return request.app.state.assets


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def public_base_url(request: Request, settings: Settings) -> str:
    """Base URL clients should use to reach ``/uploads``.

    In production the configured ``BACKEND_URL`` wins, otherwise the
    request's own host is assumed to sit behind TLS.
    """
    host = request.headers.get("host") or request.url.netloc
    if settings.is_production:
        return settings.backend_url.rstrip("/") or f"https://{host}"
    return f"{request.url.scheme}://{host}"


@router.post("", response_model=UploadResponse)
async def upload_image(
    request: Request,
    image: Optional[UploadFile] = File(None),
    assets: AssetManager = Depends(get_assets),
    settings: Settings = Depends(get_settings),
) -> UploadResponse:
    if image is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        # Multipart parsing already knows the size; refuse before buffering.
        assets.check_upload(image.filename or "", image.content_type, image.size)
        content = await image.read(assets.max_bytes + 1)
        stored = assets.store(
            content,
            original_filename=image.filename or "",
            mime_type=image.content_type,
            size_bytes=len(content),
            base_url=public_base_url(request, settings),
        )
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to upload image")
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return UploadResponse(image_url=stored.url)


@router.delete("/{filename}", response_model=MessageResponse)
async def delete_image(
    filename: str,
    assets: AssetManager = Depends(get_assets),
) -> MessageResponse:
    try:
        assets.remove(filename)
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to delete image")
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message="Image deleted successfully")
