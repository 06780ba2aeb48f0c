# catgallery/routers/thumbnails.py
import hashlib
import os
from io import BytesIO

import httpx
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import FileResponse
from PIL import Image, ImageOps, UnidentifiedImageError

from catgallery.logging import get_logger
from catgallery.schemas import CachedItem

router = APIRouter(prefix="/gallery/images", tags=["renders"])

logger = get_logger(__name__)


def _cached_item_or_404(request: Request, remote_id: str) -> CachedItem:
    item = request.app.state.store.get(remote_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Not Found")
    return item


async def _fetch_image(client: httpx.AsyncClient, url: str) -> Image.Image:
    try:
        r = await client.get(url)
    except httpx.HTTPError as e:
        raise HTTPException(502, f"Image host network error: {e}")
    if r.status_code != 200:
        raise HTTPException(502, f"Image host HTTP {r.status_code}")

    # simple content-type sanity check
    ctype = r.headers.get("content-type", "")
    if "image" not in ctype:
        raise HTTPException(502, f"Image host returned non-image ({ctype})")

    try:
        im = Image.open(BytesIO(r.content))
        im.load()
    except (UnidentifiedImageError, OSError):
        raise HTTPException(502, "Image host returned an unreadable image")
    return im.convert("RGB")


async def _render(request: Request, remote_id: str, name: str, transform) -> FileResponse:
    item = _cached_item_or_404(request, remote_id)

    renders_dir = request.app.state.settings.renders_dir
    os.makedirs(renders_dir, exist_ok=True)
    key = hashlib.sha1(remote_id.encode("utf-8")).hexdigest()
    path = os.path.join(renders_dir, f"{key}_{name}.png")
    if os.path.exists(path):
        logger.debug("render_cache_hit", remote_id=remote_id, render=name)
        return FileResponse(path, media_type="image/png")

    logger.debug("render_cache_miss", remote_id=remote_id, render=name)
    im = await _fetch_image(request.app.state.http, item.image_url)
    out = transform(im)
    out.save(path, format="PNG")
    return FileResponse(path, media_type="image/png")


@router.get("/{remote_id}/thumbnail")
async def thumbnail(
    request: Request,
    remote_id: str,
    w: int = Query(256, ge=16, le=1024),
    h: int = Query(256, ge=16, le=1024),
):
    """Grid cell render: scaled and center-cropped to exactly w x h."""
    return await _render(
        request, remote_id, f"crop_{w}x{h}",
        lambda im: ImageOps.fit(im, (w, h)),
    )


@router.get("/{remote_id}/full")
async def full(
    request: Request,
    remote_id: str,
    max_side: int = Query(1024, ge=64, le=4096),
):
    """Detail view render: the whole image, scaled down to fit a max_side square."""
    def fit_inside(im: Image.Image) -> Image.Image:
        out = im.copy()
        out.thumbnail((max_side, max_side))
        return out

    return await _render(request, remote_id, f"inside_{max_side}", fit_inside)
