# catgallery/routers/images.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from pydantic import BaseModel
from typing import List

from catgallery.data_store import CatImageStore
from catgallery.schemas import CachedItem, UiState
from catgallery.viewmodel import CatImageViewModel

router = APIRouter(prefix="/gallery", tags=["gallery"])

# how close to the end of the cache a grid window must reach before the next
# page is requested
PREFETCH_THRESHOLD = 10


class CommandAccepted(BaseModel):
    accepted: bool


def get_viewmodel(request: Request) -> CatImageViewModel:
    return request.app.state.viewmodel


def get_store(request: Request) -> CatImageStore:
    return request.app.state.store


@router.get("/state", response_model=UiState)
async def current_state(vm: CatImageViewModel = Depends(get_viewmodel)):
    return vm.state


@router.get("/images", response_model=List[CachedItem])
async def list_images(
    response: Response,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    prefetch: bool = Query(True),
    store: CatImageStore = Depends(get_store),
    vm: CatImageViewModel = Depends(get_viewmodel),
):
    total = store.count()
    items = store.list_all()[offset: offset + limit]

    # infinite scroll: the window reached the tail of what is cached
    last_visible = min(offset + limit, total) - 1
    if prefetch and last_visible >= total - PREFETCH_THRESHOLD:
        vm.load_more_images()

    # headers: total + RFC5988 pagination links
    response.headers["X-Total-Count"] = str(total)

    def build_link(off, lim):
        return f'</v1/gallery/images?limit={lim}&offset={off}>'

    links = []
    links.append(build_link(offset, limit) + '; rel="self"')
    if offset + limit < total:
        links.append(build_link(offset + limit, limit) + '; rel="next"')
    if offset > 0:
        prev_off = max(0, offset - limit)
        links.append(build_link(prev_off, limit) + '; rel="prev"')
    if total > 0:
        last_page_off = ((total - 1) // limit) * limit
        links.append(build_link(last_page_off, limit) + '; rel="last"')

    response.headers["Link"] = ", ".join(links)
    return items


@router.get("/images/{remote_id}", response_model=CachedItem)
def get_image(remote_id: str, store: CatImageStore = Depends(get_store)):
    item = store.get(remote_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Not Found")
    return item


@router.post("/refresh", response_model=CommandAccepted, status_code=status.HTTP_202_ACCEPTED)
async def refresh(vm: CatImageViewModel = Depends(get_viewmodel)):
    vm.refresh_images()
    return CommandAccepted(accepted=True)


@router.post("/load-more", response_model=CommandAccepted, status_code=status.HTTP_202_ACCEPTED)
async def load_more(vm: CatImageViewModel = Depends(get_viewmodel)):
    task = vm.load_more_images()
    return CommandAccepted(accepted=task is not None)
