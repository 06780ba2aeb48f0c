# catgallery/schemas.py
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ----- Remote payload -----
class ImageDescriptor(BaseModel):
    id: str
    url: str
    width: int
    height: int


# ----- Cached item, as handed to the presentation layer -----
class CachedItem(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    remote_id: str
    image_url: str
    title: str
    description: str


# ----- UI state: exactly one of these is current -----
class LoadingState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loading"] = "loading"


class EmptyState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["empty"] = "empty"


class SuccessState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    images: List[CachedItem]


class ErrorState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["error"] = "error"
    message: str


UiState = Annotated[
    Union[LoadingState, EmptyState, SuccessState, ErrorState],
    Field(discriminator="status"),
]
