"""Tagged response models for the Dropbox API."""

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """A file in a folder listing."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tag: Literal["file"] = Field(alias=".tag")
    name: str
    path_lower: str
    path_display: str | None = None
    size: int = Field(ge=0)
    server_modified: datetime


class FolderEntry(BaseModel):
    """A subfolder in a folder listing."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tag: Literal["folder"] = Field(alias=".tag")
    name: str
    path_lower: str
    path_display: str | None = None


Entry = Annotated[Union[FileEntry, FolderEntry], Field(discriminator="tag")]


class ListFolderResult(BaseModel):
    """One page of a folder listing."""

    entries: list[Entry] = Field(default_factory=list)
    cursor: str | None = None
    has_more: bool = False


# Outcomes of a create-shared-link call


@dataclass(frozen=True)
class Created:
    """A new link was created."""

    url: str


@dataclass(frozen=True)
class AlreadyExists:
    """The file already has a shared link."""

    summary: str


@dataclass(frozen=True)
class OtherError:
    """Creation failed for any other reason."""

    summary: str
    status_code: int | None = None
    description: str = ""


CreateLinkResult = Union[Created, AlreadyExists, OtherError]
