"""Pydantic schemas for image upload, delete and extraction requests/responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ImageUploadOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    uploaded: int = 1
    url: str
    stored_path: str = Field(alias="storedPath")


class DynamicUploadOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    uploaded: bool = True
    url: str


class Base64ImageIn(BaseModel):
    image: str
    folder: Optional[str] = None
    lang: Optional[str] = None
    slug: Optional[str] = None
    random: bool = False


class DeleteImageIn(BaseModel):
    path: Optional[str] = None
    record_kind: Optional[str] = None
    record_id: Optional[int] = None


class DeleteImageOut(BaseModel):
    deleted: bool = True


class ImageExtractIn(BaseModel):
    content: str = ""


class ImageExtractOut(BaseModel):
    images: List[str]
