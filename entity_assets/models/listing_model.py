# entity_assets/models/listing_model.py
from typing import List, Optional

from pydantic import BaseModel, Field


class ListedImage(BaseModel):
    file: str = Field(..., description="Filename inside the entity folder")
    time: Optional[int] = Field(
        None, description="Modification time as a UNIX timestamp, None if missing"
    )


class ImageListing(BaseModel):
    """Main image and gallery of one entity."""

    path: str = Field(..., description="Relative entity folder ({type}/{shard})")
    main: ListedImage
    gallery: List[ListedImage] = Field(default_factory=list)


class ListedFile(BaseModel):
    file: str = Field(..., description="Filename inside the files folder")
    size: int = Field(default=0, ge=0, description="File size in bytes")


class FileListing(BaseModel):
    """Documents of one entity."""

    path: str = Field(..., description="Relative files folder ({type}/{shard}/files)")
    files: List[ListedFile] = Field(default_factory=list)
