# entity_assets/models/upload_model.py
"""
Upload descriptor consumed by the ingestors.

Transport-neutral: web handlers, CLIs and jobs all build an UploadedAsset;
FastAPI handlers can use UploadedAsset.from_upload_file().
"""

import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from fastapi import UploadFile

from ..enums import UploadStatus


@dataclass
class UploadedAsset:
    """
    One uploaded file as seen by the transport layer.

    Exactly one of ``path`` (temp file on disk) or ``stream`` (readable
    binary handle) carries the payload.
    """

    status: UploadStatus
    size: Optional[int]
    media_type: Optional[str]
    client_filename: Optional[str] = None
    stream: Optional[BinaryIO] = None
    path: Optional[str] = None

    @property
    def is_empty_selection(self) -> bool:
        """True when the client submitted the field without choosing a file"""
        return self.status == UploadStatus.NO_FILE

    @property
    def source(self) -> Union[str, BinaryIO, None]:
        """Payload handle suitable for the image decoder"""
        return self.path if self.path is not None else self.stream

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        """
        Yield a binary handle positioned at the start of the payload.

        Handles opened from ``path`` are closed on exit; a caller-owned
        ``stream`` is left open.
        """
        if self.path is not None:
            with open(self.path, "rb") as handle:
                yield handle
            return

        if self.stream is None:
            raise FileNotFoundError("Upload carries neither a path nor a stream")

        if self.stream.seekable():
            self.stream.seek(0)
        yield self.stream

    @classmethod
    def no_file(cls) -> "UploadedAsset":
        """The "empty selection" sentinel"""
        return cls(status=UploadStatus.NO_FILE, size=0, media_type=None)

    @classmethod
    def from_path(
        cls,
        path: Union[str, Path],
        media_type: Optional[str],
        client_filename: Optional[str] = None,
        status: UploadStatus = UploadStatus.OK,
    ) -> "UploadedAsset":
        """Describe a file already written to disk (e.g. a spooled temp upload)"""
        path_obj = Path(path)
        size = path_obj.stat().st_size if path_obj.is_file() else 0
        return cls(
            status=status,
            size=size,
            media_type=media_type,
            client_filename=client_filename or path_obj.name,
            path=str(path_obj),
        )

    @classmethod
    def from_upload_file(cls, upload: UploadFile) -> "UploadedAsset":
        """
        Adapt a FastAPI/Starlette UploadFile.

        A part without a filename is how browsers submit an empty file input.
        """
        if not upload.filename:
            return cls.no_file()

        size = upload.size
        if size is None:
            upload.file.seek(0, os.SEEK_END)
            size = upload.file.tell()
            upload.file.seek(0)

        return cls(
            status=UploadStatus.OK,
            size=size,
            media_type=upload.content_type,
            client_filename=upload.filename,
            stream=upload.file,
        )
