"""
Upload Data Models

The file reference chosen through the picker.
"""

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from broker.models import UploadRequest
from upload.constants import ACCEPTED_MIME_PREFIX, DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class SelectedFile:
    """
    A local file picked for upload.

    Attributes:
        path: Absolute path on disk
        name: File name sent as the video title and tus "filename" metadata
        size: Size in bytes
        mime_type: Guessed MIME type, sent as tus "filetype" metadata
    """

    path: Path
    name: str
    size: int
    mime_type: str

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SelectedFile":
        """
        Build from a filesystem path.

        Raises:
            OSError: File missing or unreadable
        """
        file_path = Path(path).expanduser().resolve()
        size = file_path.stat().st_size
        mime_type, _ = mimetypes.guess_type(file_path.name)

        return cls(
            path=file_path,
            name=file_path.name,
            size=size,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
        )

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith(ACCEPTED_MIME_PREFIX)

    @property
    def size_mb(self) -> float:
        return self.size / (1024 * 1024)

    def to_upload_request(self) -> UploadRequest:
        return UploadRequest(
            file_name=self.name,
            file_size=self.size,
            file_type=self.mime_type,
        )
