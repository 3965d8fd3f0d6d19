"""
Form submission models shared by the encoder, the gateway and the views
"""

from dataclasses import dataclass, field
from typing import Any, List, Tuple

@dataclass
class UploadedFile:
    """A newly chosen file waiting to be sent with a submission"""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

@dataclass
class FormSubmission:
    """
    Ordered multipart payload.

    Text entries may repeat a key (multiselect / multirelation); file parts
    are only present when a new upload was chosen.
    """
    fields: List[Tuple[str, str]] = field(default_factory=list)
    files: List[Tuple[str, UploadedFile]] = field(default_factory=list)

    def append(self, key: str, value: str) -> None:
        self.fields.append((key, value))

    def attach(self, key: str, upload: UploadedFile) -> None:
        self.files.append((key, upload))

    def get_all(self, key: str) -> List[str]:
        return [value for name, value in self.fields if name == key]

    def keys(self) -> List[str]:
        seen: List[str] = []
        for name, _ in self.fields + [(name, None) for name, _ in self.files]:
            if name not in seen:
                seen.append(name)
        return seen

    def has_file(self, key: str) -> bool:
        return any(name == key for name, _ in self.files)

    def to_multipart(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        """Render as an httpx ``files=`` list so text entries go out as form-data parts"""
        parts: List[Tuple[str, Tuple[Any, ...]]] = [
            (name, (None, value)) for name, value in self.fields
        ]
        for name, upload in self.files:
            parts.append((name, (upload.filename, upload.content, upload.content_type)))
        return parts
