"""Attachment upload types and the byte input contract."""

from enum import Enum
from typing import BinaryIO


class AttachmentType(Enum):
    """File types accepted by add_attachment.

    Each member carries the file extension and content type sent in the
    multipart upload.
    """

    PNG = ("png", "image/png")
    JPEG = ("jpg", "image/jpeg")
    PDF = ("pdf", "application/pdf")

    @property
    def extension(self) -> str:
        return self.value[0]

    @property
    def content_type(self) -> str:
        return self.value[1]

    @classmethod
    def from_file_name(cls, file_name: str) -> "AttachmentType":
        """Guess the attachment type from a file name.

        Raises:
            ValueError: If the extension is not png, jpg/jpeg or pdf
        """
        extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
        if extension == "jpeg":
            extension = "jpg"
        for attachment_type in cls:
            if attachment_type.extension == extension:
                return attachment_type
        raise ValueError(f"Unsupported attachment file type: '{file_name}'")


READ_CHUNK_SIZE = 1024


def read_byte_input(byte_input: BinaryIO, chunk_size: int = READ_CHUNK_SIZE) -> bytes:
    """Read a binary input to exhaustion.

    The input is not closed: the caller opened it and owns its lifecycle.

    Args:
        byte_input: Any object with a read(size) method returning bytes
        chunk_size: Number of bytes requested per read

    Returns:
        Everything that was read
    """
    chunks = []
    while True:
        chunk = byte_input.read(chunk_size)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)
