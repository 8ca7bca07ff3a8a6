"""
Responsibility: build the status-line, headers and body bytes for the outcome of one exchange.

Error outcomes are a bare status line. Only Ok carries headers and a body.
"""

from dataclasses import dataclass
from typing import ClassVar, Dict

from fileserver.config import HTTP_VERSION, SERVER_NAME, SERVER_VERSION
from fileserver.resolver import ContentType, Found, Missing, ResolvedResource, Unreadable

LINE_END = "\r\n"

@dataclass(frozen=True)
class HttpResponse:
    """
    Holds the fields common to every outcome
    """
    status_code: ClassVar[int]
    status_message: ClassVar[str]

    @property
    def status_line(self) -> str:
        return f"{HTTP_VERSION} {self.status_code} {self.status_message}"

    def serialize(self) -> bytes:
        return f"{self.status_line}{LINE_END}".encode("ascii")

@dataclass(frozen=True)
class BadRequest(HttpResponse):
    status_code: ClassVar[int] = 400
    status_message: ClassVar[str] = "Bad Request"

@dataclass(frozen=True)
class Forbidden(HttpResponse):
    status_code: ClassVar[int] = 403
    status_message: ClassVar[str] = "Forbidden"

@dataclass(frozen=True)
class NotFound(HttpResponse):
    status_code: ClassVar[int] = 404
    status_message: ClassVar[str] = "File Not Found"

@dataclass(frozen=True)
class Ok(HttpResponse):
    status_code: ClassVar[int] = 200
    status_message: ClassVar[str] = "OK"

    content_type: ContentType
    body: bytes

    @property
    def content_length(self) -> int:
        # Bytes, not characters, so multi-byte text is measured correctly
        return len(self.body)

    def headers(self) -> Dict[str, str]:
        return {
            "Server": f"{SERVER_NAME}/{SERVER_VERSION}",
            "Content-Type": self.content_type.mime_type,
            "Content-Length": str(self.content_length),
        }

    def serialize(self) -> bytes:
        field_lines = "".join(f"{key}: {value}{LINE_END}" for key, value in self.headers().items())
        head = f"{self.status_line}{LINE_END}{field_lines}{LINE_END}"

        return head.encode("ascii") + self.body

def response_for(resource: ResolvedResource) -> HttpResponse:
    if isinstance(resource, Missing):
        return NotFound()
    if isinstance(resource, Unreadable):
        return Forbidden()
    if isinstance(resource, Found):
        return Ok(content_type=resource.content_type, body=resource.body)

    raise TypeError(f"Unexpected resource: {resource!r}")
