"""
Responsibility: turn the raw bytes of a single read into the requested filesystem path.

Only `GET <path> HTTP...` is understood. Anything after the HTTP marker (version, headers)
is ignored, and a request that does not contain that shape is rejected with None.
"""

import re
from typing import Final, Optional

# The path is a single run of non-whitespace, so doubled or stray spaces around it fail the match
REQUEST_PATTERN: Final[re.Pattern] = re.compile(r"GET (\S+) HTTP")
ESCAPED_SPACE: Final[str] = "%20"

def decode_request(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")

def parse_request(raw: bytes) -> Optional[str]:
    match = REQUEST_PATTERN.search(decode_request(raw))
    if match is None:
        return None

    # Spaces are the only escape we decode
    return match.group(1).replace(ESCAPED_SPACE, " ")

def request_line(raw: bytes) -> str:
    """
    First line of the request as it should appear in the access log
    """
    text = decode_request(raw).replace("\x00", "")
    if text == "":
        return ""

    return text.splitlines()[0].strip()
