"""
Responsibility: default constants and the runtime configuration handed to the dispatcher.
"""

from dataclasses import dataclass
from typing import Final, Optional

SERVER_NAME: Final[str] = "fileserver"
SERVER_VERSION: Final[str] = "0.1.0"
HTTP_VERSION: Final[str] = "HTTP/1.0"
HOST: Final[str] = "127.0.0.1"  # localhost
PORT: Final[int] = 8080         # Port number
RECV_BUFFER_SIZE: Final[int] = 4096
LISTEN_BACKLOG: Final[int] = 5
ACCEPT_POLL_INTERVAL: Final[float] = 0.5  # Seconds between shutdown checks in the accept loop

@dataclass(frozen=True)
class ServerConfig:
    """
    Listener settings

    - web_root confines request paths to a directory; None serves paths literally
    - max_workers bounds the worker pool; None spawns one thread per connection
    - connection_timeout bounds the single request read; None waits on the peer indefinitely
    """
    host: str = HOST
    port: int = PORT
    web_root: Optional[str] = None
    max_workers: Optional[int] = None
    connection_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Port out of range: {self.port}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.connection_timeout is not None and self.connection_timeout <= 0:
            raise ValueError("connection_timeout must be positive")
