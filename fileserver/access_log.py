"""
Responsibility: report each completed exchange to the access logger.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

ACCESS_LOGGER = logging.getLogger("fileserver.access")

@dataclass(frozen=True)
class AccessLogRecord:
    client: str
    request_line: str
    status_code: int
    response_size: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def format(self) -> str:
        # Common Log Format minus identity and user
        when = self.timestamp.strftime("%d/%b/%Y:%H:%M:%S %z")
        return f'{self.client} - - [{when}] "{self.request_line}" {self.status_code} {self.response_size}'

def log_exchange(record: AccessLogRecord) -> None:
    # logging handlers take their own lock, so concurrent connections never interleave lines
    ACCESS_LOGGER.info(record.format())
