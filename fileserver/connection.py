"""
Responsibility: run one exchange on an accepted socket: read, parse, resolve, respond, close.
"""

import logging
import socket
from typing import Any, Optional

from fileserver.access_log import AccessLogRecord, log_exchange
from fileserver.config import RECV_BUFFER_SIZE
from fileserver.http_request import parse_request, request_line
from fileserver.http_response import BadRequest, Forbidden, HttpResponse, response_for
from fileserver.resolver import confine, resolve

logger = logging.getLogger(__name__)

def client_name(client_address: Any) -> str:
    if isinstance(client_address, tuple) and client_address:
        return str(client_address[0])

    return str(client_address) if client_address else "-"

def build_response(raw: bytes, web_root: Optional[str] = None) -> HttpResponse:
    path = parse_request(raw)
    if path is None:
        return BadRequest()

    if web_root is not None:
        path = confine(path, web_root)
        if path is None:
            return Forbidden()

    return response_for(resolve(path))

def handle_connection(client_socket: socket.socket, client_address: Any = None,
                      web_root: Optional[str] = None, timeout: Optional[float] = None) -> Optional[HttpResponse]:
    """
    Serves exactly one request on client_socket and always closes it.

    Returns the response that was produced, or None if the request could not be read.
    A single read of RECV_BUFFER_SIZE bytes is made; longer requests are truncated.
    """
    client = client_name(client_address)
    logger.debug("Connection from %s", client)

    try:
        if timeout is not None:
            client_socket.settimeout(timeout)

        try:
            raw = client_socket.recv(RECV_BUFFER_SIZE)
        except OSError as e:
            logger.warning("Unable to read request from %s: %s", client, e)
            return None

        response = build_response(raw, web_root)
        payload = response.serialize()

        try:
            client_socket.sendall(payload)
        except OSError as e:
            logger.warning("Failed sending response to %s: %s", client, e)
            return response

        log_exchange(AccessLogRecord(
            client=client,
            request_line=request_line(raw),
            status_code=response.status_code,
            response_size=len(payload),
        ))

        return response
    finally:
        client_socket.close()
