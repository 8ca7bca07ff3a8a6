import argparse
import logging
import signal
import socket
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import List, Optional, Tuple

from fileserver.config import ACCEPT_POLL_INTERVAL, HOST, LISTEN_BACKLOG, PORT, ServerConfig
from fileserver.connection import handle_connection

logger = logging.getLogger("fileserver")

def finish_submission(client_socket: socket.socket, future: Future) -> None:
    # Work cancelled by a pool shutdown never ran, so its socket is still open
    if future.cancelled():
        client_socket.close()
        return

    error = future.exception()
    if error is not None:
        logger.error("Connection handler failed: %r", error)

class HttpServer:
    """
    Owns the listening socket and hands every accepted connection to its own worker
    """

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self.server_socket: Optional[socket.socket] = None
        self.executor: Optional[ThreadPoolExecutor] = None
        self.shutdown_event = threading.Event()

    def __enter__(self) -> "HttpServer":
        self.bind()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def address(self) -> Tuple[str, int]:
        if self.server_socket is None:
            raise RuntimeError("Server socket is not bound")

        return self.server_socket.getsockname()[:2]

    def bind(self) -> None:
        # Failing to bind is fatal, so errors propagate to the caller
        server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.config.host, self.config.port))
            server_socket.listen(LISTEN_BACKLOG)
        except OSError:
            server_socket.close()
            raise

        # accept() wakes up periodically to notice shutdown requests
        server_socket.settimeout(ACCEPT_POLL_INTERVAL)
        self.server_socket = server_socket

        host, port = self.address
        logger.info("Server listening on http://%s:%s", host, port)

    def serve_forever(self) -> None:
        if self.server_socket is None:
            self.bind()

        if self.config.max_workers is not None:
            self.executor = ThreadPoolExecutor(max_workers=self.config.max_workers, thread_name_prefix="fileserver")

        try:
            while not self.shutdown_event.is_set():
                try:
                    client_socket, client_address = self.server_socket.accept()
                except socket.timeout:
                    continue
                except OSError as e:
                    if self.shutdown_event.is_set():
                        break
                    logger.error("Unable to accept connection: %s", e)
                    continue

                self.dispatch(client_socket, client_address)
        finally:
            self.close()

    def dispatch(self, client_socket: socket.socket, client_address) -> None:
        args = (client_socket, client_address, self.config.web_root, self.config.connection_timeout)

        if self.executor is not None:
            future = self.executor.submit(handle_connection, *args)
            future.add_done_callback(partial(finish_submission, client_socket))
            return

        # NOTE: Daemon threads so a peer that never sends data cannot hold the process open on exit
        incoming_thread = threading.Thread(target=handle_connection, args=args, daemon=True)
        incoming_thread.start()

    def shutdown(self) -> None:
        self.shutdown_event.set()

    def close(self) -> None:
        if self.executor is not None:
            self.executor.shutdown(wait=False, cancel_futures=True)
            self.executor = None

        if self.server_socket is not None:
            self.server_socket.close()
            self.server_socket = None
            logger.info("Server stopped")

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve files over a minimal HTTP/1.0 GET protocol.")
    parser.add_argument("--host", default=HOST, help=f"Bind address (default {HOST})")
    parser.add_argument("--port", type=int, default=PORT, help=f"Port to listen on (default {PORT})")
    parser.add_argument("--root", default=None,
                        help="Confine request paths to this directory (default: serve paths as given)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Size of a bounded worker pool (default: one thread per connection)")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds to wait for a request")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    try:
        config = ServerConfig(host=args.host, port=args.port, web_root=args.root,
                              max_workers=args.workers, connection_timeout=args.timeout)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    server = HttpServer(config)
    try:
        server.bind()
    except OSError as e:
        logger.error("Unable to bind %s:%s: %s", config.host, config.port, e)
        return 1

    signal.signal(signal.SIGTERM, lambda signum, frame: server.shutdown())

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down server...")
    finally:
        server.close()

    return 0

if __name__ == "__main__":
    sys.exit(main())
