import logging
import socket

LISTEN_BACKLOG = 10


class Communicator:
    """Liveness endpoint: accepts and drops TCP connections so an external
    health checker can tell the node is up."""

    def __init__(self, port, listen_backlog=LISTEN_BACKLOG):
        self.socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.socket.bind(('', port))
        self.socket.listen(listen_backlog)
        self.port = self.socket.getsockname()[1]
        self.running = True

    def start(self):
        logging.info(f"[Communicator] Listening for health checks on port {self.port}")
        while self.running:
            try:
                conn, _ = self.socket.accept()
                conn.close()
            except OSError as e:
                if not self.running:
                    break
                logging.error(f"[Communicator] Error accepting connection: {e}")

    def stop(self):
        logging.info("[Communicator] Stopping")
        self.running = False
        if self.socket:
            try:
                self.socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                # Listening socket was never connected
                pass
            self.socket.close()
