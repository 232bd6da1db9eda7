import socket
import threading

from common.communicator import Communicator


def test_accepts_health_check_connections():
    comms = Communicator(0)
    worker = threading.Thread(target=comms.start, daemon=True)
    worker.start()

    try:
        with socket.create_connection(("127.0.0.1", comms.port), timeout=2):
            pass
    finally:
        comms.stop()
        worker.join(timeout=2)

    assert not comms.running
