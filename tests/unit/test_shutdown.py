import os
import signal
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]

NODE_SCRIPT = textwrap.dedent("""
    import os
    import random
    import signal
    import threading

    from common.publisher import Publisher
    from common.stream_bridge import Binding, StreamBridge
    from price_generator.generator import PRICE_CALCULATOR_OUT, PriceGenerator


    class NullPublisher(Publisher):
        def publish(self, data, *, routing_key=None):
            pass

        def close(self):
            print("bridge closed", flush=True)


    bindings = {PRICE_CALCULATOR_OUT: Binding(PRICE_CALCULATOR_OUT, "PRICE.IN.EXCHANGE")}
    generator = PriceGenerator(StreamBridge(bindings, lambda b: NullPublisher()), random.Random(1), interval_ms=10000)

    signal.signal(signal.SIGTERM, lambda signum, frame: generator.stop())
    signal.signal(signal.SIGINT, lambda signum, frame: generator.stop())
    threading.Timer(0.5, os.kill, args=(os.getpid(), {signum})).start()

    generator.run()
    print("generator stopped", flush=True)
""")


@pytest.mark.parametrize("signum", [signal.SIGTERM, signal.SIGINT])
def test_generator_stops_on_signal_while_waiting_for_tick(signum):
    env = dict(os.environ, PYTHONPATH=os.pathsep.join(filter(None, [str(ROOT), os.environ.get("PYTHONPATH")])))

    result = subprocess.run(
        [sys.executable, "-c", NODE_SCRIPT.replace("{signum}", str(int(signum)))],
        cwd=str(ROOT),
        env=env,
        capture_output=True,
        text=True,
        timeout=8,
    )

    assert result.returncode == 0, result.stderr
    assert "generator stopped" in result.stdout
    assert "bridge closed" in result.stdout
