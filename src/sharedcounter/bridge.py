import queue
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from kivy.logger import Logger as logger

from .api_client import CounterClient
from .core.models import Counter
from .errors import CounterClientError


@dataclass(frozen=True)
class SetCounterEvent:
    """UI request to overwrite the server's counter."""

    counter: int


class CounterBridge:
    """
    Connects the UI to the counter server.

    Two daemon threads share nothing but the client:
    - the poll loop fetches the counter every `poll_interval` seconds and
      hands the value to `on_counter`,
    - the set loop forwards SetCounterEvents queued by the UI.
    Failures are logged and never end either loop.
    """

    def __init__(
        self,
        client: CounterClient,
        on_counter: Optional[Callable[[int], None]] = None,
        poll_interval: float = 1.0,
    ):
        self.client = client
        self.on_counter = on_counter
        self.poll_interval = poll_interval

        self._events: "queue.Queue[SetCounterEvent]" = queue.Queue()
        self._stopping = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None
        self._set_thread: Optional[threading.Thread] = None
        self._running = False

    # ---------- Public API ----------

    def start(self):
        if self._running:
            return
        self._running = True
        # one event per run: a thread outliving stop() keeps seeing its run as stopped
        self._stopping = threading.Event()
        self._poll_thread = threading.Thread(
            target=self._poll_loop, args=(self._stopping,), name="counter-poll", daemon=True
        )
        self._set_thread = threading.Thread(
            target=self._set_loop, args=(self._stopping,), name="counter-set", daemon=True
        )
        self._poll_thread.start()
        self._set_thread.start()

    def stop(self, timeout: float = 5.0):
        self._running = False
        self._stopping.set()
        for thread in (self._poll_thread, self._set_thread):
            if thread:
                thread.join(timeout=timeout)
                if thread.is_alive():
                    logger.warning(
                        "CounterBridge: %s still busy after %.1fs, leaving it to exit",
                        thread.name,
                        timeout,
                    )
        self._poll_thread = None
        self._set_thread = None

    @property
    def running(self) -> bool:
        return self._running

    def send_set(self, value: int):
        self._events.put(SetCounterEvent(counter=value))

    def poll_once(self) -> Optional[int]:
        try:
            counter = self.client.get_counter()
        except CounterClientError as e:
            logger.warning("CounterBridge: get_counter() error: %s", e)
            return None

        number = counter.get()
        if self.on_counter:
            try:
                self.on_counter(number)
            except Exception as e:
                logger.error("CounterBridge: on_counter callback failed: %s", e)
        return number

    def forward(self, event: SetCounterEvent) -> bool:
        counter = Counter.new()
        counter.set(event.counter)
        try:
            ok = self.client.set_counter(counter)
        except CounterClientError as e:
            logger.warning("CounterBridge: set_counter() error: %s", e)
            return False
        if not ok:
            logger.warning("CounterBridge: Server rejected counter %d", event.counter)
        return ok

    # ---------- Internals ----------

    def _poll_loop(self, stopping: threading.Event):
        # Event.wait returns True only once stop() was called
        while not stopping.wait(self.poll_interval):
            try:
                self.poll_once()
            except Exception:
                logger.exception("CounterBridge: Unexpected error while polling")

    def _set_loop(self, stopping: threading.Event):
        while not stopping.is_set():
            try:
                event = self._events.get(timeout=0.1)
            except queue.Empty:
                continue
            try:
                self.forward(event)
            except Exception:
                logger.exception("CounterBridge: Unexpected error forwarding %s", event)
            finally:
                self._events.task_done()
