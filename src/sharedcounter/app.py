# flake8: noqa: E402
import os
from configparser import ConfigParser
from functools import partial
from typing import Optional

# Ensure Kivy behaves in headless-friendly mode unless a window is explicitly desired.
os.environ.setdefault("KIVY_NO_ARGS", "1")

from kivy.app import App
from kivy.clock import Clock
from kivy.logger import Logger as logger
from kivy.properties import StringProperty
from kivy.uix.screenmanager import ScreenManager

from .api_client import CounterClient
from .bridge import CounterBridge
from .config import get_timeout
from .ui.loader import KV_DIR, SCREENS_PACKAGE, discover_screens, load_kv_files

# flake8: enable=E402


class SharedCounter(App):
    title = "SharedCounter"
    counter_text = StringProperty("-")

    def __init__(
        self,
        cfg: ConfigParser,
        client: Optional[CounterClient] = None,
        bridge: Optional[CounterBridge] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.cfg = cfg
        self.client = client or CounterClient(
            cfg.get("client", "host"), timeout=get_timeout(cfg)
        )
        self.bridge = bridge or CounterBridge(
            self.client,
            on_counter=self.on_counter,
            poll_interval=cfg.getfloat("bridge", "poll_interval"),
        )

    def build(self):
        load_kv_files(KV_DIR)
        sm = ScreenManager()
        for screen_cls in discover_screens(SCREENS_PACKAGE):
            sm.add_widget(screen_cls())
        return sm

    def on_start(self):
        logger.info("SharedCounter: Polling %s", self.client.counter_url)
        self.bridge.start()

    def on_stop(self):
        self.bridge.stop()
        self.client.close()

    def on_counter(self, number: int):
        # Called from the bridge's poll thread; widgets may only change on the main thread
        Clock.schedule_once(partial(self._show_counter, number))

    def _show_counter(self, number: int, *_):
        self.counter_text = str(number)

    def on_set_counter(self, text: str) -> bool:
        try:
            value = int(text.strip())
        except ValueError:
            logger.warning("SharedCounter: Ignoring non-integer counter value %r", text)
            return False
        self.bridge.send_set(value)
        return True

    def on_reset(self):
        self.bridge.send_set(0)
