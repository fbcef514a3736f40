import os

# Must be set before importing kivy
os.environ["KIVY_WINDOW"] = "mock"
os.environ["KIVY_GL_BACKEND"] = "mock"

import pytest  # noqa: E402
from doubles import FakeCounterClient  # noqa: E402

from sharedcounter.bridge import CounterBridge  # noqa: E402


@pytest.fixture
def app(mock_cfg):
    from sharedcounter.app import SharedCounter

    client = FakeCounterClient()
    bridge = CounterBridge(client, poll_interval=10.0)
    app = SharedCounter(cfg=mock_cfg, client=client, bridge=bridge)
    try:
        yield app
    finally:
        bridge.stop()


def test_app_title(app):
    assert app.title == "SharedCounter"
    assert app.counter_text == "-"


def test_default_client_and_bridge_follow_config(mock_cfg):
    from sharedcounter.app import SharedCounter

    mock_cfg.set("client", "host", "http://10.0.0.5:3000/")
    mock_cfg.set("bridge", "poll_interval", "2.5")

    app = SharedCounter(cfg=mock_cfg)
    try:
        assert app.client.counter_url == "http://10.0.0.5:3000/counter"
        assert app.bridge.client is app.client
        assert app.bridge.poll_interval == 2.5
        assert app.bridge.on_counter == app.on_counter
    finally:
        app.client.close()


def test_on_set_counter_queues_event(app):
    assert app.on_set_counter(" 42 ") is True
    app.bridge.forward(app.bridge._events.get_nowait())
    assert app.client.sent == [42]


def test_on_set_counter_rejects_text(app, caplog):
    with caplog.at_level("WARNING"):
        assert app.on_set_counter("forty-two") is False

    assert app.bridge._events.empty()
    assert any("non-integer" in message for message in caplog.messages)


def test_on_reset_sends_zero(app):
    app.on_reset()
    assert app.bridge._events.get_nowait().counter == 0


def test_show_counter_updates_text(app):
    app._show_counter(17)
    assert app.counter_text == "17"


def test_on_counter_schedules_update(app):
    from kivy.clock import Clock

    app.on_counter(5)
    Clock.tick()
    assert app.counter_text == "5"


def test_start_and_stop_drive_the_bridge(app):
    app.on_start()
    assert app.bridge.running
    app.on_stop()
    assert not app.bridge.running
