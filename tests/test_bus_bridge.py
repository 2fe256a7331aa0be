from app_ui.bus_bridge import PreferenceEventBridge
from runtime_bus import topics
from runtime_bus.bus import RuntimeBus


def test_bridge_relays_preference_events() -> None:
    bus = RuntimeBus()
    bridge = PreferenceEventBridge(bus)
    seen = []
    bridge.preference_updated.connect(lambda key, value: seen.append(("updated", key, value)))
    bridge.preference_deleted.connect(lambda key: seen.append(("deleted", key)))
    bridge.preferences_updated.connect(lambda data: seen.append(("bulk", data)))
    bridge.preferences_cleared.connect(lambda: seen.append(("cleared",)))
    bridge.start()

    bus.publish(topics.PREFERENCE_UPDATED, {"key": "theme", "value": {"mode": "dark"}}, source="test")
    bus.publish(topics.PREFERENCE_DELETED, {"key": "theme"}, source="test")
    bus.publish(topics.PREFERENCES_UPDATED, {"a": 1}, source="test")
    bus.publish(topics.PREFERENCES_CLEARED, None, source="test")

    assert seen == [
        ("updated", "theme", {"mode": "dark"}),
        ("deleted", "theme"),
        ("bulk", {"a": 1}),
        ("cleared",),
    ]


def test_bridge_replays_startup_events() -> None:
    bus = RuntimeBus()
    bus.publish(topics.PREFERENCES_LOADED, {"theme": "dark"}, source="test", sticky=True)
    bus.publish(topics.USER_DATA_LOADED, {"profile": None}, source="test", sticky=True)
    bridge = PreferenceEventBridge(bus)
    loaded = []
    bridge.preferences_loaded.connect(lambda data: loaded.append(data))
    bridge.user_data_loaded.connect(lambda data: loaded.append(data))
    bridge.start()
    assert loaded == [{"profile": None}, {"theme": "dark"}]


def test_bridge_stop_unsubscribes() -> None:
    bus = RuntimeBus()
    bridge = PreferenceEventBridge(bus)
    bridge.start()
    assert bridge.connected is True
    bridge.stop()
    assert bridge.connected is False
    assert bus.get_stats()["subscriber_count"] == 0
