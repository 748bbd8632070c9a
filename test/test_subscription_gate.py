import threading

from xyzl_perception.core.subscription_gate import SubscriptionGate


def _gate():
    events = []
    gate = SubscriptionGate(lambda: events.append("connect"), lambda: events.append("disconnect"))
    return gate, events


def test_connects_on_first_subscriber_only():
    gate, events = _gate()

    assert gate.update(0) is False
    assert gate.update(1) is True
    assert gate.update(3) is True
    assert events == ["connect"]
    assert gate.active


def test_disconnects_when_last_subscriber_leaves():
    gate, events = _gate()

    gate.update(2)
    gate.update(0)
    gate.update(0)
    gate.update(1)

    assert events == ["connect", "disconnect", "connect"]


def test_concurrent_updates_connect_once():
    gate, events = _gate()
    threads = [threading.Thread(target=gate.update, args=(1,)) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert events == ["connect"]
