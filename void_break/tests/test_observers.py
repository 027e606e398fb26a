from unittest.mock import MagicMock

from void_break.utils.observers import ObserverRegistry


def test_notify_in_registration_order():
    registry = ObserverRegistry()
    calls = []
    registry.subscribe(lambda value: calls.append(('a', value)))
    registry.subscribe(lambda value: calls.append(('b', value)))

    registry.notify(25)

    assert calls == [('a', 25), ('b', 25)]
    assert len(registry) == 2


def test_unsubscribe_by_handle():
    registry = ObserverRegistry()
    callback = MagicMock()
    handle = registry.subscribe(callback)
    other = registry.subscribe(MagicMock())

    assert handle != other
    assert registry.unsubscribe(handle) is True
    assert registry.unsubscribe(handle) is False

    registry.notify()
    callback.assert_not_called()


def test_unsubscribe_during_notify_applies_next_time():
    registry = ObserverRegistry()
    second = MagicMock()
    handles = {}
    handles['first'] = registry.subscribe(lambda: registry.unsubscribe(handles['second']))
    handles['second'] = registry.subscribe(second)

    registry.notify()
    registry.notify()

    second.assert_called_once_with()


def test_clear():
    registry = ObserverRegistry()
    callback = MagicMock()
    registry.subscribe(callback)
    registry.clear()
    registry.notify()
    callback.assert_not_called()
    assert len(registry) == 0
