import itertools


class ObserverRegistry:
    """
    Maps subscription handles to callbacks.

    Callbacks are notified synchronously in registration order. Removing a
    listener during a notification takes effect from the next notification.
    """

    def __init__(self):
        self._callbacks = {}
        self._handles = itertools.count(1)

    def subscribe(self, callback) -> int:
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def unsubscribe(self, handle) -> bool:
        return self._callbacks.pop(handle, None) is not None

    def notify(self, *args):
        for callback in list(self._callbacks.values()):
            callback(*args)

    def clear(self):
        self._callbacks.clear()

    def __len__(self):
        return len(self._callbacks)
