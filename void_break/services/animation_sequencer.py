"""
Queue-based animation sequencing.

An animation is any object with start(), update(delta) and is_complete(),
plus an optional on_complete callable attribute. The core only schedules
TimedSteps; renderers can enqueue their own animations alongside.
"""


class TimedStep:
    """Completes once `duration` seconds of update deltas have elapsed."""

    def __init__(self, duration, on_complete=None, name=None):
        self.duration = duration
        self.on_complete = on_complete
        self.name = name
        self.elapsed = 0.0
        self.started = False

    def start(self):
        self.started = True
        self.elapsed = 0.0

    def update(self, delta):
        if self.started:
            self.elapsed += delta

    def is_complete(self):
        return self.started and self.elapsed >= self.duration

    def __repr__(self):
        return f"TimedStep(name={self.name!r}, duration={self.duration})"


class AnimationSequencer:

    def __init__(self):
        self.queue = []
        self.active = []
        self._on_empty_callbacks = []

    def enqueue(self, animation):
        self.queue.append(animation)

    def play_next(self):
        """Starts the next queued animation, or fires the on-empty callbacks if the queue is empty."""
        if not self.queue:
            self._fire_empty()
            return
        animation = self.queue.pop(0)
        self.active.append(animation)
        animation.start()

    def play_parallel(self, animations):
        for animation in animations:
            self.active.append(animation)
            animation.start()

    def play_immediate(self, animation):
        self.active.append(animation)
        animation.start()

    def update(self, delta):
        """
        Advances every active animation by `delta` seconds.

        Finished animations are removed and their on_complete fired. When nothing
        is active the next queued animation starts; when the queue is also empty
        the pending on-empty callbacks fire once.
        """
        for animation in list(self.active):
            animation.update(delta)
            if animation.is_complete():
                self.active.remove(animation)
                on_complete = getattr(animation, 'on_complete', None)
                if on_complete:
                    on_complete()

        if not self.active and self.queue:
            self.play_next()
        elif not self.active and not self.queue:
            self._fire_empty()

    @property
    def is_playing(self):
        return bool(self.active or self.queue)

    def on_empty(self, callback):
        """Registers a one-shot callback for the next time the sequencer runs dry."""
        self._on_empty_callbacks.append(callback)

    def clear_on_empty(self):
        self._on_empty_callbacks = []

    def _fire_empty(self):
        callbacks = self._on_empty_callbacks
        self._on_empty_callbacks = []
        for callback in callbacks:
            callback()

    def clear(self):
        self.queue = []
        self.active = []
        self._on_empty_callbacks = []
