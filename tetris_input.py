"""Keyboard input: key decoding, the input channel and the reader thread"""
import enum
import logging
import os
import queue
import select
import threading
from typing import Callable, Optional

log = logging.getLogger(__name__)

ESC = b"\x1b"
CTRL_C = b"\x03"


class Key(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    ROTATE = "rotate"
    QUIT = "quit"
    OTHER = "other"


class InputClosed(Exception):
    """The key source reached end of file."""


PLAIN_KEYS = {
    b"a": Key.LEFT, b"h": Key.LEFT,
    b"d": Key.RIGHT, b"l": Key.RIGHT,
    b"s": Key.DOWN, b"j": Key.DOWN,
    b"z": Key.ROTATE, b"w": Key.ROTATE, b"k": Key.ROTATE,
    b"q": Key.QUIT, CTRL_C: Key.QUIT,
}
ARROWS = {b"A": Key.ROTATE, b"B": Key.DOWN, b"C": Key.RIGHT, b"D": Key.LEFT}


class KeyDecoder:
    """Turns a raw byte stream into keys.

    `read` blocks for one byte and returns b"" at end of file. `more` tells
    whether another byte follows promptly, which is how a lone ESC is told
    apart from the start of an arrow-key sequence.
    """
    def __init__(self, read: Callable[[], bytes], more: Callable[[], bool]):
        self.read = read
        self.more = more

    def _byte(self) -> bytes:
        b = self.read()
        if not b:
            raise InputClosed()
        return b

    def next_key(self) -> Key:
        b = self._byte()
        if b != ESC:
            return PLAIN_KEYS.get(b.lower(), Key.OTHER)
        if not self.more():
            return Key.QUIT
        if self._byte() not in (b"[", b"O"):
            return Key.OTHER
        return ARROWS.get(self._byte(), Key.OTHER)


class TerminalKeySource(KeyDecoder):
    """Reads keys from a terminal file descriptor already in cbreak/raw mode."""
    def __init__(self, fd: int, escape_timeout: float = 0.03):
        self.fd = fd
        self.escape_timeout = escape_timeout
        super().__init__(self._read, self._more)

    def _read(self) -> bytes:
        return os.read(self.fd, 1)

    def _more(self) -> bool:
        ready, _, _ = select.select([self.fd], [], [], self.escape_timeout)
        return bool(ready)


class InputChannel:
    """Ordered, unbounded key queue from the reader to the game loop, plus the stop flag."""
    def __init__(self):
        self._queue: "queue.Queue[Key]" = queue.Queue()
        self._stop = threading.Event()

    def send(self, key: Key):
        self._queue.put(key)

    def poll(self) -> Optional[Key]:
        """At most one key, never blocks."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def stop(self):
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()


class InputReader(threading.Thread):
    def __init__(self, source: KeyDecoder, channel: InputChannel):
        super().__init__(name="input-reader", daemon=True)
        self.source = source
        self.channel = channel

    def run(self):
        while not self.channel.stopped:
            try:
                key = self.source.next_key()
            except InputClosed:
                log.info("input closed, stopping")
                break
            except OSError:
                log.warning("input read failed, stopping", exc_info=True)
                break
            if key is Key.OTHER: continue
            self.channel.send(key)
            if key is Key.QUIT:
                log.info("quit key read")
                break
        self.channel.stop()
