"""
Diagnostic channel between a parser and the UI error output.

The parser writes free-form text into the channel as if it were a stream.
Complete lines are queued and a background thread hands each one to the
sink (usually Ui.error) in order. The owner must call flush() after parsing
so every line has been delivered before it continues, and close() once the
channel is no longer needed so the drain thread terminates.
"""
import logging
import queue
import threading

logger = logging.getLogger(__name__)

_CLOSED = object()


class DiagnosticChannel:
    def __init__(self, sink, /):
        if not callable(sink):
            raise TypeError("DiagnosticChannel() argument must be callable")
        self._sink = sink
        self._queue = queue.Queue()
        self._lock = threading.Lock()
        self._pending = ""
        self._closed = False
        self._thread = threading.Thread(target=self._drain, name="vaultcli-diagnostics", daemon=True)
        self._thread.start()

    @property
    def closed(self):
        return self._closed

    def write(self, text, /):
        with self._lock:
            if self._closed:
                raise ValueError("write to closed diagnostic channel")
            *lines, self._pending = (self._pending + text).split("\n")
            for line in lines:
                self._queue.put(line)
        return len(text)

    def flush(self):
        """
        Block until every line written so far has reached the sink.

        A trailing partial line is delivered as a line of its own.
        """
        with self._lock:
            if self._pending:
                self._queue.put(self._pending)
                self._pending = ""
        self._queue.join()

    def close(self):
        if self._closed:
            return
        self.flush()
        with self._lock:
            self._closed = True
            self._queue.put(_CLOSED)
        self._thread.join()

    def _drain(self):
        while True:
            line = self._queue.get()
            try:
                if line is _CLOSED:
                    return
                self._sink(line)
            except Exception:
                logger.exception("diagnostic sink failed")
            finally:
                self._queue.task_done()


__all__ = (
    "DiagnosticChannel",
)
