import logging
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from typing import List, Optional

from creditsafe.settings.main import LogSettings


class LoggingService:
    """Wires a logger to console (and optional file) sinks through a queue.

    The application thread only enqueues records; a QueueListener thread
    formats and writes them.
    """

    def __init__(self, logger_name: str = "creditsafe", settings: Optional[LogSettings] = None):
        self.settings: LogSettings = settings if settings else LogSettings()
        self.propagate = False
        self.sinks: List[logging.Handler] = []

        self.logger_name: str = logger_name
        self.logger = logging.getLogger(self.logger_name)
        self.logger_level = self.settings.log_level

        self.log_queue: Optional[Queue] = None
        self.log_listener: Optional[QueueListener] = None

    def set_propagate(self, propagate: bool):
        self.propagate = propagate

    def append_sink(self, sink: logging.Handler):
        self.sinks.append(sink)

    def configure_logger(self) -> logging.Logger:
        self.logger.setLevel(self.logger_level)

        # Record is handled only by the handlers attached to this logger
        self.logger.propagate = self.propagate

        # Idempotence guard, a second call must not duplicate handlers
        if self.logger.handlers:
            return self.logger

        formatter = logging.Formatter(self.settings.log_format)

        console = logging.StreamHandler()
        console.setLevel(self.logger_level)
        console.setFormatter(formatter)
        self.append_sink(console)

        if self.settings.log_file:
            file_sink = logging.FileHandler(self.settings.log_file, encoding="utf-8")
            file_sink.setLevel(self.logger_level)
            file_sink.setFormatter(formatter)
            self.append_sink(file_sink)

        # Decouple app from IO: QueueHandler -> QueueListener(sinks)
        self.log_queue = self.log_queue or Queue(maxsize=self.settings.log_max_queue)
        if not self.log_listener:
            self.log_listener = QueueListener(self.log_queue, *self.sinks, respect_handler_level=True)

        self.logger.addHandler(QueueHandler(self.log_queue))
        self.start()

        return self.logger

    def start(self):
        if self.log_listener and (not self.log_listener._thread or not self.log_listener._thread.is_alive()):
            self.log_listener.start()

    def stop(self):
        if self.log_listener and self.log_listener._thread:
            self.log_listener.stop()
        for sink in self.sinks:
            sink.close()
