from typing import Optional


class SharedCounterError(Exception):
    """Base class for every error raised by sharedcounter."""


class ConfigError(SharedCounterError):
    """Startup configuration is invalid. The process must not start."""


class CounterClientError(SharedCounterError):
    """A counter request issued by the client failed."""


class CounterTransportError(CounterClientError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CounterDecodeError(CounterClientError):
    pass
