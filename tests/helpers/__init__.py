from .fakes import FakeTransport, RecordedCall, make_client, backend_error

__all__ = [
    "FakeTransport",
    "RecordedCall",
    "make_client",
    "backend_error",
]
