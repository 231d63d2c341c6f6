from enum import Enum


class ErrorKind(str, Enum):
    NOT_APPLICABLE = "not_applicable"
    UPSTREAM_READ_FAILED = "upstream_read_failed"
    UPSTREAM_WRITE_FAILED = "upstream_write_failed"


class UpstreamError(Exception):
    """A read or write against the record store did not go through."""
    kind = ErrorKind.UPSTREAM_READ_FAILED


class UpstreamReadError(UpstreamError):
    kind = ErrorKind.UPSTREAM_READ_FAILED


class UpstreamWriteError(UpstreamError):
    kind = ErrorKind.UPSTREAM_WRITE_FAILED
