class DmeOrderError(Exception):
    """Base error; `exit_code` is what run.py returns for it."""

    exit_code = 6


class InvalidInputError(DmeOrderError, ValueError):
    exit_code = 1


class ExtractionTimeoutError(DmeOrderError):
    exit_code = 2


class SerializationError(DmeOrderError):
    exit_code = 3


class TransportTimeoutError(DmeOrderError):
    exit_code = 4


class TransportError(DmeOrderError):
    exit_code = 5


class UnexpectedFailureError(DmeOrderError):
    exit_code = 6
