"""Exception types raised by the recommendation pipeline and its stores."""


class RasikaError(Exception):
    pass


class RequestValidationError(RasikaError, ValueError):
    """Malformed request, rejected before any model call."""


class ModelInvocationError(RasikaError):
    """The generative model call failed or returned a non-conforming payload."""


class PersistenceError(RasikaError):
    """A history or review read/write against the document store failed."""


class HistoryNotFoundError(PersistenceError):
    pass
