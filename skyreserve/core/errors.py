"""Error taxonomy shared by services, routes and background jobs.

Services raise these; routes turn them into ``HTTPException`` with the
carried ``status_code``; the reconciliation job logs them and moves on.
"""


class SkyReserveError(Exception):
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(SkyReserveError):
    status_code = 400


class ForbiddenError(SkyReserveError):
    status_code = 403


class NotFoundError(SkyReserveError):
    status_code = 404


class ConflictError(SkyReserveError):
    status_code = 409


class PersistenceError(SkyReserveError):
    status_code = 500


class SchemaDriftError(PersistenceError):
    """The store is reachable but its schema lags the models (missing table/column)."""


class IdentifierExhaustedError(PersistenceError):
    """No unused identifier found within the retry budget."""
