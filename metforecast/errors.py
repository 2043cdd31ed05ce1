"""Failure kinds raised by the forecast client. All derive from ForecastError."""


class ForecastError(Exception):
    """Base class for every failure the client surfaces to callers."""


class InvalidParameter(ForecastError, ValueError):
    """A request parameter (e.g. timestep) has a value the API does not accept."""


class MissingCredential(ForecastError):
    """Direct mode was requested without an API key."""


class MissingCoordinates(ForecastError):
    """Latitude and longitude were not both supplied before a request."""


class LocationUnavailable(ForecastError):
    """The device location could not be determined."""


class UpstreamError(ForecastError):
    """The forecast source kept failing until the retry budget ran out."""

    def __init__(self, message: str, *, attempts: int = 0, status_code: int | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.status_code = status_code
