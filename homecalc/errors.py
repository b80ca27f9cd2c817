"""Error taxonomy shared by the engines, data clients and API routes."""


class InvalidInput(ValueError):
    """Malformed request data; rejected before any external call."""


class ExternalUnavailable(RuntimeError):
    """An external provider failed or returned a non-success response."""


class LookupTimeout(ExternalUnavailable):
    """An external provider did not answer within its timeout."""


class NotFound(LookupError):
    """No provider has data for the requested location."""
