"""Error types shared by the client and the HTTP service."""


class ValidationError(ValueError):
    """Bad input rejected at the boundary (missing prompt, unknown month)."""


class ConfigurationError(RuntimeError):
    """The server is missing its upstream credential."""


class UpstreamError(RuntimeError):
    """The text-generation call failed or returned nothing."""


class EmptyTextError(UpstreamError):
    """The upstream call succeeded but produced no text."""
