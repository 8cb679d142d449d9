"""
Error types shared across the discovery engine.
"""


class ProviderError(Exception):
    """A third-party provider returned a non-2xx status or an unusable envelope."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")


class ProviderNotConfigured(ProviderError):
    """Credentials for a provider are missing."""

    def __init__(self, provider: str):
        super().__init__(provider, "credentials not configured")
