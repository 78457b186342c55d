from __future__ import annotations


class SitegenError(Exception):
    """Base error for the model server."""


class UnknownProviderError(SitegenError):
    def __init__(self, provider_id: str) -> None:
        super().__init__(f"Unknown provider: {provider_id}")
        self.provider_id = provider_id


class ProviderUnavailableError(SitegenError):
    """Raised when a known provider is not configured."""

    def __init__(self, provider_id: str) -> None:
        super().__init__(f"Provider is not configured: {provider_id}")
        self.provider_id = provider_id


class PickerError(SitegenError):
    pass
