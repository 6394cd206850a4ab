"""Feature config errors."""


class FeatureConfigError(ValueError):
    """Stored config exists but cannot be turned back into an object."""


class DecryptionError(FeatureConfigError):
    """Wrong secret, truncated or tampered payload."""


class MarshallingError(FeatureConfigError):
    """Config cannot be marshalled or the payload has an unexpected format."""
