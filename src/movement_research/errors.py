"""Pipeline exceptions."""


class ConfigurationError(Exception):
    """Required credentials are missing; the run cannot start."""


class DecodeError(ValueError):
    """A reasoning-service response holds no valid structured object."""
