"""Process level exceptions raised while wiring the application."""


class ConfigurationError(Exception):
    """Raised when settings are unusable for starting the service."""
