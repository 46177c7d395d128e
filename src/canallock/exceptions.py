"""Exceptions raised by the canal lock simulation."""


class ConfigurationError(ValueError):
    """Physical configuration outside the domain the model is defined for.

    Raised when a ship footprint does not fit inside the chamber, or when a
    configured constant or level is negative.
    """
