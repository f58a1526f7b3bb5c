"""Exceptions raised by the slippy layer."""


class SlippyLayerError(Exception):
    """Base class for errors raised by slippylayer."""


class ConfigurationError(SlippyLayerError, ValueError):
    """A setting holds a value the layer cannot work with."""
