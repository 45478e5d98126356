"""conceptdeck - sharded concept notebooks presented as one navigable sequence."""

__version__ = "0.1.0"
