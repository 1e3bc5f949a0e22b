"""writenex: content collection discovery, naming-pattern inference and caching."""

__version__ = "0.1.0"
