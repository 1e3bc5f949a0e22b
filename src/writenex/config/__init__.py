"""Configuration: ``writenex.toml`` discovery, settings and logging."""
