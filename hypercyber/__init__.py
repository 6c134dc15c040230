"""HyperCyber console: RGPD compliance records and asset catalogue client."""

__version__ = "1.0.0"
