"""Components of a verifiable-credential verifier: configuration, registry clients, caches, models and logging."""

__version__ = "0.1.0"

__all__ = [
    "cache",
    "common",
    "config_client",
    "document_loader",
    "health",
    "log",
    "models",
    "provider",
    "registry",
    "settings",
    "tir_client",
]