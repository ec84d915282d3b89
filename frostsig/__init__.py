"""FROST threshold key generation and signing with Ed25519-compatible output over ristretto255."""

__version__ = "0.1.0"