"""
gift_preview
============

Does: Root package initializer for the gift preview compiler.
Returns: Exposes the `compiler` and `session` subpackages through a stable namespace.
Used by: All higher-level imports starting from `gift_preview.*`.
"""

__all__: list[str] = []
__docformat__ = "google"
