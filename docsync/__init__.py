"""Synchronize a language-neutral documentation tree into per-language outputs."""

__version__ = "0.4.0"
