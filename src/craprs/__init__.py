"""craprs - CRAP (Change Risk Anti-Pattern) scores for Rust functions."""

__version__ = "0.1.0"
