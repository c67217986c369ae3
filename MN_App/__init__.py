"""Genesis account tool application layer (config/logging/ledger/cli)."""

__all__ = [
    "config",
    "logger",
    "ledger",
    "cli",
]
