"""In-memory energy tokenization ledger."""

from __future__ import annotations

__version__ = "0.1.0"
