"""
graphaugment CLI - Command line tools for augmenting and validating schemas.
"""

from __future__ import annotations

from .config import load_features, save_features
from .main import app, main

__all__ = ["app", "load_features", "main", "save_features"]
