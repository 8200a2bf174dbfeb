"""
Features loading for the command line.

A features file is YAML in the camelCase layout:

    limitRequired: true
    excludeDeprecatedFields:
      attributeFilters: true
    filters:
      String:
        MATCHES: true
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from ..core.features import Features


logger = logging.getLogger(__name__)

DEFAULT_FEATURES_PATH = "graphaugment.yaml"


def load_features(path: Optional[Union[Path, str]] = None) -> Features:
    """Load features from a YAML file; defaults when the file does not exist."""
    path = Path(path or DEFAULT_FEATURES_PATH)
    if not path.exists():
        logger.debug(f"No features file at {path}; using defaults")
        return Features()

    data = yaml.safe_load(path.read_text())
    logger.debug(f"Loaded features from {path}")
    return Features.from_mapping(data)


def save_features(features: Features, path: Union[Path, str] = DEFAULT_FEATURES_PATH) -> None:
    """Save features to a YAML file, camelCase keys, callbacks omitted."""
    data = features.model_dump(by_alias=True, exclude={"populated_by"})
    Path(path).write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
