"""Loaders — analysis-options.yml into AnalysisOptions, crawl JSON into snapshots."""

import json
from pathlib import Path

import yaml

from sca.schemas.config import AnalysisOptions
from sca.schemas.snapshot import AnalysisSnapshot


def load_config(path: str | Path) -> AnalysisOptions:
    """Load and validate an analysis options file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    An empty file yields the default options.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        return AnalysisOptions()
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    return AnalysisOptions(**raw)


def load_snapshot(path: str | Path) -> AnalysisSnapshot:
    """Load a crawled site snapshot from a JSON file.

    Accepts the crawler's camelCase output as-is. When the file has no
    ``domain`` it is derived from the file name.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    raw = json.loads(path.read_text())
    if not isinstance(raw, dict):
        raise ValueError(f"Snapshot file must contain a JSON object, got {type(raw).__name__}")

    raw.setdefault("domain", path.stem)
    return AnalysisSnapshot.model_validate(raw)
