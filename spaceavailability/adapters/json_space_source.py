"""
Space sources that load schedule records from JSON files or the app config.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from ..config import AppConfig, SpaceConfig
from ..domain.exceptions import SpaceConfigError, SpaceNotFoundError
from ..domain.models import Space

logger = logging.getLogger(__name__)


class JsonSpaceSource:
    """
    Loads spaces from a directory of JSON records.

    Each ``<name>.json`` file holds one space in the camelCase shape::

        {"timeZone": "America/New_York", "minimumNotice": 0,
         "openingTimes": {"1": {"open": {"hour": 9, "minute": 0},
                                "close": {"hour": 17, "minute": 0}}}}

    The file stem is used as the space name.
    """

    def __init__(self, directory: Path):
        """
        Initialize the source.

        Args:
            directory: Folder containing the ``*.json`` space records
        """
        self.directory = Path(directory)

    def list_spaces(self) -> List[str]:
        """Return the names of all space records, sorted."""
        if not self.directory.is_dir():
            logger.warning("Space directory %s does not exist", self.directory)
            return []
        return sorted(path.stem for path in self.directory.glob("*.json"))

    def get_space(self, name: str) -> Space:
        """
        Load and validate a single space record.

        Raises:
            SpaceNotFoundError: If no record with this name exists
            SpaceConfigError: If the record is not valid JSON or fails validation
        """
        path = self.directory / f"{name}.json"
        if not path.is_file():
            raise SpaceNotFoundError(f"No space named '{name}' in {self.directory}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise SpaceConfigError(f"Could not read space record {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise SpaceConfigError(f"Space record {path} must contain a JSON object")

        data.setdefault("name", name)
        try:
            space_config = SpaceConfig.model_validate(data)
        except ValidationError as exc:
            raise SpaceConfigError(f"Invalid space record {path}: {exc}") from exc

        logger.debug("Loaded space %r from %s", name, path)
        return space_config.to_space()


class ConfigSpaceSource:
    """Serves the spaces declared inline in the application config."""

    def __init__(self, config: AppConfig):
        self.config = config

    def list_spaces(self) -> List[str]:
        return [space.name for space in self.config.spaces]

    def get_space(self, name: str) -> Space:
        space_config = self.config.find_space(name)
        if space_config is None:
            raise SpaceNotFoundError(f"No space named '{name}' in the configuration")
        return space_config.to_space()


class CompositeSpaceSource:
    """
    Looks spaces up in several sources, first match wins.

    Useful for combining inline config spaces with a fixtures directory.
    """

    def __init__(self, *sources):
        self.sources = list(sources)

    def list_spaces(self) -> List[str]:
        names: Dict[str, None] = {}
        for source in self.sources:
            for name in source.list_spaces():
                names.setdefault(name, None)
        return list(names)

    def get_space(self, name: str) -> Space:
        for source in self.sources:
            try:
                return source.get_space(name)
            except SpaceNotFoundError:
                continue
        raise SpaceNotFoundError(f"Unknown space: '{name}'")
