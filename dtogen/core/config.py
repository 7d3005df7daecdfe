"""
Batch configuration for DTO generation.

Loads the YAML document that declares several DTOs at once and turns
each entry into a TransformConfig, applying the global defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..logging_config import get_logger
from .errors import ConfigError
from .naming import default_output_file, default_output_name
from .schema import Filter, TransformConfig

logger = get_logger(__name__)

SAMPLE_CONFIG_FILE = "dtogen_sample.yaml"


@dataclass
class GlobalConfig:
    """Settings applied to every DTO unless an entry overrides them."""

    output_dir: Optional[str] = None
    imports: List[str] = field(default_factory=list)
    exclude_imports: List[str] = field(default_factory=list)
    source: str = "."


@dataclass
class DTOConfig:
    """One DTO declaration."""

    type: str
    source: Optional[str] = None
    name: Optional[str] = None
    output: Optional[str] = None
    excludes: List[str] = field(default_factory=list)
    includes: List[str] = field(default_factory=list)
    add_fields: List[str] = field(default_factory=list)
    renames: Dict[str, str] = field(default_factory=dict)
    filters: List[Filter] = field(default_factory=list)
    template: Optional[str] = None

    @property
    def output_name(self) -> str:
        return self.name or default_output_name(self.type)

    @property
    def output_file(self) -> str:
        return self.output or default_output_file(self.output_name)

    def source_location(self, global_config: GlobalConfig) -> str:
        return self.source or global_config.source or "."

    def to_transform_config(self, global_config: GlobalConfig) -> TransformConfig:
        return TransformConfig(
            output_name=self.output_name,
            includes=frozenset(self.includes),
            excludes=frozenset(self.excludes),
            renames=dict(self.renames),
            add_fields=tuple(self.add_fields),
            filters=tuple(self.filters),
            imports=tuple(global_config.imports),
            exclude_imports=frozenset(global_config.exclude_imports),
            template=Path(self.template) if self.template else None,
        )


@dataclass
class BatchConfig:
    """Parsed batch document."""

    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    dtos: List[DTOConfig] = field(default_factory=list)


def load_config(path: Union[str, Path]) -> BatchConfig:
    """
    Load a batch document from YAML.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed batch configuration

    Raises:
        ConfigError: If the file is missing, not valid YAML, or malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    config = parse_config(data, origin=str(path))
    logger.info("Loaded %d DTO declaration(s) from %s", len(config.dtos), path)
    return config


def parse_config(data: Any, origin: str = "<config>") -> BatchConfig:
    """Build a BatchConfig from already-parsed YAML data."""
    if data is None:
        return BatchConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{origin}: top level must be a mapping")

    global_config = _parse_global(data.get("global") or {}, origin)

    raw_dtos = data.get("dtos") or []
    if not isinstance(raw_dtos, list):
        raise ConfigError(f"{origin}: 'dtos' must be a list")

    dtos = [
        _parse_dto(entry, f"{origin}: dtos[{index}]")
        for index, entry in enumerate(raw_dtos)
    ]
    return BatchConfig(global_config=global_config, dtos=dtos)


def _parse_global(data: Any, where: str) -> GlobalConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: 'global' must be a mapping")
    return GlobalConfig(
        output_dir=_optional_str(data, "output_dir", where),
        imports=_str_list(data, "imports", where),
        exclude_imports=_str_list(data, "exclude_imports", where),
        source=_optional_str(data, "source", where) or ".",
    )


def _parse_dto(data: Any, where: str) -> DTOConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: entry must be a mapping")

    type_name = _optional_str(data, "type", where)
    if not type_name:
        raise ConfigError(f"{where}: 'type' is required")

    renames = data.get("renames") or {}
    if not isinstance(renames, dict):
        raise ConfigError(f"{where}: 'renames' must be a mapping")

    return DTOConfig(
        type=type_name,
        source=_optional_str(data, "source", where),
        name=_optional_str(data, "name", where),
        output=_optional_str(data, "output", where),
        excludes=_str_list(data, "excludes", where),
        includes=_str_list(data, "includes", where),
        add_fields=_str_list(data, "add_fields", where),
        renames={str(k): str(v) for k, v in renames.items()},
        filters=_filters(data, where),
        template=_optional_str(data, "template", where),
    )


def _optional_str(data: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{where}: '{key}' must be a string")
    return str(value)


def _str_list(data: Dict[str, Any], key: str, where: str) -> List[str]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ConfigError(f"{where}: '{key}' must be a list")
    return [str(item) for item in value]


def _filters(data: Dict[str, Any], where: str) -> List[Filter]:
    value = data.get("filters") or []
    if not isinstance(value, list):
        raise ConfigError(f"{where}: 'filters' must be a list")

    filters = []
    for index, item in enumerate(value):
        if not isinstance(item, dict) or "when" not in item or "do" not in item:
            raise ConfigError(
                f"{where}: filters[{index}] needs 'when' and 'do' keys"
            )
        filters.append(Filter(when=str(item["when"]), do=str(item["do"])))
    return filters


SAMPLE_CONFIG = """\
# Global settings applied to all DTOs unless overridden
global:
  output_dir: "./generated"
  source: "./models"
  imports:
    - "from decimal import Decimal"
  # exclude_imports:
  #   - "sqlalchemy.orm"

dtos:
  - type: User
    source: "./models"
    name: UserDTO
    output: user_dto.py
    excludes:
      - password
    # includes: [id, username]
    # renames:
    #   username: login
    # add_fields:
    #   - "display_name: str = ''"
    # filters:
    #   - when: "source.is_confidential"
    #     do: |
    #       dto.email = None
    # template: "./templates/custom_dto.py.j2"
"""


def generate_sample(path: Union[str, Path] = SAMPLE_CONFIG_FILE) -> Path:
    """Write a commented sample batch document."""
    path = Path(path)
    try:
        path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write sample config to {path}: {e}") from e
    return path
