"""Tool configuration schema and loading.

Validates the tool config file (``configs/tool.v1.yaml``) with pydantic:
    - logging: level, console colors, JSON file output
    - validation: optional override of the packaged JSON schema
    - import_defaults: which default document fills rejected fields
    - export: output directory for exported metadata files

Loading fails fast with the offending key and the config path in the
message.

Usage:
    from nwb_metadata.utils import validators

    tool_cfg = validators.load_tool_config("configs/tool.v1.yaml")
    defaults = tool_cfg.defaults_document()
"""

from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .. import value_lists


class ConfigError(Exception):
    """Raised when the tool configuration is invalid."""

    pass


class LoggingSettings(BaseModel):
    """Console/file logging for entrypoints (see logging_config.setup_logging)."""
    level: str = Field("INFO", description="Root log level")
    color: bool = Field(True, description="ANSI colors on the console")
    json_file: bool = Field(False, description="JSON lines in the log file")
    file: Optional[str] = Field(None, description="Log file path, None for console only")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"level must be one of {allowed}, got '{v}'")
        return v.upper()

    def setup_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for logging_config.setup_logging()."""
        return {
            'log_level': self.level,
            'log_file': self.file,
            'json': self.json_file,
            'color': self.color,
        }


class ValidationSettings(BaseModel):
    """Schema selection."""
    schema_path: Optional[str] = Field(
        None, description="JSON schema overriding the packaged nwb_schema.json"
    )


class ExportSettings(BaseModel):
    """Where exported metadata files are written."""
    output_dir: str = Field("outputs/metadata", description="Export directory")


class ToolConfigV1(BaseModel):
    """Tool config schema v1 (complete config file)."""
    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    schema_version: str = Field("nwb_metadata_tool.v1", alias="schema", description="Schema version")
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    import_defaults: Literal["empty", "lab"] = Field(
        "empty", description="Default document used for fields rejected on import"
    )
    export: ExportSettings = Field(default_factory=ExportSettings)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "nwb_metadata_tool.v1":
            raise ValueError(f"Expected schema 'nwb_metadata_tool.v1', got '{v}'")
        return v

    def defaults_document(self) -> Dict[str, Any]:
        """Fresh copy of the default document selected by ``import_defaults``."""
        if self.import_defaults == "lab":
            return value_lists.default_yml_values()
        return value_lists.empty_form_data()


def load_tool_config(path: Union[str, Path]) -> ToolConfigV1:
    """Load and validate the tool config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to tool.v1.yaml file

    Returns
    -------
    ToolConfigV1
        Validated tool configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ConfigError
        If the file is not valid YAML or fails validation
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tool config not found: {path}")

    try:
        data = fs.load_yaml(path)
        return ToolConfigV1(**data)
    except (fs.ParseError, ValidationError) as e:
        raise ConfigError(f"Tool config validation failed at {path}: {e}") from e
