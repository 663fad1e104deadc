"""
Rule table and fact file loading for jobflow.

Rule tables and fact snapshots can be kept in YAML or JSON files. This
module provides:
- FileReader for format detection and parsing (ruamel.yaml / json)
- pydantic models that validate rule-file structure, collecting every error
- load_rule_table / parse_rule_table producing a StageRuleTable
- load_facts for fact files or stdin
- dump_rule_table for exporting a table back to YAML or JSON
"""

import json
import logging
import sys
from io import StringIO
from pathlib import Path
from typing import IO, Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
)
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from jobflow.models import (
    ConfigValidationError,
    FileFormat,
    LoadError,
    RuleConfigurationError,
    RuleFileDict,
    RuleTableDefinition,
)
from jobflow.table import StageRuleTable

logger = logging.getLogger(__name__)

RULE_TABLE_KEY = "rule_table"


# ============================================================================
# File reading
# ============================================================================


class FileReader:
    """Reads YAML and JSON documents from files, streams or text."""

    @staticmethod
    def detect_format(file_path: Path) -> FileFormat:
        """Detect file format from extension, defaulting to YAML."""
        if file_path.suffix.lower() == ".json":
            return FileFormat.JSON
        return FileFormat.YAML

    @staticmethod
    def _yaml() -> YAML:
        return YAML(typ="safe", pure=True)

    @classmethod
    def parse(cls, text: str, file_format: FileFormat = FileFormat.YAML, source: str = "") -> Any:
        """
        Parse a document.

        Raises:
            LoadError: If the text is not valid YAML/JSON
        """
        label = source or "<input>"
        try:
            if file_format == FileFormat.JSON:
                return json.loads(text)
            return cls._yaml().load(text)
        except json.JSONDecodeError as e:
            raise LoadError(f"Invalid JSON in {label}: {e}") from e
        except YAMLError as e:
            raise LoadError(f"Invalid YAML in {label}: {e}") from e

    @classmethod
    def read(cls, file_path: str | Path) -> Any:
        """
        Read and parse a YAML or JSON file.

        Raises:
            LoadError: If the file is missing, unreadable or malformed
        """
        path = Path(file_path)
        if not path.exists():
            raise LoadError(f"File not found: {path}")
        if not path.is_file():
            raise LoadError(f"Not a file: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise LoadError(f"Cannot decode {path} as UTF-8: {e}") from e
        except OSError as e:
            raise LoadError(f"Cannot read {path}: {e}") from e

        logger.debug("Read %d characters from %s", len(text), path)
        return cls.parse(text, cls.detect_format(path), source=str(path))

    @classmethod
    def read_stream(cls, stream: IO[str]) -> Any:
        """Parse a YAML or JSON document from a text stream (JSON is valid YAML)."""
        try:
            text = stream.read()
        except UnicodeDecodeError as e:
            raise LoadError(f"Cannot decode <stdin> as UTF-8: {e}") from e
        if not text.strip():
            raise LoadError("No data provided on stdin")
        return cls.parse(text, FileFormat.YAML, source="<stdin>")

    @classmethod
    def dump(cls, data: Any, file_format: FileFormat = FileFormat.YAML) -> str:
        """Serialize data to YAML or JSON text."""
        if file_format == FileFormat.JSON:
            return json.dumps(data, indent=2) + "\n"
        yaml = cls._yaml()
        yaml.default_flow_style = False
        yaml.sort_base_mapping_type_on_output = False
        yaml.indent(mapping=2, sequence=4, offset=2)
        stream = StringIO()
        yaml.dump(data, stream)
        return stream.getvalue()


# ============================================================================
# Rule file validation models
# ============================================================================


class RuleFileModel(BaseModel):
    """Base model with common configuration for rule-file validation models."""

    model_config = ConfigDict(extra="forbid")


# Stage and fact names are trimmed; messages and operands are kept verbatim
Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class _PrerequisiteModel(RuleFileModel):
    field: Identifier = Field(description="Fact name looked up in the snapshot")
    message: str = Field(min_length=1, description="Shown when the check fails")


class ExistsPrerequisiteModel(_PrerequisiteModel):
    check: Literal["exists"]


class TruthyPrerequisiteModel(_PrerequisiteModel):
    check: Literal["truthy"]


class EqualsPrerequisiteModel(_PrerequisiteModel):
    check: Literal["equals"]
    value: bool | int | float | str = Field(description="Value the fact must equal")


class HasRelatedPrerequisiteModel(_PrerequisiteModel):
    check: Literal["has_related"]
    related_table: Identifier = Field(
        validation_alias=AliasChoices("related_table", "relatedTable")
    )
    related_field: Identifier = Field(
        validation_alias=AliasChoices("related_field", "relatedField")
    )


PrerequisiteModel = Annotated[
    ExistsPrerequisiteModel
    | TruthyPrerequisiteModel
    | EqualsPrerequisiteModel
    | HasRelatedPrerequisiteModel,
    Field(discriminator="check"),
]


class StageRuleModel(RuleFileModel):
    stage: Identifier
    label: str = ""
    can_skip: bool = Field(default=False, validation_alias=AliasChoices("can_skip", "canSkip"))
    prerequisites: list[PrerequisiteModel] = Field(default_factory=list)


class RuleTableModel(RuleFileModel):
    """Complete rule table, stages in pipeline order."""

    name: str = ""
    description: str = ""
    unrestricted_stages: list[Identifier] = Field(default_factory=list)
    stages: list[StageRuleModel] = Field(min_length=1)


def extract_validation_errors(error: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into readable messages."""
    messages = []
    for error_dict in error.errors():
        location = " -> ".join(str(loc) for loc in error_dict["loc"])
        messages.append(f"Field '{location}': {error_dict['msg']}")
    return messages


# ============================================================================
# Public loading API
# ============================================================================


def parse_rule_table(data: Any, source: str = "") -> StageRuleTable:
    """
    Build a rule table from parsed YAML/JSON data.

    The data may be the table itself or a mapping with a ``rule_table`` key.

    Raises:
        ConfigValidationError: If the structure or the rules are invalid
    """
    if isinstance(data, dict) and RULE_TABLE_KEY in data:
        data = data[RULE_TABLE_KEY]
    if not isinstance(data, dict):
        raise ConfigValidationError(
            [f"Rule table must be a mapping, got {type(data).__name__}"], source=source
        )

    try:
        model = RuleTableModel.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(extract_validation_errors(e), source=source) from e

    definition: RuleTableDefinition = model.model_dump(mode="python")
    try:
        table = StageRuleTable.from_definition(definition)
    except RuleConfigurationError as e:
        raise ConfigValidationError(e.errors, source=source) from e

    logger.info("Loaded rule table %s with %d stages", table.name or source or "<unnamed>", len(table))
    return table


def load_rule_table(file_path: str | Path) -> StageRuleTable:
    """
    Load a rule table from a YAML or JSON file.

    Raises:
        LoadError: If the file cannot be read or parsed
        ConfigValidationError: If the rule table is invalid
    """
    logger.debug("Loading rule table from %s", file_path)
    return parse_rule_table(FileReader.read(file_path), source=str(file_path))


def load_facts(file_path: str | Path | None = None, stream: IO[str] | None = None) -> dict[str, Any]:
    """
    Load a fact snapshot from a file, or from a stream (stdin by default).

    Raises:
        LoadError: If the data cannot be read or is not a mapping
    """
    if file_path is not None:
        data = FileReader.read(file_path)
        source = str(file_path)
    else:
        data = FileReader.read_stream(stream if stream is not None else sys.stdin)
        source = "<stdin>"

    if not isinstance(data, dict):
        raise LoadError(f"Facts in {source} must be a mapping, got {type(data).__name__}")
    bad_keys = [key for key in data if not isinstance(key, str)]
    if bad_keys:
        raise LoadError(
            f"Fact names in {source} must be strings, got " + ", ".join(repr(k) for k in bad_keys)
        )
    return data


def dump_rule_table(table: StageRuleTable, file_format: FileFormat = FileFormat.YAML) -> str:
    """Serialize a rule table, wrapped in a ``rule_table`` key."""
    data: RuleFileDict = {"rule_table": table.to_dict()}
    return FileReader.dump(data, file_format)
