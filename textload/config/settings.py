"""
Load configuration.

A load is described by one YAML file, validated into LoadSettings:

```yaml
sources:
  - data/customers/2024-01-31/part-0.txt
delimiter: "|"            # or widths: [6, 20, 10]
time_pattern: "(\\d{4})-(\\d{2})-(\\d{2})"   # or time: "20240131"
errors: out/customers/errors
with_key: true
clean: default            # identity, trim or default
rules: config/validation_rules.yaml
columns:
  - {name: customer_id, type: string}
  - {name: balance, type: "decimal(12,2)"}
  - {name: opened, type: date}
  - {name: time, type: string}
  - {name: key, type: string, nullable: false}
output: out/customers/accepted
output_format: parquet
```
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator

from textload.core.clean import Clean
from textload.core.filter import RowFilter
from textload.core.rules import RuleConfigLoader, RuleEngine
from textload.core.schema import StructTypeCodec, struct_from_columns
from textload.core.time_source import Predetermined, TimeSource, from_path_pattern
from textload.core.validators import Validator


class ColumnConfig(BaseModel):
    """One target column: name, type name (see struct_codec.TYPE_NAMES) and nullability."""

    name: str = Field(..., min_length=1)
    type: str = "string"
    nullable: bool = True


class LoadSettings(BaseModel):
    """
    Validated configuration of one load.

    Exactly one of delimiter/widths and exactly one of time/time_pattern
    must be given. Keyed loads need a delimiter and a trailing string column
    for the key.
    """

    sources: list[str] = Field(..., min_length=1)
    delimiter: str | None = None
    widths: list[int] | None = None
    time: str | None = None
    time_pattern: str | None = None
    errors: str
    overwrite_errors: bool = False
    with_key: bool = False
    clean: Literal["identity", "trim", "default"] = "default"
    row_leader: str | None = None
    rules: str | None = None
    columns: list[ColumnConfig] = Field(..., min_length=1)
    output: str | None = None
    output_format: Literal["parquet", "csv", "json"] = "parquet"

    @model_validator(mode="after")
    def check_exclusive_options(self) -> "LoadSettings":
        if (self.delimiter is None) == (self.widths is None):
            raise ValueError("Exactly one of 'delimiter' or 'widths' must be set")
        if self.delimiter == "":
            raise ValueError("'delimiter' must not be empty")
        if self.widths is not None and any(width < 0 for width in self.widths):
            raise ValueError("'widths' must not contain negative values")
        if (self.time is None) == (self.time_pattern is None):
            raise ValueError("Exactly one of 'time' or 'time_pattern' must be set")
        if self.with_key:
            if self.delimiter is None:
                raise ValueError("'with_key' is only supported for delimited loads")
            if self.columns[-1].type.lower() not in ("string", "str"):
                raise ValueError("The last column of a keyed load must be a string column for the key")
        return self

    @classmethod
    def from_yaml(cls, path: str | Path) -> "LoadSettings":
        """
        Load settings from a YAML file.

        Raises:
            FileNotFoundError: If path does not exist
            ValueError: If the file is empty or the settings are invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Load configuration file not found: {path}")

        with open(path) as f:
            config = yaml.safe_load(f)

        if not config:
            raise ValueError(f"Load configuration file is empty: {path}")

        return cls.model_validate(config)

    def time_source(self) -> TimeSource:
        if self.time is not None:
            return Predetermined(time=self.time)
        return from_path_pattern(self.time_pattern)

    def codec(self) -> StructTypeCodec:
        return StructTypeCodec(struct_from_columns([column.model_dump() for column in self.columns]))

    def cleaner(self) -> Clean:
        return {
            "identity": Clean.identity,
            "trim": Clean.trim,
            "default": Clean.default,
        }[self.clean]()

    def row_filter(self) -> RowFilter:
        if self.row_leader is not None:
            return RowFilter.by_row_leader(self.row_leader)
        return RowFilter.keep()

    def validator(self) -> Validator:
        if self.rules is None:
            return Validator.accept()
        return RuleEngine(RuleConfigLoader(self.rules).load_rules())
