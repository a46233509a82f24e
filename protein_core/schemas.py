from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


DEFAULT_STORE_FILE_NAME = "tmpProteinInfoCache.db3"


class ProteinCacheError(Exception):
    """Base class for protein cache failures."""


class CacheStateError(ProteinCacheError):
    """Raised when an operation is invalid for the current store state."""


class StoreSchemaError(ProteinCacheError):
    """Raised when the backing table exists with an unexpected layout."""


TBaseSchema = TypeVar("TBaseSchema", bound="BaseSchema")


class BaseSchema(BaseModel):
    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json")

    @classmethod
    def from_json(cls: type[TBaseSchema], data: str) -> TBaseSchema:
        return cls.model_validate_json(data)

    @classmethod
    def from_dict(cls: type[TBaseSchema], data: Mapping[str, object]) -> TBaseSchema:
        return cls.model_validate(data)


class ProteinRecord(BaseSchema):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    sequence: str
    unique_sequence_id: int = Field(ge=0)
    percent_coverage: float = Field(default=0.0, ge=0.0, le=1.0)


class DelimitedFileFormat(str, Enum):
    """Column order of a delimited protein file."""

    SEQUENCE_ONLY = "sequence_only"
    NAME_SEQUENCE = "name_sequence"
    NAME_DESCRIPTION_SEQUENCE = "name_description_sequence"
    NAME_SEQUENCE_DESCRIPTION = "name_sequence_description"

    @property
    def columns(self) -> tuple[str, ...]:
        return _FORMAT_COLUMNS[self]


_FORMAT_COLUMNS: dict[DelimitedFileFormat, tuple[str, ...]] = {
    DelimitedFileFormat.SEQUENCE_ONLY: ("sequence",),
    DelimitedFileFormat.NAME_SEQUENCE: ("name", "sequence"),
    DelimitedFileFormat.NAME_DESCRIPTION_SEQUENCE: ("name", "description", "sequence"),
    DelimitedFileFormat.NAME_SEQUENCE_DESCRIPTION: ("name", "sequence", "description"),
}


def _require_single_char(value: str, field: str) -> str:
    if len(value) != 1:
        raise ValueError(f"{field} must be exactly one character, got {value!r}")
    if value == "\0":
        raise ValueError(f"{field} must not be the NUL character")
    return value


class FastaFileOptions(BaseSchema):
    record_start_char: str = ">"
    accession_end_char: str = " "

    @field_validator("record_start_char", "accession_end_char")
    @classmethod
    def single_char(cls, value: str, info: ValidationInfo) -> str:
        return _require_single_char(value, info.field_name or "value")

    @model_validator(mode="after")
    def distinct_chars(self) -> "FastaFileOptions":
        if self.record_start_char == self.accession_end_char:
            raise ValueError("record_start_char and accession_end_char must differ")
        return self


class CacheOptions(BaseSchema):
    """Reader, normalization and store settings for one ingest run."""

    assume_fasta: bool = False
    assume_delimited: bool = False
    delimiter: str = "\t"
    delimited_format: DelimitedFileFormat = DelimitedFileFormat.NAME_DESCRIPTION_SEQUENCE
    skip_header_line: bool = False

    strip_symbols: bool = True
    fold_lowercase: bool = False
    fold_uppercase: bool = False
    unify_il: bool = False

    fasta: FastaFileOptions = Field(default_factory=FastaFileOptions)

    retain_store_file: bool = False
    store_file_name: str = DEFAULT_STORE_FILE_NAME
    store_directory: str | None = None
    progress_interval: int = Field(default=100, gt=0)
    commit_partial_on_error: bool = False

    @field_validator("delimiter")
    @classmethod
    def delimiter_single_char(cls, value: str) -> str:
        value = _require_single_char(value, "delimiter")
        if value in "\r\n":
            raise ValueError("delimiter must not be a line break")
        return value

    @field_validator("store_file_name")
    @classmethod
    def plain_file_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("store_file_name must not be empty")
        if "/" in stripped or "\\" in stripped:
            raise ValueError("store_file_name must be a file name, not a path")
        return stripped


class IngestErrorKind(str, Enum):
    INPUT = "input"
    INGEST = "ingest"


class IngestResult(BaseSchema):
    success: bool
    record_count: int = Field(default=0, ge=0)
    lines_read: int = Field(default=0, ge=0)
    store_path: str | None = None
    error_kind: IngestErrorKind | None = None
    message: str = ""
    partial: bool = False
