"""Input validation with strong typing and the Result pattern."""

import re
import shutil
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, BinaryIO

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from returns.result import Failure, Result, Success

from .config import Settings, get_settings
from .logging_config import get_logger

logger = get_logger(__name__)

# Validation limits
MAX_REQUIREMENTS_LENGTH = 20_000
MAX_SEARCH_PROMPT_LENGTH = 500

EXTENSION_SUFFIXES = frozenset({".aix"})
IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp"})

PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")

EXTENSIONS_SLOT = "extensions"
DESIGN_IMAGES_SLOT = "designImages"


class ValidationError(Exception):
    """Validation failed for one or more request fields."""

    def __init__(self, message: str, fields: Iterable[str] = (), errors: list[dict[str, str]] | None = None):
        super().__init__(message)
        self.message = message
        self.fields = tuple(fields)
        self.errors = errors if errors is not None else [
            {"field": name, "message": message} for name in self.fields
        ]


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    fields: tuple[str, ...] = ()
    errors: list[dict[str, str]] = field(default_factory=list)

    def to_exception(self) -> ValidationError:
        return ValidationError(self.message, self.fields, list(self.errors))


@dataclass
class UploadedFile:
    """An uploaded file handle: its original name plus a readable byte source."""

    filename: str
    stream: BinaryIO

    @property
    def stem(self) -> str:
        return PurePath(self.filename).stem

    @property
    def suffix(self) -> str:
        return PurePath(self.filename).suffix.lower()

    @property
    def basename(self) -> str:
        """Filename with any client-side directory components removed."""
        return PurePath(self.filename.replace("\\", "/")).name

    def copy_to(self, target: BinaryIO) -> None:
        """Copy the full byte content into ``target``."""
        self.stream.seek(0)
        shutil.copyfileobj(self.stream, target)

    def close(self) -> None:
        """Release the underlying temporary upload."""
        if not self.stream.closed:
            self.stream.close()


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True,
        validate_assignment=True,
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


class GenerationRequest(RequestValidator):
    """Validated archive generation request."""

    project_name: str = Field(min_length=1, max_length=100)
    user_id: str = Field(min_length=1, max_length=100)
    api_key: str = ""
    cse_id: str = ""
    search_prompt: str = Field(default="", max_length=MAX_SEARCH_PROMPT_LENGTH)
    requirements: str = Field(default="", max_length=MAX_REQUIREMENTS_LENGTH)
    save_config: bool = False
    validate_strict: bool = True
    extension_files: list[UploadedFile] = Field(default_factory=list)
    design_image_files: list[UploadedFile] = Field(default_factory=list)

    @field_validator("api_key", "cse_id", "search_prompt", "requirements", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("project_name")
    @classmethod
    def validate_project_name(cls, v: str) -> str:
        """Project name becomes a path segment and a Java package segment."""
        v = v.strip()
        if not PROJECT_NAME_PATTERN.match(v):
            raise ValueError("Project name must start with a letter and contain only letters, digits and underscores")
        return v

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        v = v.strip()
        if not USER_ID_PATTERN.match(v):
            raise ValueError("User ID may contain only letters, digits, '_', '.' and '-'")
        return v

    @property
    def effective_search_prompt(self) -> str:
        return self.search_prompt.strip()

    def close_uploads(self) -> None:
        """Release every uploaded file handle."""
        for upload in [*self.extension_files, *self.design_image_files]:
            upload.close()


def _field_name(loc: tuple[Any, ...]) -> str:
    name = str(loc[0]) if loc else "request"
    return to_camel(name) if "_" in name else name


def _check_slot(
    uploads: list[UploadedFile],
    slot: str,
    allowed: frozenset[str],
    limit: int,
    strict: bool,
) -> tuple[list[UploadedFile], list[dict[str, str]]]:
    kept: list[UploadedFile] = []
    errors: list[dict[str, str]] = []
    seen: set[str] = set()
    for upload in uploads:
        if upload.suffix not in allowed:
            message = f"{upload.filename}: only {', '.join(sorted(allowed))} files are allowed"
        elif upload.basename in seen:
            # Uploads land in one directory by basename
            message = f"{upload.filename}: duplicate file name"
        else:
            seen.add(upload.basename)
            kept.append(upload)
            continue
        if strict:
            errors.append({"field": slot, "message": message})
        else:
            logger.warning("upload_dropped", slot=slot, filename=upload.filename, reason=message)
            upload.close()
    if len(kept) > limit:
        errors.append({"field": slot, "message": f"At most {limit} files are allowed"})
    return kept, errors


def validate_uploads(request: GenerationRequest, settings: Settings | None = None) -> GenerationRequest:
    """
    Check upload slots against the allowed suffixes, duplicate names and count limits.

    In strict mode a disallowed or repeated file is an error; otherwise it is dropped.

    Raises:
        ValidationError: If any slot is invalid
    """
    settings = settings or get_settings()
    strict = request.validate_strict
    extensions, ext_errors = _check_slot(
        request.extension_files, EXTENSIONS_SLOT, EXTENSION_SUFFIXES, settings.max_extension_files, strict
    )
    images, image_errors = _check_slot(
        request.design_image_files, DESIGN_IMAGES_SLOT, IMAGE_SUFFIXES, settings.max_design_images, strict
    )
    errors = ext_errors + image_errors
    if errors:
        fields = sorted({e["field"] for e in errors})
        raise ValidationError("Invalid file uploads", fields, errors)
    if len(extensions) == len(request.extension_files) and len(images) == len(request.design_image_files):
        return request
    return request.model_copy(update={"extension_files": extensions, "design_image_files": images})


def validate_request(
    data: Mapping[str, Any],
    extension_files: Iterable[UploadedFile] = (),
    design_images: Iterable[UploadedFile] = (),
    settings: Settings | None = None,
) -> Result[GenerationRequest, ValidationResult]:
    """
    Validate a raw request body plus its uploads (Result pattern version).

    Args:
        data: Request fields, camelCase or snake_case keys
        extension_files: Uploads from the extensions slot
        design_images: Uploads from the design images slot

    Returns:
        Success with the immutable request, or Failure naming the offending fields
    """
    payload = dict(data)
    payload["extension_files"] = list(extension_files)
    payload["design_image_files"] = list(design_images)
    try:
        request = GenerationRequest.model_validate(payload)
    except PydanticValidationError as e:
        errors = [{"field": _field_name(err["loc"]), "message": err["msg"]} for err in e.errors()]
        fields = tuple(dict.fromkeys(err["field"] for err in errors))
        return Failure(ValidationResult("Invalid request body", fields, errors))
    try:
        return Success(validate_uploads(request, settings))
    except ValidationError as e:
        return Failure(ValidationResult(e.message, e.fields, e.errors))
