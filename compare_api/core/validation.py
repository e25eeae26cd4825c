"""Input validation for post payloads.

Validators never raise on bad input. Each returns a ValidationResult and the
caller decides what to do with the errors.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

KIB = 1024
MAX_IMAGE_BYTES = 10 * KIB * KIB
MIN_IMAGE_BYTES = KIB

IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")
GIF_TYPE = "image/gif"
GIF_EXTENSION = ".gif"

CAPTION_MAX_LENGTH = 500
CAPTION_STRICT_MIN_LENGTH = 2
CAPTION_WARNING_LENGTH = 400

SEARCH_MIN_LENGTH = 2
SEARCH_MAX_LENGTH = 100

SIZE_RATIO_WARNING = 10

UNSAFE_CHARACTERS = re.compile(r"[<>\"'&]")
UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)


@dataclass
class ImageFile:
    """An uploaded image held in memory."""

    filename: str
    content_type: str
    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        name = self.filename.lower()
        dot = name.rfind(".")
        return name[dot:] if dot != -1 else ""


@dataclass
class ValidationResult:
    """Outcome of one or more checks."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, message: str) -> "ValidationResult":
        self.errors.append(message)
        return self

    def extend(self, other: "ValidationResult", prefix: str = "") -> "ValidationResult":
        """Fold another result into this one, labelling its errors."""
        self.errors.extend(f"{prefix}{message}" for message in other.errors)
        self.warnings.extend(other.warnings)
        return self


def format_file_size(size: int) -> str:
    """Human readable byte count: 0 Bytes, 512 Bytes, 1.5 KB, 10 MB."""
    if size == 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    index = 0
    value = float(size)
    while value >= KIB and index < len(units) - 1:
        value /= KIB
        index += 1
    return f"{round(value, 2):g} {units[index]}"


def sanitize_file_name(filename: str) -> str:
    """Make a client file name safe to embed in a storage path."""
    name = re.sub(r"[^a-zA-Z0-9.-]", "_", filename)
    name = re.sub(r"_{2,}", "_", name)
    name = name.strip("_")
    return name.lower()


def validate_image_file(image: ImageFile, allow_gif: bool = False) -> ValidationResult:
    """Check size bounds, MIME type and extension of an uploaded image.

    The extension is checked on its own even when the MIME type passes, since
    clients control both.

    Args:
        image: Uploaded image
        allow_gif: Also accept image/gif and .gif

    Returns:
        ValidationResult with one error per violated rule
    """
    result = ValidationResult()
    allowed_types = IMAGE_TYPES + ((GIF_TYPE,) if allow_gif else ())
    allowed_extensions = IMAGE_EXTENSIONS + ((GIF_EXTENSION,) if allow_gif else ())

    if image.size > MAX_IMAGE_BYTES:
        result.error(f"File too large. Maximum size is {format_file_size(MAX_IMAGE_BYTES)}")
    elif image.size < MIN_IMAGE_BYTES:
        result.error(f"File too small. Minimum size is {format_file_size(MIN_IMAGE_BYTES)}")

    if (image.content_type or "").lower() not in allowed_types:
        names = "JPEG, PNG, WebP, GIF" if allow_gif else "JPEG, PNG, WebP"
        result.error(f"Invalid file type. Allowed types: {names}")

    if image.extension not in allowed_extensions:
        result.error(f"Invalid file extension. Allowed extensions: {', '.join(allowed_extensions)}")

    return result


def validate_caption(caption: str, strict: bool = False) -> ValidationResult:
    """Check caption length and reject unsafe characters (never strips them)."""
    result = ValidationResult()

    if len(caption) > CAPTION_MAX_LENGTH:
        result.error(f"Caption too long. Maximum {CAPTION_MAX_LENGTH} characters allowed")

    if strict and 0 < len(caption) < CAPTION_STRICT_MIN_LENGTH:
        result.error(f"Caption too short. Minimum {CAPTION_STRICT_MIN_LENGTH} characters required")

    if UNSAFE_CHARACTERS.search(caption):
        result.error("Caption contains invalid characters")

    return result


def validate_uuid(value: Optional[str], label: str = "ID") -> ValidationResult:
    """Require the canonical 8-4-4-4-12 hex form."""
    result = ValidationResult()

    if not value or not isinstance(value, str):
        return result.error(f"Invalid {label}")

    if not UUID_PATTERN.fullmatch(value):
        result.error(f"Invalid {label} format")

    return result


def validate_user_id(user_id: Optional[str]) -> ValidationResult:
    return validate_uuid(user_id, "user ID")


def validate_post_id(post_id: Optional[str]) -> ValidationResult:
    return validate_uuid(post_id, "post ID")


def validate_search_term(term: str) -> ValidationResult:
    """Search terms are empty or 2..100 characters without unsafe characters."""
    result = ValidationResult()

    if len(term) > SEARCH_MAX_LENGTH:
        result.error(f"Search term too long. Maximum {SEARCH_MAX_LENGTH} characters allowed")
    elif 0 < len(term) < SEARCH_MIN_LENGTH:
        result.error(f"Search term too short. Minimum {SEARCH_MIN_LENGTH} characters required")

    if UNSAFE_CHARACTERS.search(term):
        result.error("Search term contains invalid characters")

    return result


def validate_all_inputs(
    before: Optional[ImageFile] = None,
    after: Optional[ImageFile] = None,
    caption: Optional[str] = None,
    search_term: Optional[str] = None,
    user_id: Optional[str] = None,
    post_id: Optional[str] = None,
    allow_gif: bool = False,
    strict_caption: bool = False,
) -> ValidationResult:
    """Validate every provided field and collect all errors and warnings.

    Fields left as None are skipped. Errors are prefixed with the field they
    belong to. Warnings never make the result invalid.
    """
    result = ValidationResult()

    if before is not None:
        result.extend(validate_image_file(before, allow_gif), "Before image: ")
    if after is not None:
        result.extend(validate_image_file(after, allow_gif), "After image: ")
    if caption is not None:
        result.extend(validate_caption(caption, strict_caption), "Caption: ")
    if search_term is not None:
        result.extend(validate_search_term(search_term), "Search term: ")
    if user_id is not None:
        result.extend(validate_user_id(user_id), "User ID: ")
    if post_id is not None:
        result.extend(validate_post_id(post_id), "Post ID: ")

    if caption and len(caption) > CAPTION_WARNING_LENGTH:
        result.warnings.append("Caption is quite long and may be truncated in some views")

    if before is not None and after is not None:
        smaller = min(before.size, after.size)
        larger = max(before.size, after.size)
        if larger and (smaller == 0 or larger / smaller > SIZE_RATIO_WARNING):
            result.warnings.append(
                "Images have very different file sizes - this may affect loading performance"
            )

    return result
