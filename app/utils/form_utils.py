import json
from typing import Any, Dict, Iterable, List, Optional
from fastapi import UploadFile


from app.core.config import settings
from app.schemas.utility_schemas import ImageUpload
from app.utils.exception_utils import ValidationException


def present_fields(**fields: Any) -> Dict[str, Any]:
    """Keep only the form fields the client actually sent."""
    return {key: value for key, value in fields.items() if value is not None}


def parse_identifier_list(values: Optional[Iterable[str]], field: str) -> List[str]:
    """
    Read a list of identifiers sent either as a JSON array, a comma separated string
    or repeated form fields.

    Args:
        values: Raw form values
        field: Form field name used in error locations

    Returns:
        Identifiers in the order given, blanks removed
    """
    identifiers: List[str] = []
    for raw in values or []:
        raw = (raw or "").strip()
        if not raw:
            continue
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                raise ValidationException(
                    fields=[{"field": field, "message": "Invalid JSON array"}]
                )
            if not isinstance(parsed, list):
                raise ValidationException(
                    fields=[{"field": field, "message": "Expected a list of identifiers"}]
                )
            identifiers.extend(str(item).strip() for item in parsed)
        else:
            identifiers.extend(part.strip() for part in raw.split(","))
    return [identifier for identifier in identifiers if identifier]


def parse_specs(
    specs: Optional[str],
    seats: Optional[str] = None,
    fuel: Optional[str] = None,
    transmission: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Build the specs object from a JSON ``specs`` field and/or flat form fields.
    Flat fields win over keys of the JSON object.

    Args:
        specs: JSON object string
        seats: Number of seats
        fuel: Fuel type
        transmission: Transmission type

    Returns:
        Dictionary of supplied spec keys, or None when nothing was sent
    """
    data: Dict[str, Any] = {}
    if specs and specs.strip():
        try:
            parsed = json.loads(specs)
        except json.JSONDecodeError:
            raise ValidationException(
                fields=[{"field": "specs", "message": "Invalid JSON object"}]
            )
        if not isinstance(parsed, dict):
            raise ValidationException(
                fields=[{"field": "specs", "message": "Expected a JSON object"}]
            )
        data.update(parsed)
    data.update(present_fields(seats=seats, fuel=fuel, transmission=transmission))
    return data or None


async def read_uploads(files: Optional[List[UploadFile]]) -> List[ImageUpload]:
    """
    Read multipart files into memory. Empty file parts sent by browsers are skipped.
    At most one byte past the size limit is read per file, enough for the size
    check to reject it.

    Args:
        files: Uploaded files

    Returns:
        ImageUpload per file, in submission order
    """
    read_limit = settings.MAX_IMAGE_SIZE_MB * 1024 * 1024 + 1
    uploads: List[ImageUpload] = []
    for file in files or []:
        if file is None or not file.filename:
            continue
        uploads.append(
            ImageUpload(
                filename=file.filename,
                content_type=file.content_type or "",
                data=await file.read(read_limit),
            )
        )
    return uploads
