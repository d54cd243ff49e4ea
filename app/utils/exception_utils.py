from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status


class DetailedHTTPException(HTTPException):
    """
    Base exception for all custom HTTP exceptions with extended detail support.

    Carries a machine readable ``kind`` and, for input errors, the list of
    offending ``fields`` as ``{"field": ..., "message": ...}`` entries.
    """

    kind: str = "Error"

    def __init__(
        self,
        status_code: int,
        detail: str,
        fields: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ):
        super().__init__(status_code=status_code, detail=detail, **kwargs)
        self.fields = fields or []


class ValidationException(DetailedHTTPException):
    """
    Raised when input has the wrong shape or is out of range.
    """

    kind = "ValidationError"

    def __init__(
        self,
        detail: str = "Validation failed",
        fields: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST, detail=detail, fields=fields
        )

    @property
    def field_names(self) -> List[str]:
        return [f["field"] for f in self.fields]


class MissingImageException(DetailedHTTPException):
    """
    Raised when a record that requires images is created without any.
    """

    kind = "MissingImageError"

    def __init__(self, detail: str = "At least one image is required"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            fields=[{"field": "images", "message": detail}],
        )


class EmptyImageSetException(DetailedHTTPException):
    """
    Raised when an image change would leave a listing without images.
    """

    kind = "EmptyImageSetError"

    def __init__(self, detail: str = "A listing must keep at least one image"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            fields=[{"field": "images", "message": detail}],
        )


class CredentialsException(DetailedHTTPException):
    """
    Raised when authentication fails or credentials are invalid.
    """

    kind = "CredentialsError"

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(DetailedHTTPException):
    """
    Raised when user lacks required permissions.
    """

    kind = "ForbiddenError"

    def __init__(self, detail: str = "Not enough permissions"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundException(DetailedHTTPException):
    """
    Raised when requested resource does not exist.
    """

    kind = "NotFoundError"

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateEntryException(DetailedHTTPException):
    """
    Raised when attempting to create a duplicate resource.
    """

    kind = "DuplicateError"

    def __init__(self, detail: str = "This entry already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictException(DetailedHTTPException):
    """
    Raised when an operation is blocked by dependent records.
    """

    kind = "ConflictError"

    def __init__(self, detail: str = "Operation conflicts with existing records"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StorageException(DetailedHTTPException):
    """
    Raised when the blob store fails to store or serve a file.
    """

    kind = "StorageError"

    def __init__(self, detail: str = "File storage is unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class RepositoryException(DetailedHTTPException):
    """
    Raised when the document store fails for reasons other than a duplicate key.
    """

    kind = "RepositoryError"

    def __init__(self, detail: str = "Database is unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


def fields_from_pydantic(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Flatten pydantic error entries into ``{"field", "message"}`` pairs.

    Args:
        errors: Output of ``ValidationError.errors()``

    Returns:
        One entry per offending field location
    """
    fields = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        fields.append(
            {
                "field": ".".join(loc) or "__root__",
                "message": err.get("msg", "Invalid value"),
            }
        )
    return fields
