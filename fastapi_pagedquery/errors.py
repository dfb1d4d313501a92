# fastapi_pagedquery/errors.py

from typing import Any

from fastapi import HTTPException


class PagedQueryError(HTTPException):
    """Base for errors raised while building or running a paged list query."""

    status_code = 500
    code = "PAGED_QUERY_ERROR"

    def __init__(self, detail: str, details: dict[str, Any] | None = None):
        super().__init__(status_code=self.status_code, detail=detail)
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.detail, "details": self.details}


class BadRequestError(PagedQueryError):
    """Malformed or missing caller input; raised before any database work."""

    status_code = 400
    code = "BAD_REQUEST"


class UnprocessableEntityError(PagedQueryError):
    """Well-formed value that the resource does not recognize, e.g. a sort key."""

    status_code = 422
    code = "UNPROCESSABLE_ENTITY"


class ServerError(PagedQueryError):
    """
    Failure after the transaction opened. The detail names only the resource;
    the underlying error is chained as ``__cause__``.
    """

    status_code = 500
    code = "SERVER_ERROR"

    def __init__(self, resource_name: str):
        super().__init__(f"Could not retrieve {resource_name}.", {"resource": resource_name})
        self.resource_name = resource_name
