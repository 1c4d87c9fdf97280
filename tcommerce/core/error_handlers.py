# tcommerce/core/error_handlers.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from tcommerce.core.exceptions import (
    DomainException,
    InsufficientStock,
    InvalidQuantity,
    LineNotFound,
    PersistenceFailure,
    ProductUnavailable,
)

# Domain error -> HTTP status. Order matters: first isinstance match wins.
STATUS_BY_EXCEPTION: list[tuple[type[DomainException], int]] = [
    (ProductUnavailable, status.HTTP_404_NOT_FOUND),
    (LineNotFound, status.HTTP_404_NOT_FOUND),
    (InsufficientStock, status.HTTP_400_BAD_REQUEST),
    (InvalidQuantity, status.HTTP_400_BAD_REQUEST),
    (PersistenceFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(exc: DomainException) -> int:
    for exc_type, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    body = {"success": False, "error": exc.message, "code": exc.code}

    if isinstance(exc, InsufficientStock):
        body.update(
            product_id=str(exc.product_id),
            requested=exc.requested,
            available=exc.available,
        )

    return JSONResponse(status_code=status_for(exc), content=body)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Input shape errors are client errors (400), not 422.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": "Validation failed",
            "code": "VALIDATION_ERROR",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
