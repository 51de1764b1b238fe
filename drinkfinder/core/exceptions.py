"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Barcode is required", "MISSING_BARCODE", 400)
        raise AppException("Store not found", "STORE_NOT_FOUND", 404, {"store_id": 7})

    Error Codes:
        Input:
            - VALIDATION_ERROR (400)
            - MISSING_BARCODE (400)
            - MISSING_LOCATION (400)
            - MISSING_ADDRESS (400)
            - INVALID_SORT (400)

        Catalog:
            - DRINK_NOT_FOUND (404)
            - DRINK_EXISTS (409)
            - BARCODE_EXISTS (409)

        Locations:
            - STORE_NOT_FOUND (404)
            - NO_STORES (404)

        External services:
            - ADDRESS_NOT_FOUND (404)
            - GEOCODING_FAILED (500)
            - DISCOVERY_FAILED (502)

        General:
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "STORE_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "message": self.message,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException to the JSON error envelope."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} - {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.code} - {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 with per-field details."""
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    app_exc = AppException(
        "Invalid request parameters",
        "VALIDATION_ERROR",
        400,
        {"fields": fields}
    )
    return JSONResponse(status_code=400, content=app_exc.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the traceback and return a 500 envelope."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=internal_error().to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def validation_error(message: str, details: Optional[Dict[str, Any]] = None) -> AppException:
    """Create generic invalid input exception."""
    return AppException(message, "VALIDATION_ERROR", 400, details)


def missing_barcode() -> AppException:
    """Create missing barcode exception."""
    return AppException("Barcode is required", "MISSING_BARCODE", 400)


def missing_location() -> AppException:
    """Create missing store identification exception."""
    return AppException(
        "Either store_id or latitude/longitude is required",
        "MISSING_LOCATION",
        400
    )


def missing_address() -> AppException:
    """Create missing address data exception."""
    return AppException(
        "Address is required. Provide either a full address string "
        "or address components (city, state, zip_code)",
        "MISSING_ADDRESS",
        400
    )


def invalid_sort(field: str, allowed: list) -> AppException:
    """Create unsupported sort field/order exception."""
    return AppException(
        f"Cannot sort by '{field}'",
        "INVALID_SORT",
        400,
        {"allowed": allowed}
    )


def drink_not_found(
    drink_id: Optional[int] = None,
    barcode: Optional[str] = None
) -> AppException:
    """Create drink not found exception."""
    if barcode is not None:
        return AppException(
            f"No energy drink found with barcode {barcode}",
            "DRINK_NOT_FOUND",
            404,
            {"barcode": barcode}
        )
    details = {"drink_id": drink_id} if drink_id is not None else {}
    return AppException("Energy drink not found", "DRINK_NOT_FOUND", 404, details)


def drink_exists(brand: str, flavor: str, size_ml: int) -> AppException:
    """Create duplicate catalog entry exception."""
    return AppException(
        f"{brand} {flavor} ({size_ml}ml) already exists",
        "DRINK_EXISTS",
        409,
        {"brand": brand, "flavor": flavor, "size_ml": size_ml}
    )


def barcode_exists(barcode: str) -> AppException:
    """Create duplicate barcode exception."""
    return AppException(
        f"Barcode '{barcode}' is already assigned to another drink",
        "BARCODE_EXISTS",
        409,
        {"barcode": barcode}
    )


def store_not_found(store_id: Optional[int] = None) -> AppException:
    """Create store not found exception."""
    if store_id is not None:
        return AppException(
            f"Store with ID {store_id} not found",
            "STORE_NOT_FOUND",
            404,
            {"store_id": store_id}
        )
    return AppException("Store not found", "STORE_NOT_FOUND", 404)


def no_stores() -> AppException:
    """Create empty store table exception."""
    return AppException("No stores found in database", "NO_STORES", 404)


def address_not_found(query: str) -> AppException:
    """Create geocoding zero-results exception."""
    return AppException("Address not found", "ADDRESS_NOT_FOUND", 404, {"query": query})


def geocoding_failed(reason: str) -> AppException:
    """Create geocoding provider failure exception."""
    return AppException("Geocoding failed", "GEOCODING_FAILED", 500, {"reason": reason})


def discovery_failed(reason: str) -> AppException:
    """Create points-of-interest provider failure exception."""
    return AppException(
        "Store discovery failed",
        "DISCOVERY_FAILED",
        502,
        {"reason": reason}
    )


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, "INTERNAL_ERROR", 500)
