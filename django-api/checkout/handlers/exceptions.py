"""Mapping from domain errors to HTTP responses.

Registered as ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``. Only the error code and
the user-safe message leave the process; internal details stay in the logs.
"""

import logging

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from checkout.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_TIER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MISSING_BUYER_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INSUFFICIENT_INVENTORY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONTENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ORDER_GROUP_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SIGNATURE_VERIFICATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_USED: status.HTTP_409_CONFLICT,
    ErrorCode.CONTENT_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PAYMENT_GATEWAY_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.NOT_SUPPORTED: status.HTTP_501_NOT_IMPLEMENTED,
    ErrorCode.TICKET_ISSUANCE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.ALREADY_PAID: status.HTTP_409_CONFLICT,
}


def status_for(error: DomainError) -> int:
    return STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST)


def error_body(error: DomainError) -> dict:
    body = {"code": error.code.value, "message": error.message}
    group_id = getattr(error, "group_id", None)
    order_id = getattr(error, "order_id", None)
    if group_id and error.code is not ErrorCode.ORDER_GROUP_NOT_FOUND:
        body["groupId"] = group_id
    if order_id and error.code not in (ErrorCode.ORDER_NOT_FOUND, ErrorCode.TICKET_ISSUANCE_FAILED):
        body["orderId"] = order_id
    return body


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        code = status_for(exc)
        if code >= 500:
            logger.error("Request failed with %s: %s", exc.code.value, exc.message)
        return Response(error_body(exc), status=code)

    if isinstance(exc, drf_exceptions.ValidationError):
        return Response(
            {
                "code": ErrorCode.VALIDATION_ERROR.value,
                "message": "Invalid request",
                "errors": exc.detail,
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    return exception_handler(exc, context)
