"""
Lambda handler responsible for profile image upload.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.bootstrap import load_dependencies
from core.models.errors import ProfileMediaError
from core.utils.constants import METRIC_PROFILE_IMAGE_UPLOADED
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import ProfileImageUploadRequest, ProfileImageUploadResponse
from .service import ProfileImageIngestionService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle profile image uploads.

    The handler decodes the base64 image, validates the payload, re-encodes
    the image under the size ceiling, stores it and makes it the user's
    current profile image.

    Expected API Gateway event structure:
    {
        "body": "{...}",           # JSON string containing upload data
        "isBase64Encoded": false
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response with the new key and URL
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received profile image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(message="Invalid JSON body", request_id=request_id)

    try:
        request = validate_request(ProfileImageUploadRequest, body)
    except PydanticValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.validation_error(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(list(exc.errors()))},
            request_id=request_id,
        )

    service = ProfileImageIngestionService.from_dependencies(load_dependencies())

    try:
        key = service.ingest(
            owner_id=request.user_id,
            owner_label=request.display_name,
            raw_bytes=request.file_data,
            content_type=request.content_type,
        )
    except ProfileMediaError as exc:
        logger.exception(
            "Profile image upload failed",
            extra={"user_id": request.user_id, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_error(exc, request_id=request_id)

    metrics.add_metric(name=METRIC_PROFILE_IMAGE_UPLOADED, unit=MetricUnit.Count, value=1)

    response = ProfileImageUploadResponse(
        user_id=request.user_id,
        profile_image_key=key,
        profile_image_url=service.storage.url_for(key),
        storage_mode=service.storage_mode.value,
        message="Profile image uploaded successfully",
    )

    return ResponseBuilder.created(response.model_dump(), request_id=request_id)
