"""
Lambda handler responsible for the profile view (current profile image).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.bootstrap import load_dependencies
from core.models.errors import ProfileMediaError
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import GetProfileImageRequest, ProfileImageResponse
from .service import ProfileImageQueryService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle profile image lookups.

    Expected API Gateway event structure:
    {
        "pathParameters": {"user_id": "..."}
    }

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response with the current key and its URL
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received profile image request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
        },
    )

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(GetProfileImageRequest, {"user_id": path_params.get("user_id")})
    except PydanticValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(list(exc.errors()))},
            request_id=request_id,
        )

    service = ProfileImageQueryService.from_dependencies(load_dependencies())

    try:
        profile = service.get_profile(owner_id=request.user_id)
    except ProfileMediaError as exc:
        logger.exception("Profile lookup failed", extra={"user_id": request.user_id})
        return ResponseBuilder.from_error(exc, request_id=request_id)

    response = ProfileImageResponse(
        user_id=profile.user_id,
        name=profile.name,
        profile_image_key=profile.profile_image_key,
        profile_image_url=service.storage.url_for(profile.profile_image_key),
        storage_mode=service.storage_mode.value,
    )

    return ResponseBuilder.ok(response.model_dump(), request_id=request_id)
