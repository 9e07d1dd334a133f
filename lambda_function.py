import base64
import json
import traceback

from docwise.api import (
    SERVICE_BUSY_RESPONSE,
    create_model_client,
    create_storage_client,
    is_service_busy,
    process_document,
    store_usage_data,
)
from docwise.utils.logging_helper import setup_logger, InvalidRequestError
from docwise.utils.usage_tracker import SessionUsageTracker

logger = setup_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

# Built on first use and reused while the container stays warm
_clients = {}


def get_clients():
    """Return the (storage, model) pair for this container."""
    if "storage" not in _clients:
        _clients["storage"] = create_storage_client()
        _clients["model"] = create_model_client()
    return _clients["storage"], _clients["model"]


def json_response(status_code, payload):
    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(payload),
    }


def parse_body(event):
    """
    Decode the JSON request body of an API Gateway / Function URL event.

    Raises:
        InvalidRequestError: If the body is not a JSON object or a field has the wrong type
    """
    body = event.get("body") or "{}"
    try:
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")
        parsed = json.loads(body)
    except ValueError as e:
        raise InvalidRequestError(f"Request body is not valid JSON: {e}")
    if not isinstance(parsed, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    urls = parsed.get("file_urls")
    if urls is not None and (
        not isinstance(urls, list) or not all(isinstance(url, str) for url in urls)
    ):
        raise InvalidRequestError("file_urls must be a list of strings")
    for field in ("raw_text", "extracted_text"):
        if parsed.get(field) is not None and not isinstance(parsed[field], str):
            raise InvalidRequestError(f"{field} must be a string")
    return parsed


def _request_method(event):
    method = event.get("httpMethod")
    if not method:
        method = event.get("requestContext", {}).get("http", {}).get("method")
    return (method or "POST").upper()


def lambda_handler(event, context):
    """
    Lambda handler for the process-document endpoint.

    Args:
        event: API Gateway (REST or HTTP API) or Function URL proxy event
        context: Lambda context

    Returns:
        Dict: Proxy response with status code, CORS headers and JSON body
    """
    if _request_method(event) == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    request_id = getattr(context, "aws_request_id", None)
    logger.info(f"Lambda execution ID: {request_id}")

    try:
        body = parse_body(event)
        urls = body.get("file_urls") or []
        provided_text = body.get("raw_text") or body.get("extracted_text") or ""
        logger.info(
            f"Processing request: url_count={len(urls)}, has_provided_text={bool(provided_text)}"
        )
        if not urls and not provided_text:
            raise InvalidRequestError("file_urls or raw_text is required")

        storage, model = get_clients()
        result = process_document(
            file_urls=urls,
            raw_text=provided_text,
            storage=storage,
            model=model,
        )
        logger.info(f"Final summary: {result['summary']}")
        store_usage_data(storage)
        return json_response(200, result)

    except InvalidRequestError as e:
        logger.warning(f"Rejected request: {e}")
        return json_response(400, {"error": str(e)})

    except Exception as e:
        logger.error(f"process-document error: {e}")
        logger.debug(traceback.format_exc())

        message = str(e)
        if is_service_busy(message):
            return json_response(503, {"error": SERVICE_BUSY_RESPONSE})
        return json_response(500, {"error": message})

    finally:
        # Warm containers must not carry usage into the next request
        SessionUsageTracker.reset()
