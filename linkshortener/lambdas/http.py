"""HTTP helpers shared by the API Gateway (Lambda proxy) handlers.

Request side:
    path_shortcode(event) -> str
    http_method(event) -> str
    body_target_url(event) -> str
        Raise BadRequestError (mapped to 400) on malformed input.

Response side:
    response_200/201/204/302/400/404/405/500/503
    link_payload(link, event, include_stats=False) -> dict

Errors:
    handle_link_errors(handler)
        Decorator: map request and service errors to HTTP error responses.
"""

import json
import base64
import binascii
import logging
import functools
from typing import Any
from collections.abc import Callable

from linkshortener.exceptions import InvalidUrlError, CapacityExhaustedError, ConfigurationError
from linkshortener.dao.exceptions import LinkNotFoundError, DataStoreError
from linkshortener.models import LinkRecordModel
from linkshortener.utils.helpers import get_short_url
from linkshortener.utils.runtime import running_in_production


logger = logging.getLogger(__name__)


# Error codes
INVALID_REQUEST_BODY = 'INVALID_REQUEST_BODY'
MISSING_URL = 'MISSING_URL'
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
INVALID_URL = 'INVALID_URL'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
CAPACITY_EXHAUSTED = 'CAPACITY_EXHAUSTED'
REPOSITORY_UNAVAILABLE = 'REPOSITORY_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'

JSON_HEADERS = {'Content-Type': 'application/json'}


class BadRequestError(Exception):
    """Raised while parsing a request the client must fix (400)."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


def path_shortcode(event: dict[str, Any]) -> str:
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        raise BadRequestError("missing 'shortcode' in path", MISSING_SHORTCODE)
    return shortcode


def http_method(event: dict[str, Any]) -> str:
    """Return the request method for REST (v1) and HTTP (v2) API payloads"""
    method = event.get('httpMethod') or (event.get('requestContext') or {}).get('http', {}).get('method', '')
    return method.upper()


def body_target_url(event: dict[str, Any]) -> str:
    """Extract the 'url' field from a JSON request body

    Raises:
        BadRequestError: body is not a JSON object or 'url' is missing.
    """
    raw = event.get('body') or '{}'
    try:
        if event.get('isBase64Encoded'):
            raw = base64.b64decode(raw).decode('utf-8')
        body = json.loads(raw)
    except (json.JSONDecodeError, binascii.Error, UnicodeDecodeError) as e:
        raise BadRequestError('invalid JSON body', INVALID_REQUEST_BODY) from e

    if not isinstance(body, dict):
        raise BadRequestError('JSON body must be an object', INVALID_REQUEST_BODY)
    if body.get('url') is None:
        raise BadRequestError("missing 'url' in JSON body", MISSING_URL)
    return body['url']


def link_payload(link: LinkRecordModel, event: dict[str, Any], include_stats: bool = False) -> dict[str, Any]:
    payload = {
        'id': link.id,
        'url': link.target,
        'shortCode': link.shortcode,
        'shortUrl': get_short_url(link.shortcode, event),
        'createdAt': link.created_at.isoformat() if link.created_at else None,
        'updatedAt': link.updated_at.isoformat() if link.updated_at else None,
    }
    if include_stats:
        payload['accessCount'] = link.access_count
    return payload


def _json_response(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> dict:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def _error_body(base: str, message: str | None, error_code: str | None) -> dict[str, Any]:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return body


def response_200(body: dict[str, Any]) -> dict:
    return _json_response(200, body)


def response_201(body: dict[str, Any]) -> dict:
    return _json_response(201, body)


def response_204() -> dict:
    return {
        'statusCode': 204,
        'headers': {},
        'body': '',
    }


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    return _json_response(400, _error_body('Bad Request', message, error_code))


def response_404(message: str | None = None, error_code: str | None = LINK_NOT_FOUND) -> dict:
    return _json_response(404, _error_body('Not Found', message, error_code))


def response_405(allowed: list[str]) -> dict:
    return _json_response(
        405,
        _error_body('Method Not Allowed', None, METHOD_NOT_ALLOWED),
        headers={'Allow': ', '.join(allowed)},
    )


def response_500(error: Exception | None = None, error_code: str | None = None) -> dict:
    body = _error_body('Internal Server Error', None, error_code)
    if error is not None and not running_in_production():
        body['detail'] = f'{type(error).__name__}: {error}'
    return _json_response(500, body)


def response_503(error: Exception | None = None) -> dict:
    body = _error_body('Service Unavailable', None, REPOSITORY_UNAVAILABLE)
    if error is not None and not running_in_production():
        body['detail'] = f'{type(error).__name__}: {error}'
    return _json_response(503, body)


def handle_link_errors(handler: Callable[..., dict]) -> Callable[..., dict]:
    """Decorator: translate request and service errors into HTTP responses

    Mapping:
        BadRequestError         -> 400 (INVALID_REQUEST_BODY / MISSING_URL / MISSING_SHORTCODE)
        InvalidUrlError         -> 400 INVALID_URL
        LinkNotFoundError       -> 404 LINK_NOT_FOUND
        CapacityExhaustedError  -> 500 CAPACITY_EXHAUSTED
        ConfigurationError      -> 500 CONFIGURATION_ERROR
        DataStoreError          -> 503 REPOSITORY_UNAVAILABLE

    Anything else propagates (see `guarantee_500_response`).
    """

    @functools.wraps(handler)
    def wrapper(event: dict[str, Any], context: Any) -> dict:
        shortcode = (event.get('pathParameters') or {}).get('shortcode')
        try:
            return handler(event, context)
        except BadRequestError as e:
            logger.info('Bad request. Responding with 400.', extra={'event': e.error_code, 'reason': e.message})
            return response_400(message=e.message, error_code=e.error_code)
        except InvalidUrlError as e:
            logger.info('Invalid target URL. Responding with 400.', extra={'event': INVALID_URL, 'reason': str(e)})
            return response_400(message=str(e), error_code=INVALID_URL)
        except LinkNotFoundError:
            logger.info('Link not found. Responding with 404.', extra={'shortcode': shortcode, 'event': LINK_NOT_FOUND})
            return response_404(message=f"short code '{shortcode}' doesn't exist")
        except CapacityExhaustedError as e:
            logger.error('Shortcode space exhausted. Responding with 500.', extra={'event': CAPACITY_EXHAUSTED})
            return response_500(e, error_code=CAPACITY_EXHAUSTED)
        except ConfigurationError as e:
            logger.exception('Lambda is misconfigured. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
            return response_500(e, error_code=CONFIGURATION_ERROR)
        except DataStoreError as e:
            logger.exception('Repository unavailable. Responding with 503.', extra={'event': REPOSITORY_UNAVAILABLE})
            return response_503(e)

    return wrapper
