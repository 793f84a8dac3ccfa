import logging

from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.services import LinkService, link_service_from_config
from linkshortener.utils.config import load_config
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.lambdas.http import (
    body_target_url,
    handle_link_errors,
    http_method,
    link_payload,
    path_shortcode,
    response_200,
    response_204,
    response_405,
)
from linkshortener.lambdas.manage_url.constants import (
    LAMBDA_NAME,
    ALLOWED_METHODS,
    LINK_RETRIEVED,
    LINK_UPDATED,
    LINK_DELETED,
    UNSUPPORTED_METHOD,
)


logger = logging.getLogger(__name__)


def get_link(service: LinkService, shortcode: str, event: LambdaEvent) -> LambdaResponse:
    # Counts as an access, same as following the short link
    link = service.resolve(shortcode)
    logger.info('Retrieved link. Responding with 200.', extra={'shortcode': shortcode, 'event': LINK_RETRIEVED})
    return response_200(link_payload(link, event))


def update_link(service: LinkService, shortcode: str, event: LambdaEvent) -> LambdaResponse:
    target_url = body_target_url(event)
    link = service.update(shortcode, target_url)
    logger.info('Updated link. Responding with 200.', extra={'shortcode': shortcode, 'event': LINK_UPDATED})
    return response_200(link_payload(link, event))


def delete_link(service: LinkService, shortcode: str, event: LambdaEvent) -> LambdaResponse:
    service.delete(shortcode)
    logger.info('Deleted link. Responding with 204.', extra={'shortcode': shortcode, 'event': LINK_DELETED})
    return response_204()


ROUTES = {
    'GET': get_link,
    'PUT': update_link,
    'DELETE': delete_link,
}


@guarantee_500_response
@handle_link_errors
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle `GET|PUT|DELETE /shorten/{shortcode}` requests

    HTTP responses:
        200: GET -> link, PUT -> updated link
            body: {id, url, shortCode, shortUrl, createdAt, updatedAt}
        204: DELETE succeeded (no content)
        400: Bad client request
            errorCode: MISSING_SHORTCODE | INVALID_REQUEST_BODY | MISSING_URL | INVALID_URL
        404: Link not found
            errorCode: LINK_NOT_FOUND
        405: Unsupported HTTP method
        500: Internal server error
        503: Repository unavailable

    Example:
        >>> event = {'httpMethod': 'DELETE', 'pathParameters': {'shortcode': 'abc123'}}
        >>> lambda_handler(event, None)['statusCode']
        204
    """
    method = http_method(event)
    route = ROUTES.get(method)
    if route is None:
        logger.info(
            'Unsupported HTTP method. Responding with 405.',
            extra={'method': method, 'event': UNSUPPORTED_METHOD},
        )
        return response_405(ALLOWED_METHODS)

    shortcode = path_shortcode(event)
    service = link_service_from_config(load_config(LAMBDA_NAME))
    return route(service, shortcode, event)
