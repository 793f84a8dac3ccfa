import logging

from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.services import link_service_from_config
from linkshortener.utils.config import load_config
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.lambdas.http import body_target_url, handle_link_errors, link_payload, response_201
from linkshortener.lambdas.shorten_url.constants import LAMBDA_NAME, LINK_SHORTENED


logger = logging.getLogger(__name__)


@guarantee_500_response
@handle_link_errors
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle `POST /shorten` requests

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Build the link service from the application's config
    - Step 2: Extract the target URL from the request body
    - Step 3: Validate it and persist it under a fresh shortcode
    - Step 4: Respond with 201 and the new link

    HTTP responses:
        201: Link created
            body: {id, url, shortCode, shortUrl, createdAt, updatedAt}
        400: Bad client request
            errorCode: INVALID_REQUEST_BODY | MISSING_URL | INVALID_URL
        500: Internal server error
            errorCode: CAPACITY_EXHAUSTED | CONFIGURATION_ERROR | UNKNOWN_INTERNAL_SERVER_ERROR
        503: Repository unavailable
            errorCode: REPOSITORY_UNAVAILABLE

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['url']
        'https://example.com'
    """
    # 0- Get application's config and wire the service
    service = link_service_from_config(load_config(LAMBDA_NAME))

    # 1- Extract target URL from request body
    target_url = body_target_url(event)

    # 2- Create the link
    link = service.create(target_url)

    # 3- Return successful response to user
    logger.info(
        'Shortened URL. Responding with 201.',
        extra={'shortcode': link.shortcode, 'event': LINK_SHORTENED},
    )
    return response_201(link_payload(link, event))
