import logging

from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.services import link_service_from_config
from linkshortener.utils.config import load_config
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.lambdas.http import handle_link_errors, link_payload, path_shortcode, response_200
from linkshortener.lambdas.url_stats.constants import LAMBDA_NAME, STATS_RETRIEVED


logger = logging.getLogger(__name__)


@guarantee_500_response
@handle_link_errors
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle `GET /shorten/{shortcode}/stats` requests

    Reading statistics never counts as an access.

    HTTP responses:
        200: body: {id, url, shortCode, shortUrl, createdAt, updatedAt, accessCount}
        400: MISSING_SHORTCODE
        404: LINK_NOT_FOUND
        500: Internal server error
        503: REPOSITORY_UNAVAILABLE
    """
    shortcode = path_shortcode(event)
    service = link_service_from_config(load_config(LAMBDA_NAME))

    link = service.stats(shortcode)

    logger.info(
        'Retrieved link statistics. Responding with 200.',
        extra={'shortcode': shortcode, 'accessCount': link.access_count, 'event': STATS_RETRIEVED},
    )
    return response_200(link_payload(link, event, include_stats=True))
