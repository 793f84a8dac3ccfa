import logging

from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.services import link_service_from_config
from linkshortener.utils.config import load_config
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.lambdas.http import handle_link_errors, path_shortcode, response_302
from linkshortener.lambdas.redirect_url.constants import LAMBDA_NAME, REDIRECT_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
@handle_link_errors
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the link (counts an access unless served from cache)
    - Step 3: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: MISSING_SHORTCODE
        404: LINK_NOT_FOUND
        500: Internal server error
        503: REPOSITORY_UNAVAILABLE

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TC'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Extract shortcode from request's path
    shortcode = path_shortcode(event)
    service = link_service_from_config(load_config(LAMBDA_NAME))

    # 2- Resolve target URL
    target_url = service.redirect(shortcode)

    # 3- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
