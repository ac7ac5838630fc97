import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.utils.config import redirect_url
from kvshortener.utils.helpers import guarantee_500_response
from kvshortener.utils.responses import response_302, response_404
from kvshortener.lambdas.redirect_root.constants import REDIRECT_URL_NOT_CONFIGURED, ROOT_REDIRECT


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Send requests for the bare domain (GET /) to the configured landing page"""
    location = redirect_url()
    if location is None:
        logger.info('REDIRECT_URL is not configured. Responding with 404.', extra={'event': REDIRECT_URL_NOT_CONFIGURED})
        return response_404(error_code=REDIRECT_URL_NOT_CONFIGURED)

    logger.info('Redirecting root request. Responding with 302.', extra={'event': ROOT_REDIRECT})
    return response_302(location=location)
