import html
import json
import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.constants import Preview
from kvshortener.models import ShortURLModel, PreviewMetadata
from kvshortener.dao.redis import ShortURLRedisDAO
from kvshortener.dao.exceptions import ShortURLNotFoundError, MalformedRecordError
from kvshortener.utils import load_redis_config, get_short_url, app_prefix
from kvshortener.utils.helpers import guarantee_500_response, path_parameter
from kvshortener.utils.responses import response_400, response_404, response_html
from kvshortener.lambdas.preview_page.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    PREVIEW_RENDERED,
    PREVIEW_TEMPLATE,
)


logger = logging.getLogger(__name__)

DEFAULT_PREVIEW = PreviewMetadata(
    title=Preview.DEFAULT_TITLE,
    description=Preview.DEFAULT_DESCRIPTION,
    image_url=Preview.DEFAULT_IMAGE_URL,
)


def _script_literal(value: str) -> str:
    """Encode value as a JS string literal that can't close the surrounding <script>"""
    return json.dumps(value).replace('<', '\\u003c').replace('>', '\\u003e').replace('&', '\\u0026')


def render_preview(short_url: ShortURLModel) -> str:
    """Render the OpenGraph page for a mapping, escaping every embedded value"""
    preview = (short_url.preview or DEFAULT_PREVIEW).escaped()
    return PREVIEW_TEMPLATE.format(
        title=preview.title,
        description=preview.description,
        image_url=preview.image_url,
        url=html.escape(short_url.target, quote=True),
        url_literal=_script_literal(short_url.target),
    )


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Serve the link-preview page of a short URL (GET /{shortcode}/og)

    The page carries og:title, og:description, og:image, og:url and og:type
    tags for crawlers, and a script sending browsers on to the target.
    This is a passive read: expired records are reported as 404 but not deleted.

    HTTP responses:
        200: HTML preview page
        400: Missing shortcode in path
        404: Unknown, malformed or expired shortcode
    """
    redis_config = load_redis_config('preview_page')

    shortcode = path_parameter(event, 'shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    try:
        short_url = ShortURLRedisDAO(**redis_config, prefix=app_prefix()).get(shortcode)
    except (ShortURLNotFoundError, MalformedRecordError):
        short_url = None

    if short_url is None or short_url.is_expired():
        logger.info('Short URL record not found in database. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    logger.info('Rendering preview page. Responding with 200.', extra={'shortcode': shortcode, 'event': PREVIEW_RENDERED})
    return response_html(render_preview(short_url))
