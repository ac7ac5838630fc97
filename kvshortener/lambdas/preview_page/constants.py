# Logging events / error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
PREVIEW_RENDERED = 'PREVIEW_RENDERED'

PREVIEW_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{title}</title>
    <meta property="og:title" content="{title}" />
    <meta property="og:description" content="{description}" />
    <meta property="og:image" content="{image_url}" />
    <meta property="og:url" content="{url}" />
    <meta property="og:type" content="website" />
  </head>
  <body>
    <script>
      window.location.href = {url_literal};
    </script>
  </body>
</html>
"""
