from kvshortener.models.short_url_model import ShortURLModel, PreviewMetadata


__all__ = [
    'ShortURLModel',
    'PreviewMetadata',
]
