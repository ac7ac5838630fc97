# TTL caching tiers in seconds
HOT_TTL = 60 * 60  # 60 minutes * 60 seconds = 60 minutes

# Preview metadata is re-fetched at most once per HOT_TTL per target URL,
# whether the cached value came from the page or from fallback defaults
PREVIEW_TTL = HOT_TTL
