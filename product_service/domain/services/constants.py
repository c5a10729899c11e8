from product_service.domain.models.interaction import InteractionType

# Default number of recommendations per call
DEFAULT_LIMIT = 6

# Similarity candidate pool
SAME_CATEGORY_CANDIDATES = 100   # same-category products fetched first
OTHER_CATEGORY_CANDIDATES = 50   # cross-category top-up when the pool is thin

# Hybrid blending
SIMILARITY_BLEND = 0.7   # similarity score multiplier
POPULARITY_SCORE = 0.3   # flat score for popularity candidates

# Recommendation sources
SOURCE_SIMILARITY = "similarity"
SOURCE_POPULARITY = "popularity"

# Interaction types that count towards popularity
POPULARITY_INTERACTION_TYPES = (InteractionType.VIEW, InteractionType.PURCHASE)

# Verified-purchase ratings count 20% more in the weighted average
VERIFIED_RATING_WEIGHT = 1.2
MIN_RATING = 1
MAX_RATING = 5

# Trending score weights
TRENDING_PURCHASE_WEIGHT = 5
TRENDING_CART_WEIGHT = 3
TRENDING_VIEW_WEIGHT = 1
TRENDING_RECENT_BONUS = 10

# Search limits
SEARCH_MIN_QUERY_LEN = 2
SEARCH_PRODUCT_LIMIT = 10
SEARCH_CATEGORY_LIMIT = 5
SUGGEST_PRODUCT_LIMIT = 5
SUGGEST_CATEGORY_LIMIT = 3
