from .query_keys import INVALIDATION_PATHS, FAVORITE_PATHS, key_path, matches_path, query_key
from .query_cache import CacheEntry, QueryCache, QueryStatus
from .api_client import PawPalClient
