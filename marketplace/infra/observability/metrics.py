from prometheus_client import Counter, Histogram


# Catalog Metrics
items_created_total = Counter("marketplace_items_created_total", "Total items listed")
items_deleted_total = Counter("marketplace_items_deleted_total", "Total items deleted")
item_price = Histogram(
    "marketplace_item_price",
    "Listed item price distribution",
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 5000, float("inf")],
)

# Offer Metrics
offers_submitted_total = Counter("marketplace_offers_submitted_total", "Total offers submitted")
offer_decisions_total = Counter("marketplace_offer_decisions_total", "Offer decisions", ["decision"])

# Favorite Metrics
favorite_writes_total = Counter(
    "marketplace_favorite_writes_total", "Favorite membership writes", ["action"]
)  # action: added / removed / unchanged
favorite_cache_repairs_total = Counter(
    "marketplace_favorite_cache_repairs_total", "Items whose favourited_by cache had drifted and was rewritten"
)

# Review Metrics
reviews_created_total = Counter("marketplace_reviews_created_total", "Total user reviews created")

# Lock contention
lock_conflicts_total = Counter(
    "marketplace_lock_conflicts_total", "Operations that gave up after repeated lock conflicts", ["operation"]
)
