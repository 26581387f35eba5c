from prometheus_client import Counter

# Purchase intents by outcome: created, rejected, mismatch, provider_error
payment_intents_total = Counter("payment_intents_total", "Purchase intents requested", ["outcome"])
