"""
Observability Infrastructure

Prometheus metrics for the authentication service. Tracing lives in
utils.tracing and is shared by every app.
"""
