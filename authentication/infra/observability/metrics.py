"""
Prometheus Metrics

Authentication counters. Exposed together with the marketplace metrics at
/api/marketplace/metrics/ (single default registry).
"""

from prometheus_client import Counter

# ===== Login Metrics =====

login_total = Counter("auth_login_total", "Total login attempts", ["status"])
"""
Total login attempts counter.
Labels: status (success/failed)

Example:
    login_total.labels(status='success').inc()
"""

login_failed = Counter("auth_login_failed", "Failed login attempts", ["reason"])
"""
Failed login attempts counter.
Labels: reason (missing_fields, user_not_found, wrong_password, inactive)
"""


# ===== Registration Metrics =====

registration_total = Counter("auth_registration_total", "Total registration attempts", ["status"])

registration_failed = Counter("auth_registration_failed", "Failed registration attempts", ["reason"])
"""
Labels: reason (missing_fields, username_exists, email_exists, password_mismatch, invalid_password, invalid_email)
"""


# ===== Account Metrics =====

account_deleted_total = Counter("auth_account_deleted_total", "Total deleted accounts")
