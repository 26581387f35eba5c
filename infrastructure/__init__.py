"""
Infrastructure Package
======================

Adapters between the domain services and the outside world.

Modules:
    - store: Persistence handle bound to a database alias
    - payments: Payment provider abstraction (Stripe, mock)
    - container: Builds and caches the store, the provider and the services

Services only ever receive these through the container, so tests can swap
the mock payment provider in from settings.
"""
