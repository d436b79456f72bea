"""Storefront bounded context — Shopping Cart, Pricing, Orders and Search.

Handles the customer's shopping cart (CQRS) and its pricing, checkout of a
cart into an order document, rendering of order documents pushed by the
external backend, and per-session recent search history.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
