"""Failure taxonomy for the storefront's external collaborators.

None of these are fatal: each is logged where it is caught and converted into a
degraded but usable state (empty catalogue, no identity, unsaved order, history
error message).
"""


class StorefrontError(Exception):
    """Base class for storefront collaborator failures."""


class CatalogFetchError(StorefrontError):
    """The product catalogue could not be read (missing token, transport, non-2xx)."""


class IdentityProvisionError(StorefrontError):
    """The identity backend refused or failed to issue an identity."""


class Unauthenticated(StorefrontError):
    """An order was submitted without a resolved identity."""


class OrderWriteError(StorefrontError):
    """The order store failed to persist an order."""


class OrderReadError(StorefrontError):
    """The order store failed to return a user's order history."""
