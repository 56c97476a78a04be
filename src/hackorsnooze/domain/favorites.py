"""Favorite synchronization strategies."""

from enum import Enum


class FavoriteSync(str, Enum):
    """How a favorite toggle reconciles local state with the API Gateway.

    - ROLLBACK: mutate locally, undo the local change if the request fails
    - OPTIMISTIC: mutate locally, keep the local change even on failure
    - PESSIMISTIC: wait for the request to succeed, then mutate locally
    """

    ROLLBACK = "rollback"
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"
