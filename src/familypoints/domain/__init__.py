"""Domain layer for familypoints application.

`StateService` lives in `familypoints.domain.state`; it depends on the
database layer and is imported from there directly.
"""

from familypoints.domain.catalog import CatalogService
from familypoints.domain.ledger import LedgerService, calculate_score
from familypoints.domain.mailbox import MailboxService

__all__ = [
    "CatalogService",
    "LedgerService",
    "MailboxService",
    "calculate_score",
]
