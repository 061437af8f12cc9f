"""Customer lookup by email address."""

import logging
from typing import List, Optional

from config import DEFAULT_CONFIG, InquiryConfig, MatchPolicy
from errors import AmbiguousCustomerMatch, DirectoryFault
from ports import Column, DirectoryQuery, Filter, SearchResult
from schemas import CustomerMatch

logger = logging.getLogger(__name__)

CUSTOMER_COLUMNS = [
    Column("email"),
    Column("internalid"),
    Column("email", join="salesRep"),
]


class CustomerResolver:
    def __init__(self, directory: DirectoryQuery, config: InquiryConfig = DEFAULT_CONFIG):
        self.directory = directory
        self.config = config

    def resolve(self, email: Optional[str]) -> CustomerMatch:
        """
        Find the customer whose directory email equals `email`.

        Returns an empty CustomerMatch when nothing matches or the email is
        empty. With several matches the configured MatchPolicy picks the row;
        under LAST_WINS the last row in directory order is used.
        """
        if not email:
            logger.info("Submission has no email; skipping customer lookup")
            return CustomerMatch()

        rows = self._search(email)
        if not rows:
            logger.info("No customer matched the submitted email")
            return CustomerMatch()

        if len(rows) > 1:
            ids = [str(row.get_value("internalid")) for row in rows]
            logger.warning(f"{len(rows)} customers matched the submitted email: {ids}")
            if self.config.match_policy == MatchPolicy.REJECT_AMBIGUOUS:
                raise AmbiguousCustomerMatch(email, ids)

        row = rows[0] if self.config.match_policy == MatchPolicy.FIRST_WINS else rows[-1]
        customer_id = row.get_value("internalid")
        match = CustomerMatch(
            customer_id=str(customer_id) if customer_id else None,
            customer_email=row.get_value("email"),
            sales_owner_email=row.get_value("email", join="salesRep") or "",
        )
        logger.info(f"Resolved customer {match.customer_id} (sales owner assigned: {bool(match.sales_owner_email)})")
        return match

    def _search(self, email: Optional[str]) -> List[SearchResult]:
        try:
            return list(self.directory.search(
                self.config.customer_type,
                [Filter("email", "is", email)],
                CUSTOMER_COLUMNS,
            ))
        except DirectoryFault:
            raise
        except Exception as e:
            raise DirectoryFault(f"Customer search failed: {e}") from e
