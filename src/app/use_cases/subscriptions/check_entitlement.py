"""CheckEntitlement Use Case

Read-only quota check for a subscription and service category.
"""

from libs.result import Result, Return, Error
from src.app.repositories.entitlement_repository import EntitlementRepository
from .dtos import EntitlementCommandDTO, EntitlementCheckDTO


class CheckEntitlement:
    """
    Check Entitlement Use Case

    Answers whether `quantity` units of a category can be used without
    consuming anything.

    - No row: the category is not included
    - Unlimited: always accessible, reports quota_used
    - Bounded: accessible iff quota_remaining >= quantity
    """

    def __init__(self, entitlement_repo: EntitlementRepository):
        self.entitlement_repo = entitlement_repo

    async def execute(self, command: EntitlementCommandDTO) -> Result[EntitlementCheckDTO]:
        try:
            entitlement = await self.entitlement_repo.get(
                command.subscription_id, command.category_id
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="CHECK_ENTITLEMENT_FAILED",
                    message="Failed to check entitlement",
                    reason=str(e),
                )
            )

        if not entitlement:
            return Return.ok(EntitlementCheckDTO(has_access=False, is_included=False))

        if entitlement.is_unlimited:
            return Return.ok(
                EntitlementCheckDTO(
                    has_access=True,
                    is_included=True,
                    is_unlimited=True,
                    quota_used=entitlement.quota_used,
                )
            )

        return Return.ok(
            EntitlementCheckDTO(
                has_access=entitlement.quota_remaining >= command.quantity,
                is_included=True,
                is_unlimited=False,
                quota_total=entitlement.quota_total,
                quota_used=entitlement.quota_used,
                quota_remaining=entitlement.quota_remaining,
            )
        )
