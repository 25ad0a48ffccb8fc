"""GetTierDetails Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.catalog_repository import CatalogRepository
from src.domain.errors import DomainError, NotFoundError
from .dtos import TierDetailsQueryDTO, TierDTO
from .mappers import load_tier_features, to_tier_dto


class GetTierDetails:
    """
    Get Tier Details Use Case

    One active tier with its pricing options and, for a species and life
    stage, the categories it covers.

    Errors:
        TIER_NOT_FOUND: unknown or inactive tier
    """

    def __init__(self, catalog_repo: CatalogRepository):
        self.catalog_repo = catalog_repo

    async def execute(self, query: TierDetailsQueryDTO) -> Result[TierDTO]:
        try:
            tier = await self.catalog_repo.get_tier(query.tier_id)
            if not tier:
                raise NotFoundError("TIER_NOT_FOUND", "Tier not found")

            cycles = await self.catalog_repo.list_billing_cycles()
            features = await load_tier_features(self.catalog_repo, tier.id, query)

            return Return.ok(to_tier_dto(tier, cycles, features))
        except DomainError as e:
            return Return.err(e.to_error())
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_TIER_DETAILS_FAILED",
                    message="Failed to get tier details",
                    reason=str(e),
                )
            )
