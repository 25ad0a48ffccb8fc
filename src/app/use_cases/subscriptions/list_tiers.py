"""ListTiers Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.catalog_repository import CatalogRepository
from .dtos import TierCatalogQueryDTO, TierListDTO
from .mappers import load_tier_features, to_tier_dto


class ListTiers:
    """
    List Tiers Use Case

    Read-only catalog of sellable tiers in display order, each priced for
    every billing cycle (cycle discount applied, before tax).
    """

    def __init__(self, catalog_repo: CatalogRepository):
        self.catalog_repo = catalog_repo

    async def execute(self, query: TierCatalogQueryDTO) -> Result[TierListDTO]:
        try:
            tiers = await self.catalog_repo.list_active_tiers()
            cycles = await self.catalog_repo.list_billing_cycles()

            results = []
            for tier in tiers:
                features = await load_tier_features(self.catalog_repo, tier.id, query)
                results.append(to_tier_dto(tier, cycles, features))

            return Return.ok(TierListDTO(tiers=results))
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_TIERS_FAILED",
                    message="Failed to list tiers",
                    reason=str(e),
                )
            )
