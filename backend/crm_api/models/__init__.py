# Database models
from crm_api.models.material import (
    PlanningMaterial,
    PlanningMaterialArchive,
    PurchasedItemId,
    PurchasedMaterial,
    PurchasedMaterialArchive,
)
from crm_api.models.warehouse import Warehouse
from crm_api.models.supplier import Supplier
from crm_api.models.section import Section
from crm_api.models.user import User

__all__ = [
    "PlanningMaterial",
    "PlanningMaterialArchive",
    "PurchasedItemId",
    "PurchasedMaterial",
    "PurchasedMaterialArchive",
    "Warehouse",
    "Supplier",
    "Section",
    "User",
]
