# nilhub/schemas/stats.py
from pydantic import ConfigDict
from sqlmodel import SQLModel


class StoreDashboardStats(SQLModel):
    """
    Catalog counters for a vendor's own dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_products: int
    active_products: int
    out_of_stock_products: int
    total_views: int
    total_whatsapp_clicks: int


class PlatformStats(SQLModel):
    """
    Platform-wide counters for administrators.
    """
    model_config = ConfigDict(extra="forbid")

    accounts: int
    vendors: int
    admins: int
    stores: int
    active_stores: int
    products: int
    active_products: int
