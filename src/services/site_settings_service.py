"""
Site settings service - the single global settings record
"""

import logging

from models.record import SiteSettings
from services.record_gateway import GatewayError, RecordGateway

logger = logging.getLogger(__name__)

COLLECTION = "site_settings"
GLOBAL_KEY = "global"

class SiteSettingsService:
    """Read and upsert the record keyed "global" """

    def __init__(self, gateway: RecordGateway):
        self.gateway = gateway

    async def get_settings(self) -> SiteSettings:
        """Current settings; defaults when the record is missing or unreadable"""
        try:
            result = await self.gateway.list_records(
                COLLECTION,
                page=1,
                per_page=1,
                filter_expr=f'key = "{GLOBAL_KEY}"'
            )
        except GatewayError as e:
            logger.warning(f"Site settings unavailable, using defaults: {e.message}")
            return SiteSettings()

        item = result.items[0] if result.items else None
        if not item or not item.get("id"):
            return SiteSettings()
        show_footer = item.get("show_footer")
        return SiteSettings(id=item["id"], show_footer=True if show_footer is None else bool(show_footer))

    async def set_show_footer(self, show_footer: bool) -> SiteSettings:
        """Create the global record on first write, update it afterwards"""
        current = await self.get_settings()
        if current.id:
            saved = await self.gateway.update_record(COLLECTION, current.id, {"show_footer": show_footer})
        else:
            saved = await self.gateway.create_record(COLLECTION, {"key": GLOBAL_KEY, "show_footer": show_footer})
        logger.info(f"Site footer {'shown' if show_footer else 'hidden'}")
        return SiteSettings(id=saved.get("id") or current.id, show_footer=saved.get("show_footer", show_footer))
