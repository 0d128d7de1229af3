"""
Feature capability flags.

Optional features backed by tables that may not exist in every deployment
are checked once at startup; services read the resolved flags instead of
inspecting the schema on each call.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


@dataclass
class FeatureCapabilities:
    backups: bool = False


capabilities = FeatureCapabilities()


async def resolve_capabilities(engine: AsyncEngine) -> FeatureCapabilities:
    """Inspect the schema and update the global capability flags in place"""
    async with engine.connect() as conn:
        table_names = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))

    capabilities.backups = "backups" in table_names
    logger.info(f"Capabilities resolved: backups={capabilities.backups}")
    return capabilities
