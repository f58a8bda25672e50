"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .asset_store import AssetStore, S3AssetStore, get_asset_store

__all__ = ["AssetStore", "S3AssetStore", "get_asset_store"]
