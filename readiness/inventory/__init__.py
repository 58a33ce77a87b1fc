"""
Cluster inventory collection: node names and basic cluster facts.
"""

from .collector import (
    ClusterInventory,
    InventoryError,
    collect_cluster_inventory,
    detect_cloud_provider,
    detect_distribution
)

__all__ = [
    'ClusterInventory',
    'InventoryError',
    'collect_cluster_inventory',
    'detect_cloud_provider',
    'detect_distribution'
]
