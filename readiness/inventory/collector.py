#!/usr/bin/env python3
"""
Cluster Inventory Collector

Lists the cluster's nodes and derives the basic facts shown alongside the
provisioning check: server version, cloud provider, Kubernetes distribution
and total vCPU capacity.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, Tuple
from kubernetes.client.rest import ApiException
from kubernetes.utils import parse_quantity

UNKNOWN = "Unknown"

# providerID prefixes, e.g. "aws:///<region>/<instanceID>"
PROVIDER_ID_PREFIXES = [
    ("aws://", "AWS"),
    ("gce://", "GCP"),
    ("azure://", "Azure"),
    ("digitalocean://", "DigitalOcean"),
]

# Substrings of node label keys, checked in order
DISTRIBUTION_LABEL_MARKERS = [
    ("eks.amazonaws.com", "EKS"),
    ("cloud.google.com/gke-nodepool", "GKE"),
    ("kubernetes.azure.com", "AKS"),
    ("openshift", "OpenShift"),
    ("cattle.io", "RKE"),
    ("doks.digitalocean.com", "DOKS"),
]


class InventoryError(Exception):
    """Raised when the node list cannot be read"""


@dataclass(frozen=True)
class ClusterInventory:
    """Facts about the cluster collected once per run"""
    node_names: Tuple[str, ...] = ()
    version: str = UNKNOWN
    cloud_provider: str = UNKNOWN
    distribution: str = UNKNOWN
    total_vcpu_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'node_names', tuple(self.node_names))

    @property
    def total_node_count(self) -> int:
        return len(self.node_names)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'cloud_provider': self.cloud_provider,
            'distribution': self.distribution,
            'total_node_count': self.total_node_count,
            'total_vcpu_count': self.total_vcpu_count,
            'nodes': list(self.node_names)
        }


def detect_cloud_provider(nodes) -> str:
    """Guess the cloud provider from the nodes' spec.providerID"""
    for node in nodes:
        provider_id = (node.spec.provider_id if node.spec else None) or ""
        for prefix, provider in PROVIDER_ID_PREFIXES:
            if provider_id.startswith(prefix):
                return provider
    return UNKNOWN


def detect_distribution(nodes) -> str:
    """Guess the Kubernetes distribution from well-known node label keys"""
    for node in nodes:
        labels = (node.metadata.labels if node.metadata else None) or {}
        for label_key in labels:
            for marker, distribution in DISTRIBUTION_LABEL_MARKERS:
                if marker in label_key:
                    return distribution
    return UNKNOWN


def _node_cpu_count(node) -> float:
    capacity = (node.status.capacity if node.status else None) or {}
    cpu = capacity.get('cpu')
    if not cpu:
        return 0
    try:
        return float(parse_quantity(cpu))
    except ValueError:
        logging.warning(f"Unparseable CPU capacity {cpu!r} on node {node.metadata.name}")
        return 0


def collect_cluster_inventory(core_api, version_api=None) -> ClusterInventory:
    """
    Collect node names and basic facts from the cluster
    
    Args:
        core_api: CoreV1Api client
        version_api: VersionApi client (optional)
        
    Returns:
        ClusterInventory: Collected facts
        
    Raises:
        InventoryError: If nodes cannot be listed
    """
    version = UNKNOWN
    if version_api is not None:
        try:
            version = version_api.get_code().git_version or UNKNOWN
        except Exception as e:
            logging.error(f"Failed to read Kubernetes server version: {e}")
    
    try:
        nodes = core_api.list_node().items
    except ApiException as e:
        raise InventoryError(f"Failed to list nodes: {e.status} {e.reason}") from e
    except Exception as e:
        raise InventoryError(f"Failed to list nodes: {e}") from e
    
    logging.info(f"Found {len(nodes)} node(s) in the cluster")
    total_cpu = sum(_node_cpu_count(node) for node in nodes)
    
    return ClusterInventory(
        node_names=tuple(node.metadata.name for node in nodes),
        version=version,
        cloud_provider=detect_cloud_provider(nodes),
        distribution=detect_distribution(nodes),
        total_vcpu_count=int(total_cpu)
    )
