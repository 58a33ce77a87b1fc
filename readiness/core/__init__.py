"""
Core configuration and Kubernetes client utilities for the readiness checker.
"""

from .config import ProvisioningCheckConfig, setup_logging
from .kube_client import KubeClients, init_kubernetes_clients

__all__ = [
    'ProvisioningCheckConfig',
    'setup_logging',
    'KubeClients',
    'init_kubernetes_clients'
]
