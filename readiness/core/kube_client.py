#!/usr/bin/env python3
"""
Kubernetes client bootstrap.

Loads in-cluster configuration when running inside a pod and falls back to a
kubeconfig file otherwise.
"""

import os
import logging
from dataclasses import dataclass
from typing import Dict, Any
from kubernetes import client, config


@dataclass
class KubeClients:
    """API groups used by the readiness checker"""
    core: client.CoreV1Api
    storage: client.StorageV1Api
    version: client.VersionApi
    in_cluster: bool = False


def init_kubernetes_clients(config_data: Dict[str, Any] = None) -> KubeClients:
    """
    Initialize Kubernetes clients
    
    Args:
        config_data: Configuration data; the optional 'kubernetes' section may
            name a kubeconfig file and context
            
    Returns:
        KubeClients: Ready-to-use API clients
    """
    kube_config = (config_data or {}).get('kubernetes') or {}
    in_cluster = 'KUBERNETES_SERVICE_HOST' in os.environ
    
    try:
        if in_cluster:
            config.load_incluster_config()
            logging.info("Using in-cluster Kubernetes configuration")
        else:
            config.load_kube_config(
                config_file=kube_config.get('kubeconfig'),
                context=kube_config.get('context')
            )
            logging.info("Using kubeconfig file for Kubernetes configuration")
    except Exception as e:
        logging.error(f"Failed to initialize Kubernetes client: {e}")
        raise
    
    return KubeClients(
        core=client.CoreV1Api(),
        storage=client.StorageV1Api(),
        version=client.VersionApi(),
        in_cluster=in_cluster
    )
