"""
Cluster Readiness Checker

Inspects a running Kubernetes cluster and validates that every node can
dynamically provision persistent storage.

Components:
- core: configuration and Kubernetes client bootstrap
- inventory: node discovery and basic cluster facts
- provisioning: the per-node PV provisioning validation engine
- ui: rich console rendering of results
"""

__version__ = '1.0.0'
