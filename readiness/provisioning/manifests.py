#!/usr/bin/env python3
"""
Object bodies for the PV provisioning check.

Bodies are plain dictionaries in API (camelCase) form; the Kubernetes client
serialises them unchanged.
"""

from typing import Dict, Any

from readiness.core.config import ProvisioningCheckConfig
from .models import Trial

TEST_TYPE_LABEL = "test-type"
TEST_TYPE_VALUE = "pv-provisioning-check"
MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
MANAGED_BY_VALUE = "cluster-readiness-checker"
NODE_ANNOTATION = "readiness-check/node"

CONTAINER_NAME = "pv-check-container"
VOLUME_NAME = "pvc-volume"
MOUNT_PATH = "/test"
WORKLOAD_SCRIPT = "echo 'Hello from PV provisioning check' > /test/datafile && sleep 5 && exit 0"


def _labels() -> Dict[str, str]:
    return {
        TEST_TYPE_LABEL: TEST_TYPE_VALUE,
        MANAGED_BY_LABEL: MANAGED_BY_VALUE
    }


def build_namespace(name: str) -> Dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Namespace",
        "metadata": {
            "name": name,
            "labels": _labels()
        }
    }


def build_claim(trial: Trial, check_config: ProvisioningCheckConfig) -> Dict[str, Any]:
    """
    Build the ReadWriteOnce claim for a trial
    
    storageClassName is omitted unless configured so the cluster default
    class provisions the volume.
    """
    spec = {
        "accessModes": ["ReadWriteOnce"],
        "resources": {
            "requests": {
                "storage": check_config.claim_size
            }
        }
    }
    if check_config.storage_class:
        spec["storageClassName"] = check_config.storage_class
    
    return {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {
            "name": trial.claim_name,
            "labels": _labels(),
            "annotations": {NODE_ANNOTATION: trial.node_name}
        },
        "spec": spec
    }


def build_pod(trial: Trial, check_config: ProvisioningCheckConfig) -> Dict[str, Any]:
    """
    Build the short-lived pod pinned to the trial's node
    
    Pinning uses a metadata.name field affinity rather than nodeName so the
    pod still goes through the scheduler, which WaitForFirstConsumer classes
    need to pick a topology for the volume. Tolerating every taint keeps
    tainted nodes (e.g. control plane) in scope.
    """
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {
            "name": trial.pod_name,
            "labels": _labels(),
            "annotations": {NODE_ANNOTATION: trial.node_name}
        },
        "spec": {
            "affinity": {
                "nodeAffinity": {
                    "requiredDuringSchedulingIgnoredDuringExecution": {
                        "nodeSelectorTerms": [
                            {
                                "matchFields": [
                                    {
                                        "key": "metadata.name",
                                        "operator": "In",
                                        "values": [trial.node_name]
                                    }
                                ]
                            }
                        ]
                    }
                }
            },
            "tolerations": [{"operator": "Exists"}],
            "restartPolicy": "Never",
            "containers": [
                {
                    "name": CONTAINER_NAME,
                    "image": check_config.image,
                    "command": ["sh", "-c"],
                    "args": [WORKLOAD_SCRIPT],
                    "volumeMounts": [
                        {
                            "name": VOLUME_NAME,
                            "mountPath": MOUNT_PATH
                        }
                    ]
                }
            ],
            "volumes": [
                {
                    "name": VOLUME_NAME,
                    "persistentVolumeClaim": {
                        "claimName": trial.claim_name
                    }
                }
            ]
        }
    }
