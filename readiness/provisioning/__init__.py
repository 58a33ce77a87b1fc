"""
PV provisioning validation for the readiness checker.

Components:
- ProvisioningValidator: per-node claim + pod trials with guaranteed cleanup
- ScopedNamespace: namespace owned by a single validation run
- ValidationResult / NodeTrialResult: results handed to the report layer
"""

from .models import (
    NodeTrialResult,
    Trial,
    TrialOutcome,
    ValidationResult,
    summarize_outcomes,
    trial_resource_name
)
from .namespace import NamespaceAcquisitionError, ScopedNamespace
from .poller import wait_for_pod_running_or_succeeded
from .validator import ProvisioningValidator, run_pv_provisioning_check

__all__ = [
    'NodeTrialResult',
    'Trial',
    'TrialOutcome',
    'ValidationResult',
    'summarize_outcomes',
    'trial_resource_name',
    'NamespaceAcquisitionError',
    'ScopedNamespace',
    'wait_for_pod_running_or_succeeded',
    'ProvisioningValidator',
    'run_pv_provisioning_check'
]
