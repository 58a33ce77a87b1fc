#!/usr/bin/env python3
"""
Configuration handling for the readiness checker.

The YAML configuration (config.yaml) is loaded by the caller and passed around
as a plain dictionary. Settings for the provisioning check are frozen into a
ProvisioningCheckConfig so the engine never reads mutable global state.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Any, Optional

DEFAULT_NAMESPACE = "readiness-pv-check-ns"
DEFAULT_NAME_PREFIX = "readiness-pv-check"
DEFAULT_CLAIM_SIZE = "1Mi"
DEFAULT_IMAGE = "busybox:1.36.1"
DEFAULT_POLL_INTERVAL_SECONDS = 3.0
DEFAULT_TIMEOUT_SECONDS = 45.0
DEFAULT_NAMESPACE_RELEASE_WAIT_SECONDS = 60.0


@dataclass(frozen=True)
class ProvisioningCheckConfig:
    """Immutable settings for one PV provisioning validation run"""
    namespace: str = DEFAULT_NAMESPACE
    name_prefix: str = DEFAULT_NAME_PREFIX
    claim_size: str = DEFAULT_CLAIM_SIZE
    storage_class: Optional[str] = None  # None means the cluster default class
    image: str = DEFAULT_IMAGE
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    namespace_release_wait_seconds: float = DEFAULT_NAMESPACE_RELEASE_WAIT_SECONDS
    run_timeout_seconds: Optional[float] = None

    def __post_init__(self):
        if not self.namespace:
            raise ValueError("provisioning_check.namespace must not be empty")
        if not self.name_prefix:
            raise ValueError("provisioning_check.name_prefix must not be empty")
        if self.poll_interval_seconds <= 0:
            raise ValueError("provisioning_check.poll_interval_seconds must be positive")
        if self.timeout_seconds <= 0:
            raise ValueError("provisioning_check.timeout_seconds must be positive")
        if self.namespace_release_wait_seconds < 0:
            raise ValueError("provisioning_check.namespace_release_wait_seconds must not be negative")
        if self.run_timeout_seconds is not None and self.run_timeout_seconds <= 0:
            raise ValueError("provisioning_check.run_timeout_seconds must be positive when set")

    @classmethod
    def from_config(cls, config_data: Optional[Dict[str, Any]]) -> 'ProvisioningCheckConfig':
        """
        Build the check settings from the 'provisioning_check' section
        
        Missing or null keys fall back to the defaults.
        
        Args:
            config_data: Full configuration dictionary (may be None)
            
        Returns:
            ProvisioningCheckConfig: Frozen settings
            
        Raises:
            ValueError: If a value is out of range
        """
        section = (config_data or {}).get('provisioning_check') or {}
        
        def _get(key, default):
            value = section.get(key)
            return default if value is None else value
        
        run_timeout = section.get('run_timeout_seconds')
        return cls(
            namespace=str(_get('namespace', DEFAULT_NAMESPACE)),
            name_prefix=str(_get('name_prefix', DEFAULT_NAME_PREFIX)),
            claim_size=str(_get('claim_size', DEFAULT_CLAIM_SIZE)),
            storage_class=section.get('storage_class') or None,
            image=str(_get('image', DEFAULT_IMAGE)),
            poll_interval_seconds=float(_get('poll_interval_seconds', DEFAULT_POLL_INTERVAL_SECONDS)),
            timeout_seconds=float(_get('timeout_seconds', DEFAULT_TIMEOUT_SECONDS)),
            namespace_release_wait_seconds=float(
                _get('namespace_release_wait_seconds', DEFAULT_NAMESPACE_RELEASE_WAIT_SECONDS)),
            run_timeout_seconds=float(run_timeout) if run_timeout is not None else None
        )

    def with_overrides(self, namespace: str = None, timeout_seconds: float = None) -> 'ProvisioningCheckConfig':
        """Return a copy with command line overrides applied"""
        changes = {}
        if namespace:
            changes['namespace'] = namespace
        if timeout_seconds is not None:
            changes['timeout_seconds'] = float(timeout_seconds)
        return replace(self, **changes) if changes else self


def setup_logging(config_data: Dict[str, Any], verbose: bool = False):
    """Configure logging based on configuration"""
    logging_config = (config_data or {}).get('logging') or {}
    log_file = logging_config.get('file')
    log_to_stdout = logging_config.get('stdout', True)
    
    handlers = []
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    if log_to_stdout:
        handlers.append(logging.StreamHandler())
    if not handlers:
        handlers.append(logging.NullHandler())
    
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    
    # The Kubernetes client logs every request at DEBUG through urllib3
    logging.getLogger('urllib3').setLevel(logging.WARNING)
