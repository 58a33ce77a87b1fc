#!/usr/bin/env python3
"""
Data model for the PV provisioning check.
"""

import hashlib
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Tuple

# DNS-1123 subdomain limit for object names
MAX_NAME_LENGTH = 253
_DIGEST_LENGTH = 8
_INVALID_NAME_CHARS = re.compile(r'[^a-z0-9.-]+')


class TrialOutcome(Enum):
    """Outcome of one node's provisioning trial"""
    PASSED = "Passed"
    FAILED = "Failed"


def trial_resource_name(prefix: str, kind: str, node_name: str) -> str:
    """
    Derive a deterministic object name for a node's trial resource
    
    Node names are already valid object names in practice, so the result is
    normally just '<prefix>-<kind>-<node>'. Anything that had to be sanitised
    or truncated gets a digest of the node name appended to stay unique.
    
    Args:
        prefix: Name prefix shared by all check resources
        kind: Resource kind marker ('pvc' or 'pod')
        node_name: Name of the node under test
        
    Returns:
        str: Valid DNS-1123 subdomain name
    """
    raw = f"{prefix}-{kind}-{node_name}"
    name = _INVALID_NAME_CHARS.sub('-', raw.lower()).strip('-.')
    if name == raw and len(name) <= MAX_NAME_LENGTH:
        return name
    
    digest = hashlib.sha1(node_name.encode('utf-8')).hexdigest()[:_DIGEST_LENGTH]
    head = name[:MAX_NAME_LENGTH - _DIGEST_LENGTH - 1].rstrip('-.')
    return f"{head}-{digest}" if head else digest


@dataclass(frozen=True)
class Trial:
    """Claim and pod pairing bound to one node"""
    node_name: str
    claim_name: str
    pod_name: str

    @classmethod
    def for_node(cls, node_name: str, name_prefix: str) -> 'Trial':
        return cls(
            node_name=node_name,
            claim_name=trial_resource_name(name_prefix, "pvc", node_name),
            pod_name=trial_resource_name(name_prefix, "pod", node_name)
        )


@dataclass(frozen=True)
class NodeTrialResult:
    """Recorded outcome for one node"""
    node_name: str
    outcome: TrialOutcome
    reason: str = ""
    duration_seconds: float = 0.0

    @property
    def passed(self) -> bool:
        return self.outcome is TrialOutcome.PASSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'node_name': self.node_name,
            'outcome': self.outcome.value,
            'reason': self.reason,
            'duration_seconds': round(self.duration_seconds, 2)
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Aggregate result of a PV provisioning run
    
    passed_count + failed_count == total_nodes whenever trials ran. A run that
    short-circuits reports zero passed and zero failed, with result_message
    explaining why no trials ran.
    """
    total_nodes: int = 0
    passed_count: int = 0
    failed_count: int = 0
    result_message: str = ""
    node_results: Tuple[NodeTrialResult, ...] = field(default_factory=tuple)

    @property
    def trials_ran(self) -> bool:
        return (self.passed_count + self.failed_count) > 0

    @property
    def all_passed(self) -> bool:
        return self.passed_count > 0 and self.failed_count == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_nodes': self.total_nodes,
            'passed_count': self.passed_count,
            'failed_count': self.failed_count,
            'result_message': self.result_message,
            'node_results': [r.to_dict() for r in self.node_results]
        }


def summarize_outcomes(passed_count: int, failed_count: int) -> str:
    """Build the display string, e.g. 'Passed' or 'Passed(7)/Failed(3)'"""
    if failed_count == 0 and passed_count > 0:
        return TrialOutcome.PASSED.value
    if passed_count == 0 and failed_count > 0:
        return TrialOutcome.FAILED.value
    return f"Passed({passed_count})/Failed({failed_count})"
