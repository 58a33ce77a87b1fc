#!/usr/bin/env python3
"""
PV Provisioning Validation Engine

For each node a 1Mi claim and a pod pinned to that node are created in a
dedicated namespace. A node passes when its pod reaches Running or Succeeded
within the timeout. Trial objects are deleted after every node and the
namespace is deleted at the end of the run.
"""

import time
import logging
import threading
from typing import Callable, Iterable, List, Optional
from kubernetes.client.rest import ApiException

from readiness.core.config import ProvisioningCheckConfig
from .manifests import build_claim, build_pod
from .models import (
    NodeTrialResult,
    Trial,
    TrialOutcome,
    ValidationResult,
    summarize_outcomes
)
from .namespace import NamespaceAcquisitionError, ScopedNamespace
from .poller import wait_for_pod_running_or_succeeded

NO_NODES_MESSAGE = "No nodes found; PV provisioning check skipped."
NO_STORAGE_CLASSES_MESSAGE = "No StorageClasses found; dynamic provisioning likely not available."


class ProvisioningValidator:
    """Runs the PV provisioning check node by node"""

    def __init__(self, core_api, storage_api, check_config: ProvisioningCheckConfig = None,
                 cancel_event: Optional[threading.Event] = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Optional[Callable[[float], None]] = None):
        """
        Args:
            core_api: CoreV1Api client
            storage_api: StorageV1Api client
            check_config: Check settings (defaults when omitted)
            cancel_event: Set from another thread to stop the run early
            clock: Monotonic time source
            sleep: Sleep function used while polling
        """
        self.core_api = core_api
        self.storage_api = storage_api
        self.config = check_config or ProvisioningCheckConfig()
        self.cancel_event = cancel_event or threading.Event()
        self.clock = clock
        self.sleep = sleep or self.cancel_event.wait
        self._run_deadline = None

    def validate(self, node_names: Iterable[str]) -> ValidationResult:
        """
        Validate dynamic PV provisioning on every node
        
        Never raises; every failure is reflected in the returned result.
        
        Args:
            node_names: Names of the nodes to check
            
        Returns:
            ValidationResult: Aggregate outcome of the run
        """
        nodes = list(dict.fromkeys(node_names or []))
        total_nodes = len(nodes)
        if total_nodes == 0:
            logging.info("No nodes supplied, skipping PV provisioning check")
            return ValidationResult(result_message=NO_NODES_MESSAGE)
        
        self._run_deadline = None
        if self.config.run_timeout_seconds is not None:
            self._run_deadline = self.clock() + self.config.run_timeout_seconds
        
        logging.info(f"Starting PV provisioning check on {total_nodes} node(s) in namespace {self.config.namespace}")
        scope = ScopedNamespace(
            self.core_api,
            self.config.namespace,
            release_wait_seconds=self.config.namespace_release_wait_seconds,
            poll_interval_seconds=self.config.poll_interval_seconds,
            cancel_event=self.cancel_event,
            run_deadline=self._run_deadline,
            clock=self.clock,
            sleep=self.sleep
        )
        try:
            with scope:
                return self._validate_in_namespace(nodes)
        except NamespaceAcquisitionError as e:
            logging.error(str(e))
            return ValidationResult(total_nodes=total_nodes, result_message=str(e))

    def run_trial(self, node_name: str) -> NodeTrialResult:
        """
        Run one node's trial and clean up its objects
        
        Args:
            node_name: Node to validate
            
        Returns:
            NodeTrialResult: Outcome for the node
        """
        start = self.clock()
        trial = Trial.for_node(node_name, self.config.name_prefix)
        try:
            outcome, reason = self._exercise(trial)
        except Exception as e:
            outcome, reason = TrialOutcome.FAILED, f"unexpected error: {e}"
        finally:
            self._cleanup(trial)
        
        if outcome is TrialOutcome.PASSED:
            logging.info(f"PV provisioning passed on node {node_name}: {reason}")
        else:
            logging.warning(f"PV provisioning failed on node {node_name}: {reason}")
        return NodeTrialResult(node_name, outcome, reason, self.clock() - start)

    def _validate_in_namespace(self, nodes: List[str]) -> ValidationResult:
        total_nodes = len(nodes)
        try:
            storage_classes = self.storage_api.list_storage_class().items
        except ApiException as e:
            message = f"Failed to list StorageClasses: {e.status} {e.reason}"
            logging.error(message)
            return ValidationResult(total_nodes=total_nodes, result_message=message)
        except Exception as e:
            message = f"Failed to list StorageClasses: {e}"
            logging.error(message)
            return ValidationResult(total_nodes=total_nodes, result_message=message)
        
        if not storage_classes:
            logging.warning(NO_STORAGE_CLASSES_MESSAGE)
            return ValidationResult(total_nodes=total_nodes, result_message=NO_STORAGE_CLASSES_MESSAGE)
        logging.debug(f"Found {len(storage_classes)} StorageClass(es)")
        
        results = []
        for node_name in nodes:
            if self._stop_requested():
                logging.warning(f"PV provisioning check stopped before node {node_name}")
                results.append(NodeTrialResult(node_name, TrialOutcome.FAILED, "cancelled before trial started"))
                continue
            results.append(self.run_trial(node_name))
        
        passed_count = sum(1 for r in results if r.passed)
        failed_count = len(results) - passed_count
        message = summarize_outcomes(passed_count, failed_count)
        logging.info(f"PV provisioning check finished: {message}")
        
        return ValidationResult(
            total_nodes=total_nodes,
            passed_count=passed_count,
            failed_count=failed_count,
            result_message=message,
            node_results=tuple(results)
        )

    def _exercise(self, trial: Trial):
        namespace = self.config.namespace
        
        try:
            self.core_api.create_namespaced_persistent_volume_claim(
                namespace=namespace, body=build_claim(trial, self.config))
        except ApiException as e:
            return TrialOutcome.FAILED, f"failed to create PVC {trial.claim_name}: {e.status} {e.reason}"
        except Exception as e:
            return TrialOutcome.FAILED, f"failed to create PVC {trial.claim_name}: {e}"
        
        try:
            self.core_api.create_namespaced_pod(
                namespace=namespace, body=build_pod(trial, self.config))
        except ApiException as e:
            return TrialOutcome.FAILED, f"failed to create pod {trial.pod_name}: {e.status} {e.reason}"
        except Exception as e:
            return TrialOutcome.FAILED, f"failed to create pod {trial.pod_name}: {e}"
        
        return wait_for_pod_running_or_succeeded(
            self.core_api,
            namespace,
            trial.pod_name,
            interval=self.config.poll_interval_seconds,
            timeout=self.config.timeout_seconds,
            cancel_event=self.cancel_event,
            run_deadline=self._run_deadline,
            clock=self.clock,
            sleep=self.sleep
        )

    def _cleanup(self, trial: Trial):
        namespace = self.config.namespace
        self._delete("pod", trial.pod_name, lambda: self.core_api.delete_namespaced_pod(
            name=trial.pod_name, namespace=namespace))
        self._delete("pvc", trial.claim_name, lambda: self.core_api.delete_namespaced_persistent_volume_claim(
            name=trial.claim_name, namespace=namespace))

    def _delete(self, resource_type: str, name: str, delete_call: Callable[[], object]):
        try:
            delete_call()
            logging.debug(f"Deleted {resource_type} {name}")
        except ApiException as e:
            if e.status == 404:
                logging.debug(f"{resource_type} {name} not found, nothing to clean up")
            else:
                logging.warning(f"Failed to clean up {resource_type} {name}: {e.status} {e.reason}")
        except Exception as e:
            logging.warning(f"Failed to clean up {resource_type} {name}: {e}")

    def _stop_requested(self) -> bool:
        if self.cancel_event.is_set():
            return True
        return self._run_deadline is not None and self.clock() >= self._run_deadline


def run_pv_provisioning_check(core_api, storage_api, node_names: Iterable[str],
                              check_config: ProvisioningCheckConfig = None,
                              cancel_event: Optional[threading.Event] = None) -> ValidationResult:
    """Convenience wrapper: validate PV provisioning on the given nodes"""
    validator = ProvisioningValidator(core_api, storage_api, check_config, cancel_event=cancel_event)
    return validator.validate(node_names)
