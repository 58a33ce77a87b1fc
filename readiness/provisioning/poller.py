#!/usr/bin/env python3
"""
Pod status polling for provisioning trials.
"""

import time
import logging
import threading
from typing import Callable, Optional, Tuple
from kubernetes.client.rest import ApiException

from .models import TrialOutcome

READY_PHASES = ("Running", "Succeeded")
FAILED_PHASE = "Failed"


def wait_for_pod_running_or_succeeded(core_api, namespace: str, pod_name: str,
                                      interval: float, timeout: float,
                                      cancel_event: Optional[threading.Event] = None,
                                      run_deadline: Optional[float] = None,
                                      clock: Callable[[], float] = time.monotonic,
                                      sleep: Optional[Callable[[float], None]] = None) -> Tuple[TrialOutcome, str]:
    """
    Poll a pod until it is Running or Succeeded, fails, or the timeout elapses
    
    The first poll happens immediately. A read error ends the wait as a
    failure without retrying.
    
    Args:
        core_api: CoreV1Api client
        namespace: Namespace of the pod
        pod_name: Name of the pod
        interval: Seconds between polls
        timeout: Seconds to wait before giving up
        cancel_event: Set to abandon the wait early
        run_deadline: Absolute clock() value at which the whole run ends
        clock: Monotonic time source
        sleep: Sleep function; defaults to waiting on cancel_event so that
            cancellation interrupts the sleep
        
    Returns:
        Tuple[TrialOutcome, str]: Outcome and a human-readable reason
    """
    if sleep is None:
        sleep = cancel_event.wait if cancel_event is not None else time.sleep
    
    start = clock()
    deadline = start + timeout
    stop_at = min(deadline, run_deadline) if run_deadline is not None else deadline
    phase = None
    
    while True:
        if cancel_event is not None and cancel_event.is_set():
            return TrialOutcome.FAILED, "cancelled while waiting for pod"
        
        try:
            pod = core_api.read_namespaced_pod(name=pod_name, namespace=namespace)
        except ApiException as e:
            return TrialOutcome.FAILED, f"failed to read pod status: {e.status} {e.reason}"
        except Exception as e:
            return TrialOutcome.FAILED, f"failed to read pod status: {e}"
        
        phase = pod.status.phase if pod.status else None
        logging.debug(f"Pod {namespace}/{pod_name} phase: {phase}")
        
        if phase in READY_PHASES:
            return TrialOutcome.PASSED, f"pod reached {phase} after {clock() - start:.1f}s"
        if phase == FAILED_PHASE:
            return TrialOutcome.FAILED, "pod failed"
        
        now = clock()
        if now >= stop_at:
            if now < deadline:
                return TrialOutcome.FAILED, f"run deadline reached while pod was {phase}"
            return TrialOutcome.FAILED, f"timed out after {timeout:g}s (last phase: {phase})"
        
        sleep(min(interval, stop_at - now))
