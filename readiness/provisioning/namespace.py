#!/usr/bin/env python3
"""
Scoped namespace handling for the PV provisioning check.

ScopedNamespace acquires the check namespace on entry and releases it exactly
once on exit, whatever path the run takes.
"""

import time
import threading
import logging
from typing import Callable, Optional
from kubernetes.client.rest import ApiException

from .manifests import build_namespace

TERMINATING_PHASE = "Terminating"


class NamespaceAcquisitionError(Exception):
    """Raised when the check namespace cannot be created or reused"""

    def __init__(self, namespace: str, reason: str):
        super().__init__(f"Failed to create namespace {namespace!r}: {reason}")
        self.namespace = namespace
        self.reason = reason


def _describe_api_error(e: ApiException) -> str:
    return f"{e.status} {e.reason}".strip() if e.status else str(e)


class ScopedNamespace:
    """
    Context manager owning the check namespace for one run
    
    Acquisition is create-if-absent. A namespace that already exists is left
    over from an earlier run that never released it, and may still hold that
    run's trial objects under the same names, so it is deleted and created
    afresh. A namespace still terminating is waited out first, otherwise
    object creation inside it would be rejected. The wait stops early when
    cancel_event is set or run_deadline passes.
    Release failures are logged and never raised.
    """

    def __init__(self, core_api, name: str, release_wait_seconds: float = 60.0,
                 poll_interval_seconds: float = 3.0,
                 cancel_event: Optional[threading.Event] = None,
                 run_deadline: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Optional[Callable[[float], None]] = None):
        self.core_api = core_api
        self.name = name
        self.release_wait_seconds = release_wait_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.cancel_event = cancel_event
        self.run_deadline = run_deadline
        self.clock = clock
        if sleep is None:
            sleep = cancel_event.wait if cancel_event is not None else time.sleep
        self.sleep = sleep
        self.acquired = False
        self.created = False
        self.recycled = False
        self._released = False

    def __enter__(self) -> 'ScopedNamespace':
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.release()
        return False

    def acquire(self):
        """
        Make sure a fresh namespace exists
        
        Raises:
            NamespaceAcquisitionError: If the namespace cannot be made available
        """
        existing = self._read()
        if existing is not None:
            phase = existing.status.phase if existing.status else None
            if phase != TERMINATING_PHASE:
                logging.info(f"Namespace {self.name} left over from a previous run, deleting it")
                self._delete_stale()
                self.recycled = True
            else:
                logging.info(f"Namespace {self.name} is terminating from a previous run, waiting for removal")
            self._wait_until_gone()
        
        try:
            self.core_api.create_namespace(body=build_namespace(self.name))
            self.created = True
            logging.info(f"Created namespace {self.name}")
        except ApiException as e:
            if e.status != 409:
                raise NamespaceAcquisitionError(self.name, _describe_api_error(e))
            logging.info(f"Namespace {self.name} already exists, reusing it")
        except Exception as e:
            raise NamespaceAcquisitionError(self.name, str(e))
        
        self.acquired = True

    def release(self):
        """Delete the namespace once; failures are only logged"""
        if not self.acquired or self._released:
            return
        self._released = True
        
        try:
            self.core_api.delete_namespace(name=self.name)
            logging.info(f"Deleted namespace {self.name}")
        except ApiException as e:
            if e.status == 404:
                logging.debug(f"Namespace {self.name} already deleted")
            else:
                logging.warning(f"Failed to delete namespace {self.name}: {_describe_api_error(e)}")
        except Exception as e:
            logging.warning(f"Failed to delete namespace {self.name}: {e}")

    def _read(self):
        try:
            return self.core_api.read_namespace(name=self.name)
        except ApiException as e:
            if e.status == 404:
                return None
            raise NamespaceAcquisitionError(self.name, _describe_api_error(e))
        except Exception as e:
            raise NamespaceAcquisitionError(self.name, str(e))

    def _delete_stale(self):
        try:
            self.core_api.delete_namespace(name=self.name)
        except ApiException as e:
            if e.status != 404:
                raise NamespaceAcquisitionError(
                    self.name, f"could not delete stale namespace: {_describe_api_error(e)}")
        except Exception as e:
            raise NamespaceAcquisitionError(self.name, f"could not delete stale namespace: {e}")

    def _wait_until_gone(self):
        deadline = self.clock() + self.release_wait_seconds
        stop_at = min(deadline, self.run_deadline) if self.run_deadline is not None else deadline
        while True:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise NamespaceAcquisitionError(self.name, "cancelled while waiting for namespace removal")
            if self._read() is None:
                return
            now = self.clock()
            if now >= stop_at:
                if now < deadline:
                    raise NamespaceAcquisitionError(
                        self.name, "cancelled: run deadline reached while waiting for namespace removal")
                raise NamespaceAcquisitionError(
                    self.name,
                    f"still terminating after {self.release_wait_seconds:g}s"
                )
            self.sleep(min(self.poll_interval_seconds, stop_at - now))
