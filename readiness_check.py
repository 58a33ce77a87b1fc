#!/usr/bin/env python3
"""
Cluster Readiness Check

Collects basic facts about the current Kubernetes cluster and validates that
persistent volumes can be dynamically provisioned on every node by running a
short-lived claim + pod trial per node.
"""

import sys
import json
import signal
import logging
import argparse
import threading
import yaml

from readiness.core import ProvisioningCheckConfig, init_kubernetes_clients, setup_logging
from readiness.inventory import ClusterInventory, InventoryError, collect_cluster_inventory
from readiness.provisioning import ProvisioningValidator
from readiness.ui import ReadinessUI


def load_config(config_path: str):
    """Load configuration from a YAML file"""
    try:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    except Exception as e:
        logging.error(f"Failed to load configuration from {config_path}: {e}")
        sys.exit(1)


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description="Kubernetes Cluster Readiness Check")
    parser.add_argument("--config", "-c", default="config.yaml",
                       help="Path to configuration file (default: config.yaml)")
    parser.add_argument("--output", "-o", help="Output file for results (JSON format)")
    parser.add_argument("--nodes", help="Comma-separated node names to check (default: all nodes)")
    parser.add_argument("--namespace", help="Namespace for the ephemeral test objects")
    parser.add_argument("--timeout", type=float,
                       help="Seconds to wait for each node's test pod")
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Enable verbose logging")
    
    return parser.parse_args(argv)


def select_nodes(inventory: ClusterInventory, nodes_arg: str = None):
    """Restrict the inventory's nodes to the ones requested on the command line"""
    if not nodes_arg:
        return list(inventory.node_names)
    
    requested = [n.strip() for n in nodes_arg.split(",") if n.strip()]
    unknown = [n for n in requested if n not in inventory.node_names]
    if unknown:
        logging.warning(f"Ignoring nodes not found in the cluster: {', '.join(unknown)}")
    return [n for n in requested if n in inventory.node_names]


def install_signal_handlers(cancel_event: threading.Event):
    """Turn SIGINT/SIGTERM into a cancellation request so cleanup still runs"""
    def _handler(signum, frame):
        logging.warning(f"Received signal {signum}, cancelling PV provisioning check")
        cancel_event.set()
    
    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def write_results(path: str, inventory: ClusterInventory, result):
    report = {
        'cluster': inventory.to_dict(),
        'pv_provisioning': result.to_dict()
    }
    with open(path, 'w') as f:
        json.dump(report, f, indent=2)


def main(argv=None):
    """Main function"""
    args = parse_arguments(argv)
    
    config_data = load_config(args.config)
    setup_logging(config_data, verbose=args.verbose)
    
    try:
        check_config = ProvisioningCheckConfig.from_config(config_data).with_overrides(
            namespace=args.namespace, timeout_seconds=args.timeout)
    except ValueError as e:
        logging.error(f"Invalid configuration: {e}")
        return 1
    
    try:
        clients = init_kubernetes_clients(config_data)
    except Exception:
        return 1
    
    try:
        inventory = collect_cluster_inventory(clients.core, clients.version)
    except InventoryError as e:
        logging.error(str(e))
        inventory = ClusterInventory()
    
    ui = ReadinessUI()
    ui.display_initial_banner(inventory, check_config.namespace)
    
    cancel_event = threading.Event()
    install_signal_handlers(cancel_event)
    
    validator = ProvisioningValidator(clients.core, clients.storage, check_config, cancel_event=cancel_event)
    result = validator.validate(select_nodes(inventory, args.nodes))
    ui.display_validation_result(result)
    
    if args.output:
        try:
            write_results(args.output, inventory, result)
            logging.info(f"Results saved to {args.output}")
            ui.display_output_written(args.output)
        except Exception as e:
            logging.error(f"Failed to save results to {args.output}: {e}")
    
    return 0 if result.all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
