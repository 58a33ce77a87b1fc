import unittest
import logging
from unittest.mock import Mock

from readiness.inventory.collector import (
    UNKNOWN,
    ClusterInventory,
    InventoryError,
    collect_cluster_inventory,
    detect_cloud_provider,
    detect_distribution
)
from tests.mock_kubernetes_data import FakeCoreV1Api, api_error, make_node

logging.disable(logging.CRITICAL)


class TestDetectCloudProvider(unittest.TestCase):

    def test_known_providers(self):
        cases = {
            "aws:///us-east-1a/i-0abc": "AWS",
            "gce://project/zone/instance": "GCP",
            "azure:///subscriptions/x/resourceGroups/y": "Azure",
            "digitalocean://123456": "DigitalOcean",
        }
        for provider_id, expected in cases.items():
            with self.subTest(provider_id=provider_id):
                self.assertEqual(detect_cloud_provider([make_node("n", provider_id=provider_id)]), expected)

    def test_unknown_provider(self):
        nodes = [make_node("n1"), make_node("n2", provider_id="kind://docker/kind/kind-control-plane")]
        self.assertEqual(detect_cloud_provider(nodes), UNKNOWN)

    def test_first_recognised_node_wins(self):
        nodes = [make_node("n1"), make_node("n2", provider_id="gce://p/z/i")]
        self.assertEqual(detect_cloud_provider(nodes), "GCP")


class TestDetectDistribution(unittest.TestCase):

    def test_known_distributions(self):
        cases = {
            "eks.amazonaws.com/nodegroup": "EKS",
            "cloud.google.com/gke-nodepool": "GKE",
            "kubernetes.azure.com/cluster": "AKS",
            "machine.openshift.io/machine": "OpenShift",
            "rke.cattle.io/machine": "RKE",
            "doks.digitalocean.com/node-id": "DOKS",
        }
        for label_key, expected in cases.items():
            with self.subTest(label_key=label_key):
                node = make_node("n", labels={label_key: "x", "kubernetes.io/hostname": "n"})
                self.assertEqual(detect_distribution([node]), expected)

    def test_plain_cluster(self):
        node = make_node("n", labels={"kubernetes.io/hostname": "n", "kubernetes.io/os": "linux"})
        self.assertEqual(detect_distribution([node]), UNKNOWN)


class TestCollectClusterInventory(unittest.TestCase):

    def test_collects_nodes_and_facts(self):
        core = FakeCoreV1Api(nodes=[
            make_node("worker-1", provider_id="aws:///us-east-1a/i-1",
                      labels={"eks.amazonaws.com/nodegroup": "ng"}, cpu="4"),
            make_node("worker-2", provider_id="aws:///us-east-1b/i-2", cpu="3500m"),
        ])
        version_api = Mock()
        version_api.get_code.return_value = Mock(git_version="v1.29.2")

        inventory = collect_cluster_inventory(core, version_api)

        self.assertEqual(inventory.node_names, ("worker-1", "worker-2"))
        self.assertEqual(inventory.total_node_count, 2)
        self.assertEqual(inventory.version, "v1.29.2")
        self.assertEqual(inventory.cloud_provider, "AWS")
        self.assertEqual(inventory.distribution, "EKS")
        self.assertEqual(inventory.total_vcpu_count, 7)

    def test_version_failure_is_not_fatal(self):
        core = FakeCoreV1Api(nodes=[make_node("n1")])
        version_api = Mock()
        version_api.get_code.side_effect = api_error(403)

        inventory = collect_cluster_inventory(core, version_api)

        self.assertEqual(inventory.version, UNKNOWN)
        self.assertEqual(inventory.node_names, ("n1",))

    def test_missing_or_bad_cpu_capacity_counts_as_zero(self):
        core = FakeCoreV1Api(nodes=[make_node("n1", cpu=None), make_node("n2", cpu="lots"), make_node("n3", cpu="2")])
        inventory = collect_cluster_inventory(core)
        self.assertEqual(inventory.total_vcpu_count, 2)

    def test_node_list_failure_raises(self):
        core = FakeCoreV1Api()
        core.failures["list_node"] = api_error(403)
        with self.assertRaises(InventoryError) as ctx:
            collect_cluster_inventory(core)
        self.assertIn("403", str(ctx.exception))

    def test_empty_cluster(self):
        inventory = collect_cluster_inventory(FakeCoreV1Api())
        self.assertEqual(inventory.node_names, ())
        self.assertEqual(inventory.cloud_provider, UNKNOWN)

    def test_to_dict(self):
        inventory = ClusterInventory(node_names=["a"], version="v1.30.0", total_vcpu_count=8)
        self.assertEqual(inventory.to_dict(), {
            'version': 'v1.30.0',
            'cloud_provider': UNKNOWN,
            'distribution': UNKNOWN,
            'total_node_count': 1,
            'total_vcpu_count': 8,
            'nodes': ['a']
        })

    def test_node_names_are_immutable(self):
        names = ["a", "b"]
        inventory = ClusterInventory(node_names=names)
        names.append("c")
        self.assertEqual(inventory.node_names, ("a", "b"))
        with self.assertRaises(AttributeError):
            inventory.node_names.append("c")


if __name__ == '__main__':
    unittest.main()
