import re
import unittest

from readiness.provisioning.models import (
    MAX_NAME_LENGTH,
    NodeTrialResult,
    Trial,
    TrialOutcome,
    ValidationResult,
    summarize_outcomes,
    trial_resource_name
)

DNS_SUBDOMAIN = re.compile(r'^[a-z0-9]([-a-z0-9.]*[a-z0-9])?$')


class TestSummarizeOutcomes(unittest.TestCase):

    def test_all_passed(self):
        self.assertEqual(summarize_outcomes(3, 0), "Passed")

    def test_all_failed(self):
        self.assertEqual(summarize_outcomes(0, 2), "Failed")

    def test_mixed(self):
        self.assertEqual(summarize_outcomes(7, 3), "Passed(7)/Failed(3)")

    def test_nothing_ran(self):
        self.assertEqual(summarize_outcomes(0, 0), "Passed(0)/Failed(0)")


class TestTrialResourceName(unittest.TestCase):

    def test_plain_node_name_is_used_verbatim(self):
        self.assertEqual(trial_resource_name("pv-check", "pvc", "worker-1"), "pv-check-pvc-worker-1")
        self.assertEqual(
            trial_resource_name("pv-check", "pod", "ip-10-0-1-5.ec2.internal"),
            "pv-check-pod-ip-10-0-1-5.ec2.internal"
        )

    def test_names_are_deterministic(self):
        self.assertEqual(trial_resource_name("p", "pod", "Node_A"), trial_resource_name("p", "pod", "Node_A"))

    def test_invalid_characters_are_sanitised_with_digest(self):
        name = trial_resource_name("pv-check", "pod", "Worker_1")
        self.assertRegex(name, DNS_SUBDOMAIN)
        self.assertTrue(name.startswith("pv-check-pod-worker-1-"))

    def test_sanitised_names_do_not_collide(self):
        self.assertNotEqual(
            trial_resource_name("pv-check", "pod", "Worker_1"),
            trial_resource_name("pv-check", "pod", "worker-1")
        )

    def test_long_names_are_truncated_uniquely(self):
        first = trial_resource_name("pv-check", "pvc", "a" * 300)
        second = trial_resource_name("pv-check", "pvc", "a" * 301)
        self.assertLessEqual(len(first), MAX_NAME_LENGTH)
        self.assertRegex(first, DNS_SUBDOMAIN)
        self.assertNotEqual(first, second)


class TestTrial(unittest.TestCase):

    def test_for_node_derives_claim_and_pod_names(self):
        trial = Trial.for_node("worker-2", "readiness-pv-check")
        self.assertEqual(trial.claim_name, "readiness-pv-check-pvc-worker-2")
        self.assertEqual(trial.pod_name, "readiness-pv-check-pod-worker-2")
        self.assertEqual(trial.node_name, "worker-2")


class TestValidationResult(unittest.TestCase):

    def test_to_dict(self):
        result = ValidationResult(
            total_nodes=2,
            passed_count=1,
            failed_count=1,
            result_message="Passed(1)/Failed(1)",
            node_results=(
                NodeTrialResult("a", TrialOutcome.PASSED, "pod reached Running after 3.0s", 3.456),
                NodeTrialResult("b", TrialOutcome.FAILED, "pod failed", 1.0),
            )
        )
        data = result.to_dict()
        self.assertEqual(data["total_nodes"], 2)
        self.assertEqual(data["result_message"], "Passed(1)/Failed(1)")
        self.assertEqual(data["node_results"][0], {
            'node_name': 'a',
            'outcome': 'Passed',
            'reason': 'pod reached Running after 3.0s',
            'duration_seconds': 3.46
        })
        self.assertTrue(result.trials_ran)
        self.assertFalse(result.all_passed)

    def test_short_circuit_result(self):
        result = ValidationResult(total_nodes=3, result_message="No StorageClasses found")
        self.assertFalse(result.trials_ran)
        self.assertFalse(result.all_passed)
        self.assertEqual(result.node_results, ())

    def test_result_is_immutable(self):
        result = ValidationResult(total_nodes=1, passed_count=1, result_message="Passed")
        with self.assertRaises(AttributeError):
            result.passed_count = 0


if __name__ == '__main__':
    unittest.main()
