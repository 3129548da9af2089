"""
Module: test_metrics.py
Description: Unit tests for CloudWatch metrics publishing.
"""

from unittest.mock import MagicMock

import boto3

from lease_queue.config.settings import QueueConfig
from lease_queue.utils.metrics import MetricsClient


class TestMetricsClient:
    """Test cases for MetricsClient."""

    def test_put_metric(self, aws_mock):
        client = MetricsClient(namespace="LeaseQueueTest", region="us-east-1")

        client.put_metric("ItemsCreated", 1.0, dimensions={"QueueName": "jobs"})

        cloudwatch = boto3.client("cloudwatch", region_name="us-east-1")
        metrics = cloudwatch.list_metrics(Namespace="LeaseQueueTest")["Metrics"]
        assert [metric["MetricName"] for metric in metrics] == ["ItemsCreated"]
        assert metrics[0]["Dimensions"] == [{"Name": "QueueName", "Value": "jobs"}]

    def test_failures_are_swallowed(self):
        cloudwatch = MagicMock()
        cloudwatch.put_metric_data.side_effect = RuntimeError("CloudWatch unavailable")
        client = MetricsClient(namespace="LeaseQueueTest", cloudwatch=cloudwatch)

        client.put_metric("ItemsCreated", 1.0)

        cloudwatch.put_metric_data.assert_called_once()

    def test_from_config_disabled(self):
        assert MetricsClient.from_config(QueueConfig(_env_file=None)) is None

    def test_from_config_enabled(self, aws_mock):
        config = QueueConfig(
            _env_file=None,
            metrics_namespace="LeaseQueue",
            aws_access_key_id="testing",
            aws_secret_access_key="testing"
        )

        client = MetricsClient.from_config(config)

        assert client.namespace == "LeaseQueue"
