"""
Module: metrics.py
Description: CloudWatch custom metrics publishing.

Publishes queue metrics to CloudWatch for monitoring throughput
(items created, claimed, deleted, released) and backlog depth.

Key Components:
- MetricsClient: CloudWatch metrics client
- put_metric(): Publish individual metrics
- Graceful error handling for metrics failures
- Structured logging for metric operations

Dependencies: boto3, typing, logger
"""

from typing import Any, Dict, Optional

import boto3

from ..config.settings import QueueConfig
from .logger import get_logger

logger = get_logger(__name__)


class MetricsClient:
    """CloudWatch metrics client."""

    def __init__(self, namespace: str = "LeaseQueue", cloudwatch: Any = None, region: Optional[str] = None):
        """
        Initialize metrics client.

        Args:
            namespace: CloudWatch metrics namespace
            cloudwatch: Pre-built boto3 CloudWatch client (optional)
            region: AWS region used when building the client
        """
        self.namespace = namespace
        self.cloudwatch = cloudwatch or boto3.client('cloudwatch', region_name=region)

        logger.info(
            "Metrics client initialized",
            namespace=namespace
        )

    @classmethod
    def from_config(cls, config: QueueConfig) -> Optional["MetricsClient"]:
        """Build a metrics client when config.metrics_namespace is set."""
        if not config.metrics_namespace:
            return None

        session = boto3.Session(
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=(
                config.aws_secret_access_key.get_secret_value()
                if config.aws_secret_access_key else None
            ),
            aws_session_token=(
                config.aws_session_token.get_secret_value()
                if config.aws_session_token else None
            ),
            region_name=config.aws_region,
        )
        return cls(
            namespace=config.metrics_namespace,
            cloudwatch=session.client('cloudwatch')
        )

    def put_metric(
        self,
        metric_name: str,
        value: float,
        unit: str = 'Count',
        dimensions: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Publish a metric to CloudWatch.

        Args:
            metric_name: Name of the metric
            value: Metric value
            unit: Metric unit (Count, Seconds, etc.)
            dimensions: Optional metric dimensions
        """
        try:
            metric_data = {
                'MetricName': metric_name,
                'Value': value,
                'Unit': unit
            }

            if dimensions:
                metric_data['Dimensions'] = [
                    {'Name': k, 'Value': v}
                    for k, v in dimensions.items()
                ]

            self.cloudwatch.put_metric_data(
                Namespace=self.namespace,
                MetricData=[metric_data]
            )

            logger.debug(
                "Metric published to CloudWatch",
                metric_name=metric_name,
                value=value,
                unit=unit,
                dimensions=dimensions,
                namespace=self.namespace
            )

        except Exception as e:
            # Metrics are best effort; queue operations must not fail on them
            logger.warning(
                "Failed to publish metric",
                metric_name=metric_name,
                value=value,
                error=str(e),
                namespace=self.namespace
            )
