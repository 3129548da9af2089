"""
Module: sqs.py
Description: Amazon SQS transport.

Implements the queue transport over boto3. Handles queue provisioning,
sending, single-message long-poll receives, visibility changes and
deletes, translating botocore failures into TransportError subclasses.

Key Components:
- SqsTransport: boto3-backed QueueTransport
- Error classification by SQS error code
- Structured logging of every failed call

Dependencies: boto3, botocore, typing
"""

from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config.settings import MAX_WAIT_TIME_SECONDS, QueueConfig
from ..exceptions import (
    PermissionDeniedError,
    QueueDoesNotExistError,
    ThrottlingError,
    TransportError,
)
from ..models.item import ReceivedMessage
from ..utils.logger import get_logger
from .base import QueueTransport

logger = get_logger(__name__)

THROTTLING_CODES = frozenset({
    "Throttling",
    "ThrottlingException",
    "RequestThrottled",
    "AWS.SimpleQueueService.RequestThrottled",
    "ServiceUnavailable",
})
PERMISSION_CODES = frozenset({
    "AccessDenied",
    "AccessDeniedException",
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "UnrecognizedClientException",
})
NON_EXISTENT_QUEUE_CODES = frozenset({
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
})
QUEUE_EXISTS_CODES = frozenset({
    "AWS.SimpleQueueService.QueueNameExists",
    "QueueAlreadyExists",
    "QueueNameExists",
})


class SqsTransport(QueueTransport):
    """
    SQS transport built on a boto3 client.

    Attributes:
        region: AWS region the client talks to
        endpoint_url: Custom endpoint, if any
        client: boto3 SQS client

    Example:
        >>> transport = SqsTransport(config)
        >>> url = transport.create_queue("orders")
        >>> transport.send_message(url, '{"id": 42}')
    """

    def __init__(self, config: QueueConfig, client: Any = None):
        """
        Initialize SQS transport.

        Args:
            config: Resolved queue configuration
            client: Pre-built boto3 SQS client (optional)
        """
        self.region = config.aws_region
        self.endpoint_url = config.endpoint_url

        if client is None:
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
            client = session.client(
                'sqs',
                endpoint_url=config.endpoint_url,
                config=Config(
                    # Long polls must finish before the read times out
                    read_timeout=config.request_timeout + MAX_WAIT_TIME_SECONDS,
                    connect_timeout=5,
                ),
            )

        self.client = client

        logger.info(
            "SQS transport initialized",
            region=self.region,
            endpoint_url=self.endpoint_url
        )

    def create_queue(self, name: str, attributes: Optional[Dict[str, str]] = None) -> str:
        try:
            response = self.client.create_queue(
                QueueName=name,
                Attributes=attributes or {}
            )
        except ClientError as e:
            if e.response['Error']['Code'] not in QUEUE_EXISTS_CODES:
                self._handle_error(e, "CreateQueue", queue_name=name)

            # Same name, different attributes: reuse the existing queue
            logger.info(
                "Queue already exists with different attributes, reusing it",
                queue_name=name
            )
            queue_url = self.get_queue_url(name)
            if not queue_url:
                self._handle_error(e, "CreateQueue", queue_name=name)
            return queue_url
        except BotoCoreError as e:
            self._handle_error(e, "CreateQueue", queue_name=name)

        queue_url = response['QueueUrl']
        logger.info("Queue created", queue_name=name, queue_url=queue_url)
        return queue_url

    def get_queue_url(self, name: str) -> Optional[str]:
        try:
            response = self.client.get_queue_url(QueueName=name)
        except ClientError as e:
            if e.response['Error']['Code'] in NON_EXISTENT_QUEUE_CODES:
                return None
            self._handle_error(e, "GetQueueUrl", queue_name=name)
        except BotoCoreError as e:
            self._handle_error(e, "GetQueueUrl", queue_name=name)
        return response['QueueUrl']

    def delete_queue(self, queue_url: str) -> None:
        self._call("DeleteQueue", self.client.delete_queue, QueueUrl=queue_url)
        logger.info("Queue deleted", queue_url=queue_url)

    def send_message(self, queue_url: str, body: str) -> str:
        response = self._call(
            "SendMessage",
            self.client.send_message,
            QueueUrl=queue_url,
            MessageBody=body
        )
        return response['MessageId']

    def receive_message(
        self,
        queue_url: str,
        visibility_timeout: int,
        wait_time_seconds: int
    ) -> Optional[ReceivedMessage]:
        response = self._call(
            "ReceiveMessage",
            self.client.receive_message,
            QueueUrl=queue_url,
            MaxNumberOfMessages=1,
            VisibilityTimeout=visibility_timeout,
            WaitTimeSeconds=wait_time_seconds,
            AttributeNames=['ApproximateReceiveCount']
        )

        messages = response.get('Messages', [])
        if not messages:
            return None

        message = messages[0]
        attributes = message.get('Attributes', {})
        return ReceivedMessage(
            body=message.get('Body', ''),
            receipt_handle=message.get('ReceiptHandle'),
            message_id=message.get('MessageId'),
            receive_count=max(1, int(attributes.get('ApproximateReceiveCount', 1)))
        )

    def change_visibility(self, queue_url: str, receipt_handle: str, visibility_timeout: int) -> None:
        self._call(
            "ChangeMessageVisibility",
            self.client.change_message_visibility,
            QueueUrl=queue_url,
            ReceiptHandle=receipt_handle,
            VisibilityTimeout=visibility_timeout
        )

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        self._call(
            "DeleteMessage",
            self.client.delete_message,
            QueueUrl=queue_url,
            ReceiptHandle=receipt_handle
        )

    def get_attributes(self, queue_url: str, names: List[str]) -> Dict[str, str]:
        response = self._call(
            "GetQueueAttributes",
            self.client.get_queue_attributes,
            QueueUrl=queue_url,
            AttributeNames=names
        )
        return response.get('Attributes', {})

    def _call(self, operation: str, method: Callable[..., Dict[str, Any]], **kwargs) -> Dict[str, Any]:
        """Invoke a boto3 method, translating failures to TransportError."""
        try:
            return method(**kwargs)
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e, operation, queue_url=kwargs.get('QueueUrl'))

    def _handle_error(self, error: Exception, operation: str, **context) -> None:
        """
        Convert botocore errors to queue exceptions.

        Args:
            error: ClientError or BotoCoreError from boto3
            operation: SQS operation name
            **context: Extra fields for the log entry

        Raises:
            ThrottlingError: If throttled
            PermissionDeniedError: If credentials were rejected
            QueueDoesNotExistError: If the queue does not exist
            TransportError: For other errors
        """
        if isinstance(error, ClientError):
            code = error.response['Error']['Code']
            message = error.response['Error'].get('Message', str(error))

            logger.error(
                "SQS operation failed",
                operation=operation,
                error_code=code,
                error_message=message,
                **context
            )

            if code in THROTTLING_CODES:
                raise ThrottlingError(
                    f"SQS throttling on {operation} - retry with backoff",
                    code=code,
                    operation=operation
                ) from error
            if code in PERMISSION_CODES:
                raise PermissionDeniedError(
                    f"SQS permission denied on {operation}: {message}",
                    code=code,
                    operation=operation
                ) from error
            if code in NON_EXISTENT_QUEUE_CODES:
                raise QueueDoesNotExistError(
                    f"SQS queue does not exist ({operation})",
                    code=code,
                    operation=operation
                ) from error
            raise TransportError(
                f"SQS error on {operation}: {message}",
                code=code,
                operation=operation
            ) from error

        logger.error(
            "SQS request failed",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **context
        )
        raise TransportError(
            f"SQS request failed on {operation}: {error}",
            operation=operation
        ) from error
