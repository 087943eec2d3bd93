"""
Alert notifiers.

A notifier is told about every recorded alert. Notification is best-effort:
a failing notifier logs the problem and never interrupts monitoring.
"""

import logging
from abc import ABC, abstractmethod

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .aws import call_with_retries, error_code
from .models import Alert
from .serialization import alert_to_json

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Interface of an alert sink."""

    @abstractmethod
    async def notify(self, user_id: str, alert: Alert) -> None:
        """Deliver ``alert`` to ``user_id``. Implementations must not raise."""


class LoggingNotifier(Notifier):
    """Writes alerts to the log."""

    async def notify(self, user_id: str, alert: Alert) -> None:
        logger.warning(
            f"Sentiment alert [{alert.severity.value}] for '{alert.brand_name}' "
            f"(user {user_id}): score={alert.sentiment.score:.3f}, "
            f"risk={alert.risk_level.value}, monitor={alert.monitoring_id}"
        )


class SnsNotifier(Notifier):
    """
    Publishes alerts to an Amazon SNS topic.

    The message body is the JSON form of the alert; the user id and severity
    travel as message attributes so subscriptions can filter on them.
    Throttling and connection errors are retried with exponential backoff;
    a publish that still fails is logged and dropped.
    """

    def __init__(self, topic_arn: str, region_name: str = "us-east-1",
                 max_retries: int = 3, base_delay: float = 1.0):
        if not topic_arn:
            raise ValueError("SNS topic ARN cannot be empty")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.topic_arn = topic_arn
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.sns = boto3.client('sns', region_name=region_name)

        logger.info(f"SnsNotifier initialized for topic {topic_arn}")

    async def notify(self, user_id: str, alert: Alert) -> None:
        try:
            message = alert_to_json(alert)
        except ValueError as e:
            logger.error(f"Could not serialize alert {alert.id}: {e}")
            return

        attributes = {
            'user_id': {'DataType': 'String', 'StringValue': user_id},
            'severity': {'DataType': 'String', 'StringValue': alert.severity.value},
        }
        subject = f"Sentiment alert: {alert.brand_name} ({alert.severity.value})"[:100]

        try:
            response = await call_with_retries(
                f"SNS publish of alert {alert.id}",
                lambda: self.sns.publish(
                    TopicArn=self.topic_arn,
                    Message=message,
                    Subject=subject,
                    MessageAttributes=attributes
                ),
                max_retries=self.max_retries,
                base_delay=self.base_delay
            )
        except ClientError as e:
            logger.error(f"Failed to publish alert {alert.id} to SNS: {error_code(e)} - {e}")
            return
        except BotoCoreError as e:
            logger.error(f"Failed to publish alert {alert.id} to SNS: {e}")
            return

        logger.info(f"Published alert {alert.id} to SNS: {response.get('MessageId', 'unknown')}")
