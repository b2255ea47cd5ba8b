"""Main Lambda handler for the feed renderer."""

import json
import os
from datetime import UTC, datetime
from typing import Any

import boto3

from .config import Config, ConfigError
from .feed import FeedRenderer
from .logging_config import create_execution_logger, setup_structured_logging
from .models import FeedItem

METRICS_NAMESPACE = "Feed-Renderer"

# Setup structured logging
setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Render an RSS feed from the items carried by the event.

    The event holds ``items`` (list of item objects), optional ``config``
    overrides and an optional ``fallback_url`` for the channel link.

    Args:
        event: Lambda event data
        context: Lambda context object

    Returns:
        Response dictionary whose body is the feed document
    """
    execution_id = f"lambda_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)

    main_logger.log_execution_start(
        lambda_request_id=getattr(context, "aws_request_id", "unknown"),
        lambda_function_name=getattr(context, "function_name", "unknown"),
    )

    metrics = {
        "items_received": 0,
        "items_hidden": 0,
        "items_skipped": 0,
        "items_rendered": 0,
        "errors": [],
    }
    aws_region = os.getenv("CURRENT_AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "us-east-1"))
    event = event or {}

    try:
        config_loader = Config(execution_id=execution_id)
        feed_config = config_loader.get_feed_config(event.get("config"))
        fallback_url = event.get("fallback_url") or config_loader.fallback_url
        main_logger.info("Configuration initialized", feed_title=feed_config.title)

        raw_items = event.get("items") or []
        if not isinstance(raw_items, list):
            raise ValueError("Event items must be a list")
        items = [FeedItem.from_dict(raw) for raw in raw_items]

        renderer = FeedRenderer(execution_id=execution_id)
        rendered = renderer.build(items, feed_config, fallback_url)
        metrics.update(rendered.as_metrics())

        main_logger.log_metrics(metrics)
        send_cloudwatch_metrics(metrics, aws_region, execution_id)
        main_logger.log_execution_end(success=True, metrics=metrics)

        return {"statusCode": 200, "body": rendered.xml}

    except Exception as e:
        status_code = 400 if isinstance(e, ConfigError) else 500
        error_msg = f"Failed to render feed: {str(e)}"
        main_logger.error(error_msg, error=str(e))
        metrics["errors"].append(error_msg)

        send_cloudwatch_metrics(metrics, aws_region, execution_id)
        main_logger.log_execution_end(success=False, metrics=metrics, error=error_msg)

        return {
            "statusCode": status_code,
            "body": json.dumps(
                {
                    "message": "Feed rendering failed",
                    "execution_id": execution_id,
                    "error": error_msg,
                }
            ),
        }


def send_cloudwatch_metrics(
    metrics: dict[str, Any], aws_region: str, execution_id: str
) -> None:
    """
    Send custom metrics to CloudWatch.

    Args:
        metrics: Dictionary containing execution metrics
        aws_region: AWS region for CloudWatch client
        execution_id: Execution ID for logging context
    """
    metrics_logger = create_execution_logger("cloudwatch_metrics", execution_id)

    try:
        metrics_logger.info("Sending metrics to CloudWatch", metrics=metrics)
        cloudwatch = boto3.client("cloudwatch", region_name=aws_region)

        total_errors = len(metrics["errors"])
        execution_success = total_errors == 0
        dimensions = [{"Name": "ExecutionId", "Value": execution_id}]

        metric_data = [
            {
                "MetricName": name,
                "Value": metrics[key],
                "Unit": "Count",
                "Dimensions": dimensions,
            }
            for name, key in (
                ("ItemsReceived", "items_received"),
                ("ItemsHidden", "items_hidden"),
                ("ItemsSkipped", "items_skipped"),
                ("ItemsRendered", "items_rendered"),
            )
        ]
        metric_data.extend(
            [
                {
                    "MetricName": "Errors",
                    "Value": total_errors,
                    "Unit": "Count",
                    "Dimensions": dimensions,
                },
                {
                    "MetricName": "ExecutionSuccess",
                    "Value": 1 if execution_success else 0,
                    "Unit": "Count",
                    "Dimensions": [
                        {
                            "Name": "Status",
                            "Value": "Success" if execution_success else "Failure",
                        }
                    ],
                },
                {
                    "MetricName": "RenderRate",
                    "Value": (
                        metrics["items_rendered"] / max(metrics["items_received"], 1)
                    )
                    * 100,
                    "Unit": "Percent",
                    "Dimensions": dimensions,
                },
            ]
        )

        # CloudWatch limit is 20 metrics per call
        batch_size = 20
        for i in range(0, len(metric_data), batch_size):
            batch = metric_data[i : i + batch_size]
            cloudwatch.put_metric_data(Namespace=METRICS_NAMESPACE, MetricData=batch)
            metrics_logger.debug(f"Sent batch of {len(batch)} metrics to CloudWatch")

        metrics_logger.info(
            "Successfully sent metrics to CloudWatch",
            metrics_sent=len(metric_data),
            namespace=METRICS_NAMESPACE,
            execution_success=execution_success,
        )

    except Exception as e:
        metrics_logger.error(f"Failed to send CloudWatch metrics: {e}", error=str(e))
        # Metrics failure never fails the render
