"""
Lambda control-plane client for function configuration, aliases and versions.

The boto3 client is created lazily and can be replaced with ``set_lambda_client``
(for a stubbed client in tests, or a client with custom configuration).
"""

from typing import Any, Dict, List

import boto3
from botocore.exceptions import ClientError

from lambda_radar.utils.observability import logger

_lambda_client: Any = None


def get_lambda_client() -> Any:
    """
    Get or create the Lambda client.

    Returns:
        boto3 Lambda client
    """
    global _lambda_client

    if _lambda_client is None:
        _lambda_client = boto3.client('lambda')
        logger.debug('Lambda client initialized')

    return _lambda_client


def set_lambda_client(client: Any) -> None:
    """
    Set a custom Lambda client (useful for testing or custom configuration).

    Args:
        client: Custom Lambda client, or None to fall back to a default client
    """
    global _lambda_client
    _lambda_client = client


def get_lambda_configuration(function_name: str) -> Dict[str, Any]:
    """
    Retrieve configuration for a Lambda function.

    Args:
        function_name: Name or ARN of the Lambda function

    Returns:
        GetFunctionConfiguration response

    Raises:
        ClientError: If the Lambda API call fails
    """
    try:
        return get_lambda_client().get_function_configuration(FunctionName=function_name)
    except ClientError as e:
        logger.error(f'Failed to get configuration for {function_name}: {e.response["Error"]["Code"]}')
        raise


def _paginate(operation: str, result_key: str, function_name: str) -> List[Dict[str, Any]]:
    paginator = get_lambda_client().get_paginator(operation)
    items: List[Dict[str, Any]] = []
    try:
        for page in paginator.paginate(FunctionName=function_name):
            items.extend(page.get(result_key, []))
    except ClientError as e:
        logger.error(f'{operation} failed for {function_name}: {e.response["Error"]["Code"]}')
        raise
    return items


def list_lambda_aliases(function_name: str) -> List[Dict[str, Any]]:
    """
    List aliases for a Lambda function.

    Args:
        function_name: Name or ARN of the Lambda function

    Returns:
        Alias configurations across every page, empty when there are none
    """
    return _paginate('list_aliases', 'Aliases', function_name)


def list_lambda_versions(function_name: str) -> List[Dict[str, Any]]:
    """
    List versions for a Lambda function.

    Args:
        function_name: Name or ARN of the Lambda function

    Returns:
        Version configurations across every page, empty when there are none
    """
    return _paginate('list_versions_by_function', 'Versions', function_name)
