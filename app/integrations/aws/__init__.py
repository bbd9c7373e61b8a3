"""AWS integration: boto3 execution with OperationResult and DynamoDB helpers."""
