"""Script to create DynamoDB tables for LocalStack or AWS."""

import asyncio
from typing import Any

import aioboto3
from botocore.exceptions import ClientError

from keygate.config import settings
from keygate.repositories.base import get_dynamodb_config


async def create_api_keys_table(
    dynamodb: Any, table_name: str, index_name: str
) -> None:
    """
    Create API keys table with a GSI on the key digest.

    Records are looked up by digest, never by the project id embedded
    in the key.

    Args:
        dynamodb: DynamoDB resource
        table_name: Name of the API keys table
        index_name: Name of the digest index
    """
    try:
        table = await dynamodb.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": "key_id", "KeyType": "HASH"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "key_id", "AttributeType": "S"},
                {"AttributeName": "key_digest", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": index_name,
                    "KeySchema": [
                        {"AttributeName": "key_digest", "KeyType": "HASH"},
                    ],
                    "Projection": {"ProjectionType": "ALL"},
                }
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        await table.wait_until_exists()
        print(f"✓ Created table: {table_name}")
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"→ Table already exists: {table_name}")
        else:
            raise


async def create_projects_table(dynamodb: Any, table_name: str) -> None:
    """
    Create projects table.

    Args:
        dynamodb: DynamoDB resource
        table_name: Name of the projects table
    """
    try:
        table = await dynamodb.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": "project_id", "KeyType": "HASH"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "project_id", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        await table.wait_until_exists()
        print(f"✓ Created table: {table_name}")
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"→ Table already exists: {table_name}")
        else:
            raise


async def main() -> None:
    """Create all required DynamoDB tables."""
    print("Creating DynamoDB tables...")
    print(f"Region: {settings.aws_region}")
    print(f"Endpoint: {settings.dynamodb_endpoint_url or 'AWS'}")
    print()

    session = aioboto3.Session()
    async with session.resource("dynamodb", **get_dynamodb_config()) as dynamodb:
        await create_api_keys_table(
            dynamodb,
            settings.dynamodb_table_api_keys,
            settings.api_key_digest_index,
        )
        await create_projects_table(dynamodb, settings.dynamodb_table_projects)

    print()
    print("✓ All tables created successfully!")


if __name__ == "__main__":
    asyncio.run(main())
