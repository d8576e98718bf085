"""AWS Lambda handler for the Keygate project API.

Wraps the FastAPI application with the Mangum adapter so the gateway can
run behind API Gateway. The handler keeps no per-request state; usage
counters live in DynamoDB.
"""

from mangum import Mangum

from keygate.main import app

# Routes already carry their /v1 prefix, so nothing is stripped
handler = Mangum(app, lifespan="off")


def lambda_handler(event: dict, context: object) -> dict:
    """
    AWS Lambda function handler.

    Args:
        event: API Gateway event containing request details
        context: Lambda context object with runtime information

    Returns:
        API Gateway response dict with statusCode, headers, and body
    """
    return handler(event, context)
