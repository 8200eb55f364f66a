"""Lambda that launches a Fargate task for each object uploaded to S3."""
