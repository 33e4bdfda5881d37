"""AWS providers: web identity credentials, S3 mapping fetch, credential step."""
