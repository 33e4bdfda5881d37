"""AWS client factory helpers."""

import boto3


def get_session(credentials=None, region_name=None):
    if credentials:
        return boto3.Session(
            aws_access_key_id=credentials["aws_access_key_id"],
            aws_secret_access_key=credentials["aws_secret_access_key"],
            aws_session_token=credentials["aws_session_token"],
            region_name=region_name,
        )
    return boto3.Session(region_name=region_name)


def get_client(service_name, credentials=None, region_name=None):
    session = get_session(credentials=credentials, region_name=region_name)
    return session.client(service_name, region_name=region_name)
