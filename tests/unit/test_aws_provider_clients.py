import io

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError

import pipeline_role.providers.aws.clients as clients
from pipeline_role.core.errors import TokenRefreshExhausted
from pipeline_role.core.retry import RetryingRefresher
from pipeline_role.providers.aws import errors as aws_errors
from pipeline_role.providers.aws.auth import WebIdentityCredentials
from pipeline_role.providers.aws.mappings import fetch_mappings
from pipeline_role.core.models.mappings import BootstrapConfig


def _client_error(code, operation="AssumeRoleWithWebIdentity"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class _StsStub:
    def __init__(self, failures=0, code="Throttling"):
        self.failures = failures
        self.code = code
        self.calls = []

    def assume_role_with_web_identity(self, **kwargs):
        self.calls.append(kwargs)
        if len(self.calls) <= self.failures:
            raise _client_error(self.code)
        return {
            "Credentials": {
                "AccessKeyId": "AKIA",
                "SecretAccessKey": "secret",
                "SessionToken": "session",
            }
        }


class _S3Stub:
    def __init__(self, body):
        self.body = body
        self.requests = []

    def get_object(self, Bucket, Key):
        self.requests.append((Bucket, Key))
        return {"Body": io.BytesIO(self.body)}


def _factory(sts, s3=None, calls=None):
    def _client(service_name, credentials=None, region_name=None):
        if calls is not None:
            calls.append((service_name, credentials, region_name))
        return sts if service_name == "sts" else s3

    return _client


def _refresher(max_retries=3):
    return RetryingRefresher(
        max_retries=max_retries, sleep=lambda _s: None, retry_on=(ClientError,)
    )


def test_get_client_uses_boto3_session(monkeypatch):
    calls = {}

    class _Session:
        def client(self, service_name, region_name=None):
            calls["service"] = service_name
            calls["region"] = region_name
            return {"service": service_name, "region": region_name}

    def _session(**kwargs):
        calls["session_kwargs"] = kwargs
        return _Session()

    monkeypatch.setattr(clients.boto3, "Session", _session, raising=False)

    client = clients.get_client(
        "s3",
        credentials={
            "aws_access_key_id": "AKIA",
            "aws_secret_access_key": "secret",
            "aws_session_token": "session",
        },
        region_name="eu-central-1",
    )

    assert client["service"] == "s3"
    assert calls["region"] == "eu-central-1"
    assert calls["session_kwargs"]["aws_session_token"] == "session"


def test_web_identity_refresh_passes_token_and_session_name():
    sts = _StsStub()
    creds = WebIdentityCredentials(
        role_arn="dummy-role",
        role_session_name="prepare-pipeline",
        web_identity_token="my-web-identity-token",
        refresher=_refresher(),
        client_factory=_factory(sts),
    )

    result = creds.refresh()

    assert result["aws_access_key_id"] == "AKIA"
    assert sts.calls == [
        {
            "RoleArn": "dummy-role",
            "RoleSessionName": "prepare-pipeline",
            "WebIdentityToken": "my-web-identity-token",
        }
    ]


def test_web_identity_refresh_retries_transient_failures():
    sts = _StsStub(failures=2)
    creds = WebIdentityCredentials(
        role_arn="dummy-role",
        role_session_name="s",
        web_identity_token="t",
        duration_seconds=900,
        refresher=_refresher(),
        client_factory=_factory(sts),
    )

    creds.refresh()

    assert len(sts.calls) == 3
    assert sts.calls[0]["DurationSeconds"] == 900


def test_web_identity_refresh_retry_three_times_then_exhausted():
    sts = _StsStub(failures=100)
    creds = WebIdentityCredentials(
        role_arn="dummy-role",
        role_session_name="dummy-session",
        web_identity_token="dummy-token",
        refresher=_refresher(max_retries=3),
        client_factory=_factory(sts),
    )

    with pytest.raises(TokenRefreshExhausted) as exc_info:
        creds.refresh()

    assert len(sts.calls) == 4
    assert exc_info.value.attempts == 4
    assert isinstance(exc_info.value.__cause__, ClientError)


def test_web_identity_refresh_reports_single_attempt_for_unretried_error():
    class _UnreachableSts:
        def __init__(self):
            self.calls = 0

        def assume_role_with_web_identity(self, **kwargs):
            self.calls += 1
            raise EndpointConnectionError(endpoint_url="https://sts.amazonaws.com")

    sts = _UnreachableSts()
    creds = WebIdentityCredentials(
        role_arn="dummy-role",
        role_session_name="dummy-session",
        web_identity_token="dummy-token",
        refresher=_refresher(max_retries=3),
        client_factory=_factory(sts),
    )

    with pytest.raises(TokenRefreshExhausted, match="after 1 attempt") as exc_info:
        creds.refresh()

    assert sts.calls == 1
    assert exc_info.value.attempts == 1
    assert isinstance(exc_info.value.__cause__, EndpointConnectionError)


def test_fetch_mappings_reads_object_with_bootstrap_credentials():
    sts = _StsStub()
    s3 = _S3Stub(b'{"test-repo": {"mapping": {"refs": ["*"], "roles": {"dev": "dev-role"}}}}')
    calls = []

    def _credentials(**kwargs):
        return WebIdentityCredentials(
            refresher=_refresher(), client_factory=_factory(sts, s3, calls), **kwargs
        )

    mappings = fetch_mappings(
        BootstrapConfig("reader-role", "dummy-bucket", "dummy-key"),
        "my-web-identity-token",
        credentials_factory=_credentials,
    )

    assert mappings["test-repo"]["mapping"]["roles"] == {"dev": "dev-role"}
    assert s3.requests == [("dummy-bucket", "dummy-key")]
    assert sts.calls[0]["RoleSessionName"] == "prepare-pipeline"
    assert sts.calls[0]["RoleArn"] == "reader-role"
    assert calls[-1][0] == "s3"
    assert calls[-1][1]["aws_session_token"] == "session"


def test_describe_aws_error_access_denied():
    message = aws_errors.describe_aws_error(_client_error("AccessDenied", "GetObject"))

    assert message.startswith("Access denied")
    assert aws_errors.is_credential_error(_client_error("AccessDenied"))


def test_describe_aws_error_missing_key():
    message = aws_errors.describe_aws_error(_client_error("NoSuchKey", "GetObject"))

    assert message.startswith("Mapping document not found")
    assert not aws_errors.is_credential_error(_client_error("NoSuchKey"))


def test_describe_aws_error_rejected_token():
    message = aws_errors.describe_aws_error(_client_error("InvalidIdentityToken"))

    assert "trust policy" in message


def test_no_credentials_is_credential_error():
    assert aws_errors.is_credential_error(NoCredentialsError())
    assert aws_errors.is_aws_error(NoCredentialsError())
    assert not aws_errors.is_aws_error(ValueError("x"))
