import io

from pipeline_role.core.models.mappings import AssumeRoleParameters
from pipeline_role.integrations.github.actions import ActionsRuntime
from pipeline_role.providers.aws.credentials import (
    CREDENTIAL_VARIABLES,
    account_id_from_arn,
    cleanup_aws_credentials,
    configure_aws_credentials,
)

ROLE_ARN = "arn:aws:iam::123456789012:role/deploy"


class _RuntimeStub(ActionsRuntime):
    def __init__(self):
        super().__init__(environ={}, stdout=io.StringIO())
        self.audiences = []

    def get_id_token(self, audience="sts.amazonaws.com", timeout=10):
        self.audiences.append(audience)
        return "fresh-token"


class _CredentialsStub:
    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        _CredentialsStub.instances.append(self)

    def refresh(self):
        return {
            "aws_access_key_id": "AKIA",
            "aws_secret_access_key": "secret",
            "aws_session_token": "session",
        }


def test_account_id_from_arn():
    assert account_id_from_arn(ROLE_ARN) == "123456789012"
    assert account_id_from_arn("dev-role") == ""


def test_configure_aws_credentials_exports_session():
    _CredentialsStub.instances = []
    actions = _RuntimeStub()
    params = AssumeRoleParameters(role_to_assume=ROLE_ARN, aws_region="eu-central-1")

    configure_aws_credentials(params, actions, credentials_factory=_CredentialsStub)

    assert actions.audiences == ["sts.amazonaws.com"]
    kwargs = _CredentialsStub.instances[0].kwargs
    assert kwargs["role_arn"] == ROLE_ARN
    assert kwargs["web_identity_token"] == "fresh-token"
    assert kwargs["duration_seconds"] == 3600
    assert actions.environ["AWS_ACCESS_KEY_ID"] == "AKIA"
    assert actions.environ["AWS_SESSION_TOKEN"] == "session"
    assert actions.environ["AWS_REGION"] == "eu-central-1"
    assert actions.environ["AWS_DEFAULT_REGION"] == "eu-central-1"

    output = actions.stdout.getvalue()
    assert "::add-mask::secret" in output
    assert "::add-mask::session" in output
    assert "::add-mask::123456789012" not in output


def test_configure_aws_credentials_masks_account_id_when_requested():
    actions = _RuntimeStub()
    params = AssumeRoleParameters(role_to_assume=ROLE_ARN, mask_aws_account_id=True)

    configure_aws_credentials(params, actions, credentials_factory=_CredentialsStub)

    assert "::add-mask::123456789012" in actions.stdout.getvalue()


def test_cleanup_aws_credentials_blanks_variables():
    actions = _RuntimeStub()
    actions.environ["AWS_ACCESS_KEY_ID"] = "AKIA"

    cleanup_aws_credentials(actions)

    assert all(actions.environ[name] == "" for name in CREDENTIAL_VARIABLES)
