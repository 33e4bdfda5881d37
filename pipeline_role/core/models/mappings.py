from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class RepositoryMapping:
    refs: Tuple[str, ...]
    roles: Dict[str, str] = field(default_factory=dict)
    cross_account_role: Optional[str] = None
    name: Optional[str] = None

    def with_name(self, name):
        return replace(self, name=name)

    @classmethod
    def from_dict(cls, raw):
        return cls(
            refs=tuple(raw.get("refs") or ()),
            roles=dict(raw.get("roles") or {}),
            cross_account_role=raw.get("crossAccountRole") or None,
        )


# mapping name -> RepositoryMapping
RepositoryMappings = Dict[str, RepositoryMapping]
# repository name -> RepositoryMappings
RepositoriesMappings = Dict[str, RepositoryMappings]


@dataclass(frozen=True)
class ResolutionContext:
    repository: str
    ref: str
    mapping_name: Optional[str] = None
    account: Optional[str] = None
    multi_account: bool = False
    event_name: str = ""


@dataclass(frozen=True)
class BootstrapConfig:
    role_arn: str
    mapping_bucket: str
    mapping_key: str


@dataclass(frozen=True)
class AssumeRoleParameters:
    role_to_assume: str
    aws_region: str = "eu-central-1"
    mask_aws_account_id: bool = False
    role_duration_seconds: int = 3600
    role_session_name: str = "pipeline-role"
