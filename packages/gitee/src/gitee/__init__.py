"""Gitee API client utilities."""

from .client import GiteeClient
from .config import GiteeConfig, ListDefaults, get_token
from .errors import GiteeError, RepoNotEmptyError
from .models import (
    BranchOutput,
    CheckRepoEmptyOutput,
    CommitOutput,
    CreateRepoOutput,
    CreateWebhookOutput,
    EnsureRepoOutput,
    ForkOutput,
    HasRepoOutput,
    OrgOutput,
    ProtectedBranchOutput,
    PutFileOutput,
    RepoOutput,
    WebhookOutput,
)
from .webhook import build_webhook_payload

__all__ = [
    "GiteeClient",
    "GiteeConfig",
    "ListDefaults",
    "get_token",
    "GiteeError",
    "RepoNotEmptyError",
    "build_webhook_payload",
    "OrgOutput",
    "RepoOutput",
    "BranchOutput",
    "CommitOutput",
    "WebhookOutput",
    "CreateWebhookOutput",
    "ForkOutput",
    "CreateRepoOutput",
    "HasRepoOutput",
    "CheckRepoEmptyOutput",
    "ProtectedBranchOutput",
    "EnsureRepoOutput",
    "PutFileOutput",
]
