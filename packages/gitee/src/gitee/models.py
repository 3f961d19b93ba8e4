"""Gitee API data models."""

from typing import Annotated, Any

from pydantic import BaseModel, Field

NonEmptyStr = Annotated[str, Field(min_length=1)]


def pick(data: Any, path: str, default: Any = None) -> Any:
    """Read a dotted path (e.g. ``owner.login``) out of a raw response body."""
    current = data
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


# ============ Input parameters ============


class RepoParams(BaseModel):
    """Repository coordinates."""

    owner: NonEmptyStr
    repo: NonEmptyStr


class ListBranchesParams(RepoParams):
    """Parameters for listing branches."""


class CommitParams(RepoParams):
    """Parameters for fetching one commit."""

    sha: NonEmptyStr


class RefParams(RepoParams):
    """Parameters for resolving a ref to a commit."""

    ref: NonEmptyStr


class BranchParams(RepoParams):
    """Parameters addressing a single branch."""

    branch: NonEmptyStr


class WebhookParams(RepoParams):
    """Parameters addressing a single webhook."""

    hook_id: int = Field(ge=1)


class CreateWebhookParams(RepoParams):
    """Parameters for creating a webhook."""

    url: NonEmptyStr
    secret: str | None = None
    events: list[str] | None = None


class UpdateWebhookParams(CreateWebhookParams):
    """Parameters for updating a webhook."""

    hook_id: int = Field(ge=1)


class CreateForkParams(RepoParams):
    """Parameters for forking a repository."""

    organization: str | None = None
    name: str | None = None
    path: str | None = None


class CreateRepoParams(BaseModel):
    """Parameters for creating a repository owned by the token's user."""

    name: NonEmptyStr
    private: bool = True
    description: str | None = None
    auto_init: bool = False


class PutFileParams(RepoParams):
    """Parameters for writing one file."""

    path: NonEmptyStr
    content: str | bytes
    message: NonEmptyStr
    branch: str | None = None


# ============ Output records ============


class OrgOutput(BaseModel):
    """Organization the user belongs to."""

    id: int | None = None
    org: str | None = None
    source: dict[str, Any] = Field(default_factory=dict)


class RepoOutput(BaseModel):
    """Repository summary."""

    id: int | None = None
    name: str | None = None
    avatar_url: str | None = None
    owner: str | None = None
    url: str | None = None
    private: bool | None = None
    description: str | None = None
    default_branch: str | None = None
    source: dict[str, Any] = Field(default_factory=dict)


class BranchOutput(BaseModel):
    """Branch head."""

    name: str | None = None
    commit_sha: str | None = None
    source: dict[str, Any] = Field(default_factory=dict)


class CommitOutput(BaseModel):
    """Commit sha and message."""

    sha: str | None = None
    message: str | None = None
    source: dict[str, Any] = Field(default_factory=dict)


class WebhookOutput(BaseModel):
    """Registered webhook."""

    id: int | None = None
    url: str | None = None
    source: dict[str, Any] = Field(default_factory=dict)


class CreateWebhookOutput(BaseModel):
    """Newly created webhook."""

    id: int | None = None
    source: dict[str, Any] = Field(default_factory=dict)


class ForkOutput(BaseModel):
    """Forked repository."""

    id: int | None = None
    full_name: str | None = None
    url: str | None = None


class CreateRepoOutput(BaseModel):
    """Newly created repository."""

    id: int | None = None
    full_name: str | None = None
    url: str | None = None


class HasRepoOutput(BaseModel):
    """Repository existence check."""

    is_exist: bool
    id: int | None = None
    full_name: str | None = None
    url: str | None = None


class CheckRepoEmptyOutput(BaseModel):
    """Repository emptiness check."""

    is_empty: bool


class ProtectedBranchOutput(BaseModel):
    """Branch protection status."""

    protected: bool | None = None


class EnsureRepoOutput(BaseModel):
    """Result of ensuring an empty repository exists."""

    is_new_created: bool
    url: str = ""


class PutFileOutput(BaseModel):
    """Written file and the commit that wrote it."""

    path: str
    sha: str | None = None  # blob SHA of the new content
    commit_sha: str | None = None
    source: dict[str, Any] = Field(default_factory=dict)
