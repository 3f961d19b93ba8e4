"""Gitee API client."""

import base64
import logging
from typing import Any

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, GiteeConfig, ListDefaults, get_token
from .errors import GiteeError, RepoNotEmptyError
from .models import (
    BranchOutput,
    BranchParams,
    CheckRepoEmptyOutput,
    CommitOutput,
    CommitParams,
    CreateForkParams,
    CreateRepoOutput,
    CreateRepoParams,
    CreateWebhookOutput,
    CreateWebhookParams,
    EnsureRepoOutput,
    ForkOutput,
    HasRepoOutput,
    ListBranchesParams,
    OrgOutput,
    ProtectedBranchOutput,
    PutFileOutput,
    PutFileParams,
    RefParams,
    RepoOutput,
    RepoParams,
    UpdateWebhookParams,
    WebhookOutput,
    WebhookParams,
    pick,
)
from .webhook import build_webhook_payload

logger = logging.getLogger(__name__)

TAG_PREFIX = "refs/tags/"
BRANCH_PREFIX = "refs/heads/"

# Methods whose parameters travel in the query string; the rest use a JSON body
QUERY_METHODS = frozenset({"GET", "DELETE"})


class GiteeClient:
    """Gitee REST API v5 client."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        defaults: ListDefaults | None = None,
        use_dotenv: bool = False,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize Gitee client.

        Args:
            token: Gitee personal access token (falls back to environment)
            base_url: Custom API base URL (defaults to gitee.com v5)
            timeout: Request timeout in seconds
            defaults: Paging and sort parameters for list endpoints
            use_dotenv: Load a .env file before reading the environment
            transport: Custom httpx transport

        Raises:
            ValueError: If no access token can be resolved
        """
        resolved_token = get_token(token, use_dotenv=use_dotenv)
        if not resolved_token or not resolved_token.strip():
            raise ValueError("Access token is required")

        self.access_token = resolved_token
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.defaults = defaults or ListDefaults()
        self.transport = transport
        self.headers = {
            "Accept": "application/json",
            "User-Agent": "gitee-python-client",
        }
        logger.info("Gitee client ready, base_url=%s", self.base_url)

    @classmethod
    def from_config(
        cls, config: GiteeConfig, transport: httpx.BaseTransport | None = None
    ) -> "GiteeClient":
        """Build a client from a GiteeConfig."""
        return cls(
            token=config.access_token,
            base_url=config.base_url,
            timeout=config.timeout,
            defaults=config.defaults,
            transport=transport,
        )

    # ============ Plumbing ============

    def _request(
        self, method: str, path: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Make an authenticated request to the Gitee API."""
        method = method.upper()
        url = f"{self.base_url}{path}"
        data = {k: v for k, v in (params or {}).items() if v is not None}
        data.setdefault("access_token", self.access_token)

        if method in QUERY_METHODS:
            kwargs: dict[str, Any] = {"params": data}
        else:
            kwargs = {"json": data}

        logger.debug("Request: %s %s", method, url)
        with httpx.Client(
            timeout=self.timeout, headers=self.headers, transport=self.transport
        ) as client:
            response = client.request(method, url, **kwargs)
        logger.debug(
            "Response: %s %s (status=%d)", method, path, response.status_code
        )
        response.raise_for_status()
        return response

    def _request_json(
        self, method: str, path: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Make a request and decode its JSON body (``{}`` when empty)."""
        response = self._request(method, path, params)
        if not response.content:
            return {}
        return response.json()

    def _request_list(self, path: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Fetch every page of a list endpoint.

        Pages are requested until one comes back shorter than ``per_page``.
        When the total is an exact multiple of ``per_page`` the final request
        returns an empty page.
        """
        params = dict(params)
        per_page = params["per_page"]
        rows: list[dict[str, Any]] = []
        while True:
            page = self._request_json("GET", path, params) or []
            if not isinstance(page, list):
                raise GiteeError(f"Expected a list from {path}, got {type(page).__name__}")
            rows.extend(page)
            logger.debug("Page %d of %s: %d rows", params["page"], path, len(page))
            params["page"] += 1
            if len(page) != per_page:
                break
        return rows

    def _list_params(self, **extra: Any) -> dict[str, Any]:
        params = self.defaults.as_params()
        params.update(extra)
        return params

    # ============ Organizations & repositories ============

    def list_orgs(self) -> list[OrgOutput]:
        """List organizations of the authenticated user."""
        logger.info("Listing organizations")
        rows = self._request_list("/user/orgs", self._list_params())
        return [
            OrgOutput(id=row.get("id"), org=row.get("name"), source=row)
            for row in rows
        ]

    def list_repos(self) -> list[RepoOutput]:
        """List repositories owned by the authenticated user."""
        logger.info("Listing repositories")
        rows = self._request_list("/user/repos", self._list_params(affiliation="owner"))
        return [
            RepoOutput(
                id=row.get("id"),
                name=row.get("name"),
                avatar_url=pick(row, "owner.avatar_url"),
                owner=pick(row, "owner.login"),
                url=row.get("html_url"),
                private=row.get("private"),
                description=row.get("description"),
                default_branch=row.get("default_branch"),
                source=row,
            )
            for row in rows
        ]

    def create_repo(
        self,
        name: str,
        private: bool = True,
        description: str | None = None,
        auto_init: bool = False,
    ) -> CreateRepoOutput:
        """Create a repository for the authenticated user."""
        params = CreateRepoParams(
            name=name, private=private, description=description, auto_init=auto_init
        )
        logger.info("Creating repository %s (private=%s)", params.name, params.private)
        source = self._request_json("POST", "/user/repos", params.model_dump())
        return CreateRepoOutput(
            id=source.get("id"),
            full_name=source.get("full_name"),
            url=source.get("html_url"),
        )

    def delete_repo(self, owner: str, repo: str) -> None:
        """Delete a repository."""
        params = RepoParams(owner=owner, repo=repo)
        logger.info("Deleting repository %s/%s", params.owner, params.repo)
        self._request("DELETE", f"/repos/{params.owner}/{params.repo}")

    def has_repo(self, owner: str, repo: str) -> HasRepoOutput:
        """
        Check whether a repository exists.

        Any request failure (not found, no access, network error, unreadable
        body) is reported as ``is_exist=False``.
        """
        params = RepoParams(owner=owner, repo=repo)
        try:
            source = self._request_json("GET", f"/repos/{params.owner}/{params.repo}")
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Repository %s/%s not reachable: %s", params.owner, params.repo, e)
            return HasRepoOutput(is_exist=False)
        return HasRepoOutput(
            is_exist=True,
            id=pick(source, "id"),
            full_name=pick(source, "full_name"),
            url=pick(source, "html_url"),
        )

    def check_repo_empty(self, owner: str, repo: str) -> CheckRepoEmptyOutput:
        """
        Check whether a repository has no commits.

        A failed commit listing counts as empty, as Gitee answers that
        request with an error for repositories without commits.
        """
        params = RepoParams(owner=owner, repo=repo)
        try:
            commits = self._request_json(
                "GET",
                f"/repos/{params.owner}/{params.repo}/commits",
                {"page": 1, "per_page": 1},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Commit listing failed for %s/%s: %s", params.owner, params.repo, e)
            return CheckRepoEmptyOutput(is_empty=True)
        return CheckRepoEmptyOutput(is_empty=not commits)

    def ensure_empty_repo(self, owner: str, repo: str) -> EnsureRepoOutput:
        """
        Make sure an empty repository with the given name exists.

        Returns the URL of an existing empty repository, or creates a private
        one when none exists.

        Raises:
            RepoNotEmptyError: If the repository exists and has commits
        """
        existing = self.has_repo(owner=owner, repo=repo)
        if not existing.is_exist:
            logger.info("Repository %s/%s not found, creating it", owner, repo)
            created = self.create_repo(name=repo, private=True)
            return EnsureRepoOutput(is_new_created=True, url=created.url or "")

        if self.check_repo_empty(owner=owner, repo=repo).is_empty:
            logger.info("Reusing empty repository %s/%s", owner, repo)
            return EnsureRepoOutput(is_new_created=False, url=existing.url or "")

        logger.error("Repository %s/%s exists and is not empty", owner, repo)
        raise RepoNotEmptyError(owner, repo)

    def create_fork(
        self,
        owner: str,
        repo: str,
        organization: str | None = None,
        name: str | None = None,
        path: str | None = None,
    ) -> ForkOutput:
        """Fork a repository, optionally into an organization."""
        params = CreateForkParams(
            owner=owner, repo=repo, organization=organization, name=name, path=path
        )
        logger.info("Forking %s/%s", params.owner, params.repo)
        source = self._request_json(
            "POST",
            f"/repos/{params.owner}/{params.repo}/forks",
            params.model_dump(include={"organization", "name", "path"}),
        )
        return ForkOutput(
            id=source.get("id"),
            full_name=source.get("full_name"),
            url=source.get("url"),
        )

    # ============ Branches & commits ============

    def list_branches(self, owner: str, repo: str) -> list[BranchOutput]:
        """List all branches of a repository."""
        params = ListBranchesParams(owner=owner, repo=repo)
        logger.info("Listing branches: %s/%s", params.owner, params.repo)
        rows = self._request_list(
            f"/repos/{params.owner}/{params.repo}/branches", self._list_params()
        )
        return [
            BranchOutput(name=row.get("name"), commit_sha=pick(row, "commit.sha"), source=row)
            for row in rows
        ]

    def get_commit_by_id(self, owner: str, repo: str, sha: str) -> CommitOutput:
        """Get a single commit."""
        params = CommitParams(owner=owner, repo=repo, sha=sha)
        logger.info("Fetching commit %s in %s/%s", params.sha, params.owner, params.repo)
        source = self._request_json(
            "GET", f"/repos/{params.owner}/{params.repo}/commits/{params.sha}"
        )
        return CommitOutput(
            sha=source.get("sha"),
            message=pick(source, "commit.message"),
            source=source,
        )

    def get_ref_commit(self, owner: str, repo: str, ref: str) -> CommitOutput:
        """
        Resolve a ref to the commit it points at.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: ``refs/tags/<tag>``, ``refs/heads/<branch>`` or a bare branch name

        Returns:
            CommitOutput; for tags the message is the tag name
        """
        params = RefParams(owner=owner, repo=repo, ref=ref)
        base = f"/repos/{params.owner}/{params.repo}"

        if params.ref.startswith(TAG_PREFIX):
            tag = params.ref.removeprefix(TAG_PREFIX)
            logger.info("Resolving tag %s in %s/%s", tag, params.owner, params.repo)
            source = self._request_json("GET", f"{base}/releases/tags/{tag}")
            return CommitOutput(
                sha=source.get("target_commitish"),
                message=source.get("tag_name"),
                source=source,
            )

        branch = params.ref.removeprefix(BRANCH_PREFIX)
        logger.info("Resolving branch %s in %s/%s", branch, params.owner, params.repo)
        source = self._request_json("GET", f"{base}/branches/{branch}")
        return CommitOutput(
            sha=pick(source, "commit.sha"),
            message=pick(source, "commit.commit.message"),
            source=source,
        )

    # ============ Branch protection ============

    def set_protection_branch(self, owner: str, repo: str, branch: str) -> None:
        """Protect a branch so only admins may push or merge."""
        params = BranchParams(owner=owner, repo=repo, branch=branch)
        base = f"/repos/{params.owner}/{params.repo}/branches/{params.branch}"
        logger.info("Protecting branch %s in %s/%s", params.branch, params.owner, params.repo)
        self._request("PUT", f"{base}/protection", params.model_dump())
        self._request(
            "PUT",
            f"{base}/setting",
            {
                "owner": params.owner,
                "repo": params.repo,
                "wildcard": params.branch,
                "pusher": "admin",
                "merger": "admin",
            },
        )

    def get_protection_branch(self, owner: str, repo: str, branch: str) -> ProtectedBranchOutput:
        """Get the protection status of a branch."""
        params = BranchParams(owner=owner, repo=repo, branch=branch)
        logger.info("Fetching protection of %s in %s/%s", params.branch, params.owner, params.repo)
        source = self._request_json(
            "GET", f"/repos/{params.owner}/{params.repo}/branches/{params.branch}"
        )
        return ProtectedBranchOutput(protected=source.get("protected"))

    # ============ Webhooks ============

    def list_webhooks(self, owner: str, repo: str) -> list[WebhookOutput]:
        """List webhooks of a repository."""
        params = RepoParams(owner=owner, repo=repo)
        logger.info("Listing webhooks: %s/%s", params.owner, params.repo)
        rows = self._request_list(
            f"/repos/{params.owner}/{params.repo}/hooks", self._list_params()
        )
        return [WebhookOutput(id=row.get("id"), url=row.get("url"), source=row) for row in rows]

    def get_webhook(self, owner: str, repo: str, hook_id: int) -> WebhookOutput:
        """Get a single webhook."""
        params = WebhookParams(owner=owner, repo=repo, hook_id=hook_id)
        logger.info("Fetching webhook %d on %s/%s", params.hook_id, params.owner, params.repo)
        source = self._request_json(
            "GET", f"/repos/{params.owner}/{params.repo}/hooks/{params.hook_id}"
        )
        return WebhookOutput(id=source.get("id"), url=source.get("url"), source=source)

    def create_webhook(
        self,
        owner: str,
        repo: str,
        url: str,
        secret: str | None = None,
        events: list[str] | None = None,
    ) -> CreateWebhookOutput:
        """
        Register a webhook.

        Args:
            owner: Repository owner
            repo: Repository name
            url: Callback URL
            secret: Signing password
            events: Any of push, release, pull_request, issues

        Returns:
            CreateWebhookOutput with the new hook id
        """
        params = CreateWebhookParams(owner=owner, repo=repo, url=url, secret=secret, events=events)
        logger.info("Creating webhook on %s/%s -> %s", params.owner, params.repo, params.url)
        payload = build_webhook_payload(params.url, params.secret, params.events)
        source = self._request_json(
            "POST", f"/repos/{params.owner}/{params.repo}/hooks", payload
        )
        return CreateWebhookOutput(id=source.get("id"), source=source)

    def update_webhook(
        self,
        owner: str,
        repo: str,
        hook_id: int,
        url: str,
        secret: str | None = None,
        events: list[str] | None = None,
    ) -> None:
        """Replace the URL, secret and events of a webhook."""
        params = UpdateWebhookParams(
            owner=owner, repo=repo, hook_id=hook_id, url=url, secret=secret, events=events
        )
        logger.info("Updating webhook %d on %s/%s", params.hook_id, params.owner, params.repo)
        payload = build_webhook_payload(params.url, params.secret, params.events)
        self._request(
            "PATCH", f"/repos/{params.owner}/{params.repo}/hooks/{params.hook_id}", payload
        )

    def delete_webhook(self, owner: str, repo: str, hook_id: int) -> None:
        """Delete a webhook."""
        params = WebhookParams(owner=owner, repo=repo, hook_id=hook_id)
        logger.info("Deleting webhook %d on %s/%s", params.hook_id, params.owner, params.repo)
        self._request("DELETE", f"/repos/{params.owner}/{params.repo}/hooks/{params.hook_id}")

    # ============ Files ============

    def _get_file_sha(self, owner: str, repo: str, path: str, ref: str | None) -> str | None:
        """Return the blob SHA of an existing file, or None when it does not exist."""
        try:
            data = self._request_json(
                "GET", f"/repos/{owner}/{repo}/contents/{path}", {"ref": ref}
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise
        # Gitee answers a missing file with an empty list
        if isinstance(data, dict):
            return data.get("sha")
        return None

    def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str | bytes,
        message: str,
        branch: str | None = None,
    ) -> PutFileOutput:
        """
        Create or update a file in a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in repository
            content: New file content (text is encoded as UTF-8)
            message: Commit message
            branch: Target branch (default: repository default branch)

        Returns:
            PutFileOutput with blob and commit SHAs
        """
        params = PutFileParams(
            owner=owner, repo=repo, path=path, content=content, message=message, branch=branch
        )
        raw = params.content.encode("utf-8") if isinstance(params.content, str) else params.content
        body: dict[str, Any] = {
            "content": base64.b64encode(raw).decode("ascii"),
            "message": params.message,
            "branch": params.branch,
        }
        endpoint = f"/repos/{params.owner}/{params.repo}/contents/{params.path}"

        sha = self._get_file_sha(params.owner, params.repo, params.path, params.branch)
        if sha:
            logger.info("Updating file %s in %s/%s", params.path, params.owner, params.repo)
            body["sha"] = sha
            source = self._request_json("PUT", endpoint, body)
        else:
            logger.info("Creating file %s in %s/%s", params.path, params.owner, params.repo)
            source = self._request_json("POST", endpoint, body)

        return PutFileOutput(
            path=pick(source, "content.path") or params.path,
            sha=pick(source, "content.sha"),
            commit_sha=pick(source, "commit.sha"),
            source=source,
        )
