"""Gitee client errors."""


class GiteeError(Exception):
    """Base error raised by the Gitee client itself."""

    def __init__(self, message: str, owner: str | None = None, repo: str | None = None):
        super().__init__(message)
        self.message = message
        self.owner = owner
        self.repo = repo


class RepoNotEmptyError(GiteeError):
    """A repository that should be empty already has commits."""

    def __init__(self, owner: str, repo: str):
        super().__init__(
            f"There is a repo called {repo}, which is not empty",
            owner=owner,
            repo=repo,
        )
