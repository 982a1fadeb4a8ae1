"""Custom exceptions for breakcheck with user-friendly error messages."""


class BreakcheckError(Exception):
    """Base exception with user-friendly message and optional hint.

    Attributes:
        message: The main error message.
        hint: Optional hint for resolving the error.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        """Initialize the exception.

        Args:
            message: The main error message.
            hint: Optional hint for resolving the error.
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class AuthenticationError(BreakcheckError):
    """Authentication failed - missing or invalid credentials."""

    pass


class GitHubAuthenticationError(AuthenticationError):
    """GitHub authentication failed."""

    def __init__(
        self,
        message: str = "GitHub authentication failed",
        hint: str = "Pass the workflow token via the github-token input or GITHUB_TOKEN.",
    ) -> None:
        super().__init__(message, hint)


class AccessDeniedError(BreakcheckError):
    """Access denied - insufficient permissions."""

    pass


class GitHubAccessDeniedError(AccessDeniedError):
    """GitHub access denied."""

    def __init__(
        self,
        repo: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"GitHub access denied for repository '{repo}'" if repo else "GitHub access denied"
        if not hint:
            hint = "Grant the workflow 'pull-requests: write' and 'contents: read' permissions."
        super().__init__(message, hint)


class NotFoundError(BreakcheckError):
    """Resource not found."""

    pass


class GitHubNotFoundError(NotFoundError):
    """GitHub repository or PR not found."""

    def __init__(
        self,
        repo: str = "",
        pr_number: int | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            if repo and pr_number:
                message = f"GitHub PR #{pr_number} not found in repository '{repo}'"
            elif repo:
                message = f"GitHub repository '{repo}' not found"
            else:
                message = "GitHub resource not found"
        if not hint:
            hint = "Verify the repository (owner/repo) and PR number are correct."
        super().__init__(message, hint)


class ConfigurationError(BreakcheckError):
    """Invalid configuration."""

    pass


class MissingTokenError(ConfigurationError):
    """Required token is missing."""

    def __init__(
        self,
        token_name: str,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Required input {token_name} is not set"
        if not hint:
            hint = f"Set {token_name} in your workflow inputs or environment."
        super().__init__(message, hint)


class CatalogError(BreakcheckError):
    """The breaking-change catalog returned an unusable response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        hint: str = "",
    ) -> None:
        self.status_code = status_code
        super().__init__(message, hint)


class ReleaseNotFoundError(CatalogError):
    """No catalog release matches the requested version."""

    def __init__(self, source_id: str, version: str) -> None:
        self.source_id = source_id
        self.version = version
        super().__init__(f"No release {version} listed for {source_id}")


class ParseError(BreakcheckError):
    """Failed to parse response or file."""

    pass


class ManifestParseError(ParseError):
    """Failed to parse a dependency manifest snapshot."""

    def __init__(
        self,
        filename: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Failed to parse {filename}" if filename else "Failed to parse manifest"
        super().__init__(message, hint)
