"""Source-control integrations used to infer repository links."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit, urlunsplit

from techdocs_mkdocs_patcher.models import ParsedLocationAnnotation, RepoLinkResult

KNOWN_INTEGRATION_TYPES = ("github", "gitlab", "bitbucketServer", "bitbucketCloud", "azure", "gitea")
SUPPORTED_EDIT_TYPES = ("github", "gitlab", "bitbucketServer")
DEFAULT_DOCS_DIR = "docs"

# Path segments that mark a URL as pointing inside a repository rather than at its root
_FILE_PATH_PATTERN = re.compile(r"/(?:-/)?(?:blob|tree)/|/browse(?:/|$)")


@dataclass(frozen=True)
class ScmIntegration:
    """A source-control host the patcher knows how to build edit URLs for."""

    type: str
    host: str

    def __post_init__(self) -> None:
        """Validate the integration type.

        Raises:
            ValueError: If the type is not a known integration type.
        """
        if self.type not in KNOWN_INTEGRATION_TYPES:
            msg = f"Unknown SCM integration type: {self.type}"
            raise ValueError(msg)

    def resolve_edit_url(self, url: str) -> str:
        """Convert a browse URL into the host's edit URL.

        Args:
            url: URL of a file or folder in the repository.

        Returns:
            Edit URL, or the input unchanged if the host has no edit view.
        """
        parts = urlsplit(url)
        if self.type == "github":
            return urlunsplit(parts._replace(path=re.sub(r"/(?:blob|tree)/", "/edit/", parts.path, count=1)))
        if self.type == "gitlab":
            return urlunsplit(parts._replace(path=re.sub(r"/-/(?:blob|tree)/", "/-/edit/", parts.path, count=1)))
        if self.type == "bitbucketServer":
            query = f"{parts.query}&mode=edit" if parts.query else "mode=edit"
            return urlunsplit(parts._replace(query=query))
        return url


class ScmIntegrationRegistry:
    """Looks up integrations by URL host."""

    def __init__(self, integrations: Iterable[ScmIntegration]) -> None:
        """Initialise registry with the given integrations.

        Args:
            integrations: Configured integrations.
        """
        self.integrations = list(integrations)

    @classmethod
    def from_config(cls, config: Iterable[dict[str, str]]) -> "ScmIntegrationRegistry":
        """Build a registry from plain config entries.

        Args:
            config: Entries such as ``{"type": "github", "host": "github.com"}``.

        Returns:
            ScmIntegrationRegistry instance.
        """
        return cls(ScmIntegration(type=entry["type"], host=entry["host"].lower()) for entry in config)

    @classmethod
    def default(cls) -> "ScmIntegrationRegistry":
        """Registry with the public GitHub and GitLab hosts."""
        return cls([ScmIntegration("github", "github.com"), ScmIntegration("gitlab", "gitlab.com")])

    def by_url(self, url: str) -> ScmIntegration | None:
        """Find the integration whose host serves the URL.

        Args:
            url: Absolute URL.

        Returns:
            Matching ScmIntegration or None.
        """
        host = urlsplit(url).hostname
        if not host:
            return None
        for integration in self.integrations:
            if integration.host.lower() == host:
                return integration
        return None


def parse_location_annotation(annotation: str) -> ParsedLocationAnnotation:
    """Parse a ``<type>:<target>`` location annotation.

    Args:
        annotation: Annotation value, e.g. ``url:https://github.com/org/repo/tree/main``.

    Returns:
        ParsedLocationAnnotation instance.

    Raises:
        ValueError: If the type or target is missing.
    """
    location_type, separator, target = annotation.partition(":")
    if not separator or not location_type or not target:
        msg = f"Invalid location annotation, expected '<type>:<target>': {annotation!r}"
        raise ValueError(msg)
    return ParsedLocationAnnotation(type=location_type, target=target)


def resolve_repo_link(
    location: ParsedLocationAnnotation,
    integrations: ScmIntegrationRegistry,
    docs_dir: str | None = None,
) -> RepoLinkResult:
    """Work out ``repo_url`` or ``edit_uri`` for the documentation source.

    A URL pointing at a repository root yields ``repo_url``. A URL pointing
    inside a repository yields an absolute ``edit_uri`` for the docs folder.

    Args:
        location: Where the documentation was fetched from.
        integrations: Known source-control hosts.
        docs_dir: The config's ``docs_dir``, relative to the location.

    Returns:
        RepoLinkResult with at most one value set.
    """
    if location.type != "url":
        return RepoLinkResult()

    integration = integrations.by_url(location.target)
    if integration is None or integration.type not in SUPPORTED_EDIT_TYPES:
        return RepoLinkResult()

    parts = urlsplit(location.target)
    if not _FILE_PATH_PATTERN.search(parts.path):
        return RepoLinkResult(repo_url=location.target)

    base_path = parts.path if parts.path.endswith("/") else f"{parts.path}/"
    base = urlunsplit(parts._replace(path=base_path, query="", fragment=""))
    folder = urlsplit(urljoin(base, f"./{docs_dir or DEFAULT_DOCS_DIR}"))
    source_folder = urlunsplit(folder._replace(query=parts.query))
    return RepoLinkResult(edit_uri=integration.resolve_edit_url(source_folder))
