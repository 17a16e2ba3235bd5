"""Data models for MkDocs configuration patching."""

from dataclasses import dataclass
from typing import Any

MkDocsDocument = dict[str, Any]


@dataclass(frozen=True)
class ParsedLocationAnnotation:
    """Location of the documentation source, e.g. ``url:https://github.com/org/repo``."""

    type: str
    target: str


@dataclass(frozen=True)
class RepoLinkResult:
    """Repository link values a resolver could determine."""

    repo_url: str | None = None
    edit_uri: str | None = None

    def is_empty(self) -> bool:
        """Return True when neither value was resolved."""
        return not self.repo_url and not self.edit_uri

    def as_dict(self) -> dict[str, str]:
        """Return the populated values only.

        Returns:
            Mapping of field name to resolved value.
        """
        values = {"repo_url": self.repo_url, "edit_uri": self.edit_uri}
        return {key: value for key, value in values.items() if value}


@dataclass(frozen=True)
class PluginEntry:
    """One entry of the MkDocs ``plugins`` list.

    MkDocs accepts either a bare plugin name or a single-key mapping from the
    name to its configuration. ``name`` is the identity in both cases and
    ``raw`` keeps the entry exactly as it was written.
    """

    name: str
    raw: Any

    @classmethod
    def bare(cls, name: str) -> "PluginEntry":
        """Build an entry in bare-name form.

        Args:
            name: Plugin name.

        Returns:
            PluginEntry instance.
        """
        return cls(name=name, raw=name)

    @classmethod
    def from_raw(cls, raw: Any) -> "PluginEntry | None":
        """Build an entry from a decoded list item.

        Args:
            raw: Item from the decoded ``plugins`` list.

        Returns:
            PluginEntry instance or None if the item carries no plugin name.
        """
        if isinstance(raw, str):
            return cls(name=raw, raw=raw)
        if isinstance(raw, dict) and len(raw) == 1:
            (name,) = raw
            if isinstance(name, str):
                return cls(name=name, raw=raw)
        return None

    @property
    def is_configured(self) -> bool:
        """Whether the entry is in mapping form with a configuration payload."""
        return isinstance(self.raw, dict)

    def to_raw(self) -> Any:
        """Return the entry in its original shape."""
        return self.raw
