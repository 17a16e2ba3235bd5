"""Mutation policies applied to a decoded MkDocs config.

Each policy mutates the document in place and returns whether it changed
anything. Policies perform no I/O; persisting the result is left to
:class:`techdocs_mkdocs_patcher.patcher.MkDocsPatcher`.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from techdocs_mkdocs_patcher.models import MkDocsDocument, ParsedLocationAnnotation, PluginEntry, RepoLinkResult
from techdocs_mkdocs_patcher.scm import ScmIntegrationRegistry, resolve_repo_link

logger = logging.getLogger(__name__)

DEFAULT_PLUGINS = ("techdocs-core",)
MKDOCS_REPO_URL_DOCS = "https://www.mkdocs.org/user-guide/configuration/#repo_url"

RepoLinkResolver = Callable[[ParsedLocationAnnotation, ScmIntegrationRegistry, Any], RepoLinkResult]


def infer_repo_link(
    document: MkDocsDocument,
    location: ParsedLocationAnnotation,
    integrations: ScmIntegrationRegistry,
    resolver: RepoLinkResolver = resolve_repo_link,
) -> bool:
    """Fill in ``repo_url`` and ``edit_uri`` from the documentation location.

    Keys the author already wrote, including explicit nulls, are never
    overwritten. Each key is filled in independently.

    Args:
        document: Decoded MkDocs config.
        location: Where the documentation was fetched from.
        integrations: Known source-control hosts.
        resolver: Function computing the candidate values.

    Returns:
        True if at least one key was set.
    """
    if "repo_url" in document and "edit_uri" in document:
        return False

    result = resolver(location, integrations, document.get("docs_dir"))
    if result.is_empty():
        return False

    applied = RepoLinkResult(
        repo_url=None if "repo_url" in document else result.repo_url,
        edit_uri=None if "edit_uri" in document else result.edit_uri,
    )
    if applied.is_empty():
        return False

    values = applied.as_dict()
    document.update(values)
    logger.info(
        "Set %s. You can disable this feature by manually setting 'repo_url' or 'edit_uri' "
        "according to the MkDocs documentation at %s",
        values,
        MKDOCS_REPO_URL_DOCS,
    )
    return True


def reconcile_plugins(document: MkDocsDocument, default_plugins: Sequence[str] = DEFAULT_PLUGINS) -> bool:
    """Make sure every default plugin is enabled.

    Without a ``plugins`` key the defaults become the plugin list. Otherwise
    missing defaults are appended in bare form and the list is de-duplicated
    by plugin name, keeping the first occurrence as written.

    Args:
        document: Decoded MkDocs config.
        default_plugins: Plugin names that must be present.

    Returns:
        True if a plugin was added.
    """
    if "plugins" not in document:
        document["plugins"] = list(default_plugins)
        return True

    plugins = document["plugins"]
    if plugins is None:
        plugins = []
    if isinstance(plugins, dict):
        return _reconcile_plugin_mapping(plugins, default_plugins)
    if not isinstance(plugins, list):
        logger.warning(
            "Cannot add default plugins %s: 'plugins' is a %s, expected a list or a mapping",
            list(default_plugins),
            type(plugins).__name__,
        )
        return False

    entries = list(plugins)
    present = {entry.name for entry in map(PluginEntry.from_raw, entries) if entry is not None}
    appended = False
    for name in default_plugins:
        if name not in present:
            entries.append(PluginEntry.bare(name).to_raw())
            present.add(name)
            appended = True

    document["plugins"] = _dedupe_plugins(entries)
    return appended


def _reconcile_plugin_mapping(plugins: dict[Any, Any], default_plugins: Sequence[str]) -> bool:
    added = False
    for name in default_plugins:
        if name not in plugins:
            plugins[name] = {}
            added = True
    return added


def _dedupe_plugins(entries: list[Any]) -> list[Any]:
    seen: set[str] = set()
    unique = []
    for raw in entries:
        entry = PluginEntry.from_raw(raw)
        if entry is not None:
            if entry.name in seen:
                continue
            seen.add(entry.name)
        unique.append(raw)
    return unique
