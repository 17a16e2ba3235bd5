"""Read, mutate and conditionally rewrite an MkDocs config file."""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

import yaml

from techdocs_mkdocs_patcher.models import MkDocsDocument, ParsedLocationAnnotation
from techdocs_mkdocs_patcher.policies import DEFAULT_PLUGINS, RepoLinkResolver, infer_repo_link, reconcile_plugins
from techdocs_mkdocs_patcher.schema import dump_mkdocs_yaml, load_mkdocs_yaml
from techdocs_mkdocs_patcher.scm import ScmIntegrationRegistry, resolve_repo_link

logger = logging.getLogger(__name__)


class MkDocsPatcher:
    """Applies mutations to ``mkdocs.yml`` before the site generator runs.

    Patching is an enhancement, not a precondition for generating docs, so no
    read, parse or write failure is raised to the caller. Failures are logged
    as warnings and the file is left as it was.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        """Initialise patcher.

        Args:
            log: Logger for warnings; defaults to this module's logger.
        """
        self.logger = log or logger

    def patch(self, mkdocs_yml_path: str | Path, mutate: Callable[[MkDocsDocument], bool]) -> None:
        """Load the config, apply ``mutate`` and write it back if it changed.

        The file is only rewritten when ``mutate`` returns True, so unchanged
        configs keep their comments and formatting. Exceptions raised by
        ``mutate`` itself are not caught.

        Args:
            mkdocs_yml_path: Absolute path to ``mkdocs.yml`` or equivalent.
            mutate: Policy that edits the document in place and reports a change.
        """
        mkdocs_yml_path = Path(mkdocs_yml_path)
        try:
            source = mkdocs_yml_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning(
                "Could not read MkDocs YAML config file %s before running the generator: %s",
                mkdocs_yml_path,
                exc,
            )
            return

        try:
            document = load_mkdocs_yaml(source)
        except (yaml.YAMLError, RecursionError) as exc:
            self.logger.warning("Error in parsing YAML at %s before running the generator. %s", mkdocs_yml_path, exc)
            return
        if not isinstance(document, dict):
            self.logger.warning(
                "Error in parsing YAML at %s before running the generator. Bad YAML format: expected a mapping, got %s",
                mkdocs_yml_path,
                type(document).__name__,
            )
            return

        if not mutate(document):
            self.logger.debug("No changes needed for %s", mkdocs_yml_path)
            return

        try:
            mkdocs_yml_path.write_text(dump_mkdocs_yaml(document), encoding="utf-8")
        except (OSError, yaml.YAMLError, RecursionError) as exc:
            self.logger.warning(
                "Could not write to %s after updating it before running the generator. %s",
                mkdocs_yml_path,
                exc,
            )

    def patch_pre_build(
        self,
        mkdocs_yml_path: str | Path,
        location: ParsedLocationAnnotation,
        integrations: ScmIntegrationRegistry,
        resolver: RepoLinkResolver = resolve_repo_link,
    ) -> None:
        """Add ``repo_url`` or ``edit_uri`` when missing.

        With ``repo_url`` set, MkDocs renders an edit button on every page.

        Args:
            mkdocs_yml_path: Absolute path to ``mkdocs.yml`` or equivalent.
            location: Where the documentation was fetched from.
            integrations: Known source-control hosts.
            resolver: Function computing the candidate values.
        """
        self.patch(
            mkdocs_yml_path,
            lambda document: infer_repo_link(document, location, integrations, resolver),
        )

    def patch_with_plugins(
        self, mkdocs_yml_path: str | Path, default_plugins: Sequence[str] = DEFAULT_PLUGINS
    ) -> None:
        """Add every default plugin missing from the config.

        Args:
            mkdocs_yml_path: Absolute path to ``mkdocs.yml`` or equivalent.
            default_plugins: Plugin names that must be present.
        """
        self.patch(mkdocs_yml_path, lambda document: reconcile_plugins(document, default_plugins))
