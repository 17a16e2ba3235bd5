"""Permissive YAML schema for MkDocs configuration files.

MkDocs configs commonly carry tags that a safe loader refuses, such as
``!ENV [SITE_URL, ""]`` or ``!!python/name:material.extensions.emoji.twemoji``.
The loader here keeps any unknown tag as an opaque :class:`UnknownTag` value
so the document can be read, patched and written back without constructing
arbitrary Python objects or losing the tags.
"""

from dataclasses import dataclass
from typing import Any

import yaml


@dataclass
class UnknownTag:
    """A tagged YAML node the safe schema does not know how to construct."""

    tag: str
    value: Any


class MkDocsLoader(yaml.SafeLoader):
    """Safe loader that tolerates the tags MkDocs configs use."""


class MkDocsDumper(yaml.SafeDumper):
    """Safe dumper that writes :class:`UnknownTag` values back with their tag."""


def _construct_unknown_tag(loader: MkDocsLoader, node: yaml.Node) -> UnknownTag:
    value: Any
    if isinstance(node, yaml.ScalarNode):
        value = loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)
    return UnknownTag(tag=node.tag, value=value)


def _represent_unknown_tag(dumper: MkDocsDumper, data: UnknownTag) -> yaml.Node:
    if isinstance(data.value, dict):
        return dumper.represent_mapping(data.tag, data.value)
    if isinstance(data.value, list):
        return dumper.represent_sequence(data.tag, data.value)
    return dumper.represent_scalar(data.tag, "" if data.value is None else str(data.value))


# A None key is the fallback for tags without a registered constructor.
MkDocsLoader.add_constructor(None, _construct_unknown_tag)
MkDocsDumper.add_representer(UnknownTag, _represent_unknown_tag)


def load_mkdocs_yaml(source: str) -> Any:
    """Decode MkDocs YAML text.

    Args:
        source: YAML text.

    Returns:
        Decoded value; a dict for a well-formed config.

    Raises:
        yaml.YAMLError: If the text is not valid YAML.
    """
    return yaml.load(source, Loader=MkDocsLoader)  # noqa: S506


def dump_mkdocs_yaml(document: Any) -> str:
    """Encode a document back to MkDocs YAML text.

    Key order is preserved as loaded.

    Args:
        document: Document to encode.

    Returns:
        YAML text.

    Raises:
        yaml.YAMLError: If a value cannot be represented.
    """
    return yaml.dump(
        document,
        Dumper=MkDocsDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
