"""Loading and walking map YAML documents at the node level.

Maps are handled as composed PyYAML nodes rather than constructed Python
objects so that scalar styles, key order and explicit tags survive a
rewrite.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

import yaml
from yaml.events import AliasEvent
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from .config import GRID_COMPONENT, ToolSettings
from .errors import FormatError

LOG = logging.getLogger(__name__)


class TagRecordingLoader(yaml.SafeLoader):
    """SafeLoader that marks nodes whose tag was written in the source.

    The composer resolves every node to a full tag, which loses whether the
    tag came from the text (``!type:Foo``, ``!!str``) or from implicit
    resolution. Marked nodes get ``explicit_tag = True``.
    """

    def compose_node(self, parent, index):
        event = self.peek_event()
        explicit = not isinstance(event, AliasEvent) and event.tag not in (None, "!")
        node = super().compose_node(parent, index)
        if explicit:
            node.explicit_tag = True
        return node


def has_explicit_tag(node: Node) -> bool:
    return bool(getattr(node, "explicit_tag", False))


def load_map(path: Path) -> MappingNode:
    with Path(path).open("r", encoding="utf-8") as f:
        root = yaml.compose(f, Loader=TagRecordingLoader)
    if not isinstance(root, MappingNode):
        raise FormatError(f"{path}: root node is not a mapping")
    return root


def collect_map_files(paths: Iterable[str], extension: str = ".yml") -> List[Path]:
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(p for p in path.rglob(f"*{extension}") if p.is_file())
            continue
        if path.is_file():
            files.append(path)
            continue
        LOG.debug("ignoring missing path %s", path)
    return files


def get_node(node: MappingNode, key: str) -> Optional[Node]:
    for key_node, value_node in node.value:
        if isinstance(key_node, ScalarNode) and key_node.value == key:
            return value_node
    return None


def get_mapping(node: MappingNode, key: str) -> Optional[MappingNode]:
    child = get_node(node, key)
    return child if isinstance(child, MappingNode) else None


def get_sequence(node: MappingNode, key: str) -> Optional[SequenceNode]:
    child = get_node(node, key)
    return child if isinstance(child, SequenceNode) else None


def get_scalar(node: MappingNode, key: str) -> Optional[ScalarNode]:
    child = get_node(node, key)
    return child if isinstance(child, ScalarNode) else None


def get_scalar_value(node: MappingNode, key: str) -> Optional[str]:
    child = get_scalar(node, key)
    return None if child is None else child.value


def is_supported(root: MappingNode, settings: ToolSettings | None = None) -> bool:
    version = (settings or ToolSettings()).format_version
    meta = get_mapping(root, "meta")
    if meta is None:
        return False
    return get_scalar_value(meta, "format") == version


def _mappings(seq: Optional[SequenceNode]) -> Iterator[MappingNode]:
    if seq is None:
        return
    for item in seq.value:
        if isinstance(item, MappingNode):
            yield item


def iter_grid_chunks(
    root: MappingNode,
    version: str,
    *,
    grid_component: str = GRID_COMPONENT,
) -> Iterator[MappingNode]:
    """Yield every grid chunk node in document order.

    Walks entities -> entities -> components, picks components of the grid
    type and yields chunks whose ``version`` matches.
    """
    for group in _mappings(get_sequence(root, "entities")):
        for entity in _mappings(get_sequence(group, "entities")):
            for comp in _mappings(get_sequence(entity, "components")):
                if get_scalar_value(comp, "type") != grid_component:
                    continue
                chunks = get_mapping(comp, "chunks")
                if chunks is None:
                    continue
                for _, chunk in chunks.value:
                    if not isinstance(chunk, MappingNode):
                        continue
                    if get_scalar_value(chunk, "version") != version:
                        continue
                    yield chunk


def scalar_pairs(node: MappingNode) -> Sequence[tuple]:
    return [(k, v) for k, v in node.value if isinstance(k, ScalarNode) and isinstance(v, ScalarNode)]
