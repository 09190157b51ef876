"""Serialize map node trees back to YAML text.

``node_events`` mirrors what PyYAML's serializer produces for a node tree,
paired with the node each event came from. ``preserve_type_tags`` is a
separate stage over that stream: it re-marks tags recorded at load time as
explicit so they are written back out instead of being normalized away.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, Iterator, Tuple

import yaml
from yaml.events import (
    DocumentEndEvent,
    DocumentStartEvent,
    Event,
    MappingEndEvent,
    MappingStartEvent,
    ScalarEvent,
    SequenceEndEvent,
    SequenceStartEvent,
    StreamEndEvent,
    StreamStartEvent,
)
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode
from yaml.resolver import Resolver

from .mapfile import has_explicit_tag

NO_LINE_WRAP = 2**31 - 1

NodeEvent = Tuple[Node, Event]


def node_events(node: Node, resolver: Resolver | None = None) -> Iterator[NodeEvent]:
    resolver = resolver or Resolver()
    if isinstance(node, ScalarNode):
        detected = resolver.resolve(ScalarNode, node.value, (True, False))
        default = resolver.resolve(ScalarNode, node.value, (False, True))
        implicit = (node.tag == detected, node.tag == default)
        yield node, ScalarEvent(None, node.tag, implicit, node.value, style=node.style)
        return
    if isinstance(node, SequenceNode):
        implicit = node.tag == resolver.resolve(SequenceNode, node.value, True)
        yield node, SequenceStartEvent(None, node.tag, implicit, flow_style=node.flow_style)
        for item in node.value:
            yield from node_events(item, resolver)
        yield node, SequenceEndEvent()
        return
    if isinstance(node, MappingNode):
        implicit = node.tag == resolver.resolve(MappingNode, node.value, True)
        yield node, MappingStartEvent(None, node.tag, implicit, flow_style=node.flow_style)
        for key, value in node.value:
            yield from node_events(key, resolver)
            yield from node_events(value, resolver)
        yield node, MappingEndEvent()
        return
    raise TypeError(f"unsupported node type: {type(node).__name__}")


def preserve_type_tags(stream: Iterable[NodeEvent]) -> Iterator[Event]:
    for node, event in stream:
        if not has_explicit_tag(node):
            yield event
        elif isinstance(event, ScalarEvent):
            yield ScalarEvent(event.anchor, event.tag, (False, False), event.value, style=event.style)
        elif isinstance(event, MappingStartEvent):
            yield MappingStartEvent(event.anchor, event.tag, False, flow_style=event.flow_style)
        elif isinstance(event, SequenceStartEvent):
            yield SequenceStartEvent(event.anchor, event.tag, False, flow_style=event.flow_style)
        else:
            yield event


def document_events(root: Node) -> Iterator[Event]:
    yield StreamStartEvent()
    yield DocumentStartEvent(explicit=False)
    yield from preserve_type_tags(node_events(root))
    yield DocumentEndEvent(explicit=False)
    yield StreamEndEvent()


def dump_map(root: Node) -> str:
    return yaml.emit(
        document_events(root),
        Dumper=yaml.SafeDumper,
        width=NO_LINE_WRAP,
        allow_unicode=True,
    )


def save_map(root: Node, path: Path) -> None:
    """Write ``root`` to ``path`` through a temp file and an atomic replace."""
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            yaml.emit(
                document_events(root),
                f,
                Dumper=yaml.SafeDumper,
                width=NO_LINE_WRAP,
                allow_unicode=True,
            )
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
