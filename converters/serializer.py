"""Flattens a tree of output nodes into Markdown text."""

from typing import Sequence

from models import Container, OutputNode

INDENT_STEP = '\t'


def serialize_nodes(nodes: Sequence[OutputNode], indent: str = '') -> str:
    """
    Serialize output nodes in order, indenting nested list children.

    Each line of a node is written as ``indent + line + "\\n"``. Children of
    a ``Container`` follow its own lines, one tab deeper.

    Args:
        nodes: Output nodes to serialize
        indent: Prefix for every line at this depth

    Returns:
        Serialized text
    """
    chunks = []
    for node in nodes:
        for line in node.lines:
            chunks.append(f"{indent}{line}\n")
        if isinstance(node, Container):
            chunks.append(serialize_nodes(node.children, indent + INDENT_STEP))
    return ''.join(chunks)


__all__ = ['serialize_nodes', 'INDENT_STEP']
