"""Base classes for the Virtual File System.

The VFS is an in-memory tree that the shell navigates with the usual
commands (cd, ls, cat, etc.). Nothing in it touches the real disk.

Architecture:
    - Node: Base class for all VFS nodes
    - DirectoryNode: Nodes that can contain children (cd into them)
    - FileNode: Leaf nodes with content (cat them)
"""

from enum import Enum
from typing import Dict, List, Optional, Any


class NodeType(Enum):
    """Type of VFS node."""
    DIRECTORY = "directory"
    FILE = "file"


class Node:
    """Base class for all VFS nodes.

    A Node represents an entry in the virtual filesystem, either a
    directory (navigable) or a file (readable).

    Attributes:
        name: The name of this node (e.g., "etc", "passwd")
        parent: Parent directory node (None for root)
        node_type: Type of node (directory or file)
    """

    def __init__(
        self,
        name: str,
        parent: Optional['DirectoryNode'] = None,
        node_type: NodeType = NodeType.FILE,
    ):
        """Initialize a VFS node.

        Args:
            name: Name of this node
            parent: Parent directory (None for root)
            node_type: Type of node
        """
        self.name = name
        self.parent = parent
        self.node_type = node_type

    def get_info(self) -> Dict[str, Any]:
        """Get metadata about this node for display."""
        return {
            "type": self.node_type.value,
            "name": self.name,
            "path": self.get_path(),
        }

    def get_path(self) -> str:
        """Get absolute path to this node.

        Returns:
            Path like /usr/share/wordlists
        """
        if self.parent is None:
            return "/"

        parts = []
        node = self
        while node.parent is not None:
            parts.append(node.name)
            node = node.parent

        return "/" + "/".join(reversed(parts))

    def is_ancestor_of(self, other: 'Node') -> bool:
        """Check whether this node lies on the parent chain of `other`."""
        node = other.parent
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', path='{self.get_path()}')"


class DirectoryNode(Node):
    """A directory node that can contain children.

    Directory nodes can be navigated into with `cd` and their
    children can be listed with `ls`. Children keep insertion order.
    """

    def __init__(self, name: str, parent: Optional['DirectoryNode'] = None):
        """Initialize a directory node.

        Args:
            name: Name of this directory
            parent: Parent directory
        """
        super().__init__(name, parent, NodeType.DIRECTORY)
        self.children: Dict[str, Node] = {}

    def list_children(self) -> List[Node]:
        """List all children of this directory in insertion order."""
        return list(self.children.values())

    def get_child(self, name: str) -> Optional[Node]:
        """Get a child node by name.

        Args:
            name: Name of child node

        Returns:
            Child node or None if not found
        """
        return self.children.get(name)

    def attach(self, child: Node) -> Node:
        """Link `child` under this directory, keeping the back-reference in sync."""
        child.parent = self
        self.children[child.name] = child
        return child

    def detach(self, name: str) -> Optional[Node]:
        """Unlink the child called `name`, returning it (or None)."""
        child = self.children.pop(name, None)
        if child is not None:
            child.parent = None
        return child

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["children_count"] = len(self.children)
        return info


class FileNode(Node):
    """A file node with readable and writable text content."""

    def __init__(
        self,
        name: str,
        parent: Optional[DirectoryNode] = None,
        content: str = "",
    ):
        """Initialize a file node.

        Args:
            name: Name of this file
            parent: Parent directory
            content: Initial content
        """
        super().__init__(name, parent, NodeType.FILE)
        self.content = content

    def read_content(self) -> str:
        """Read the content of this file."""
        return self.content

    def write_content(self, content: str) -> None:
        """Replace the content of this file."""
        self.content = content

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["size"] = len(self.content.encode("utf-8"))
        return info
