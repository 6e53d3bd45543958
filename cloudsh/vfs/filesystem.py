"""Main VirtualFileSystem class - entry point for VFS access."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from cloudsh.vfs.base import DirectoryNode, FileNode, Node
from cloudsh.vfs.resolver import (
    PathResolver,
    NotFoundError,
    NotADirectoryError,
    NotAFileError,
    RefusedRootError,
)

logger = logging.getLogger(__name__)

EXECUTABLE_SUFFIXES = (".sh", ".py", ".pl")
ARCHIVE_SUFFIXES = (".zip", ".tar.gz")
CONTEXT_SUFFIXES = (".py", ".sh", ".txt")


class EntryKind(Enum):
    """How a listing entry should be presented."""
    DIRECTORY = "directory"
    EXECUTABLE = "executable"
    ARCHIVE = "archive"
    PLAIN = "plain"


@dataclass(frozen=True)
class Entry:
    """One name in a directory listing."""
    name: str
    kind: EntryKind

    @classmethod
    def for_node(cls, node: Node) -> 'Entry':
        if isinstance(node, DirectoryNode):
            kind = EntryKind.DIRECTORY
        elif node.name.endswith(EXECUTABLE_SUFFIXES):
            kind = EntryKind.EXECUTABLE
        elif node.name.endswith(ARCHIVE_SUFFIXES):
            kind = EntryKind.ARCHIVE
        else:
            kind = EntryKind.PLAIN
        return cls(node.name, kind)


class VirtualFileSystem:
    """In-memory file tree with a current working directory.

    This is the main entry point for accessing the VFS. It builds and
    seeds the tree, and provides path resolution plus the mutation
    primitives the shell needs.

    Usage:
        >>> vfs = VirtualFileSystem()
        >>> vfs.pwd()
        '/root'
        >>> vfs.read_file("welcome.msg")
        'Welcome to the Neural Kernel.\\nAll systems operational.'
        >>> vfs.change_directory("/etc")
        >>> [entry.name for entry in vfs.list()]
        ['passwd', 'os-release']
    """

    def __init__(self, user: str = "root", seed: bool = True):
        """Initialize the VFS.

        Args:
            user: Name of the logged-in user; `root` lives in /root,
                anyone else in /home/<user>
            seed: Populate the standard hierarchy and sample files
        """
        self.user = user
        self.root = DirectoryNode("/")
        self.home_path = "/root" if user == "root" else f"/home/{user}"
        self.resolver = PathResolver(self.root, self.home_path)
        self.current = self.root

        if seed:
            self._seed()

        home = self.resolver.resolve_directory("~", self.root)
        if home is None:
            home = self.make_path(self.home_path)
        self.current = home

    def _seed(self) -> None:
        """Build the standard Linux hierarchy."""
        root = self.root
        self.make_directory(root, "bin")
        etc = self.make_directory(root, "etc")
        self.make_directory(root, "home")
        root_home = self.make_directory(root, "root")
        self.make_directory(root, "tmp")
        usr = self.make_directory(root, "usr")
        self.make_directory(root, "var")

        share = self.make_directory(usr, "share")
        wordlists = self.make_directory(share, "wordlists")
        self.write_file(
            wordlists,
            "rockyou.txt",
            "123456\npassword\nadmin\n12345678\nroot\n...(14 million entries)...",
        )

        self.write_file(
            etc,
            "passwd",
            "root:x:0:0:root:/root:/bin/zsh\nuser:x:1000:1000:user:/home/user:/bin/zsh",
        )
        self.write_file(
            etc,
            "os-release",
            'PRETTY_NAME="Kali GNU/Linux Rolling"\nNAME="Kali GNU/Linux"\n'
            'ID=kali\nVERSION="2024.1"\nID_LIKE=debian',
        )

        self.write_file(
            root_home,
            "welcome.msg",
            "Welcome to the Neural Kernel.\nAll systems operational.",
        )
        self.write_file(
            root_home,
            "todo.txt",
            "- Update metasploit\n- Scan target 192.168.1.55\n- Write payload.py",
        )

    # --- Core operations ---

    def resolve(self, path: str) -> Optional[Node]:
        """Resolve a path relative to the current directory.

        Returns:
            Resolved node or None
        """
        return self.resolver.resolve(path, self.current)

    def make_directory(self, parent: DirectoryNode, name: str) -> DirectoryNode:
        """Create `name` under `parent`, or return it if it already exists.

        Raises:
            NotADirectoryError: If a file with that name already exists
        """
        existing = parent.get_child(name)
        if existing is not None:
            if not isinstance(existing, DirectoryNode):
                raise NotADirectoryError(existing.get_path())
            return existing

        return parent.attach(DirectoryNode(name))

    def make_path(self, path: str) -> DirectoryNode:
        """Create every missing directory along `path` (like ``mkdir -p``).

        Raises:
            NotADirectoryError: If a file sits somewhere along the path
        """
        if path == "~" or path.startswith("~/"):
            path = self.home_path + path[1:]

        node = self.root if path.startswith("/") else self.current
        for part in PathResolver.split(path):
            if part == ".":
                continue
            if part == "..":
                node = node.parent or node
                continue
            node = self.make_directory(node, part)
        return node

    def write_file(self, parent: DirectoryNode, name: str, content: str) -> FileNode:
        """Create or overwrite the file `name` under `parent`.

        Raises:
            NotAFileError: If a directory with that name already exists
        """
        existing = parent.get_child(name)
        if existing is not None:
            if not isinstance(existing, FileNode):
                raise NotAFileError(existing.get_path())
            existing.write_content(content)
            return existing

        return parent.attach(FileNode(name, content=content))

    def read_file(self, path: str) -> Optional[str]:
        """Read content of a file node.

        Returns:
            File content, or None if the path is missing or not a file
        """
        node = self.resolve(path)
        if isinstance(node, FileNode):
            return node.read_content()
        return None

    def remove(self, path: str) -> None:
        """Detach the node at `path` (and with it, its whole subtree).

        Raises:
            NotFoundError: If the path doesn't resolve
            RefusedRootError: If the path resolves to the root
        """
        node = self.resolve(path)
        if node is None:
            raise NotFoundError(path)
        if node is self.root:
            raise RefusedRootError(path)

        parent = node.parent
        # Keep the cursor on a live node when its own branch goes away
        if node is self.current or node.is_ancestor_of(self.current):
            self.current = parent

        parent.detach(node.name)
        logger.debug(f"Removed {parent.get_path().rstrip('/')}/{node.name}")

    def change_directory(self, path: str = "") -> None:
        """Change current directory. Empty path means home.

        Raises:
            NotFoundError: If the path doesn't resolve
            NotADirectoryError: If the path resolves to a file
        """
        node = self.resolver.resolve(path or "~", self.current)
        if node is None:
            raise NotFoundError(path)
        if not isinstance(node, DirectoryNode):
            raise NotADirectoryError(path)

        self.current = node

    def list(self, path: str = "") -> List[Entry]:
        """List a directory (or a single file) in insertion order.

        Raises:
            NotFoundError: If the path doesn't resolve
        """
        node = self.resolve(path)
        if node is None:
            raise NotFoundError(path)
        if isinstance(node, DirectoryNode):
            return [Entry.for_node(child) for child in node.list_children()]
        return [Entry.for_node(node)]

    def pwd(self) -> str:
        """Get current working directory path."""
        return self.current.get_path()

    # --- Presentation helpers ---

    def display_path(self) -> str:
        """Current path with the home prefix shown as `~`."""
        path = self.pwd()
        home = self.home_path
        if path == home:
            return "~"
        if home != "/" and path.startswith(home + "/"):
            return "~" + path[len(home):]
        return path

    def complete(self, partial: str) -> List[str]:
        """Get tab completion candidates."""
        return self.resolver.complete_path(partial, self.current)

    def context_files(self) -> Dict[str, str]:
        """Contents of script and text files in the current directory."""
        return {
            child.name: child.read_content()
            for child in self.current.list_children()
            if isinstance(child, FileNode) and child.name.endswith(CONTEXT_SUFFIXES)
        }
