"""Path resolution for the Virtual File System.

Handles path parsing and navigation (cd, ls semantics).
"""

from typing import Optional, List

from cloudsh.vfs.base import Node, DirectoryNode


class PathResolver:
    """Resolves paths in the VFS.

    This class provides the core navigation logic for cd, ls, etc.
    It handles:
    - Absolute paths: /usr/share/wordlists
    - Relative paths: ../other, ./notes
    - Special paths: ., .., ~ (the home directory)
    """

    def __init__(self, root: DirectoryNode, home_path: str = "/"):
        """Initialize path resolver.

        Args:
            root: Root node of the VFS
            home_path: Absolute path of the directory `~` refers to
        """
        self.root = root
        self.home_path = home_path

    def resolve(self, path: str, current: DirectoryNode) -> Optional[Node]:
        """Resolve a path to a node.

        Args:
            path: Path to resolve (absolute or relative)
            current: Current working directory

        Returns:
            Resolved node or None if path doesn't exist
        """
        if not path:
            return current
        if path == "/":
            return self.root
        if path == "~":
            return self._walk(self.root, self.split(self.home_path))
        if path.startswith("~/"):
            path = self.home_path.rstrip("/") + path[1:]

        start = self.root if path.startswith("/") else current
        return self._walk(start, self.split(path))

    def resolve_directory(
        self,
        path: str,
        current: DirectoryNode,
    ) -> Optional[DirectoryNode]:
        """Resolve a path to a directory node.

        Returns:
            Directory node or None if path doesn't exist or isn't a directory
        """
        node = self.resolve(path, current)
        if node is None or not isinstance(node, DirectoryNode):
            return None
        return node

    def resolve_parent(self, path: str, current: DirectoryNode):
        """Split `path` into its containing directory and final name.

        Used by commands that create entries (mkdir, touch, echo > file).

        Returns:
            Tuple of (parent directory or None, base name)
        """
        stripped = path.rstrip("/")
        if "/" not in stripped:
            return current, stripped

        dir_part, name = stripped.rsplit("/", 1)
        if not dir_part:
            dir_part = "/"
        return self.resolve_directory(dir_part, current), name

    def complete_path(
        self,
        partial: str,
        current: DirectoryNode,
    ) -> List[str]:
        """Get completion candidates for a partial path.

        Used for tab completion.

        Args:
            partial: Partial path to complete
            current: Current working directory

        Returns:
            List of completion candidates
        """
        if "/" in partial:
            dir_part, file_part = partial.rsplit("/", 1)
            if partial.startswith("/"):
                dir_part = dir_part or "/"
        else:
            dir_part = ""
            file_part = partial

        if dir_part:
            dir_node = self.resolve_directory(dir_part, current)
        else:
            dir_node = current

        if dir_node is None:
            return []

        candidates = []
        for child in dir_node.list_children():
            if not child.name.startswith(file_part):
                continue

            if dir_part == "/":
                candidate = f"/{child.name}"
            elif dir_part:
                candidate = f"{dir_part}/{child.name}"
            else:
                candidate = child.name

            # Trailing slash for directories
            if isinstance(child, DirectoryNode):
                candidate += "/"
            candidates.append(candidate)

        return candidates

    @staticmethod
    def split(path: str) -> List[str]:
        """Split a path into its non-empty segments."""
        return [part for part in path.split("/") if part]

    def _walk(self, start: Node, parts: List[str]) -> Optional[Node]:
        node = start
        for part in parts:
            # Nothing follows a file, not even "." or ".."
            if not isinstance(node, DirectoryNode):
                return None
            if part == ".":
                continue
            if part == "..":
                # Stay at root if already at root
                if node.parent is not None:
                    node = node.parent
                continue

            child = node.get_child(part)
            if child is None:
                return None
            node = child

        return node


class PathError(Exception):
    """Error resolving or mutating a path."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or path)


class NotFoundError(PathError):
    """Path does not exist."""
    pass


class NotADirectoryError(PathError):
    """Attempted to treat a file as a directory."""
    pass


class NotAFileError(PathError):
    """Attempted to treat a directory as a file."""
    pass


class RefusedRootError(PathError):
    """Attempted to remove the root directory."""
    pass
