"""Virtual File System backing the simulated shell.

The VFS is a plain in-memory tree. It is built once, seeded with a small
Kali-flavoured hierarchy, and lives as long as the owning process.

Architecture:

    ```
    /                           # Root (DirectoryNode, no parent)
    ├── bin/
    ├── etc/
    │   ├── passwd
    │   └── os-release
    ├── home/
    ├── root/                   # Home directory, initial cwd
    │   ├── welcome.msg
    │   └── todo.txt
    ├── tmp/
    ├── usr/
    │   └── share/
    │       └── wordlists/
    │           └── rockyou.txt
    └── var/
    ```

Path Resolution:

    The PathResolver handles navigation:
    - Absolute paths: /usr/share/wordlists
    - Relative paths: ../etc, ./notes
    - Special: ., .., ~ (home)

Usage Example:

    ```python
    from cloudsh.vfs import VirtualFileSystem, NotFoundError

    vfs = VirtualFileSystem()
    vfs.make_directory(vfs.current, "proj")
    vfs.change_directory("proj")
    print(vfs.pwd())            # /root/proj

    try:
        vfs.remove("/nope")
    except NotFoundError as e:
        print(f"missing: {e.path}")
    ```
"""

from cloudsh.vfs.base import (
    Node,
    DirectoryNode,
    FileNode,
    NodeType,
)
from cloudsh.vfs.resolver import (
    PathResolver,
    PathError,
    NotFoundError,
    NotADirectoryError,
    NotAFileError,
    RefusedRootError,
)
from cloudsh.vfs.filesystem import VirtualFileSystem, Entry, EntryKind

__all__ = [
    # Main entry point
    "VirtualFileSystem",
    "Entry",
    "EntryKind",
    # Core classes
    "Node",
    "DirectoryNode",
    "FileNode",
    "NodeType",
    # Path resolution
    "PathResolver",
    "PathError",
    "NotFoundError",
    "NotADirectoryError",
    "NotAFileError",
    "RefusedRootError",
]
