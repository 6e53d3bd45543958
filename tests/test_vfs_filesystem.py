"""Tests for VirtualFileSystem: seeding, mutation and the working directory."""

import pytest

from cloudsh.vfs import (
    DirectoryNode,
    Entry,
    EntryKind,
    FileNode,
    NodeType,
    NotADirectoryError,
    NotAFileError,
    NotFoundError,
    RefusedRootError,
    VirtualFileSystem,
)


def names(entries):
    return [entry.name for entry in entries]


class TestSeededTree:
    """Test the initial hierarchy."""

    def test_starts_in_root_home(self, vfs):
        assert vfs.pwd() == "/root"
        assert vfs.display_path() == "~"

    def test_top_level_directories(self, vfs):
        assert names(vfs.list("/")) == ["bin", "etc", "home", "root", "tmp", "usr", "var"]

    def test_seeded_files(self, vfs):
        assert vfs.read_file("welcome.msg") == "Welcome to the Neural Kernel.\nAll systems operational."
        assert vfs.read_file("/etc/passwd").startswith("root:x:0:0:")
        assert "ID=kali" in vfs.read_file("/etc/os-release")
        assert vfs.read_file("/usr/share/wordlists/rockyou.txt").startswith("123456")

    def test_unseeded_filesystem(self):
        """
        Given: A VFS created without seeding
        When: Inspecting it
        Then: Only the home directory exists and it is current
        """
        vfs = VirtualFileSystem(seed=False)

        assert vfs.pwd() == "/root"
        assert names(vfs.list("/")) == ["root"]
        assert vfs.list() == []

    def test_non_root_user_home(self):
        vfs = VirtualFileSystem(user="alice")

        assert vfs.pwd() == "/home/alice"
        assert vfs.display_path() == "~"
        assert vfs.resolve("/home/alice") is vfs.current


class TestMutation:
    """Test make_directory, make_path, write_file and remove."""

    def test_mkdir_then_list_preserves_insertion_order(self, vfs):
        """
        Given: An empty directory
        When: Creating children in a given order
        Then: Listing returns them in that order
        """
        tmp = vfs.resolve("/tmp")
        vfs.make_directory(tmp, "zeta")
        vfs.write_file(tmp, "alpha.txt", "a")
        vfs.make_directory(tmp, "mid")

        assert names(vfs.list("/tmp")) == ["zeta", "alpha.txt", "mid"]

    def test_make_directory_is_idempotent(self, vfs):
        tmp = vfs.resolve("/tmp")
        first = vfs.make_directory(tmp, "work")
        vfs.write_file(first, "keep.txt", "kept")

        second = vfs.make_directory(tmp, "work")

        assert second is first
        assert vfs.read_file("/tmp/work/keep.txt") == "kept"

    def test_make_directory_over_file_raises(self, vfs):
        with pytest.raises(NotADirectoryError):
            vfs.make_directory(vfs.current, "welcome.msg")

    def test_make_path_creates_every_level(self, vfs):
        node = vfs.make_path("a/b/c")

        assert node.get_path() == "/root/a/b/c"
        assert vfs.make_path("/root/a/b/c") is node
        assert vfs.make_path("~/a/./b/../b") is vfs.resolve("/root/a/b")

    def test_write_file_upserts(self, vfs):
        """
        Given: An existing file
        When: Writing the same name twice
        Then: One entry remains with the latest content
        """
        vfs.write_file(vfs.current, "notes", "one")
        vfs.write_file(vfs.current, "notes", "two")

        assert names(vfs.list()).count("notes") == 1
        assert vfs.read_file("notes") == "two"

    def test_write_file_over_directory_raises(self, vfs):
        with pytest.raises(NotAFileError):
            vfs.write_file(vfs.root, "etc", "oops")

    def test_read_file_on_directory_returns_none(self, vfs):
        assert vfs.read_file("/etc") is None
        assert vfs.read_file("/missing") is None

    def test_remove_file(self, vfs):
        vfs.remove("welcome.msg")

        assert vfs.resolve("welcome.msg") is None
        assert names(vfs.list()) == ["todo.txt"]

    def test_remove_directory_removes_subtree(self, vfs):
        vfs.make_path("/tmp/x/y")

        vfs.remove("/tmp/x")

        assert vfs.resolve("/tmp/x/y") is None
        assert vfs.list("/tmp") == []

    def test_remove_root_is_refused(self, vfs):
        before = names(vfs.list("/"))

        with pytest.raises(RefusedRootError):
            vfs.remove("/")

        assert names(vfs.list("/")) == before

    def test_remove_missing_raises(self, vfs):
        with pytest.raises(NotFoundError) as exc_info:
            vfs.remove("ghost")

        assert exc_info.value.path == "ghost"

    def test_remove_ancestor_of_current_moves_current(self, vfs):
        """
        Given: The current directory lies inside /tmp/work
        When: Removing /tmp/work
        Then: The current directory moves to /tmp
        """
        vfs.make_path("/tmp/work/deep")
        vfs.change_directory("/tmp/work/deep")

        vfs.remove("/tmp/work")

        assert vfs.pwd() == "/tmp"
        assert vfs.resolve("work") is None


class TestNavigation:
    """Test change_directory and pwd."""

    def test_pwd_round_trip(self, vfs):
        vfs.make_path("/tmp/a/b")

        vfs.change_directory("/tmp/a/b")
        path = vfs.pwd()
        vfs.change_directory("/")
        vfs.change_directory(path)

        assert vfs.pwd() == "/tmp/a/b"

    def test_cd_parent_at_root(self, vfs):
        vfs.change_directory("/")
        vfs.change_directory("..")

        assert vfs.pwd() == "/"

    def test_cd_empty_goes_home(self, vfs):
        vfs.change_directory("/etc")
        vfs.change_directory()

        assert vfs.pwd() == "/root"

    def test_cd_missing_leaves_cwd_unchanged(self, vfs):
        with pytest.raises(NotFoundError):
            vfs.change_directory("/nonexistent")

        assert vfs.pwd() == "/root"

    def test_cd_into_file_raises(self, vfs):
        with pytest.raises(NotADirectoryError):
            vfs.change_directory("welcome.msg")

        assert vfs.pwd() == "/root"

    def test_display_path_below_home(self, vfs):
        vfs.make_path("proj/src")
        vfs.change_directory("proj/src")

        assert vfs.display_path() == "~/proj/src"

        vfs.change_directory("/etc")
        assert vfs.display_path() == "/etc"


class TestListing:
    """Test list entries and classification."""

    def test_list_file_path(self, vfs):
        assert vfs.list("welcome.msg") == [Entry("welcome.msg", EntryKind.PLAIN)]

    def test_list_missing_raises(self, vfs):
        with pytest.raises(NotFoundError):
            vfs.list("/nope")

    def test_entry_kinds(self, vfs):
        for name in ("exploit.py", "run.sh", "loot.zip", "dump.tar.gz", "notes"):
            vfs.write_file(vfs.current, name, "")
        vfs.make_directory(vfs.current, "src")

        kinds = {entry.name: entry.kind for entry in vfs.list()}

        assert kinds["exploit.py"] is EntryKind.EXECUTABLE
        assert kinds["run.sh"] is EntryKind.EXECUTABLE
        assert kinds["loot.zip"] is EntryKind.ARCHIVE
        assert kinds["dump.tar.gz"] is EntryKind.ARCHIVE
        assert kinds["notes"] is EntryKind.PLAIN
        assert kinds["src"] is EntryKind.DIRECTORY


class TestHelpers:
    """Test completion, context files and node info."""

    def test_complete(self, vfs):
        assert vfs.complete("we") == ["welcome.msg"]
        assert vfs.complete("/us") == ["/usr/"]

    def test_context_files(self, vfs):
        """
        Given: Text, script and other files in the current directory
        When: Collecting context files
        Then: Only .py, .sh and .txt files are included
        """
        vfs.write_file(vfs.current, "payload.py", "print('hi')")

        files = vfs.context_files()

        assert set(files) == {"todo.txt", "payload.py"}
        assert files["payload.py"] == "print('hi')"

    def test_node_info(self, vfs):
        etc = vfs.resolve("/etc")
        passwd = vfs.resolve("/etc/passwd")

        assert isinstance(etc, DirectoryNode)
        assert etc.get_info()["children_count"] == 2
        assert isinstance(passwd, FileNode)
        assert passwd.node_type is NodeType.FILE
        assert passwd.get_info()["path"] == "/etc/passwd"
        assert etc.is_ancestor_of(passwd)
        assert not passwd.is_ancestor_of(etc)
