"""
Critical resolver tests — the canonical file of every group must survive,
and one failing file must never stop the rest of the run.
"""
import pytest

from hashsweep.core.errors import ResolverConfigurationError
from hashsweep.core.models import DuplicateGroup, DuplicateHandlingMethod
from hashsweep.core.resolver import DeleteResolver, MoveResolver, NullResolver, create_resolver
from hashsweep.core.scanner import DirectoryScannerImpl
from hashsweep.services.file_service import FileService


@pytest.fixture
def populated(memory_fs, repository, make_fingerprint):
    """Two groups: three copies of 'A' and two of 'B', plus one unique file."""
    contents = {
        "/photos/a.jpg": b"A",
        "/photos/old/a.jpg": b"A",
        "/photos/old/older/a_copy.jpg": b"A",
        "/docs/b.txt": b"BB",
        "/docs/backup/b.txt": b"BB",
        "/docs/unique.txt": b"U",
    }
    for path, content in contents.items():
        memory_fs.add_file(path, content)
        repository.add(make_fingerprint(path, content))
    return memory_fs, repository


class TestDeleteResolver:
    """Test deletion of non-canonical files."""

    def test_deletes_all_but_canonical(self, populated):
        fs, repository = populated

        summary = DeleteResolver(repository, fs).resolve()

        assert set(fs.files) == {"/photos/a.jpg", "/docs/b.txt", "/docs/unique.txt"}
        assert summary.action == DuplicateHandlingMethod.DELETE
        assert summary.groups == 2
        assert summary.processed_count == 3
        assert summary.processed_bytes == 1 + 1 + 2
        assert summary.failed == []

    def test_processed_files_removed_from_repository(self, populated):
        fs, repository = populated

        DeleteResolver(repository, fs).resolve()

        assert len(repository) == 3
        assert repository.get_duplicate_groupings() == []

    def test_failure_is_isolated(self, populated):
        fs, repository = populated
        fs.fail("delete", "/photos/old/a.jpg", PermissionError("read-only"))

        summary = DeleteResolver(repository, fs).resolve()

        assert "/photos/old/a.jpg" in fs.files
        assert "/photos/old/older/a_copy.jpg" not in fs.files
        assert "/docs/backup/b.txt" not in fs.files
        assert summary.processed_count == 2
        assert summary.failed == [("/photos/old/a.jpg", "read-only")]
        # The failed file stays in the repository and still forms a group with the canonical one
        groups = repository.get_duplicate_groupings()
        assert [len(g.files) for g in groups] == [2]

    def test_dry_run_changes_nothing(self, populated):
        fs, repository = populated
        before = dict(fs.files)

        summary = DeleteResolver(repository, fs, dry_run=True).resolve()

        assert fs.files == before
        assert len(repository) == 6
        assert summary.dry_run
        assert summary.processed_count == 3
        assert not any(op == "delete" for op, _ in fs.calls)

    def test_use_trash_goes_through_file_service(self, populated, monkeypatch):
        fs, repository = populated
        trashed = []
        monkeypatch.setattr(FileService, "move_to_trash", staticmethod(trashed.append))

        DeleteResolver(repository, fs, use_trash=True).resolve()

        assert sorted(trashed) == ["/docs/backup/b.txt", "/photos/old/a.jpg", "/photos/old/older/a_copy.jpg"]
        assert len(fs.files) == 6

    def test_no_groups_is_a_no_op(self, memory_fs, repository, make_fingerprint):
        memory_fs.add_file("/x", b"x")
        repository.add(make_fingerprint("/x", b"x"))

        summary = DeleteResolver(repository, memory_fs).resolve()

        assert summary.groups == 0
        assert summary.processed_count == 0
        assert "/x" in memory_fs.files


class TestMoveResolver:
    """Test moving duplicates into one directory."""

    def test_moves_duplicates_and_creates_destination(self, populated):
        fs, repository = populated

        summary = MoveResolver(repository, "/dupes", fs).resolve()

        assert fs.is_dir("/dupes")
        assert "/photos/a.jpg" in fs.files
        assert "/dupes/a.jpg" in fs.files
        assert "/dupes/a_copy.jpg" in fs.files
        assert "/dupes/b.txt" in fs.files
        assert "/photos/old/a.jpg" not in fs.files
        assert summary.processed_count == 3

    def test_name_collisions_get_numbered_suffix(self, memory_fs, repository, make_fingerprint):
        paths = ["/p/photo.jpg", "/p/a/photo.jpg", "/p/b/photo.jpg"]
        for path in paths:
            memory_fs.add_file(path, b"same")
            repository.add(make_fingerprint(path, b"same"))
        memory_fs.add_file("/dupes/photo.jpg", b"already here")

        MoveResolver(repository, "/dupes", memory_fs).resolve()

        assert memory_fs.files["/dupes/photo.jpg"] == b"already here"
        assert "/dupes/photo_(1).jpg" in memory_fs.files
        assert "/dupes/photo_(2).jpg" in memory_fs.files
        assert "/p/photo.jpg" in memory_fs.files

    def test_unique_destination_without_extension(self, memory_fs, repository):
        memory_fs.add_file("/dupes/README", b"")
        resolver = MoveResolver(repository, "/dupes", memory_fs)
        resolver.destination = "/dupes"
        assert resolver.unique_destination("README") == "/dupes/README_(1)"

    @pytest.mark.parametrize("destination", [None, "", "   "])
    def test_missing_destination_fails_before_any_change(self, populated, destination):
        fs, repository = populated
        before = dict(fs.files)

        with pytest.raises(ResolverConfigurationError):
            MoveResolver(repository, destination, fs).resolve()

        assert fs.files == before

    def test_destination_that_is_a_file_fails(self, populated):
        fs, repository = populated
        fs.add_file("/dupes", b"not a directory")

        with pytest.raises(ResolverConfigurationError, match="not a directory"):
            MoveResolver(repository, "/dupes", fs).resolve()
        assert not any(op == "move" for op, _ in fs.calls)

    def test_uncreatable_destination_fails(self, populated):
        fs, repository = populated
        fs.fail("make_dirs", "/dupes", PermissionError("denied"))

        with pytest.raises(ResolverConfigurationError, match="Unable to create"):
            MoveResolver(repository, "/dupes", fs).resolve()
        assert len(repository) == 6

    def test_move_failure_is_isolated(self, populated):
        fs, repository = populated
        fs.fail("move", "/photos/old/a.jpg", OSError("device busy"))

        summary = MoveResolver(repository, "/dupes", fs).resolve()

        assert "/photos/old/a.jpg" in fs.files
        assert summary.processed_count == 2
        assert summary.failed == [("/photos/old/a.jpg", "device busy")]

    def test_dry_run_does_not_create_destination(self, populated):
        fs, repository = populated

        summary = MoveResolver(repository, "/dupes", fs, dry_run=True).resolve()

        assert not fs.exists("/dupes")
        assert summary.processed_count == 3
        assert len(fs.files) == 6


class TestCreateResolver:
    def test_builds_matching_resolver(self, repository, memory_fs):
        assert isinstance(create_resolver(DuplicateHandlingMethod.DELETE, repository, memory_fs), DeleteResolver)
        assert isinstance(
            create_resolver(DuplicateHandlingMethod.MOVE, repository, memory_fs, move_to_dir="/x"), MoveResolver)
        assert isinstance(create_resolver(DuplicateHandlingMethod.NO_ACTION, repository), NullResolver)

    def test_flags_are_forwarded(self, repository, memory_fs):
        resolver = create_resolver(DuplicateHandlingMethod.DELETE, repository, memory_fs, use_trash=True, dry_run=True)
        assert resolver.use_trash
        assert resolver.dry_run

    def test_null_resolver_reports_groups_only(self, populated):
        fs, repository = populated
        summary = NullResolver(repository).resolve()
        assert summary.groups == 2
        assert summary.processed_count == 0
        assert len(fs.files) == 6


class TestRescannedRepository:
    """A file seen by more than one scan must never be treated as its own duplicate."""

    def test_second_scan_of_single_file_deletes_nothing(self, memory_fs, repository):
        memory_fs.add_file("/d/only.txt", b"the only copy")
        scanner = DirectoryScannerImpl(repository, file_system=memory_fs)
        scanner.scan("/d", recursive=True)
        scanner.scan("/d", recursive=True)

        summary = DeleteResolver(repository, memory_fs).resolve()

        assert "/d/only.txt" in memory_fs.files
        assert summary.groups == 0
        assert summary.processed_count == 0
        assert len(repository) == 1

    def test_overlapping_roots_keep_canonical_files(self, memory_fs, repository):
        memory_fs.add_file("/d/a.txt", b"A")
        memory_fs.add_file("/d/sub/a.txt", b"A")
        memory_fs.add_file("/d/sub/b.txt", b"B")
        scanner = DirectoryScannerImpl(repository, file_system=memory_fs)
        scanner.scan("/d", recursive=True)
        scanner.scan("/d/sub", recursive=True)

        summary = DeleteResolver(repository, memory_fs).resolve()

        assert set(memory_fs.files) == {"/d/a.txt", "/d/sub/b.txt"}
        assert summary.processed_count == 1
        assert len(repository) == 2

    def test_group_listing_canonical_path_twice_is_skipped(self, memory_fs, make_fingerprint):
        memory_fs.add_file("/d/only.txt", b"1")
        fingerprint = make_fingerprint("/d/only.txt", b"1")

        class RepeatingRepository:
            def get_duplicate_groupings(self):
                return [DuplicateGroup(digest=fingerprint.digest, files=[fingerprint, fingerprint])]

            def delete(self, fp):
                raise AssertionError(f"{fp.full_path} must not be removed")

        summary = DeleteResolver(RepeatingRepository(), memory_fs).resolve()

        assert "/d/only.txt" in memory_fs.files
        assert summary.processed_count == 0
        assert not any(op == "delete" for op, _ in memory_fs.calls)
