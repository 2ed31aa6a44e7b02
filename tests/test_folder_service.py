"""Unit tests for FolderService: cascades, uniqueness and variant integrity."""

import pytest

from deskspace.exceptions import (
    DuplicateNameError,
    ExternalServiceError,
    FolderItemNotFoundError,
    FolderNotFoundError,
    ServiceFailure,
    ValidationError,
)
from deskspace.models import FolderItem
from deskspace.schemas.folder_item import BookmarkPayload, NotePayload
from deskspace.services.folder_service import FolderService


@pytest.fixture()
def service(db, storage):
    return FolderService(db, storage)


def _orphans(db, folder_id):
    return db.query(FolderItem).filter(FolderItem.folder_id == folder_id).count()


class TestCreateFolder:

    def test_duplicate_name_rejected(self, service):
        service.create_folder("Projects")
        with pytest.raises(DuplicateNameError):
            service.create_folder("Projects")


class TestRenameFolder:

    def test_rename_to_other_folders_name_fails(self, service):
        service.create_folder("Projects")
        docs = service.create_folder("Documents")
        with pytest.raises(DuplicateNameError):
            service.rename_folder(docs.id, "Projects")

    def test_rename_to_own_name_is_allowed(self, service):
        folder = service.create_folder("Projects")
        assert service.rename_folder(folder.id, "Projects").name == "Projects"

    def test_rename_unknown_folder_raises_not_found(self, service):
        with pytest.raises(FolderNotFoundError):
            service.rename_folder("folder-missing", "X")


class TestDeleteFolderCascade:

    @pytest.mark.parametrize("item_count", [0, 1, 5])
    def test_no_orphans_left(self, db, service, item_count):
        folder = service.create_folder("Projects")
        for i in range(item_count):
            service.create_item(folder.id, f"note {i}", NotePayload(content=str(i)))
        folder_id = folder.id

        service.delete_folder(folder_id)

        assert _orphans(db, folder_id) == 0
        with pytest.raises(FolderNotFoundError):
            service.list_items(folder_id)

    def test_other_folders_untouched(self, db, service):
        doomed = service.create_folder("Doomed")
        kept = service.create_folder("Kept")
        service.create_item(doomed.id, "a", NotePayload())
        service.create_item(kept.id, "b", NotePayload())

        service.delete_folder(doomed.id)

        assert [i.name for i in service.list_items(kept.id)] == ["b"]

    def test_file_blobs_deleted(self, service, storage):
        folder = service.create_folder("Files")
        item = service.upload_file_item(folder.id, b"hello", "a.txt", "text/plain")
        file_id = item.file_id

        service.delete_folder(folder.id)

        assert storage.deleted == [file_id]

    def test_blob_failure_does_not_block_delete(self, db, service, storage):
        folder = service.create_folder("Files")
        service.upload_file_item(folder.id, b"hello", "a.txt", "text/plain")
        storage.fail_deletes = True
        folder_id = folder.id

        service.delete_folder(folder_id)

        assert _orphans(db, folder_id) == 0
        assert service.folder_repo.get_by_id_optional(folder_id) is None

    def test_unknown_id_is_noop(self, service):
        service.delete_folder("folder-missing")

    def test_scenario_note_is_gone_after_folder_delete(self, db, service):
        folder = service.create_folder("Projects", x=20, y=20)
        note = service.create_item(folder.id, "todo", NotePayload(content="buy milk"))
        note_id = note.id
        service.update_item(folder.id, note_id, name="shopping")

        service.delete_folder(folder.id)

        assert db.get(FolderItem, note_id) is None
        assert db.query(FolderItem).filter(FolderItem.name == "shopping").count() == 0


class TestItems:

    def test_bookmark_populates_only_bookmark_columns(self, service):
        folder = service.create_folder("Links")
        item = service.create_item(folder.id, "Docs", BookmarkPayload(url="https://example.com/docs"))
        assert item.type == "bookmark"
        assert item.url == "https://example.com/docs"
        assert "example.com" in item.favicon_url
        assert item.content is None
        assert item.file_url is None

    def test_note_defaults_to_empty_content(self, service):
        folder = service.create_folder("Notes")
        item = service.create_item(folder.id, "empty", NotePayload())
        assert item.content == ""
        assert item.url is None

    def test_list_items_of_unknown_folder_raises(self, service):
        with pytest.raises(FolderNotFoundError):
            service.list_items("folder-missing")

    def test_update_content_of_bookmark_rejected(self, service):
        folder = service.create_folder("Links")
        item = service.create_item(folder.id, "b", BookmarkPayload(url="example.com"))
        with pytest.raises(ValidationError):
            service.update_item(folder.id, item.id, content="nope")

    def test_update_url_refreshes_favicon(self, service):
        folder = service.create_folder("Links")
        item = service.create_item(folder.id, "b", BookmarkPayload(url="example.com"))
        updated = service.update_item(folder.id, item.id, url="python.org")
        assert updated.url == "https://python.org"
        assert "python.org" in updated.favicon_url

    def test_update_is_scoped_to_folder(self, service):
        a = service.create_folder("A")
        b = service.create_folder("B")
        item = service.create_item(a.id, "n", NotePayload())
        with pytest.raises(FolderItemNotFoundError):
            service.update_item(b.id, item.id, name="moved?")

    def test_update_never_changes_type_or_folder(self, service):
        folder = service.create_folder("A")
        item = service.create_item(folder.id, "n", NotePayload(content="x"))
        updated = service.update_item(folder.id, item.id, name="renamed", content="y")
        assert (updated.type, updated.folder_id) == ("note", folder.id)

    def test_delete_in_wrong_folder_is_noop(self, service):
        a = service.create_folder("A")
        b = service.create_folder("B")
        item = service.create_item(a.id, "n", NotePayload())

        service.delete_item(b.id, item.id)

        assert [i.id for i in service.list_items(a.id)] == [item.id]

    def test_upload_requires_configured_storage(self, service, storage):
        folder = service.create_folder("Files")
        storage.configured = False
        with pytest.raises(ExternalServiceError) as exc_info:
            service.upload_file_item(folder.id, b"data", "a.txt")
        assert exc_info.value.category == ServiceFailure.NOT_CONFIGURED

    def test_upload_to_unknown_folder_does_not_upload(self, service, storage):
        with pytest.raises(FolderNotFoundError):
            service.upload_file_item("folder-missing", b"data", "a.txt")
        assert storage.objects == {}
