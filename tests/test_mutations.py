import random

from linkpad.core.model import ROOT_FOLDER_ID, Document, Entry
from linkpad.core.mutations import (
    add_entry,
    create_folder,
    delete_entry,
    delete_folder,
    move_entry,
    move_folder,
    rename_folder,
    toggle_folder_collapsed,
)
from linkpad.core.navigator import (
    all_entries,
    find_entry,
    find_folder,
    find_parent_folder,
    is_descendant,
    iter_folders,
    locate_entry,
)


def _folder_ids(root):
    return [f.id for f in iter_folders(root)]


def _entry_ids(root):
    return [e.id for e in all_entries(root)]


class TestCreateFolder:
    def test_inserts_at_front(self, sample_document):
        root = sample_document.root_folder
        new_id = create_folder(root, "Fresh")
        assert [f.id for f in root.subfolders] == [new_id, "f-work"]
        assert find_folder(root, new_id).name == "Fresh"

    def test_nested_parent(self, sample_document):
        root = sample_document.root_folder
        new_id = create_folder(root, "Deep", "f-projects")
        assert find_parent_folder(root, new_id).id == "f-projects"

    def test_unknown_parent_is_noop(self, sample_document):
        before = sample_document.snapshot()
        assert create_folder(sample_document.root_folder, "Lost", "ghost") is None
        assert sample_document == before


class TestRenameFolder:
    def test_rename(self, sample_document):
        assert rename_folder(sample_document.root_folder, "f-work", "Office")
        assert find_folder(sample_document.root_folder, "f-work").name == "Office"

    def test_root_cannot_be_renamed(self, sample_document):
        root = sample_document.root_folder
        name = root.name
        assert not rename_folder(root, ROOT_FOLDER_ID, "Other")
        assert root.name == name

    def test_blank_name_is_noop(self, sample_document):
        assert not rename_folder(sample_document.root_folder, "f-work", "   ")
        assert find_folder(sample_document.root_folder, "f-work").name == "Work"

    def test_unknown_folder(self, sample_document):
        assert not rename_folder(sample_document.root_folder, "ghost", "Name")


class TestDeleteFolder:
    def test_root_delete_is_noop(self, sample_document):
        before = sample_document.snapshot()
        assert not delete_folder(sample_document.root_folder, ROOT_FOLDER_ID)
        assert sample_document == before

    def test_delete_cascades(self, sample_document):
        root = sample_document.root_folder
        assert delete_folder(root, "f-work")
        assert _folder_ids(root) == [ROOT_FOLDER_ID]
        assert _entry_ids(root) == ["e-root"]

    def test_delete_unknown(self, sample_document):
        assert not delete_folder(sample_document.root_folder, "ghost")


class TestToggleCollapsed:
    def test_toggle_flips(self, sample_document):
        root = sample_document.root_folder
        assert toggle_folder_collapsed(root, "f-work")
        assert find_folder(root, "f-work").is_collapsed
        assert toggle_folder_collapsed(root, "f-work")
        assert not find_folder(root, "f-work").is_collapsed

    def test_root_never_collapses(self, sample_document):
        assert not toggle_folder_collapsed(sample_document.root_folder, ROOT_FOLDER_ID)
        assert not sample_document.root_folder.is_collapsed


class TestEntries:
    def test_add_appends(self, sample_document):
        root = sample_document.root_folder
        entry = Entry.new("https://new.example.com")
        assert add_entry(root, entry, "f-work")
        assert find_folder(root, "f-work").entries[-1] is entry

    def test_add_defaults_to_root(self):
        document = Document.new()
        entry = Entry.new("/tmp/file.txt")
        assert add_entry(document.root_folder, entry)
        assert document.root_folder.entries == [entry]

    def test_add_to_unknown_folder(self, sample_document):
        before = sample_document.snapshot()
        assert not add_entry(sample_document.root_folder, Entry.new("x"), "ghost")
        assert sample_document == before

    def test_add_refuses_id_already_in_tree(self, sample_document):
        root = sample_document.root_folder
        entry = Entry.new("https://once.example.com")
        assert add_entry(root, entry)
        assert not add_entry(root, entry, "f-work")
        ids = [e.id for e in all_entries(root)]
        assert ids.count(entry.id) == 1
        assert find_folder(root, "f-work").entries[-1].id == "e-work"

    def test_delete_entry_is_idempotent(self, sample_document):
        root = sample_document.root_folder
        assert delete_entry(root, "e-work")
        after_first = sample_document.snapshot()
        assert not delete_entry(root, "e-work")
        assert sample_document == after_first
        assert find_entry(root, "e-work") is None


class TestMoveEntry:
    def test_move_appends_to_destination(self, sample_document):
        root = sample_document.root_folder
        assert move_entry(root, "e-root", "f-projects")
        assert [e.id for e in find_folder(root, "f-projects").entries] == ["e-projects", "e-root"]
        assert root.entries == []

    def test_missing_destination_keeps_entry(self, sample_document):
        root = sample_document.root_folder
        before = sample_document.snapshot()
        assert not move_entry(root, "e-work", "ghost")
        assert sample_document == before
        assert locate_entry(root, "e-work")[0].id == "f-work"

    def test_missing_entry(self, sample_document):
        before = sample_document.snapshot()
        assert not move_entry(sample_document.root_folder, "ghost", "f-work")
        assert sample_document == before

    def test_entry_lives_in_exactly_one_place(self, sample_document):
        root = sample_document.root_folder
        destinations = ["f-work", "ghost", ROOT_FOLDER_ID, "f-projects", "e-root"]
        for dest in destinations:
            move_entry(root, "e-work", dest)
            ids = _entry_ids(root)
            assert ids.count("e-work") == 1
            assert len(ids) == 3


class TestMoveFolder:
    def test_move_to_front_of_destination(self, sample_document):
        root = sample_document.root_folder
        other = create_folder(root, "Other")
        assert move_folder(root, "f-projects", other)
        assert find_parent_folder(root, "f-projects").id == other
        assert find_folder(root, "f-work").subfolders == []

        sibling = create_folder(root, "Sibling")
        assert move_folder(root, sibling, other)
        assert [f.id for f in find_folder(root, other).subfolders] == [sibling, "f-projects"]

    def test_move_into_self_is_noop(self):
        document = Document.new()
        root = document.root_folder
        a = create_folder(root, "A")
        add_entry(root, Entry.new("http://x.com"), a)
        before = document.snapshot()

        assert not move_folder(root, a, a)
        assert document == before
        assert find_parent_folder(root, a) is root

    def test_move_into_descendant_is_noop(self):
        document = Document.new()
        root = document.root_folder
        a = create_folder(root, "A")
        add_entry(root, Entry.new("http://x.com"), a)
        child = create_folder(root, "Child", a)
        before = document.snapshot()

        assert not move_folder(root, a, child)
        assert document == before

    def test_root_cannot_move(self, sample_document):
        assert not move_folder(sample_document.root_folder, ROOT_FOLDER_ID, "f-work")

    def test_unknown_ids(self, sample_document):
        before = sample_document.snapshot()
        assert not move_folder(sample_document.root_folder, "ghost", "f-work")
        assert not move_folder(sample_document.root_folder, "f-projects", "ghost")
        assert sample_document == before

    def test_random_moves_keep_a_tree(self):
        rng = random.Random(1234)
        document = Document.new()
        root = document.root_folder
        ids = [ROOT_FOLDER_ID]

        for step in range(400):
            if rng.random() < 0.35 or len(ids) < 3:
                new_id = create_folder(root, f"F{step}", rng.choice(ids))
                ids.append(new_id)
            else:
                move_folder(root, rng.choice(ids), rng.choice(ids))

            seen = _folder_ids(root)
            # Every folder is reachable exactly once from root.
            assert sorted(seen) == sorted(ids)
            for folder_id in ids:
                assert not is_descendant(root, folder_id, folder_id)
