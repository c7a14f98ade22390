from linkpad.core.model import ROOT_FOLDER_ID
from linkpad.core.navigator import (
    all_entries,
    count_items,
    find_containing_folder_id,
    find_entry,
    find_folder,
    find_parent_folder,
    is_descendant,
    iter_folders,
    locate_entry,
)


class TestFind:
    def test_find_folder(self, sample_document):
        root = sample_document.root_folder
        assert find_folder(root, ROOT_FOLDER_ID) is root
        assert find_folder(root, "f-projects").name == "Projects"
        assert find_folder(root, "nope") is None

    def test_find_entry(self, sample_document):
        root = sample_document.root_folder
        assert find_entry(root, "e-projects").text == "https://projects.example.com"
        assert find_entry(root, "f-work") is None
        assert find_entry(root, "nope") is None

    def test_find_parent_folder(self, sample_document):
        root = sample_document.root_folder
        assert find_parent_folder(root, "f-projects").id == "f-work"
        assert find_parent_folder(root, "f-work") is root
        assert find_parent_folder(root, ROOT_FOLDER_ID) is None

    def test_locate_entry(self, sample_document):
        folder, idx = locate_entry(sample_document.root_folder, "e-work")
        assert folder.id == "f-work"
        assert idx == 0

    def test_traversal_is_depth_first_self_first(self, sample_document):
        ids = [f.id for f in iter_folders(sample_document.root_folder)]
        assert ids == [ROOT_FOLDER_ID, "f-work", "f-projects"]
        texts = [e.id for e in all_entries(sample_document.root_folder)]
        assert texts == ["e-root", "e-work", "e-projects"]

    def test_count_items(self, sample_document):
        assert count_items(sample_document.root_folder) == (2, 3)


class TestContainingFolder:
    def test_folder_id_returns_itself(self, sample_document):
        assert find_containing_folder_id(sample_document.root_folder, "f-work") == "f-work"

    def test_entry_id_returns_holder(self, sample_document):
        assert find_containing_folder_id(sample_document.root_folder, "e-projects") == "f-projects"
        assert find_containing_folder_id(sample_document.root_folder, "e-root") == ROOT_FOLDER_ID

    def test_unknown_id_returns_root(self, sample_document):
        assert find_containing_folder_id(sample_document.root_folder, "ghost") == ROOT_FOLDER_ID


class TestIsDescendant:
    def test_child_and_grandchild(self, sample_document):
        root = sample_document.root_folder
        assert is_descendant(root, "f-work", ROOT_FOLDER_ID)
        assert is_descendant(root, "f-projects", ROOT_FOLDER_ID)
        assert is_descendant(root, "f-projects", "f-work")

    def test_not_its_own_descendant(self, sample_document):
        root = sample_document.root_folder
        assert not is_descendant(root, "f-work", "f-work")
        assert not is_descendant(root, ROOT_FOLDER_ID, ROOT_FOLDER_ID)

    def test_ancestor_is_not_descendant(self, sample_document):
        root = sample_document.root_folder
        assert not is_descendant(root, "f-work", "f-projects")
        assert not is_descendant(root, ROOT_FOLDER_ID, "f-work")

    def test_unknown_ids(self, sample_document):
        root = sample_document.root_folder
        assert not is_descendant(root, "ghost", "f-work")
        assert not is_descendant(root, "f-work", "ghost")
