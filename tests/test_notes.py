from linkpad.core.notes import FindState, find_matches, replace_all, replace_match


class TestFindMatches:
    def test_case_insensitive_by_default(self):
        assert find_matches("Cat cat CAT", "cat") == [(0, 3), (4, 7), (8, 11)]

    def test_case_sensitive(self):
        assert find_matches("Cat cat CAT", "cat", case_sensitive=True) == [(4, 7)]

    def test_whole_words(self):
        assert find_matches("cat concat cats cat.", "cat", whole_words=True) == [(0, 3), (16, 19)]

    def test_query_is_literal(self):
        assert find_matches("a.b axb", "a.b") == [(0, 3)]

    def test_empty_query(self):
        assert find_matches("anything", "") == []


class TestReplace:
    def test_replace_match(self):
        assert replace_match("hello world", (6, 11), "there") == "hello there"

    def test_replace_all(self):
        assert replace_all("a A a", "a", "b") == ("b b b", 3)
        assert replace_all("a A a", "a", "b", case_sensitive=True) == ("b A b", 2)

    def test_replacement_is_literal(self):
        assert replace_all("x", "x", r"\1") == (r"\1", 1)


class TestFindState:
    def test_navigation_wraps(self):
        state = FindState("one two one two one", query="one")
        assert state.current == 0
        assert state.find_next() == 1
        assert state.find_next() == 2
        assert state.find_next() == 0
        assert state.find_previous() == 2

    def test_no_matches(self):
        state = FindState("text", query="zzz")
        assert state.current == -1
        assert state.find_next() == -1
        assert not state.replace_current("x")

    def test_replace_current_keeps_cursor_in_range(self):
        state = FindState("a b a b a", query="a")
        state.find_next()
        state.find_next()
        assert state.replace_current("z")
        assert state.text == "a b a b z"
        assert len(state.matches) == 2
        assert state.current == 1

    def test_replace_all_clears_matches(self):
        state = FindState("a b a", query="a")
        assert state.replace_all("c") == 2
        assert state.text == "c b c"
        assert state.matches == []
        assert state.current == -1
