from gorevlerim.services.parsing import extract_subtasks, split_titles


class TestSplitTitles:
    def test_single_title(self):
        assert split_titles("Groceries") == ["Groceries"]

    def test_comma_separated_trimmed(self):
        assert split_titles("Groceries,  Laundry , Pay bills") == ["Groceries", "Laundry", "Pay bills"]

    def test_drops_blank_entries(self):
        assert split_titles("A, ,B,,") == ["A", "B"]

    def test_blank_string(self):
        assert split_titles(" , ") == []


class TestExtractSubtasks:
    def test_mixed_description(self):
        description, subtasks = extract_subtasks("* Buy milk\nPlan trip\n* Call mom")
        assert description == "Plan trip"
        assert subtasks == ["Buy milk", "Call mom"]

    def test_no_markers(self):
        assert extract_subtasks("Just notes\nmore") == ("Just notes\nmore", [])

    def test_only_markers_gives_no_description(self):
        assert extract_subtasks("* One\n* Two") == (None, ["One", "Two"])

    def test_indented_marker(self):
        assert extract_subtasks("   * Indented  ") == (None, ["Indented"])

    def test_marker_needs_space(self):
        assert extract_subtasks("*bold*") == ("*bold*", [])

    def test_empty_or_missing(self):
        assert extract_subtasks(None) == (None, [])
        assert extract_subtasks("") == (None, [])

    def test_keeps_inner_blank_lines(self):
        description, _ = extract_subtasks("\nFirst\n\n* Sub\nSecond\n")
        assert description == "First\n\nSecond"
