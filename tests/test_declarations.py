"""Tests for the declaration tree."""

from testplan.core.declarations import ConfigurationEntry, SuiteDeclaration, TestDeclaration, TestRun


class TestSuiteDeclaration:
    """Tests for SuiteDeclaration."""

    def test_entries_keep_declaration_order(self, nested_suite):
        """Test that suites and tests are views over ordered entries."""
        assert [e.title for e in nested_suite.entries] == ["first", "B", "fourth"]
        assert [s.title for s in nested_suite.suites] == ["B"]
        assert [t.title for t in nested_suite.tests] == ["first", "fourth"]

    def test_all_tests_is_depth_first(self, nested_suite):
        """Test that all_tests walks nested suites in place."""
        titles = [t.title for t in nested_suite.all_tests()]
        assert titles == ["first", "second", "third", "fourth"]

    def test_full_title(self, nested_suite):
        """Test that full titles join the suite chain."""
        second = nested_suite.suites[0].tests[0]
        assert second.full_title() == "A B second"
        assert nested_suite.suites[0].full_title() == "A B"

    def test_full_title_skips_untitled_root(self, nested_suite):
        """Test that an untitled root does not add whitespace."""
        root = SuiteDeclaration("")
        root.add_suite(nested_suite)
        assert nested_suite.tests[0].full_title() == "A first"

    def test_renumber_is_preorder(self, nested_suite):
        """Test that ordinals are unique and follow declaration order."""
        next_ordinal = nested_suite.renumber(10)

        inner = nested_suite.suites[0]
        assert nested_suite.ordinal == 10
        assert [t.ordinal for t in nested_suite.all_tests()] == [11, 13, 14, 15]
        assert inner.ordinal == 12
        assert next_ordinal == 16

    def test_clone_is_independent(self, nested_suite):
        """Test that cloning copies the structure without runs."""
        original_test = nested_suite.tests[0]
        original_test.runs.append(TestRun(test=original_test))

        copy = nested_suite.clone()

        assert copy is not nested_suite
        assert [t.title for t in copy.all_tests()] == ["first", "second", "third", "fourth"]
        assert all(not t.runs for t in copy.all_tests())
        assert copy.tests[0] is not original_test
        assert copy.tests[0].fn is original_test.fn
        assert copy.suites[0].parent is copy
        assert copy.suites[0].tests[0].full_title() == "A B second"


class TestTestDeclaration:
    """Tests for TestDeclaration."""

    def test_identity_hashable(self):
        """Test that equal-looking declarations are distinct set members."""
        a = TestDeclaration("same")
        b = TestDeclaration("same")
        assert len({a, b}) == 2

    def test_title_without_parent(self):
        """Test full title of a detached test."""
        assert TestDeclaration("lonely").full_title() == "lonely"


class TestTestRun:
    """Tests for TestRun."""

    def test_affinity_hash(self):
        """Test that the affinity hash is the key before the first '@'."""
        run = TestRun(test=TestDeclaration("t"), worker_hash="abc@x=a@b#repeat-0#")
        assert run.affinity_hash == "abc"

    def test_to_dict(self):
        """Test converting to dictionary."""
        suite = SuiteDeclaration("A", file="a.spec")
        test = suite.add_test(TestDeclaration("t", file="a.spec", location="a.spec:3"))
        run = TestRun(
            test=test,
            configuration=[ConfigurationEntry("browser", "firefox")],
            configuration_string="browser=firefox#repeat-0#",
            worker_hash="h@browser=firefox#repeat-0#",
        )

        d = run.to_dict()
        assert d["title"] == "A t"
        assert d["location"] == "a.spec:3"
        assert d["configuration"] == [{"name": "browser", "value": "firefox"}]
        assert d["worker_hash"] == "h@browser=firefox#repeat-0#"
