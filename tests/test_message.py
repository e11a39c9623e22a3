#!/usr/bin/env python3

import unittest

from expecttest import TestCase

from commitflow.message import (
    DEFAULT_CATALOG,
    CommitAnswer,
    CommitCatalog,
    CommitTypeSpec,
    build_prompt,
    compose,
    validate_subject,
)


class TestCompose(TestCase):
    """Test cases for building the commit message text."""

    def test_subject_only(self):
        answer = CommitAnswer(commit_type="feat", subject="add login", body="")
        self.assertEqual(compose(answer, DEFAULT_CATALOG), "feat: ✨ add login")

    def test_subject_and_body(self):
        answer = CommitAnswer(commit_type="feat", subject="add login", body="fixes #42")
        self.assertEqual(
            compose(answer, DEFAULT_CATALOG), "feat: ✨ add login\n\nfixes #42"
        )

    def test_answer_is_trimmed(self):
        answer = CommitAnswer(
            commit_type="fix", subject="  handle empty input \n", body="\n  details  \n"
        )
        self.assertExpectedInline(
            compose(answer, DEFAULT_CATALOG),
            """\
fix: 🐛 handle empty input

details""",
        )

    def test_whitespace_body_means_no_body(self):
        answer = CommitAnswer(commit_type="docs", subject="update readme", body="   ")
        self.assertEqual(compose(answer, DEFAULT_CATALOG), "docs: 📝 update readme")

    def test_multiline_body(self):
        answer = CommitAnswer(
            commit_type="refactor",
            subject="split parser",
            body="- move lexer\n- move grammar",
        )
        self.assertExpectedInline(
            compose(answer, DEFAULT_CATALOG),
            """\
refactor: 🔨 split parser

- move lexer
- move grammar""",
        )

    def test_unknown_type(self):
        answer = CommitAnswer(commit_type="wip", subject="stuff")
        with self.assertRaises(KeyError):
            compose(answer, DEFAULT_CATALOG)


class TestSubjectValidation(TestCase):
    def test_whitespace_subject_rejected(self):
        with self.assertRaises(ValueError):
            validate_subject("   ")

    def test_empty_subject_rejected(self):
        with self.assertRaises(ValueError):
            validate_subject("")

    def test_answer_with_blank_subject_rejected(self):
        with self.assertRaises(ValueError):
            CommitAnswer(commit_type="feat", subject=" \t ")

    def test_subject_trimmed(self):
        self.assertEqual(validate_subject("  add login\n"), "add login")


class TestCatalog(TestCase):
    def test_default_catalog_order(self):
        self.assertEqual(
            DEFAULT_CATALOG.labels,
            ("feat", "fix", "refactor", "chore", "docs", "style", "test"),
        )
        self.assertEqual(DEFAULT_CATALOG.default, "feat")

    def test_symbol_for_includes_separator(self):
        self.assertEqual(DEFAULT_CATALOG.symbol_for("feat"), "✨ ")
        self.assertEqual(DEFAULT_CATALOG.symbol_for("test"), "✅ ")

    def test_duplicate_label_rejected(self):
        with self.assertRaises(ValueError):
            CommitCatalog(
                [CommitTypeSpec("feat", "a", ""), CommitTypeSpec("feat", "b", "")]
            )

    def test_duplicate_symbol_rejected(self):
        with self.assertRaises(ValueError):
            CommitCatalog(
                [CommitTypeSpec("feat", "a", ""), CommitTypeSpec("fix", "a", "")]
            )

    def test_unknown_default_rejected(self):
        with self.assertRaises(ValueError):
            CommitCatalog([CommitTypeSpec("feat", "a", "")], default="fix")

    def test_empty_catalog_rejected(self):
        with self.assertRaises(ValueError):
            CommitCatalog([])

    def test_default_falls_back_to_first_entry(self):
        catalog = CommitCatalog(
            [CommitTypeSpec("fix", "a", ""), CommitTypeSpec("feat", "b", "")]
        )
        self.assertEqual(catalog.default, "fix")


class TestBuildPrompt(TestCase):
    def test_default_catalog_rows(self):
        spec = build_prompt(DEFAULT_CATALOG)
        self.assertEqual(spec.default, "feat")
        self.assertEqual(
            [c.value for c in spec.choices], list(DEFAULT_CATALOG.labels)
        )
        self.assertExpectedInline(
            "\n".join(c.name for c in spec.choices),
            """\
- feat     ✨ A new feature
- fix      🐛 A bug fix
- refactor 🔨 A code change that neither fixes a bug nor adds a feature
- chore    🔧 Changes to the build process or auxiliary tools
- docs     📝 Documentation only changes
- style    🎨 Formatting that does not affect how the code runs
- test     ✅ Adding tests""",
        )

    def test_label_field_has_uniform_width(self):
        labels = ["abcd", "abcde", "abcdefghi", "abcdef", "wxyz", "vwxyz", "stuv"]
        catalog = CommitCatalog(
            CommitTypeSpec(label, f"s{i}", f"description {i}")
            for i, label in enumerate(labels)
        )
        spec = build_prompt(catalog)
        for choice, label in zip(spec.choices, labels):
            self.assertTrue(choice.name.startswith("- "))
            label_field = choice.name[2 : 2 + 9]
            self.assertEqual(label_field, label.ljust(9))
            self.assertEqual(choice.name[2 + 9], " ")


if __name__ == "__main__":
    unittest.main()
