#!/usr/bin/env python3

import os
import unittest

from expecttest import TestCase

from commitflow.status import RepoStatus, inspect, parse_porcelain_status
from commitflow.testing import GitTestCase


class TestParsePorcelainStatus(TestCase):
    def test_empty(self):
        self.assertEqual(parse_porcelain_status(""), (frozenset(), frozenset()))

    def test_columns(self):
        output = "M  staged.py\0 M modified.py\0MM both.py\0?? new.txt\0"
        working_tree, staged = parse_porcelain_status(output)
        self.assertEqual(working_tree, {"modified.py", "both.py", "new.txt"})
        self.assertEqual(staged, {"staged.py", "both.py", "new.txt"})

    def test_rename_skips_source_path(self):
        output = "R  new name.py\0old name.py\0 D gone.py\0"
        working_tree, staged = parse_porcelain_status(output)
        self.assertEqual(staged, {"new name.py"})
        self.assertEqual(working_tree, {"gone.py"})


class TestRepoStatus(TestCase):
    def test_predicates(self):
        clean = RepoStatus()
        self.assertFalse(clean.has_pending_changes)

        staged = RepoStatus(staged_files=frozenset({"a.py"}))
        self.assertTrue(staged.has_staged_changes)
        self.assertFalse(staged.has_working_tree_changes)
        self.assertTrue(staged.has_pending_changes)

    def test_after_unshelve_moves_staged_to_working_tree(self):
        status = RepoStatus(
            working_tree_files=frozenset({"a.py"}),
            staged_files=frozenset({"b.py"}),
        )
        restored = status.after_unshelve()
        self.assertEqual(restored.working_tree_files, {"a.py", "b.py"})
        self.assertFalse(restored.has_staged_changes)
        # the original snapshot is untouched
        self.assertEqual(status.staged_files, {"b.py"})


class TestInspect(GitTestCase):
    async def test_clean_repository(self):
        status = await inspect(self.repo)
        self.assertFalse(status.has_pending_changes)

    async def test_working_tree_change(self):
        self.write_file(self.work_dir, "notes.txt", "changed\n")
        status = await inspect(self.repo)
        self.assertEqual(status.working_tree_files, {"notes.txt"})
        self.assertFalse(status.has_staged_changes)

    async def test_staged_change(self):
        self.write_file(self.work_dir, "notes.txt", "changed\n")
        await self.git_run(["add", "notes.txt"], cwd=self.work_dir)
        status = await inspect(self.repo)
        self.assertEqual(status.staged_files, {"notes.txt"})
        self.assertFalse(status.has_working_tree_changes)

    async def test_untracked_file_counts_on_both_sides(self):
        self.write_file(self.work_dir, "new.txt", "hello\n")
        status = await inspect(self.repo)
        self.assertIn("new.txt", status.working_tree_files)
        self.assertIn("new.txt", status.staged_files)

    async def test_deleted_file(self):
        os.remove(os.path.join(self.work_dir, "README.md"))
        status = await inspect(self.repo)
        self.assertEqual(status.working_tree_files, {"README.md"})


if __name__ == "__main__":
    unittest.main()
