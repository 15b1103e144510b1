import os
import tempfile
import unittest
from unittest import mock

from helpers import make_executable, make_plain_file

from pipesh.builtins import BUILTIN_NAMES
from pipesh.path_cache import SearchPathCache
from pipesh.resolver import (
    NOT_FOUND,
    BuiltinResolution,
    CommandResolver,
    ExternalResolution,
)


class TestCommandResolver(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.first = os.path.join(self.temp_dir.name, "first")
        self.second = os.path.join(self.temp_dir.name, "second")
        os.mkdir(self.first)
        os.mkdir(self.second)
        self.path_value = os.pathsep.join([self.first, self.second])
        self.env = mock.patch.dict(os.environ, {"PATH": self.path_value})
        self.env.start()
        self.resolver = CommandResolver(SearchPathCache())

    def tearDown(self):
        self.env.stop()
        self.temp_dir.cleanup()

    def test_builtin_set(self):
        self.assertEqual(
            set(BUILTIN_NAMES), {"exit", "echo", "pwd", "cd", "type", "history"}
        )

    def test_builtin_shadows_external(self):
        make_executable(self.first, "echo")
        resolution = self.resolver.resolve("echo")
        self.assertIsInstance(resolution, BuiltinResolution)
        self.assertEqual(resolution.builtin.name, "echo")

    def test_first_directory_wins(self):
        make_executable(self.second, "tool")
        expected = make_executable(self.first, "tool")
        resolution = self.resolver.resolve("tool")
        self.assertIsInstance(resolution, ExternalResolution)
        self.assertEqual(resolution.path, expected)

    def test_skips_non_executable_and_directories(self):
        make_plain_file(self.first, "tool")
        os.mkdir(os.path.join(self.first, "tooldir"))
        expected = make_executable(self.second, "tool")
        self.assertEqual(self.resolver.resolve("tool").path, expected)
        self.assertIs(self.resolver.resolve("tooldir"), NOT_FOUND)

    def test_not_found(self):
        resolution = self.resolver.resolve("definitely_missing_cmd")
        self.assertIs(resolution, NOT_FOUND)
        self.assertFalse(resolution)

    def test_executable_added_after_cache_build(self):
        """La cache es solo una optimizacion: un binario nuevo se encuentra igual"""
        self.resolver.resolve("anything")
        expected = make_executable(self.second, "late_tool")
        self.assertEqual(self.resolver.find_external("late_tool"), expected)

    def test_path_with_slash(self):
        path = make_executable(self.temp_dir.name, "direct")
        self.assertEqual(self.resolver.resolve(path).path, path)
        self.assertIs(self.resolver.resolve(path + "_missing"), NOT_FOUND)

    def test_path_change_is_seen(self):
        make_executable(self.second, "only_second")
        self.assertIsNotNone(self.resolver.find_external("only_second"))
        with mock.patch.dict(os.environ, {"PATH": self.first}):
            self.assertIsNone(self.resolver.find_external("only_second"))


class TestSearchPathCache(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_keyed_by_path_value(self):
        make_executable(self.temp_dir.name, "alpha")
        cache = SearchPathCache(maxsize=2)
        index = cache.executables(self.temp_dir.name)
        self.assertIn("alpha", index)
        self.assertIs(cache.executables(self.temp_dir.name), index)

        cache.executables(self.temp_dir.name + os.pathsep + "/nonexistent")
        cache.executables("/nonexistent")
        self.assertEqual(len(cache), 2)


if __name__ == "__main__":
    unittest.main()
