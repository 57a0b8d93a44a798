import unittest
from pathlib import Path
from unittest.mock import patch

from opencode_antigravity_sync.errors import NoHomeDirectory
from opencode_antigravity_sync.paths import (
    get_config_paths,
    get_home_dir,
    get_opencode_dir,
)


class TestPaths(unittest.TestCase):
    def test_get_home_dir_linux_uses_home(self):
        with (
            patch("opencode_antigravity_sync.paths.platform.system", return_value="Linux"),
            patch.dict(
                "opencode_antigravity_sync.paths.os.environ",
                {"HOME": "/home/test", "USERPROFILE": "/other"},
                clear=True,
            ),
        ):
            self.assertEqual(get_home_dir(), Path("/home/test"))

    def test_get_home_dir_windows_uses_userprofile(self):
        with (
            patch(
                "opencode_antigravity_sync.paths.platform.system", return_value="Windows"
            ),
            patch.dict(
                "opencode_antigravity_sync.paths.os.environ",
                {"USERPROFILE": "C:/Users/Test", "HOME": "/home/other"},
                clear=True,
            ),
        ):
            self.assertEqual(get_home_dir(), Path("C:/Users/Test"))

    def test_get_home_dir_falls_back_to_other_variable(self):
        with (
            patch("opencode_antigravity_sync.paths.platform.system", return_value="Linux"),
            patch.dict(
                "opencode_antigravity_sync.paths.os.environ",
                {"HOME": "", "USERPROFILE": "/profile"},
                clear=True,
            ),
        ):
            self.assertEqual(get_home_dir(), Path("/profile"))

    def test_get_home_dir_missing(self):
        with patch.dict("opencode_antigravity_sync.paths.os.environ", {}, clear=True):
            with self.assertRaises(NoHomeDirectory):
                get_home_dir()

    def test_get_home_dir_empty_strings(self):
        with patch.dict(
            "opencode_antigravity_sync.paths.os.environ",
            {"HOME": "", "USERPROFILE": ""},
            clear=True,
        ):
            with self.assertRaises(NoHomeDirectory):
                get_home_dir()

    def test_get_config_paths(self):
        with (
            patch("opencode_antigravity_sync.paths.platform.system", return_value="Linux"),
            patch.dict(
                "opencode_antigravity_sync.paths.os.environ",
                {"HOME": "/home/test"},
                clear=True,
            ),
        ):
            config, ag_config, accounts = get_config_paths()
        base = Path("/home/test/.config/opencode")
        self.assertEqual(config, base / "opencode.json")
        self.assertEqual(ag_config, base / "antigravity.json")
        self.assertEqual(accounts, base / "antigravity-accounts.json")

    def test_get_opencode_dir_override_skips_environment(self):
        with patch.dict("opencode_antigravity_sync.paths.os.environ", {}, clear=True):
            self.assertEqual(get_opencode_dir("/tmp/oc"), Path("/tmp/oc"))


if __name__ == "__main__":
    unittest.main()
