import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from opencode_antigravity_sync.accounts import (
    Account,
    build_plugin_account,
    export_accounts,
    load_accounts,
)
from opencode_antigravity_sync.errors import NoEnabledAccounts

ACCOUNTS = [
    Account(id="a", family="claude", enabled=True, email="a@example.com", refresh_token="rt-a"),
    Account(id="b", family="gemini", enabled=False, email="b@example.com", refresh_token="rt-b"),
    Account(id="c", family="gemini", enabled=True, email="c@example.com", refresh_token="rt-c"),
]


class TestAccounts(unittest.TestCase):
    def test_export_scenario(self):
        export = export_accounts(ACCOUNTS, active_account_id="a")

        self.assertEqual(export["version"], 3)
        self.assertEqual(
            [acc["email"] for acc in export["accounts"]], ["a@example.com", "c@example.com"]
        )
        self.assertEqual(export["activeIndex"], 0)
        self.assertEqual(export["activeIndexByFamily"], {"claude": 0, "gemini": 0})

    def test_export_never_includes_disabled(self):
        export = export_accounts(ACCOUNTS)
        tokens = [acc["refreshToken"] for acc in export["accounts"]]
        self.assertNotIn("rt-b", tokens)

    def test_active_index_within_family(self):
        accounts = [
            Account(id="g1", family="gemini", refresh_token="1"),
            Account(id="c1", family="claude", refresh_token="2"),
            Account(id="g2", family="gemini", refresh_token="3"),
        ]
        export = export_accounts(accounts, active_account_id="g2")
        self.assertEqual(export["activeIndex"], 2)
        self.assertEqual(export["activeIndexByFamily"], {"claude": 0, "gemini": 1})

    def test_empty_export(self):
        with redirect_stdout(io.StringIO()) as out:
            export = export_accounts([Account(id="x", family="claude", enabled=False)])
        self.assertEqual(export["accounts"], [])
        self.assertEqual(export["activeIndex"], -1)
        self.assertEqual(export["activeIndexByFamily"], {"claude": 0, "gemini": 0})
        self.assertIn(f"Warning: {NoEnabledAccounts()}", out.getvalue())

    def test_previous_active_index_is_clamped(self):
        previous = {"activeIndex": 7, "activeIndexByFamily": {"gemini": 5}}
        export = export_accounts(ACCOUNTS, previous=previous)
        self.assertEqual(export["activeIndex"], 1)
        self.assertEqual(export["activeIndexByFamily"], {"claude": 0, "gemini": 0})

    def test_unknown_active_id_falls_back(self):
        export = export_accounts(ACCOUNTS, active_account_id="missing")
        self.assertEqual(export["activeIndex"], 0)

    def test_other_family_exported_but_not_indexed(self):
        accounts = [
            Account(id="o", family="openai", refresh_token="o"),
            Account(id="c", family="claude", refresh_token="c"),
        ]
        export = export_accounts(accounts, active_account_id="o")
        self.assertEqual(len(export["accounts"]), 2)
        self.assertEqual(export["activeIndex"], 0)
        self.assertEqual(set(export["activeIndexByFamily"]), {"claude", "gemini"})

    def test_active_index_bounds(self):
        for active in (None, "a", "b", "c", "zzz"):
            for previous in (None, {"activeIndex": -4}, {"activeIndex": 99}):
                with self.subTest(active=active, previous=previous):
                    export = export_accounts(ACCOUNTS, active, previous)
                    self.assertGreaterEqual(export["activeIndex"], -1)
                    self.assertLessEqual(export["activeIndex"], len(export["accounts"]) - 1)

    def test_previous_state_is_preserved(self):
        previous = {
            "accounts": [
                {
                    "email": "c@example.com",
                    "refreshToken": "old-token",
                    "addedAt": 100,
                    "lastUsed": 500,
                    "rateLimitResetTimes": {"claude": 123},
                    "fingerprint": {"id": "fp"},
                }
            ]
        }
        export = export_accounts(ACCOUNTS, previous=previous)
        record = export["accounts"][1]
        self.assertEqual(record["refreshToken"], "rt-c")
        self.assertEqual(record["addedAt"], 100)
        self.assertEqual(record["lastUsed"], 500)
        self.assertEqual(record["rateLimitResetTimes"], {"claude": 123})
        self.assertEqual(record["fingerprint"], {"id": "fp"})

    def test_build_plugin_account_new(self):
        record = build_plugin_account(
            Account(id="n", family="claude", refresh_token="rt", project_id="p", last_used=9)
        )
        self.assertEqual(record["refreshToken"], "rt")
        self.assertEqual(record["projectId"], "p")
        self.assertEqual(record["lastUsed"], 9)
        self.assertNotIn("email", record)
        self.assertIsInstance(record["addedAt"], int)

    def test_load_accounts(self):
        payload = [
            {"id": "a", "family": "claude", "email": "a@example.com", "refresh_token": "rt-a"},
            {
                "email": "b@example.com",
                "family": "gemini",
                "disabled": True,
                "token": {"refresh_token": "rt-b", "project_id": "proj"},
            },
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "accounts.json"
            path.write_text(json.dumps(payload), encoding="utf-8")
            accounts = load_accounts(path)

        self.assertEqual([acc.id for acc in accounts], ["a", "b@example.com"])
        self.assertTrue(accounts[0].enabled)
        self.assertFalse(accounts[1].enabled)
        self.assertEqual(accounts[1].refresh_token, "rt-b")
        self.assertEqual(accounts[1].project_id, "proj")

    def test_load_accounts_default_family(self):
        payload = [{"id": "a", "refresh_token": "rt-a"}, {"id": "b", "family": "claude"}]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "accounts.json"
            path.write_text(json.dumps(payload), encoding="utf-8")
            self.assertEqual([acc.family for acc in load_accounts(path)], ["", "claude"])
            accounts = load_accounts(path, default_family="gemini")

        self.assertEqual([acc.family for acc in accounts], ["gemini", "claude"])

    def test_load_accounts_rejects_bad_shape(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "accounts.json"
            path.write_text('{"accounts": 3}', encoding="utf-8")
            with self.assertRaises(ValueError):
                load_accounts(path)


if __name__ == "__main__":
    unittest.main()
