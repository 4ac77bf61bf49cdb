import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import main


class TestMainCli(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        cwd = os.getcwd()
        os.chdir(tmp.name)
        self.addCleanup(os.chdir, cwd)
        self.state_path = str(Path(tmp.name) / "calendar.json")
        self.common = ["--state", self.state_path, "--config", "missing.yaml", "--start", "2024-01-02T08:00"]

    def run_cli(self, *args: str) -> str:
        out = io.StringIO()
        with redirect_stdout(out):
            main.main([*args, *self.common])
        return out.getvalue()

    def test_add_and_schedule(self) -> None:
        self.run_cli("add-event", "--name", "meeting",
                     "--event-start", "2024-01-02T09:00", "--event-end", "2024-01-02T10:00")
        out = self.run_cli("add-task", "--name", "report", "--deadline", "2024-01-03T17:00",
                           "--priority", "5", "--duration", "30")
        self.assertIn("Task added: report", out)
        self.assertIn("Tue 2024-01-02 10:00", out)

        out = self.run_cli("schedule")
        self.assertIn("Scheduled 1 out of 1 tasks", out)
        self.assertIn("Tue 2024-01-02 10:00-10:30  report", out)

        saved = json.loads(Path(self.state_path).read_text())
        self.assertEqual([t["name"] for t in saved["tasks"]], ["report"])
        self.assertTrue(saved["tasks"][0]["scheduled"])
        self.assertEqual(len(list(Path("results").glob("trace_*.json"))), 1)
        self.assertEqual(len(list(Path("results").glob("trace_*.log"))), 1)

    def test_unscheduled_tasks_are_reported(self) -> None:
        self.run_cli("add-task", "--name", "marathon", "--deadline", "2024-01-05T17:00", "--duration", "600")
        out = self.run_cli("schedule")
        self.assertIn("Unscheduled Tasks:", out)
        self.assertIn("marathon (Priority: 1, Duration: 600 mins", out)

    def test_gaps(self) -> None:
        out = self.run_cli("gaps")
        self.assertIn("11 free gap(s)", out)
        self.assertIn("Tue 2024-01-02 09:00-17:00  (480 min)", out)

    def test_tie_break_comes_from_config(self) -> None:
        Path("config.yaml").write_text("tie_break:\n  secondary: \"none\"\n")
        self.common[self.common.index("missing.yaml")] = "config.yaml"

        self.run_cli("add-task", "--name", "later", "--deadline", "2024-01-10T17:00", "--duration", "60")
        self.run_cli("add-task", "--name", "sooner", "--deadline", "2024-01-03T17:00", "--duration", "60")
        out = self.run_cli("schedule")

        self.assertIn("Tue 2024-01-02 09:00-10:00  later", out)
        self.assertIn("Tue 2024-01-02 10:15-11:15  sooner", out)

    def test_add_task_requires_name_and_deadline(self) -> None:
        with self.assertRaises(SystemExit):
            with redirect_stdout(io.StringIO()):
                main.main(["add-task", *self.common])


if __name__ == "__main__":
    unittest.main(verbosity=2)
