"""
Unit tests for run.py

Tests the command-line entry point:
- Path validation and security
- Logging setup
- Argument parsing
- End-to-end runs and exit codes
"""

import logging
import unittest
from unittest.mock import patch
from pathlib import Path
import sys
import tempfile
import shutil

# Add parent directory to path to import run module
sys.path.insert(0, str(Path(__file__).parent.parent))

import run
from tests.fixtures.sample_data import create_sample_data_dir, create_sample_items_dataframe

PROJECT_ROOT = Path(run.__file__).parent.resolve()


class TestPathValidation(unittest.TestCase):
    """Test suite for path validation and security functions."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp(dir=PROJECT_ROOT))
        self.test_file = self.test_dir / "test.xlsx"
        self.test_file.write_text("test data")

    def tearDown(self):
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_validate_existing_file(self):
        result = run.validate_file_path(str(self.test_file), must_exist=True)
        self.assertIsInstance(result, Path)
        self.assertTrue(result.exists())

    def test_validate_nonexistent_file_without_requirement(self):
        nonexistent = self.test_dir / "nonexistent.xlsx"
        result = run.validate_file_path(str(nonexistent), must_exist=False)
        self.assertIsInstance(result, Path)

    def test_validate_nonexistent_file_with_requirement(self):
        nonexistent = self.test_dir / "nonexistent.xlsx"
        with self.assertRaises(ValueError) as context:
            run.validate_file_path(str(nonexistent), must_exist=True)
        self.assertIn("File not found", str(context.exception))

    def test_prevent_path_traversal(self):
        with self.assertRaises(ValueError) as context:
            run.validate_file_path('/etc/passwd', must_exist=False)
        self.assertIn("outside allowed directories", str(context.exception))

    def test_reject_sibling_directory_with_same_prefix(self):
        sibling = str(PROJECT_ROOT) + "_evil/report.xlsx"
        with patch.object(run.Path, 'home', return_value=Path('/nonexistent-home')):
            with self.assertRaises(ValueError) as context:
                run.validate_file_path(sibling)
        self.assertIn("outside allowed directories", str(context.exception))

    def test_output_file_path_sanitizes_name(self):
        result = run.output_file_path(str(self.test_dir / "bad;name|.xlsx"))
        self.assertEqual(result, (self.test_dir / "badname.xlsx").resolve())

    def test_output_file_path_rejects_empty_name(self):
        with self.assertRaises(ValueError):
            run.output_file_path(str(self.test_dir / "***"))

    def test_sanitize_filename_removes_dangerous_chars(self):
        sanitized = run.sanitize_filename("../../bad;file|name*.xlsx")
        for char in ('/', ';', '|', '*'):
            self.assertNotIn(char, sanitized)

    def test_sanitize_filename_keeps_valid_chars(self):
        self.assertEqual(run.sanitize_filename("WorkMap_Report-2025.xlsx"), "WorkMap_Report-2025.xlsx")

    def test_sanitize_filename_limits_length(self):
        self.assertLessEqual(len(run.sanitize_filename("a" * 300 + ".xlsx")), 255)


class TestLogging(unittest.TestCase):

    def setUp(self):
        self.log_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        shutil.rmtree(self.log_dir, ignore_errors=True)

    def test_creates_timestamped_file(self):
        log_file = run.setup_logging(log_dir=self.log_dir)
        self.assertTrue(log_file.exists())
        self.assertTrue(log_file.name.startswith("scrum_workmap_"))

    def test_console_level(self):
        run.setup_logging(verbose=False, log_dir=self.log_dir)
        levels = sorted(h.level for h in logging.getLogger().handlers)
        self.assertEqual(levels, [logging.DEBUG, logging.WARNING])
        run.setup_logging(verbose=True, log_dir=self.log_dir)
        levels = sorted(h.level for h in logging.getLogger().handlers)
        self.assertEqual(levels, [logging.DEBUG, logging.INFO])


class TestParseArgs(unittest.TestCase):

    def test_defaults(self):
        args = run.parse_args([])
        self.assertEqual(args.output, 'WorkMap_Report.xlsx')
        self.assertIsNone(args.week)
        self.assertIsNone(args.file)
        self.assertFalse(args.verbose)

    def test_flags(self):
        args = run.parse_args(['--week', '2025-W03', '-d', 'data', '--html', 'n.html', '-v'])
        self.assertEqual(args.week, '2025-W03')
        self.assertEqual(args.data_dir, 'data')
        self.assertEqual(args.html, 'n.html')
        self.assertTrue(args.verbose)


@patch('run.setup_logging', return_value=Path('test.log'))
class TestMain(unittest.TestCase):

    def setUp(self):
        self.work_dir = Path(tempfile.mkdtemp(dir=PROJECT_ROOT))
        self.data_dir = create_sample_data_dir(self.work_dir / 'scrum')

    def tearDown(self):
        shutil.rmtree(self.work_dir, ignore_errors=True)

    def test_data_dir_run(self, _):
        output = self.work_dir / 'report.xlsx'
        html = self.work_dir / 'network.html'
        run.main(['--data-dir', str(self.data_dir), '--week', '2025-W03',
                  '--output', str(output), '--html', str(html)])
        self.assertTrue(output.exists())
        self.assertTrue(html.exists())

    def test_table_run(self, _):
        table = self.work_dir / 'items.csv'
        create_sample_items_dataframe().to_csv(table, index=False)
        output = self.work_dir / 'report.xlsx'
        run.main(['--file', str(table), '--output', str(output)])
        self.assertTrue(output.exists())

    def test_output_name_is_sanitized(self, _):
        run.main(['--data-dir', str(self.data_dir), '--output', str(self.work_dir / 'wm;report.xlsx')])
        self.assertTrue((self.work_dir / 'wmreport.xlsx').exists())
        self.assertFalse((self.work_dir / 'wm;report.xlsx').exists())

    def test_bad_week_exits_1(self, _):
        with self.assertRaises(SystemExit) as context:
            run.main(['--data-dir', str(self.data_dir), '--week', 'soon',
                      '--output', str(self.work_dir / 'r.xlsx')])
        self.assertEqual(context.exception.code, 1)

    def test_missing_file_exits_1(self, _):
        with self.assertRaises(SystemExit) as context:
            run.main(['--file', str(self.work_dir / 'missing.csv'),
                      '--output', str(self.work_dir / 'r.xlsx')])
        self.assertEqual(context.exception.code, 1)


if __name__ == '__main__':
    unittest.main()
