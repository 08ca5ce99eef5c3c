"""
Integration tests for the pipeline orchestrator and the Excel report.
"""

import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

import pandas as pd

from scrum_workmap.ingest import WeekKey
from scrum_workmap.pipeline import WorkMapPipeline, run_workmap
from scrum_workmap.pipeline.orchestrator import print_status
from tests.fixtures.sample_data import create_sample_data_dir, create_sample_items


class TestPipelineFromItems(unittest.TestCase):

    def setUp(self):
        self.pipeline = WorkMapPipeline(items=create_sample_items()).run_all_phases()

    def test_phases_populate_results(self):
        self.assertEqual([p.name for p in self.pipeline.projects], ['X', 'Y'])
        self.assertEqual(len(self.pipeline.layout.graph.nodes), 4)
        self.assertEqual(self.pipeline.bottlenecks[0].name, 'Park')
        self.assertEqual(len(self.pipeline.continuity), 4)

    def test_continuity_without_neighbours_is_unknown(self):
        self.assertTrue(all(r.risk_score == 6 for r in self.pipeline.continuity))

    def test_network_frames(self):
        nodes, edges = self.pipeline.network_frames()
        self.assertEqual(list(nodes['Member']), ['Kim', 'Lee', 'Park', 'Choi'])
        self.assertEqual(len(edges), 5)

    def test_export_before_run_fails(self):
        with self.assertRaises(ValueError):
            WorkMapPipeline(items=[]).export_report('unused.xlsx')

    def test_verbose_status_names_the_phase(self):
        out = StringIO()
        with redirect_stdout(out):
            WorkMapPipeline(items=create_sample_items(), verbose=True).run_all_phases()
        self.assertIn("[workmap] 2 projects", out.getvalue())
        self.assertIn("[network] 4 members", out.getvalue())


class TestConsoleHelpers(unittest.TestCase):

    def test_print_status_includes_phase(self):
        out = StringIO()
        with redirect_stdout(out):
            print_status("load", "2025-W03: 2 items")
        self.assertEqual(out.getvalue(), "  -> [load] 2025-W03: 2 items\n")


class TestPipelineFromDataDir(unittest.TestCase):

    def setUp(self):
        self.data_dir = Path(tempfile.mkdtemp())
        create_sample_data_dir(self.data_dir)

    def tearDown(self):
        shutil.rmtree(self.data_dir, ignore_errors=True)

    def test_latest_week_by_default(self):
        pipeline = WorkMapPipeline(data_dir=self.data_dir)
        pipeline.load()
        self.assertEqual(pipeline.week, WeekKey(2025, 3))
        self.assertEqual(len(pipeline.prev_items), 2)
        self.assertEqual(pipeline.next_items, [])

    def test_continuity_against_previous_week(self):
        pipeline = run_workmap(data_dir=self.data_dir, week=WeekKey(2025, 3))
        by_person = {r.person: r for r in pipeline.continuity}
        # W02 planned "fix login bug / session refactor", W03 reports both
        self.assertEqual(by_person['Kim'].prev_to_current.value, 'connected')

    def test_unknown_week(self):
        pipeline = WorkMapPipeline(data_dir=self.data_dir)
        with self.assertRaises(ValueError):
            pipeline.load(WeekKey(2024, 10))

    def test_empty_data_dir(self):
        empty = Path(tempfile.mkdtemp())
        try:
            with self.assertRaises(ValueError):
                WorkMapPipeline(data_dir=empty).load()
        finally:
            shutil.rmtree(empty)

    def test_export_report_sheets(self):
        output = self.data_dir / 'report.xlsx'
        run_workmap(data_dir=self.data_dir, output_path=output)
        self.assertTrue(output.exists())
        sheets = pd.read_excel(output, sheet_name=None)
        self.assertEqual(list(sheets), ['Metrics', 'Network Nodes', 'Network Edges',
                                        'Continuity', 'Bottlenecks'])
        self.assertEqual(list(sheets['Network Edges']['Relation']), ['pair'])


if __name__ == '__main__':
    unittest.main()
