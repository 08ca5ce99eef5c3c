"""
Unit tests for metrics rollups.

Covers:
- Feature, module and project rollups (unweighted means)
- None risk propagation
- Completed-task heuristic
- Round half up
- MetricsCache and the flattened metrics frame
"""

import unittest

import pandas as pd

from scrum_workmap.core.config import UNSPECIFIED_MODULE
from scrum_workmap.models.data_models import EMPTY_METRICS, ModuleNode, FeatureNode
from scrum_workmap.hierarchy import (
    build_workmap_hierarchy,
    find_project,
    find_module,
    find_feature,
    compute_items_metrics,
    compute_feature_metrics,
    compute_module_metrics,
    compute_project_metrics,
    MetricsCache,
    metrics_frame,
    round_half_up,
)
from scrum_workmap.hierarchy.metrics import max_risk_level, count_completed_tasks
from tests.fixtures.sample_data import make_item, create_sample_items


class TestRollups(unittest.TestCase):

    def setUp(self):
        self.projects = build_workmap_hierarchy(create_sample_items())

    def test_core_module_progress_and_risk(self):
        items = [
            make_item(project='X', module='Core', feature='Login', progress=80, risk=2),
            make_item(project='X', module='Core', feature='Logout', progress=40, risk=None),
        ]
        core = find_module(build_workmap_hierarchy(items), 'X', 'Core')
        metrics = compute_module_metrics(core)
        self.assertEqual(metrics.progress, 60)
        self.assertEqual(metrics.risk_level, 2)

    def test_project_is_mean_of_modules(self):
        # Core = 60, (unspecified) = 100
        metrics = compute_project_metrics(find_project(self.projects, 'X'))
        self.assertEqual(metrics.progress, 80)
        self.assertEqual(metrics.risk_level, 2)
        self.assertEqual(metrics.task_count, 4)
        self.assertEqual(metrics.completed_task_count, 2)

    def test_module_mean_is_unweighted(self):
        items = [make_item(feature='A', progress=100) for _ in range(3)]
        items.append(make_item(feature='B', progress=0))
        module = find_module(build_workmap_hierarchy(items), 'X', 'Core')
        self.assertEqual(compute_module_metrics(module).progress, 50)

    def test_all_none_risk_stays_none(self):
        items = [make_item(risk=None), make_item(feature='Other', risk=None)]
        module = find_module(build_workmap_hierarchy(items), 'X', 'Core')
        self.assertIsNone(compute_module_metrics(module).risk_level)

    def test_zero_risk_is_kept(self):
        module = find_module(self.projects, 'X', UNSPECIFIED_MODULE)
        self.assertEqual(compute_module_metrics(module).risk_level, 0)

    def test_empty_nodes(self):
        self.assertEqual(compute_items_metrics([]), EMPTY_METRICS)
        self.assertEqual(compute_feature_metrics(FeatureNode(name='Empty')), EMPTY_METRICS)
        self.assertEqual(compute_module_metrics(ModuleNode(name='Empty')), EMPTY_METRICS)
        self.assertIsNone(EMPTY_METRICS.risk_level)
        self.assertEqual(EMPTY_METRICS.progress, 0)

    def test_feature_metrics(self):
        login = find_feature(self.projects, 'X', 'Core', 'Login')
        metrics = compute_feature_metrics(login)
        self.assertEqual(metrics.progress, 80)
        self.assertEqual(metrics.task_count, 2)
        self.assertEqual(metrics.completed_task_count, 1)


class TestHelpers(unittest.TestCase):

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(59.5), 60)
        self.assertEqual(round_half_up(59.49), 59)

    def test_half_progress_rounds_up(self):
        items = [make_item(progress=2), make_item(progress=3)]
        self.assertEqual(compute_items_metrics(items).progress, 3)

    def test_max_risk_level(self):
        self.assertEqual(max_risk_level([None, 1, 3, None]), 3)
        self.assertEqual(max_risk_level([0, None]), 0)
        self.assertIsNone(max_risk_level([None, None]))
        self.assertIsNone(max_risk_level([]))

    def test_completed_marker(self):
        tasks = ['deploy (100%)', 'review (90%)', '100% coverage', 'docs']
        self.assertEqual(count_completed_tasks(tasks), 2)


class TestMetricsCache(unittest.TestCase):

    def setUp(self):
        self.projects = build_workmap_hierarchy(create_sample_items())

    def test_cached_values_match_direct(self):
        cache = MetricsCache()
        for project in self.projects:
            self.assertEqual(cache.project(project), compute_project_metrics(project))

    def test_second_lookup_hits(self):
        cache = MetricsCache()
        project = self.projects[0]
        cache.project(project)
        misses = cache.misses
        cache.project(project)
        self.assertEqual(cache.misses, misses)
        self.assertGreaterEqual(cache.hits, 1)

    def test_rebuilt_tree_is_recomputed(self):
        cache = MetricsCache()
        cache.project(self.projects[0])
        rebuilt = build_workmap_hierarchy(create_sample_items())
        misses = cache.misses
        cache.project(rebuilt[0])
        self.assertGreater(cache.misses, misses)

    def test_clear(self):
        cache = MetricsCache()
        cache.project(self.projects[0])
        self.assertGreater(len(cache), 0)
        cache.clear()
        self.assertEqual(len(cache), 0)


class TestMetricsFrame(unittest.TestCase):

    def test_rows_in_tree_order(self):
        df = metrics_frame(build_workmap_hierarchy(create_sample_items()))
        self.assertEqual(list(df['Level']), [
            'project', 'module', 'feature', 'module', 'feature', 'feature',
            'project', 'module', 'feature',
        ])
        self.assertEqual(df.iloc[0]['Progress'], 80)

    def test_none_risk_is_missing_not_zero(self):
        df = metrics_frame(build_workmap_hierarchy(create_sample_items()))
        logout = df[(df['Level'] == 'feature') & (df['Feature'] == 'Logout')].iloc[0]
        self.assertTrue(pd.isna(logout['Risk_Level']))
        self.assertEqual(logout['Risk_Label'], 'No Data')

    def test_empty(self):
        df = metrics_frame([])
        self.assertTrue(df.empty)
        self.assertIn('Progress', df.columns)


if __name__ == '__main__':
    unittest.main()
