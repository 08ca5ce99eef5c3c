"""
Unit tests for the deterministic collaboration graph layout.

Covers:
- Domain-column initial placement
- Collision relaxation bound (or a reported non-convergence)
- Clamping inside the padded canvas
- Determinism and immutability of the input graph
- Position overrides and node radii
"""

import itertools
import math
import unittest

import numpy as np

from scrum_workmap.models.data_models import NetworkGraph, NetworkNode
from scrum_workmap.network import (
    LayoutConfig,
    compute_layout,
    initial_positions,
    relax_positions,
    apply_position_overrides,
    node_radius,
    node_radii,
    build_network,
)
from tests.fixtures.sample_data import create_sample_items


def _graph(domains):
    """Graph with one node per entry of ``domains``."""
    return NetworkGraph(nodes=[NetworkNode(id=f"n{i}", domain=d) for i, d in enumerate(domains)])


def _min_pairwise(graph):
    return min(
        math.hypot(a.x - b.x, a.y - b.y)
        for a, b in itertools.combinations(graph.nodes, 2)
    )


class TestLayoutConfig(unittest.TestCase):

    def test_defaults(self):
        config = LayoutConfig()
        self.assertEqual(config.usable_width, 680)
        self.assertEqual(config.usable_height, 380)

    def test_min_distance_is_capped(self):
        config = LayoutConfig()
        self.assertEqual(config.min_distance(2), 90)
        self.assertAlmostEqual(config.min_distance(10), 68)
        self.assertEqual(config.min_distance(0), 90)

    def test_padding_too_large(self):
        with self.assertRaises(ValueError):
            LayoutConfig(width=100, height=100, padding=60)


class TestInitialPlacement(unittest.TestCase):

    def test_sample_columns(self):
        result = compute_layout(build_network(create_sample_items()))
        nodes = result.graph.node_map()
        # Backend, Design, Frontend columns
        self.assertAlmostEqual(nodes['Kim'].x, 60)
        self.assertAlmostEqual(nodes['Choi'].x, 60)
        self.assertAlmostEqual(nodes['Park'].x, 400)
        self.assertAlmostEqual(nodes['Lee'].x, 740)
        self.assertAlmostEqual(nodes['Kim'].y, 205)
        self.assertAlmostEqual(nodes['Choi'].y, 295)
        self.assertTrue(result.converged)
        self.assertEqual(result.iterations, 1)

    def test_single_domain_is_centred(self):
        graph = _graph(['Solo'] * 3)
        positions = initial_positions(graph.nodes, LayoutConfig())
        np.testing.assert_allclose(positions[:, 0], [400, 400, 400])
        np.testing.assert_allclose(positions[:, 1], [160, 250, 340])

    def test_row_spacing_shrinks_for_tall_columns(self):
        graph = _graph(['A'] * 11)
        positions = initial_positions(graph.nodes, LayoutConfig())
        self.assertAlmostEqual(positions[1, 1] - positions[0, 1], 38)
        self.assertAlmostEqual(positions[0, 1], 60)
        self.assertAlmostEqual(positions[-1, 1], 440)

    def test_empty(self):
        self.assertEqual(initial_positions([], LayoutConfig()).shape, (0, 2))


class TestRelaxation(unittest.TestCase):

    def assert_collision_bound(self, result):
        if result.converged:
            self.assertGreaterEqual(_min_pairwise(result.graph), result.min_distance - 1e-6)
        else:
            self.assertEqual(result.iterations, LayoutConfig().max_iterations)

    def test_bound_small_graph(self):
        result = compute_layout(_graph(['A', 'A', 'B', 'C', 'C', 'C']))
        self.assert_collision_bound(result)

    def test_bound_crowded_graph(self):
        domains = [f"D{i % 4}" for i in range(30)]
        result = compute_layout(_graph(domains))
        self.assert_collision_bound(result)

    def test_stays_inside_padding(self):
        config = LayoutConfig()
        result = compute_layout(_graph(['A'] * 15 + ['B'] * 2), config)
        for node in result.graph.nodes:
            self.assertGreaterEqual(node.x, config.padding - 1e-9)
            self.assertLessEqual(node.x, config.width - config.padding + 1e-9)
            self.assertGreaterEqual(node.y, config.padding - 1e-9)
            self.assertLessEqual(node.y, config.height - config.padding + 1e-9)

    def test_coincident_nodes_are_separated(self):
        positions = np.array([[200.0, 200.0], [200.0, 200.0]])
        relaxed, iterations, converged = relax_positions(positions, LayoutConfig())
        self.assertTrue(converged)
        distance = np.hypot(*(relaxed[1] - relaxed[0]))
        self.assertGreaterEqual(distance, 90 - 1e-6)

    def test_single_node_needs_no_pass(self):
        positions = np.array([[100.0, 100.0]])
        relaxed, iterations, converged = relax_positions(positions, LayoutConfig())
        self.assertEqual(iterations, 0)
        self.assertTrue(converged)

    def test_empty_graph(self):
        result = compute_layout(NetworkGraph())
        self.assertTrue(result.graph.is_empty)
        self.assertTrue(result.converged)


class TestDeterminism(unittest.TestCase):

    def test_same_input_same_output(self):
        graph = _graph([f"D{i % 3}" for i in range(12)])
        first = compute_layout(graph).graph.positions()
        second = compute_layout(graph).graph.positions()
        self.assertEqual(first, second)

    def test_input_graph_untouched(self):
        graph = build_network(create_sample_items())
        compute_layout(graph)
        self.assertTrue(all((n.x, n.y) == (0.0, 0.0) for n in graph.nodes))


class TestOverridesAndRadii(unittest.TestCase):

    def setUp(self):
        self.graph = compute_layout(build_network(create_sample_items())).graph

    def test_override_wins(self):
        moved = apply_position_overrides(self.graph, {'Kim': (10, 20), 'Ghost': (1, 1)})
        self.assertEqual((moved.get_node('Kim').x, moved.get_node('Kim').y), (10.0, 20.0))
        self.assertEqual(moved.get_node('Lee').x, self.graph.get_node('Lee').x)
        self.assertIsNone(moved.get_node('Ghost'))
        self.assertNotEqual(self.graph.get_node('Kim').x, 10.0)

    def test_no_overrides_returns_same_graph(self):
        self.assertIs(apply_position_overrides(self.graph, None), self.graph)

    def test_radius_range(self):
        radii = node_radii(self.graph)
        # Park carries two pre badges, the most in the sample
        self.assertEqual(radii['Park'], 32.0)
        self.assertEqual(radii['Lee'], 18.0)

    def test_radius_without_badges(self):
        node = NetworkNode(id='a', domain='A')
        self.assertEqual(node_radius(node, 0), 18.0)


if __name__ == '__main__':
    unittest.main()
