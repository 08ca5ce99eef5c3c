"""
Unit tests for collaboration graph construction.
"""

import unittest

from scrum_workmap.models.data_models import Relation
from scrum_workmap.network import build_network, author_domains
from tests.fixtures.sample_data import make_item, create_sample_items


class TestBuildNetwork(unittest.TestCase):

    def setUp(self):
        self.graph = build_network(create_sample_items())
        self.nodes = self.graph.node_map()

    def test_nodes_in_first_seen_order(self):
        self.assertEqual([n.id for n in self.graph.nodes], ['Kim', 'Lee', 'Park', 'Choi'])

    def test_one_edge_per_declaration(self):
        self.assertEqual(len(self.graph.edges), 5)
        first = self.graph.edges[0]
        self.assertEqual((first.source, first.target, first.relation), ('Kim', 'Lee', Relation.PAIR))

    def test_pair_counted_on_author(self):
        self.assertEqual(self.nodes['Kim'].pair_count, 1)
        self.assertEqual(self.nodes['Lee'].pair_count, 0)

    def test_pre_counted_on_collaborator(self):
        self.assertEqual(self.nodes['Park'].pre_count, 2)
        self.assertEqual(self.nodes['Kim'].pre_count, 1)
        self.assertEqual(self.nodes['Choi'].pre_count, 0)

    def test_post_changes_no_badge(self):
        graph = build_network([make_item(name='A', collaborators=[('B', 'post')])])
        for node in graph.nodes:
            self.assertEqual(node.degree, 0)
        self.assertEqual(len(graph.edges), 1)

    def test_parallel_edges_kept(self):
        items = [
            make_item(name='A', feature='F1', collaborators=[('B', 'pair')]),
            make_item(name='A', feature='F2', collaborators=[('B', 'pair')]),
        ]
        graph = build_network(items)
        self.assertEqual(len(graph.edges), 2)
        self.assertEqual(graph.get_node('A').pair_count, 2)

    def test_author_domain_wins_over_first_sighting(self):
        # Park is named by Kim (Backend) before Park's own Design item
        self.assertEqual(self.nodes['Park'].domain, 'Design')

    def test_non_author_inherits_declaring_domain(self):
        graph = build_network([make_item(name='A', domain='Data', collaborators=[('Ghost', 'pre')])])
        self.assertEqual(graph.get_node('Ghost').domain, 'Data')

    def test_stored_direction_is_author_to_collaborator(self):
        for edge in self.graph.edges:
            if edge.relation is Relation.PRE and edge.target == 'Park':
                self.assertIn(edge.source, ('Kim', 'Choi'))

    def test_empty(self):
        graph = build_network([])
        self.assertTrue(graph.is_empty)
        self.assertEqual(graph.edges, [])

    def test_coordinates_start_at_origin(self):
        self.assertTrue(all((n.x, n.y) == (0.0, 0.0) for n in self.graph.nodes))

    def test_author_domains(self):
        domains = author_domains(create_sample_items())
        self.assertEqual(domains['Kim'], 'Backend')
        self.assertNotIn('Ghost', domains)


if __name__ == '__main__':
    unittest.main()
