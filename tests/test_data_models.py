"""
Unit tests for the snapshot data models.
"""

import unittest

from scrum_workmap.models.data_models import Collaborator, Relation, SnapshotItem
from tests.fixtures.sample_data import make_item


class TestSnapshotItem(unittest.TestCase):

    def test_string_task_fields_become_one_entry(self):
        item = SnapshotItem(name='Kim', domain='Backend', project='X', feature='Login',
                            past_week_tasks='fix login bug', next_week_tasks='add login tests',
                            risk_notes='token expiry unclear')
        self.assertEqual(item.past_week_tasks, ('fix login bug',))
        self.assertEqual(item.next_week_tasks, ('add login tests',))
        self.assertEqual(item.risk_notes, ('token expiry unclear',))

    def test_multiline_string_split_per_line(self):
        item = SnapshotItem(name='Kim', domain='Backend', project='X', feature='Login',
                            past_week_tasks='a task\nanother task')
        self.assertEqual(item.past_week_tasks, ('a task', 'another task'))

    def test_lists_stored_as_tuples(self):
        item = make_item(past=['one', 'two'], next_tasks=['three'])
        self.assertEqual(item.past_week_tasks, ('one', 'two'))
        self.assertEqual(item.next_week_tasks, ('three',))

    def test_placeholder_risk_notes_dropped(self):
        item = make_item(risk_notes=['?', '-', 'design pending'])
        self.assertEqual(item.risk_notes, ('design pending',))

    def test_empty_module_is_none(self):
        self.assertIsNone(make_item(module='  ').module)

    def test_collaborator_dicts_converted(self):
        item = make_item(collaborators=[('Lee', 'PAIR')])
        self.assertEqual(item.collaborators, (Collaborator('Lee', Relation.PAIR),))


if __name__ == '__main__':
    unittest.main()
