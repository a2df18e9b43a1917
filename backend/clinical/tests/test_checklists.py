from types import SimpleNamespace

from django.test import SimpleTestCase

from clinical.services.checklists import (
    PLACEMENT_CHECKLIST,
    ChecklistItem,
    aggregate,
    crossed_into_complete,
    nremt_clearance,
    percent,
)

FULL = {
    'agency_id': 1,
    'preceptor_id': 2,
    'placement_date': '2026-01-05',
    'orientation_date': '2026-01-06',
    'liability_form_completed': True,
    'background_check_completed': True,
    'drug_screen_completed': True,
    'immunizations_verified': True,
    'cpr_card_verified': True,
    'uniform_issued': True,
    'badge_issued': True,
    'internship_start_date': '2026-01-10',
    'phase_1_start_date': '2026-01-10',
    'phase_1_eval_scheduled': '2026-02-10',
    'phase_1_eval_completed': True,
    'phase_2_start_date': '2026-02-11',
    'phase_2_eval_scheduled': '2026-03-20',
    'phase_2_eval_completed': True,
    'closeout_meeting_date': '2026-04-01',
    'closeout_completed': True,
    'actual_end_date': '2026-04-01',
}


class AggregateTests(SimpleTestCase):
    def test_empty_list(self):
        result = aggregate([], {})
        self.assertEqual(result.percent, 0)
        self.assertTrue(result.all_required_met)
        self.assertEqual(result.total, 0)

    def test_placement_shape(self):
        self.assertEqual(len(PLACEMENT_CHECKLIST), 11)
        self.assertEqual(sum(1 for i in PLACEMENT_CHECKLIST if i.required), 9)

    def test_date_key_decides_completion(self):
        item = ChecklistItem('orientation_completed', 'Orientation completed', date_key='orientation_date')
        self.assertFalse(item.is_complete({'orientation_completed': True}))
        self.assertTrue(item.is_complete({'orientation_date': '2026-01-06'}))

    def test_foreign_keys_on_model_objects(self):
        item = ChecklistItem('agency_id', 'Agency assigned')
        self.assertTrue(item.is_complete(SimpleNamespace(agency_id=0)))
        self.assertFalse(item.is_complete(SimpleNamespace(agency_id=None)))

    def test_optional_items_count_toward_percent_only(self):
        record = dict(FULL, uniform_issued=False, badge_issued=False)
        result = aggregate(PLACEMENT_CHECKLIST, record)
        self.assertTrue(result.all_required_met)
        self.assertEqual(result.completed, 9)
        self.assertEqual(result.percent, 82)

    def test_unmet_required_listed_in_order(self):
        record = dict(FULL, agency_id=None, drug_screen_completed=False)
        result = aggregate(PLACEMENT_CHECKLIST, record)
        self.assertFalse(result.all_required_met)
        self.assertEqual(result.unmet_required, ['agency_id', 'drug_screen_completed'])

    def test_six_of_nine_required(self):
        items = [ChecklistItem(f'step_{n}', f'Step {n}', required=True) for n in range(9)]
        record = {f'step_{n}': n < 6 for n in range(9)}
        result = aggregate(items, record)
        self.assertEqual(result.percent, 67)
        self.assertFalse(result.all_required_met)
        self.assertEqual(result.unmet_required, ['step_6', 'step_7', 'step_8'])
        self.assertEqual((result.completed, result.total), (6, 9))

    def test_percent_rounds_half_up(self):
        self.assertEqual(percent(1, 8), 13)
        self.assertEqual(percent(2, 3), 67)
        self.assertEqual(percent(0, 0), 0)


class NremtClearanceTests(SimpleTestCase):
    def test_everything_done(self):
        clearance = nremt_clearance(FULL)
        self.assertTrue(clearance.ready)
        self.assertEqual(clearance.percent, 100)
        self.assertEqual(set(clearance.sections), {'placement', 'phase1', 'phase2', 'clearance'})

    def test_optional_items_do_not_block(self):
        clearance = nremt_clearance(dict(FULL, uniform_issued=False, badge_issued=False))
        self.assertTrue(clearance.ready)
        self.assertEqual(clearance.percent, 90)

    def test_one_missing_required_item_blocks(self):
        clearance = nremt_clearance(dict(FULL, closeout_completed=False))
        self.assertFalse(clearance.ready)
        self.assertEqual(clearance.unmet_required, ['closeout_completed'])
        self.assertEqual(clearance.as_dict()['sections']['clearance']['percent'], 67)

    def test_crossing(self):
        before = nremt_clearance(dict(FULL, phase_2_eval_completed=False))
        after = nremt_clearance(FULL)
        self.assertTrue(crossed_into_complete(before, after))
        self.assertFalse(crossed_into_complete(after, after))
        self.assertFalse(crossed_into_complete(after, before))
        self.assertTrue(crossed_into_complete(
            aggregate(PLACEMENT_CHECKLIST, {}), aggregate(PLACEMENT_CHECKLIST, FULL),
        ))
