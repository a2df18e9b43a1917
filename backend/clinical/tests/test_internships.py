from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from clinical.services.internships import validate_phase_transition


class PhaseTransitionTests(SimpleTestCase):
    def assertRejected(self, current, new, message):
        with self.assertRaises(ValidationError) as ctx:
            validate_phase_transition(current, new)
        self.assertEqual(ctx.exception.message_dict, {'current_phase': [message]})

    def test_forward_and_extended_moves_allowed(self):
        validate_phase_transition('pre_internship', 'phase_2_evaluation')
        validate_phase_transition('phase_2_evaluation', 'extended')
        validate_phase_transition('extended', 'pre_internship')
        validate_phase_transition('completed', 'completed')

    def test_backwards_move_rejected(self):
        self.assertRejected('completed', 'phase_1_mentorship',
                            'Cannot move phase back from completed to phase_1_mentorship')

    def test_unknown_phase_named(self):
        self.assertRejected('phase_1_mentorship', 'phase_9', 'Unknown phase "phase_9"')
        self.assertRejected('legacy_phase', 'phase_2_evaluation', 'Unknown phase "legacy_phase"')
