from datetime import date

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings

from clinical.models import EvaluationScore, SummativeEvaluation, SummativeScenario
from clinical.services import scoring, summative

from .helpers import make_cohort, make_student, make_user

PERFECT = {key: 3 for key in scoring.SCORE_FIELDS}


class ScoringTests(SimpleTestCase):
    def test_total_treats_missing_as_zero(self):
        self.assertEqual(scoring.total_score({'leadership_scene_score': 3, 'integration_score': None}), 3)
        self.assertEqual(scoring.total_score(PERFECT), scoring.MAX_SCORE)

    def test_threshold(self):
        score = dict(PERFECT, integration_score=0)
        self.assertEqual(scoring.total_score(score), 12)
        self.assertTrue(scoring.compute_passed(score))
        score['interpersonal_score'] = 2
        self.assertFalse(scoring.compute_passed(score))

    def test_any_critical_flag_fails(self):
        for flag in scoring.CRITICAL_FIELDS:
            self.assertFalse(scoring.compute_passed(dict(PERFECT, **{flag: True})), flag)

    @override_settings(SUMMATIVE_PASS_THRESHOLD=15)
    def test_threshold_is_configurable(self):
        self.assertFalse(scoring.compute_passed(dict(PERFECT, integration_score=2)))

    def test_result_label(self):
        self.assertEqual(scoring.result_label(None), 'Pending')
        self.assertEqual(scoring.result_label(True), 'PASS')
        self.assertEqual(scoring.result_label(False), 'FAIL')


class SummativeServiceTests(TestCase):
    def setUp(self):
        self.cohort = make_cohort()
        self.students = [make_student(self.cohort, first=f'S{i}', last='Test') for i in range(7)]
        self.scenario = SummativeScenario.objects.get(scenario_number=1)
        self.examiner = make_user('instructor')

    def create(self, count, **overrides):
        fields = dict(scenario=self.scenario, evaluation_date=date(2026, 5, 1), examiner_name='Dr. Gray',
                      cohort=self.cohort)
        fields.update(overrides)
        ids = [s.pk for s in self.students[:count]]
        return summative.create_evaluation(ids, user=self.examiner, **fields)

    def test_seeded_scenarios(self):
        self.assertEqual(SummativeScenario.objects.count(), 6)

    def test_group_size_limits(self):
        with self.assertRaisesMessage(ValidationError, 'At least one student is required'):
            self.create(0)
        with self.assertRaisesMessage(ValidationError, 'Maximum 6 students per evaluation'):
            self.create(7)
        evaluation = self.create(6)
        self.assertEqual(evaluation.scores.count(), 6)
        self.assertEqual(evaluation.created_by, self.examiner)

    def test_required_fields(self):
        with self.assertRaisesMessage(ValidationError, 'Scenario is required'):
            self.create(1, scenario=None)
        with self.assertRaisesMessage(ValidationError, 'Examiner name is required'):
            self.create(1, examiner_name='  ')
        with self.assertRaisesMessage(ValidationError, 'Evaluation date is required'):
            self.create(1, evaluation_date=None)
        self.assertFalse(SummativeEvaluation.objects.exists())

    def test_add_student_rules(self):
        evaluation = self.create(5)
        with self.assertRaisesMessage(ValidationError, 'Student already in this evaluation'):
            summative.add_student(evaluation, self.students[0].pk)
        summative.add_student(evaluation, self.students[5].pk)
        with self.assertRaisesMessage(ValidationError, 'Maximum 6 students per evaluation'):
            summative.add_student(evaluation, self.students[6].pk)

    def test_remove_student(self):
        evaluation = self.create(2)
        summative.remove_student(evaluation, student_id=self.students[0].pk)
        self.assertEqual(evaluation.scores.count(), 1)
        with self.assertRaises(EvaluationScore.DoesNotExist):
            summative.remove_student(evaluation, student_id=self.students[0].pk)

    def test_grading_derives_result_and_completes_session(self):
        evaluation = self.create(2)
        first, second = self.students[:2]

        score = summative.update_score(
            evaluation, dict(PERFECT, grading_complete=True), user=self.examiner, student_id=first.pk,
        )
        self.assertTrue(score.passed)
        self.assertEqual(score.graded_by, self.examiner)
        self.assertIsNotNone(score.graded_at)
        evaluation.refresh_from_db()
        self.assertEqual(evaluation.status, 'in_progress')

        score = summative.update_score(
            evaluation,
            dict(PERFECT, critical_harmful_intervention=True, grading_complete=True),
            user=self.examiner, student_id=second.pk,
        )
        self.assertFalse(score.passed)
        evaluation.refresh_from_db()
        self.assertEqual(evaluation.status, 'completed')

    def test_explicit_passed_is_kept(self):
        evaluation = self.create(1)
        score = summative.update_score(
            evaluation, {'grading_complete': True, 'passed': True}, student_id=self.students[0].pk,
        )
        self.assertTrue(score.passed)
        self.assertEqual(score.total_score, 0)

    def test_out_of_range_score_rejected(self):
        evaluation = self.create(1)
        with self.assertRaises(ValidationError):
            summative.update_score(evaluation, {'patient_assessment_score': 4}, student_id=self.students[0].pk)
