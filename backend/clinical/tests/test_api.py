import shutil
import tempfile
from datetime import date, timedelta

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from clinical.models import CloseoutSurvey, EmploymentVerification, EvaluationScore, Internship, SummativeScenario
from notifications.models import UserNotification

from .helpers import (
    CLEARED,
    make_agency,
    make_cohort,
    make_internship,
    make_preceptor,
    make_student,
    make_user,
)


class ClinicalApiTestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.cohort = make_cohort()
        self.student = make_student(self.cohort)
        self.other_student = make_student(self.cohort, first='Ben', last='Cole')
        self.agency = make_agency()
        self.instructor = make_user('instructor')
        self.lead = make_user('lead_instructor')
        self.admin = make_user('admin')
        self.client = APIClient()

    def as_user(self, user):
        self.client.force_authenticate(user=user)
        return self.client


class InternshipEndpointTests(ClinicalApiTestCase):
    def test_create_one_per_student_and_cohort(self):
        client = self.as_user(self.lead)
        payload = {'student_id': self.student.pk, 'agency_id': self.agency.pk, 'shift_type': '24_hour'}
        resp = client.post('/api/clinical/internships/', payload, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['internship']['agency_name'], 'Metro Fire')
        self.assertEqual(resp.data['internship']['cohort_id'], self.cohort.pk)
        self.assertIn('milestones', resp.data['internship'])

        resp = client.post('/api/clinical/internships/', payload, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.data['success'])
        self.assertIn('already exists', resp.data['error'])

    def test_list_carries_milestones_and_filters(self):
        make_internship(self.student, status='at_risk')
        make_internship(self.other_student, status='in_progress')
        client = self.as_user(self.instructor)
        resp = client.get('/api/clinical/internships/', {'status': 'at_risk'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data['internships']), 1)
        self.assertEqual(resp.data['internships'][0]['student']['id'], self.student.pk)
        self.assertIn('isOverdue', resp.data['internships'][0]['milestones'])

    def test_detail(self):
        internship = make_internship(self.student)
        resp = self.as_user(self.instructor).get(f'/api/clinical/internships/{internship.pk}/')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue({'internship', 'meetings', 'milestones', 'checklist'} <= set(resp.data))
        self.assertFalse(resp.data['checklist']['ready'])

    def test_missing_record_is_enveloped_404(self):
        resp = self.as_user(self.instructor).get('/api/clinical/internships/9999/')
        self.assertEqual(resp.status_code, 404)
        self.assertFalse(resp.data['success'])

    def test_partial_update_writes_only_given_fields(self):
        internship = make_internship(
            self.student, placement_date=date(2026, 1, 5), notes='keep', agency=self.agency, agency_name='Metro Fire',
        )
        other_agency = make_agency(name='Desert Medics', abbreviation='DM')
        resp = self.as_user(self.lead).put(
            f'/api/clinical/internships/{internship.pk}/',
            {'placement_date': '', 'phase_1_eval_completed': True, 'agency_id': other_agency.pk, 'notes': '  ride-along  '},
            format='json',
        )
        self.assertEqual(resp.status_code, 200, resp.data)
        internship.refresh_from_db()
        self.assertIsNone(internship.placement_date)
        self.assertTrue(internship.phase_1_eval_completed)
        self.assertEqual(internship.agency_name, 'Desert Medics')
        self.assertEqual(internship.notes, 'ride-along')
        self.assertEqual(internship.shift_type, '12_hour')

        resp = self.as_user(self.lead).put(
            f'/api/clinical/internships/{internship.pk}/', {'notes': '   '}, format='json',
        )
        internship.refresh_from_db()
        self.assertIsNone(internship.notes)

    def test_phase_cannot_move_backwards(self):
        internship = make_internship(self.student, current_phase='phase_2_evaluation')
        client = self.as_user(self.lead)
        url = f'/api/clinical/internships/{internship.pk}/'
        resp = client.put(url, {'current_phase': 'phase_1_mentorship'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('Cannot move phase back', resp.data['error'])

        resp = client.put(url, {'current_phase': 'extended'}, format='json')
        self.assertEqual(resp.status_code, 200)
        resp = client.put(url, {'current_phase': 'phase_1_mentorship'}, format='json')
        self.assertEqual(resp.status_code, 200)

    def test_instructor_cannot_edit(self):
        internship = make_internship(self.student)
        resp = self.as_user(self.instructor).put(
            f'/api/clinical/internships/{internship.pk}/', {'status': 'on_track'}, format='json',
        )
        self.assertEqual(resp.status_code, 403)

    def test_roster_includes_unplaced_students(self):
        make_internship(self.student, agency_name='Metro Fire')
        client = self.as_user(self.instructor)
        resp = client.get('/api/clinical/internships/roster/', {'cohortId': self.cohort.pk})
        self.assertEqual(resp.status_code, 200)
        rows = resp.data['rows']
        self.assertEqual([r['hasRecord'] for r in rows], [False, True])
        self.assertEqual(rows[0]['student']['first_name'], 'Ben')
        self.assertIsNone(rows[0]['internship'])
        self.assertEqual(resp.data['stats']['needsPlacement'], 1)

        resp = client.get('/api/clinical/internships/roster/', {'cohortId': self.cohort.pk, 'search': 'metro'})
        self.assertEqual(len(resp.data['rows']), 1)

        resp = client.get('/api/clinical/internships/roster/')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'cohortId is required')

    def test_alerts_and_daily_digest(self):
        today = timezone.localdate()
        make_internship(self.student, status='in_progress', phase_1_eval_scheduled=today - timedelta(days=3))
        make_internship(self.other_student, status='at_risk')
        client = self.as_user(self.lead)

        resp = client.get('/api/clinical/internships/alerts/', {'cohortId': self.cohort.pk})
        self.assertEqual(resp.data['counts'], {'critical': 1, 'action': 1, 'upcoming': 0})
        self.assertEqual(resp.data['critical'][0]['reason'], 'Phase 1 eval overdue')
        self.assertEqual(resp.data['action'][0]['reason'], 'At risk status')

        resp = client.post('/api/clinical/internships/alerts/notify/')
        self.assertTrue(resp.data['sent'])
        self.assertEqual(resp.data['lastSent'], today.isoformat())
        notices = UserNotification.objects.filter(reference_type='internship_critical_digest')
        self.assertEqual(
            sorted(notices.values_list('user_email', flat=True)),
            ['admin@example.com', 'lead_instructor@example.com'],
        )

        resp = client.post('/api/clinical/internships/alerts/notify/')
        self.assertFalse(resp.data['sent'])
        self.assertEqual(notices.count(), 2)

    def test_notify_nremt_once_when_cleared(self):
        internship = make_internship(self.student)
        client = self.as_user(self.lead)
        url = f'/api/clinical/internships/{internship.pk}/notify-nremt/'
        resp = client.post(url)
        self.assertEqual(resp.status_code, 400)
        self.assertIn('not complete', resp.data['error'])

        Internship.objects.filter(pk=internship.pk).update(
            agency=self.agency, preceptor=make_preceptor(self.agency), **CLEARED,
        )
        resp = client.post(url)
        self.assertEqual(resp.status_code, 200, resp.data)
        internship.refresh_from_db()
        self.assertTrue(internship.nremt_notified)
        self.assertEqual(internship.nremt_notified_date, timezone.localdate())
        self.assertTrue(UserNotification.objects.filter(
            user_email='admin@example.com', reference_type='internship_nremt_clearance',
        ).exists())

        resp = client.post(url)
        self.assertEqual(resp.status_code, 400)
        self.assertIn('already sent', resp.data['error'])

    def test_update_reports_clearance_crossing(self):
        fields = dict(CLEARED, phase_2_eval_completed=False)
        internship = make_internship(self.student, agency=self.agency, preceptor=make_preceptor(self.agency), **fields)
        resp = self.as_user(self.lead).put(
            f'/api/clinical/internships/{internship.pk}/', {'phase_2_eval_completed': True}, format='json',
        )
        self.assertTrue(resp.data['clearanceJustMet'])
        self.assertTrue(resp.data['canNotifyNremt'])

    def test_preceptor_assignment_endpoints(self):
        internship = make_internship(self.student)
        first = make_preceptor(self.agency, first='Sam', last='Reed')
        second = make_preceptor(self.agency, first='Jo', last='Park')
        client = self.as_user(self.lead)
        url = f'/api/clinical/internships/{internship.pk}/preceptors/'

        resp = client.post(url, {'preceptor_id': first.pk}, format='json')
        self.assertEqual(resp.status_code, 201)
        first_id = resp.data['assignment']['id']
        client.post(url, {'preceptor_id': second.pk, 'role': 'primary'}, format='json')

        resp = client.get(url)
        self.assertEqual([a['preceptor']['first_name'] for a in resp.data['assignments']], ['Jo', 'Sam'])
        self.assertEqual([a['is_active'] for a in resp.data['assignments']], [True, False])

        resp = client.patch(url, {'assignment_id': first_id, 'role': 'secondary', 'is_active': True}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['assignment']['role'], 'secondary')

        resp = client.delete(f'{url}?assignmentId={first_id}')
        self.assertFalse(resp.data['assignment']['is_active'])

        resp = client.post(url, {}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'preceptor_id is required')

    def test_form_encoded_assignment_deactivation(self):
        internship = make_internship(self.student)
        preceptor = make_preceptor(self.agency)
        client = self.as_user(self.lead)
        url = f'/api/clinical/internships/{internship.pk}/preceptors/'
        assignment_id = client.post(url, {'preceptor_id': preceptor.pk}, format='json').data['assignment']['id']

        resp = client.patch(url, {'assignment_id': assignment_id, 'is_active': 'false'}, format='multipart')
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.data['assignment']['is_active'])

        resp = client.patch(url, {'assignment_id': assignment_id, 'is_active': 'true'}, format='multipart')
        self.assertTrue(resp.data['assignment']['is_active'])

        resp = client.delete(f'{url}?assignmentId=abc')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Assignment not found')


class CloseoutEndpointTests(ClinicalApiTestCase):
    def setUp(self):
        super().setUp()
        self.internship = make_internship(self.student, agency_name='Metro Fire')
        self.base = f'/api/clinical/internships/{self.internship.pk}/closeout/'
        self.media = tempfile.mkdtemp()
        self.override = override_settings(MEDIA_ROOT=self.media)
        self.override.enable()

    def tearDown(self):
        self.override.disable()
        shutil.rmtree(self.media, ignore_errors=True)

    def test_checklist_and_completion(self):
        resp = self.as_user(self.instructor).get(self.base)
        self.assertEqual(resp.status_code, 200)
        checklist = resp.data['checklist']
        self.assertEqual(len(checklist), 8)
        self.assertFalse(resp.data['completed'])

        resp = self.as_user(self.lead).post(self.base, {'checklist': checklist}, format='json')
        self.assertEqual(resp.status_code, 403)

        client = self.as_user(self.admin)
        resp = client.post(self.base, {'checklist': checklist}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('Cannot complete', resp.data['error'])

        # Client-sent auto_checked values are ignored; only overrides count.
        forged = [dict(item, auto_checked=True) for item in checklist]
        resp = client.post(self.base, {'checklist': forged}, format='json')
        self.assertEqual(resp.status_code, 400)

        overridden = [dict(item, manual_override=True) for item in checklist]
        resp = client.post(self.base, {'checklist': overridden}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['completed_by'], 'admin@example.com')

        resp = self.as_user(self.lead).get(self.base + 'summary/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['summary']['student']['name'], 'Ana Lopez')

    def test_summary_before_completion(self):
        resp = self.as_user(self.lead).get(self.base + 'summary/')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Internship has not been marked complete yet')

    def test_document_upload(self):
        client = self.as_user(self.lead)
        url = self.base + 'documents/'
        bad = SimpleUploadedFile('notes.txt', b'hi', content_type='text/plain')
        resp = client.post(url, {'file': bad, 'doc_type': 'other'}, format='multipart')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Invalid file type. Allowed: PDF, JPG, PNG.')

        pdf = SimpleUploadedFile('eval.pdf', b'%PDF-1.4', content_type='application/pdf')
        resp = client.post(url, {'file': pdf, 'doc_type': 'preceptor_eval'}, format='multipart')
        self.assertEqual(resp.status_code, 201)
        doc_id = resp.data['document']['id']

        resp = client.get(url)
        self.assertEqual(len(resp.data['documents']), 1)

        resp = client.delete(f'{url}?docId={doc_id}')
        self.assertTrue(resp.data['success'])
        resp = client.delete(f'{url}?docId={doc_id}')
        self.assertEqual(resp.status_code, 404)

    def test_surveys(self):
        client = self.as_user(self.lead)
        url = self.base + 'surveys/'
        resp = client.post(url, {'survey_type': 'field_preceptor', 'responses': {'q1': 4},
                                 'preceptor_name': 'Sam Reed'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('agency_name is required', resp.data['error'])

        resp = client.post(url, {'survey_type': 'field_preceptor', 'responses': {'q1': 4},
                                 'preceptor_name': 'Sam Reed', 'agency_name': 'Metro Fire'}, format='json')
        self.assertEqual(resp.status_code, 201)
        survey_id = resp.data['survey']['id']
        self.assertEqual(resp.data['survey']['submitted_by'], 'lead_instructor@example.com')

        resp = client.put(f'{url}?surveyId={survey_id}', {'responses': {'q1': 5}}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(CloseoutSurvey.objects.get().responses, {'q1': 5})

        resp = client.delete(f'{url}?surveyId={survey_id}')
        self.assertTrue(resp.data['success'])
        self.assertFalse(CloseoutSurvey.objects.exists())

    def test_non_numeric_ids_are_not_found(self):
        client = self.as_user(self.lead)
        for url in (self.base + 'documents/?docId=abc', self.base + 'surveys/?surveyId=abc'):
            resp = client.delete(url)
            self.assertEqual(resp.status_code, 404, url)
            self.assertFalse(resp.data['success'])

        resp = client.put(self.base + 'surveys/?surveyId=abc', {'responses': {'q1': 1}}, format='json')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['error'], 'Survey not found')

    def test_employment_verification(self):
        client = self.as_user(self.lead)
        url = self.base + 'employment/'
        resp = client.get(url)
        self.assertIsNone(resp.data['verification'])

        resp = client.post(url, {'company_name': 'Metro Fire', 'employment_type': 'full_time'}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertIsNone(resp.data['verification']['submitted_at'])

        resp = client.post(url, {'company_name': 'Again'}, format='json')
        self.assertEqual(resp.status_code, 400)

        resp = client.put(url, {'is_draft': False}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertIsNotNone(resp.data['verification']['submitted_at'])
        self.assertEqual(resp.data['verification']['submitted_by'], 'lead_instructor@example.com')

        resp = client.delete(url)
        self.assertEqual(resp.status_code, 403)
        resp = self.as_user(self.admin).delete(url)
        self.assertTrue(resp.data['success'])
        self.assertFalse(EmploymentVerification.objects.exists())


class SummativeEndpointTests(ClinicalApiTestCase):
    def test_create_grade_and_export(self):
        client = self.as_user(self.instructor)
        scenario = SummativeScenario.objects.get(scenario_number=2)
        resp = client.post('/api/clinical/summative-evaluations/', {
            'scenario_id': scenario.pk,
            'cohort_id': self.cohort.pk,
            'evaluation_date': '2026-05-01',
            'examiner_name': 'Dr. Gray',
            'student_ids': [self.student.pk, self.other_student.pk],
        }, format='json')
        self.assertEqual(resp.status_code, 201, resp.data)
        evaluation = resp.data['evaluation']
        self.assertEqual(len(evaluation['scores']), 2)
        scores_url = f"/api/clinical/summative-evaluations/{evaluation['id']}/scores/"

        resp = client.patch(scores_url, {
            'student_id': self.student.pk,
            'leadership_scene_score': 3, 'patient_assessment_score': 3, 'patient_management_score': 2,
            'interpersonal_score': 2, 'integration_score': 2, 'grading_complete': True,
        }, format='json')
        self.assertEqual(resp.status_code, 200, resp.data)
        self.assertEqual(resp.data['score']['total_score'], 12)
        self.assertTrue(resp.data['score']['passed'])
        self.assertEqual(resp.data['evaluation_status'], 'in_progress')

        resp = client.patch(scores_url, {'student_id': self.student.pk, 'integration_score': 5}, format='json')
        self.assertEqual(resp.status_code, 400)

        resp = client.get(f"/api/clinical/summative-evaluations/{evaluation['id']}/export/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp['Content-Type'], 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        self.assertTrue(resp.content.startswith(b'PK'))

        resp = client.get('/api/clinical/summative-evaluations/', {'studentId': self.student.pk})
        self.assertEqual(len(resp.data['evaluations']), 1)

    def test_group_limit_via_api(self):
        client = self.as_user(self.instructor)
        resp = client.post('/api/clinical/summative-evaluations/', {
            'scenario_id': SummativeScenario.objects.first().pk,
            'evaluation_date': '2026-05-01',
            'examiner_name': 'Dr. Gray',
            'student_ids': [],
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'At least one student is required')

    def test_non_numeric_score_ids(self):
        client = self.as_user(self.lead)
        resp = client.post('/api/clinical/summative-evaluations/', {
            'scenario_id': SummativeScenario.objects.first().pk,
            'evaluation_date': '2026-05-01',
            'examiner_name': 'Dr. Gray',
            'student_ids': [self.student.pk],
        }, format='json')
        scores_url = f"/api/clinical/summative-evaluations/{resp.data['evaluation']['id']}/scores/"

        resp = client.post(scores_url, {'student_id': 'abc'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Student not found')

        resp = client.patch(scores_url, {'score_id': 'abc', 'integration_score': 2}, format='json')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['error'], 'Score not found')

        resp = client.delete(f'{scores_url}?scoreId=abc')
        self.assertEqual(resp.status_code, 404)
        resp = client.delete(f'{scores_url}?studentId=abc')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(EvaluationScore.objects.count(), 1)
