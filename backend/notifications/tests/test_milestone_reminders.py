from datetime import date, timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import User
from clinical.models import Internship
from lab_management.models import Cohort, Program, Student
from notifications.models import UserNotification
from notifications.services import milestone_reminders

TODAY = date(2026, 3, 10)


class MilestoneSweepTests(TestCase):
    def setUp(self):
        program = Program.objects.create(name='Paramedic', abbreviation='PM')
        self.cohort = Cohort.objects.create(program=program, cohort_number=12)
        User.objects.create(username='coord', email='coord@example.com', role='admin')
        User.objects.create(username='ivy', email='ivy@example.com', role='instructor')
        self.student = Student.objects.create(first_name='Ana', last_name='Lopez', email='ana@example.com', cohort=self.cohort)

    def internship(self, student=None, **fields):
        fields.setdefault('status', 'in_progress')
        return Internship.objects.create(student=student or self.student, cohort=self.cohort, **fields)

    def sent(self):
        return list(UserNotification.objects.order_by('user_email', 'reference_type', 'reference_id')
                    .values_list('user_email', 'reference_type', 'reference_id'))

    def test_phase_one_and_closeout_reminders(self):
        internship = self.internship(
            internship_start_date=TODAY - timedelta(days=28),
            expected_end_date=TODAY + timedelta(days=14),
        )
        result = milestone_reminders.run_sweep(TODAY)
        self.assertEqual(result.internships_checked, 1)
        self.assertEqual(result.notifications_sent, 4)
        self.assertEqual(result.errors, [])
        pk = str(internship.pk)
        self.assertEqual(self.sent(), [
            ('ana@example.com', 'internship_closeout_due', pk),
            ('ana@example.com', 'internship_phase1_eval_due', pk),
            ('coord@example.com', 'internship_milestone_instructor', f'{pk}:closeout'),
            ('coord@example.com', 'internship_milestone_instructor', f'{pk}:phase1'),
        ])

        student_notice = UserNotification.objects.get(reference_type='internship_phase1_eval_due')
        self.assertEqual(student_notice.title, 'Phase 1 Evaluation Coming Up')
        self.assertIn('due in 2 days (Mar 12, 2026)', student_notice.message)
        closeout = UserNotification.objects.get(user_email='ana@example.com', reference_type='internship_closeout_due')
        self.assertEqual(closeout.title, 'Internship Closeout in 14 Days')

    def test_second_run_same_day_sends_nothing(self):
        self.internship(internship_start_date=TODAY - timedelta(days=30), expected_end_date=TODAY + timedelta(days=7))
        first = milestone_reminders.run_sweep(TODAY)
        second = milestone_reminders.run_sweep(TODAY)
        self.assertEqual(first.notifications_sent, 4)
        self.assertEqual(second.notifications_sent, 0)

    def test_due_today_wording(self):
        self.internship(internship_start_date=TODAY - timedelta(days=30))
        milestone_reminders.run_sweep(TODAY)
        notice = UserNotification.objects.get(user_email='ana@example.com')
        self.assertEqual(notice.title, 'Phase 1 Evaluation Due Today')
        admin_notice = UserNotification.objects.get(user_email='coord@example.com')
        self.assertIn('is due today', admin_notice.message)

    def test_phase_two_window(self):
        self.internship(expected_end_date=TODAY + timedelta(days=37))
        self.assertEqual(milestone_reminders.run_sweep(TODAY).notifications_sent, 2)
        self.assertTrue(UserNotification.objects.filter(reference_type='internship_phase2_eval_due').exists())

    def test_outside_windows_and_completed_evals(self):
        self.internship(
            internship_start_date=TODAY - timedelta(days=10),
            expected_end_date=TODAY + timedelta(days=40),
        )
        other = Student.objects.create(first_name='Ben', last_name='Cole', email='ben@example.com', cohort=self.cohort)
        self.internship(other, internship_start_date=TODAY - timedelta(days=28), phase_1_eval_completed=True)
        result = milestone_reminders.run_sweep(TODAY)
        self.assertEqual(result.internships_checked, 2)
        self.assertEqual(result.notifications_sent, 0)

    def test_only_active_records(self):
        start = TODAY - timedelta(days=28)
        self.internship(status='completed', internship_start_date=start)
        self.internship(
            Student.objects.create(first_name='Ben', last_name='Cole', cohort=self.cohort),
            status='at_risk', closeout_completed=True, internship_start_date=start,
        )
        self.internship(
            Student.objects.create(first_name='Cy', last_name='Diaz', cohort=self.cohort),
            status='not_started', internship_start_date=start,
        )
        self.assertEqual(milestone_reminders.run_sweep(TODAY).internships_checked, 0)

    def test_student_without_email_still_alerts_coordinators(self):
        quiet = Student.objects.create(first_name='Cy', last_name='Diaz', email='', cohort=self.cohort)
        self.internship(quiet, internship_start_date=TODAY - timedelta(days=25))
        result = milestone_reminders.run_sweep(TODAY)
        self.assertEqual(result.notifications_sent, 1)
        notice = UserNotification.objects.get()
        self.assertEqual(notice.title, 'Phase 1 Eval Due: Cy Diaz')


class SweepEntryPointTests(TestCase):
    def setUp(self):
        program = Program.objects.create(name='Paramedic', abbreviation='PM')
        cohort = Cohort.objects.create(program=program, cohort_number=3)
        student = Student.objects.create(first_name='Ana', last_name='Lopez', email='ana@example.com', cohort=cohort)
        Internship.objects.create(
            student=student, cohort=cohort, status='on_track',
            internship_start_date=TODAY - timedelta(days=27),
        )

    def test_management_command(self):
        out = StringIO()
        call_command('send_internship_milestones', '--date', TODAY.isoformat(), stdout=out)
        self.assertIn('Done. Internships checked: 1, notifications sent: 1', out.getvalue())

    @override_settings(CRON_SECRET='s3cret')
    def test_cron_endpoint_requires_secret(self):
        client = APIClient()
        resp = client.get('/api/cron/internship-milestones/')
        self.assertEqual(resp.status_code, 401)
        self.assertFalse(resp.data['success'])

        resp = client.get('/api/cron/internship-milestones/', HTTP_AUTHORIZATION='Bearer wrong')
        self.assertEqual(resp.status_code, 401)

        resp = client.get('/api/cron/internship-milestones/', HTTP_AUTHORIZATION='Bearer s3cret')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data['success'])
        self.assertEqual(resp.data['internships_checked'], 1)
        self.assertEqual(set(resp.data), {'success', 'internships_checked', 'notifications_sent', 'errors'})

    @override_settings(CRON_SECRET='')
    def test_cron_endpoint_disabled_without_secret(self):
        resp = APIClient().get('/api/cron/internship-milestones/', HTTP_AUTHORIZATION='Bearer ')
        self.assertEqual(resp.status_code, 401)
