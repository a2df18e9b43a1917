from datetime import date
from unittest import mock

from django.core import mail
from django.core.cache import cache
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import User
from notifications.models import UserNotification
from notifications.services import daily_gate, notification_service

TODAY = date(2026, 3, 10)


class CreateNotificationTests(TestCase):
    def test_creates_row(self):
        ok = notification_service.create_notification(
            'ana@example.com', 'Hello', 'Body', reference_type='thing', reference_id=5,
        )
        self.assertTrue(ok)
        row = UserNotification.objects.get()
        self.assertEqual(row.reference_id, '5')
        self.assertEqual(row.type, 'general')
        self.assertEqual(len(mail.outbox), 0)

    def test_blank_recipient_is_skipped(self):
        self.assertFalse(notification_service.create_notification('', 'Hello'))
        self.assertFalse(UserNotification.objects.exists())

    def test_database_failure_is_reported_not_raised(self):
        with mock.patch.object(UserNotification.objects, 'create', side_effect=DatabaseError('down')):
            with self.assertLogs('notifications.services.notification_service', level='ERROR'):
                ok = notification_service.create_notification('ana@example.com', 'Hello')
        self.assertFalse(ok)

    @override_settings(CLINICAL_NOTIFICATION_EMAIL_ENABLED=True, SITE_URL='https://tracker.example.com')
    def test_email_fan_out(self):
        notification_service.create_notification('ana@example.com', 'Eval due', 'Soon', link_url='/clinical/internships/3')
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, 'Eval due')
        self.assertIn('https://tracker.example.com/clinical/internships/3', mail.outbox[0].body)


class DailyGateTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.calls = []

    def action(self):
        self.calls.append(1)

    def test_runs_once_per_day(self):
        self.assertTrue(daily_gate.run_once_per_day('alerts', self.action, TODAY))
        self.assertFalse(daily_gate.run_once_per_day('alerts', self.action, TODAY))
        self.assertEqual(daily_gate.last_sent('alerts'), '2026-03-10')
        self.assertTrue(daily_gate.run_once_per_day('alerts', self.action, date(2026, 3, 11)))
        self.assertEqual(len(self.calls), 2)

    def test_keys_are_independent(self):
        daily_gate.run_once_per_day('a', self.action, TODAY)
        self.assertTrue(daily_gate.run_once_per_day('b', self.action, TODAY))

    def test_failure_is_swallowed_and_not_recorded(self):
        def boom():
            raise RuntimeError('smtp down')

        with self.assertLogs('notifications.services.daily_gate', level='ERROR'):
            self.assertFalse(daily_gate.run_once_per_day('alerts', boom, TODAY))
        self.assertFalse(daily_gate.already_ran('alerts', TODAY))
        self.assertTrue(daily_gate.run_once_per_day('alerts', self.action, TODAY))


class NotificationApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create(username='ana', email='ana@example.com', role='student')
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.mine = UserNotification.objects.create(user_email='ana@example.com', title='One')
        UserNotification.objects.create(user_email='ana@example.com', title='Two', is_read=True)
        self.theirs = UserNotification.objects.create(user_email='ben@example.com', title='Other')

    def test_lists_own_notifications(self):
        resp = self.client.get('/api/notifications/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(sorted(n['title'] for n in resp.data['notifications']), ['One', 'Two'])
        self.assertEqual(resp.data['unread_count'], 1)

        resp = self.client.get('/api/notifications/', {'unreadOnly': 'true'})
        self.assertEqual([n['title'] for n in resp.data['notifications']], ['One'])

    def test_mark_read(self):
        resp = self.client.post(f'/api/notifications/{self.mine.pk}/read/')
        self.assertEqual(resp.status_code, 200)
        self.mine.refresh_from_db()
        self.assertTrue(self.mine.is_read)
        self.assertIsNotNone(self.mine.read_at)

        resp = self.client.post(f'/api/notifications/{self.theirs.pk}/read/')
        self.assertEqual(resp.status_code, 404)
