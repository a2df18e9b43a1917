from django.db import models


class UserNotification(models.Model):
    """In-app notification addressed by email.

    `reference_type` + `reference_id` identify what the notice is about and
    are used to avoid repeating reminders.
    """

    class Type(models.TextChoices):
        GENERAL = 'general', 'General'
        CLINICAL = 'clinical', 'Clinical'
        ALERT = 'alert', 'Alert'

    user_email = models.EmailField(db_index=True)
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True, default='')
    type = models.CharField(max_length=16, choices=Type.choices, default=Type.GENERAL)
    category = models.CharField(max_length=32, blank=True, default='')
    link_url = models.CharField(max_length=512, blank=True, default='')
    reference_type = models.CharField(max_length=64, blank=True, default='', db_index=True)
    reference_id = models.CharField(max_length=64, blank=True, default='')
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ('-created_at',)

    def __str__(self):
        return f'{self.user_email}: {self.title}'
