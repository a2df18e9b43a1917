from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Staff and student accounts.
    What a user may do is decided by `role`, compared against the ordered
    hierarchy in `accounts.utils.ROLE_LEVELS`.
    """

    class Role(models.TextChoices):
        GUEST = 'guest', 'Guest'
        STUDENT = 'student', 'Student'
        INSTRUCTOR = 'instructor', 'Instructor'
        LEAD_INSTRUCTOR = 'lead_instructor', 'Lead instructor'
        ADMIN = 'admin', 'Admin'
        SUPERADMIN = 'superadmin', 'Superadmin'

    role = models.CharField(max_length=32, choices=Role.choices, default=Role.GUEST)
    phone = models.CharField(max_length=32, blank=True, default='')

    @property
    def display_name(self) -> str:
        full = self.get_full_name().strip()
        return full or self.email or self.username

    def __str__(self):
        return self.email or self.username
