from django.contrib import admin

from .models import UserNotification


class UserNotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user_email', 'title', 'category', 'reference_type', 'is_read', 'created_at')
    list_filter = ('category', 'reference_type', 'is_read')
    search_fields = ('user_email', 'title')
    readonly_fields = ('created_at',)


admin.site.register(UserNotification, UserNotificationAdmin)
