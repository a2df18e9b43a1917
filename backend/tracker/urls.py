from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from notifications.views import InternshipMilestoneCronView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/lab-management/', include('lab_management.urls')),
    path('api/clinical/', include('clinical.urls')),
    path('api/notifications/', include('notifications.urls')),
    path('api/cron/internship-milestones/', InternshipMilestoneCronView.as_view(), name='cron-internship-milestones'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
