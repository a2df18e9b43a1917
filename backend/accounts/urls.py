from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import MeView, RoleTokenObtainPairView

urlpatterns = [
    path('me/', MeView.as_view(), name='me'),
    path('token/', RoleTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]
