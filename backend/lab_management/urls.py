from django.urls import path

from .views import (
    CohortListView,
    DifficultyRecommendationView,
    ScenarioListView,
    ScenarioVersionListView,
    StudentListView,
)

urlpatterns = [
    path('cohorts/', CohortListView.as_view(), name='lab-cohorts'),
    path('students/', StudentListView.as_view(), name='lab-students'),
    path('scenarios/', ScenarioListView.as_view(), name='lab-scenarios'),
    path('scenarios/<int:pk>/versions/', ScenarioVersionListView.as_view(), name='lab-scenario-versions'),
    path(
        'scenarios/<int:pk>/difficulty-recommendation/',
        DifficultyRecommendationView.as_view(),
        name='lab-scenario-difficulty-recommendation',
    ),
]
