from django.urls import path

from .views import (
    AgencyListView,
    AlertsNotifyView,
    AlertsView,
    CloseoutDocumentsView,
    CloseoutSummaryView,
    CloseoutSurveysView,
    CloseoutView,
    EmploymentVerificationView,
    EvaluationExportView,
    EvaluationScoresView,
    FieldPreceptorListView,
    InternshipDetailView,
    InternshipListView,
    InternshipPreceptorsView,
    NotifyNremtView,
    RosterView,
    SummativeEvaluationDetailView,
    SummativeEvaluationListView,
    SummativeScenarioListView,
)

urlpatterns = [
    path('agencies/', AgencyListView.as_view(), name='clinical-agencies'),
    path('preceptors/', FieldPreceptorListView.as_view(), name='clinical-preceptors'),

    path('internships/', InternshipListView.as_view(), name='clinical-internships'),
    path('internships/roster/', RosterView.as_view(), name='clinical-internships-roster'),
    path('internships/alerts/', AlertsView.as_view(), name='clinical-internships-alerts'),
    path('internships/alerts/notify/', AlertsNotifyView.as_view(), name='clinical-internships-alerts-notify'),
    path('internships/<int:pk>/', InternshipDetailView.as_view(), name='clinical-internship-detail'),
    path('internships/<int:pk>/notify-nremt/', NotifyNremtView.as_view(), name='clinical-internship-notify-nremt'),
    path('internships/<int:pk>/preceptors/', InternshipPreceptorsView.as_view(), name='clinical-internship-preceptors'),
    path('internships/<int:pk>/closeout/', CloseoutView.as_view(), name='clinical-closeout'),
    path('internships/<int:pk>/closeout/summary/', CloseoutSummaryView.as_view(), name='clinical-closeout-summary'),
    path('internships/<int:pk>/closeout/documents/', CloseoutDocumentsView.as_view(), name='clinical-closeout-documents'),
    path('internships/<int:pk>/closeout/surveys/', CloseoutSurveysView.as_view(), name='clinical-closeout-surveys'),
    path('internships/<int:pk>/closeout/employment/', EmploymentVerificationView.as_view(), name='clinical-closeout-employment'),

    path('summative-scenarios/', SummativeScenarioListView.as_view(), name='clinical-summative-scenarios'),
    path('summative-evaluations/', SummativeEvaluationListView.as_view(), name='clinical-summative-evaluations'),
    path('summative-evaluations/<int:pk>/', SummativeEvaluationDetailView.as_view(), name='clinical-summative-evaluation-detail'),
    path('summative-evaluations/<int:pk>/scores/', EvaluationScoresView.as_view(), name='clinical-summative-scores'),
    path('summative-evaluations/<int:pk>/export/', EvaluationExportView.as_view(), name='clinical-summative-export'),
]
