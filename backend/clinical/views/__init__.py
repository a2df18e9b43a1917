from .closeout import (
    CloseoutDocumentsView,
    CloseoutSummaryView,
    CloseoutSurveysView,
    CloseoutView,
    EmploymentVerificationView,
)
from .directory import AgencyListView, FieldPreceptorListView
from .internships import (
    AlertsNotifyView,
    AlertsView,
    InternshipDetailView,
    InternshipListView,
    InternshipPreceptorsView,
    NotifyNremtView,
    RosterView,
)
from .summative import (
    EvaluationExportView,
    EvaluationScoresView,
    SummativeEvaluationDetailView,
    SummativeEvaluationListView,
    SummativeScenarioListView,
)

__all__ = [
    'AgencyListView',
    'AlertsNotifyView',
    'AlertsView',
    'CloseoutDocumentsView',
    'CloseoutSummaryView',
    'CloseoutSurveysView',
    'CloseoutView',
    'EmploymentVerificationView',
    'EvaluationExportView',
    'EvaluationScoresView',
    'FieldPreceptorListView',
    'InternshipDetailView',
    'InternshipListView',
    'InternshipPreceptorsView',
    'NotifyNremtView',
    'RosterView',
    'SummativeEvaluationDetailView',
    'SummativeEvaluationListView',
    'SummativeScenarioListView',
]
