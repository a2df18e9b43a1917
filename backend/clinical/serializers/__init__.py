from .closeout import CloseoutDocumentSerializer, CloseoutSurveySerializer, EmploymentVerificationSerializer
from .directory import AgencySerializer, FieldPreceptorSerializer, PreceptorAssignmentSerializer, PreceptorBriefSerializer
from .internships import (
    InternshipCreateSerializer,
    InternshipMeetingSerializer,
    InternshipSerializer,
    InternshipUpdateSerializer,
)
from .summative import (
    EvaluationScoreSerializer,
    ScoreUpdateSerializer,
    SummativeEvaluationCreateSerializer,
    SummativeEvaluationSerializer,
    SummativeScenarioSerializer,
)

__all__ = [
    'AgencySerializer',
    'CloseoutDocumentSerializer',
    'CloseoutSurveySerializer',
    'EmploymentVerificationSerializer',
    'EvaluationScoreSerializer',
    'FieldPreceptorSerializer',
    'InternshipCreateSerializer',
    'InternshipMeetingSerializer',
    'InternshipSerializer',
    'InternshipUpdateSerializer',
    'PreceptorAssignmentSerializer',
    'PreceptorBriefSerializer',
    'ScoreUpdateSerializer',
    'SummativeEvaluationCreateSerializer',
    'SummativeEvaluationSerializer',
    'SummativeScenarioSerializer',
]
