import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions_api import HasMinRole
from tracker.exceptions import error_response

from .models import Cohort, Scenario, Student
from .serializers import CohortSerializer, ScenarioSerializer, ScenarioVersionSerializer, StudentSerializer
from .services import difficulty

logger = logging.getLogger(__name__)


def _truthy(value) -> bool:
    return str(value or '').strip().lower() in ('1', 'true', 'yes')


class CohortListView(APIView):
    permission_classes = (HasMinRole,)
    min_role = 'instructor'

    def get(self, request):
        qs = Cohort.objects.select_related('program')
        if _truthy(request.query_params.get('activeOnly')):
            qs = qs.filter(is_active=True)
        return Response({'success': True, 'cohorts': CohortSerializer(qs, many=True).data})


class StudentListView(APIView):
    permission_classes = (HasMinRole,)
    min_role = 'instructor'

    def get(self, request):
        qs = Student.objects.all()
        cohort_id = request.query_params.get('cohortId')
        if cohort_id:
            qs = qs.filter(cohort_id=cohort_id)
        status_filter = request.query_params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter)
        return Response({'success': True, 'students': StudentSerializer(qs, many=True).data})


class ScenarioListView(APIView):
    permission_classes = (HasMinRole,)
    min_role = 'instructor'
    min_role_by_method = {'POST': 'lead_instructor'}

    def get(self, request):
        qs = Scenario.objects.all()
        if not _truthy(request.query_params.get('includeInactive')):
            qs = qs.filter(is_active=True)
        return Response({'success': True, 'scenarios': ScenarioSerializer(qs, many=True).data})

    def post(self, request):
        serializer = ScenarioSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        scenario = serializer.save()
        return Response({'success': True, 'scenario': ScenarioSerializer(scenario).data},
                        status=status.HTTP_201_CREATED)


class ScenarioVersionListView(APIView):
    permission_classes = (HasMinRole,)
    min_role = 'instructor'

    def get(self, request, pk: int):
        scenario = get_object_or_404(Scenario, pk=pk)
        versions = scenario.versions.select_related('created_by')
        return Response({'success': True, 'versions': ScenarioVersionSerializer(versions, many=True).data})


class DifficultyRecommendationView(APIView):
    """GET analyses assessment outcomes; POST applies a new difficulty."""

    permission_classes = (HasMinRole,)
    min_role = 'instructor'
    min_role_by_method = {'POST': 'lead_instructor'}

    def get(self, request, pk: int):
        scenario = get_object_or_404(Scenario, pk=pk)
        rec = difficulty.recommend_for_scenario(scenario)
        payload = {'success': True}
        payload.update(rec.as_dict())
        return Response(payload)

    def post(self, request, pk: int):
        scenario = get_object_or_404(Scenario, pk=pk)
        previous = scenario.difficulty
        try:
            version = difficulty.apply_difficulty_change(scenario, request.data.get('new_difficulty'), request.user)
        except difficulty.DifficultyChangeError as exc:
            return error_response(str(exc))
        return Response({
            'success': True,
            'scenario': ScenarioSerializer(scenario).data,
            'previous_difficulty': previous,
            'new_difficulty': scenario.difficulty,
            'version_number': version.version_number,
        })
