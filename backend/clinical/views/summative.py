from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from clinical.models import EvaluationScore, SummativeEvaluation, SummativeScenario
from clinical.serializers import (
    EvaluationScoreSerializer,
    ScoreUpdateSerializer,
    SummativeEvaluationCreateSerializer,
    SummativeEvaluationSerializer,
    SummativeScenarioSerializer,
)
from clinical.services import export, summative
from tracker.exceptions import error_response

from .common import ClinicalView, int_param, truthy


def evaluation_queryset():
    return (
        SummativeEvaluation.objects.select_related('scenario', 'cohort__program')
        .prefetch_related('scores__student', 'scores__graded_by')
    )


class SummativeScenarioListView(ClinicalView, APIView):
    def get(self, request):
        qs = SummativeScenario.objects.all()
        if not truthy(request.query_params.get('includeInactive')):
            qs = qs.filter(is_active=True)
        return Response({'success': True, 'scenarios': SummativeScenarioSerializer(qs, many=True).data})


class SummativeEvaluationListView(ClinicalView, APIView):
    # Examiners are instructors; they open sessions and grade them.
    min_role_by_method = {}

    def get(self, request):
        qs = evaluation_queryset()
        internship_id = int_param(request, 'internshipId')
        if internship_id:
            qs = qs.filter(internship_id=internship_id)
        cohort_id = int_param(request, 'cohortId')
        if cohort_id:
            qs = qs.filter(cohort_id=cohort_id)
        student_id = int_param(request, 'studentId')
        if student_id:
            qs = qs.filter(scores__student_id=student_id).distinct()
        return Response({'success': True, 'evaluations': SummativeEvaluationSerializer(qs, many=True).data})

    def post(self, request):
        serializer = SummativeEvaluationCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        evaluation = serializer.save()
        evaluation = evaluation_queryset().get(pk=evaluation.pk)
        return Response({'success': True, 'evaluation': SummativeEvaluationSerializer(evaluation).data},
                        status=status.HTTP_201_CREATED)


class SummativeEvaluationDetailView(ClinicalView, APIView):
    def get(self, request, pk: int):
        evaluation = get_object_or_404(evaluation_queryset(), pk=pk)
        return Response({'success': True, 'evaluation': SummativeEvaluationSerializer(evaluation).data})


class EvaluationScoresView(ClinicalView, APIView):
    min_role_by_method = {'DELETE': 'lead_instructor'}

    def post(self, request, pk: int):
        evaluation = get_object_or_404(SummativeEvaluation, pk=pk)
        score = summative.add_student(evaluation, request.data.get('student_id'))
        return Response({'success': True, 'score': EvaluationScoreSerializer(score).data},
                        status=status.HTTP_201_CREATED)

    def patch(self, request, pk: int):
        evaluation = get_object_or_404(SummativeEvaluation, pk=pk)
        serializer = ScoreUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            score = summative.update_score(
                evaluation,
                serializer.validated_data,
                user=request.user,
                score_id=request.data.get('score_id'),
                student_id=request.data.get('student_id'),
            )
        except EvaluationScore.DoesNotExist as exc:
            return error_response(str(exc), status_code=status.HTTP_404_NOT_FOUND)
        evaluation.refresh_from_db(fields=['status'])
        return Response({
            'success': True,
            'score': EvaluationScoreSerializer(score).data,
            'evaluation_status': evaluation.status,
        })

    def delete(self, request, pk: int):
        evaluation = get_object_or_404(SummativeEvaluation, pk=pk)
        try:
            summative.remove_student(
                evaluation,
                score_id=request.query_params.get('scoreId'),
                student_id=request.query_params.get('studentId'),
            )
        except EvaluationScore.DoesNotExist as exc:
            return error_response(str(exc), status_code=status.HTTP_404_NOT_FOUND)
        return Response({'success': True})


class EvaluationExportView(ClinicalView, APIView):
    def get(self, request, pk: int):
        evaluation = get_object_or_404(SummativeEvaluation.objects.select_related('scenario', 'cohort__program'), pk=pk)
        content = export.evaluation_workbook(evaluation, student_id=int_param(request, 'studentId'))
        filename = f'summative_{evaluation.pk}_{evaluation.evaluation_date.isoformat()}.xlsx'
        response = HttpResponse(content, content_type=export.XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response
