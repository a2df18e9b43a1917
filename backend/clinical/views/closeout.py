import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from clinical.models import CloseoutDocument, CloseoutSurvey, EmploymentVerification, Internship
from clinical.serializers import (
    CloseoutDocumentSerializer,
    CloseoutSurveySerializer,
    EmploymentVerificationSerializer,
)
from clinical.services import closeout
from tracker.exceptions import error_response

from .common import ClinicalView, actor

logger = logging.getLogger(__name__)


class CloseoutView(ClinicalView, APIView):
    """Closeout checklist; POST marks the internship complete."""

    min_role_by_method = {'POST': 'admin'}

    def get(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        hours = closeout.total_hours(internship)
        items = closeout.build_checklist(internship, hours)
        return Response({
            'success': True,
            'checklist': [item.as_dict() for item in items],
            'hours': {'total': float(hours), 'required': closeout.required_hours()},
            'completed': bool(internship.completed_at),
            'completed_at': internship.completed_at,
            'completed_by': internship.completed_by or None,
        })

    def post(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        overrides = closeout.overrides_from_payload(request.data.get('checklist'))
        internship = closeout.mark_complete(internship, request.user, overrides)
        return Response({
            'success': True,
            'completed_at': internship.completed_at,
            'completed_by': internship.completed_by,
        })


class CloseoutSummaryView(ClinicalView, APIView):
    min_role = 'lead_instructor'

    def get(self, request, pk: int):
        internship = get_object_or_404(
            Internship.objects.select_related('student', 'cohort__program', 'preceptor'), pk=pk,
        )
        return Response({'success': True, 'summary': closeout.build_summary(internship)})


class CloseoutDocumentsView(ClinicalView, APIView):
    def get(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        docs = internship.closeout_documents.all()
        return Response({
            'success': True,
            'documents': CloseoutDocumentSerializer(docs, many=True, context={'request': request}).data,
        })

    def post(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        doc = closeout.store_document(
            internship, request.FILES.get('file'), request.data.get('doc_type') or '', request.user,
        )
        logger.info('%s', {'event': 'closeout_document_uploaded', 'internship_id': internship.pk,
                           'doc_type': doc.doc_type, 'size': doc.size, 'by': actor(request.user)})
        return Response({
            'success': True,
            'document': CloseoutDocumentSerializer(doc, context={'request': request}).data,
        }, status=status.HTTP_201_CREATED)

    def delete(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        try:
            closeout.delete_document(internship, request.query_params.get('docId'))
        except CloseoutDocument.DoesNotExist as exc:
            return error_response(str(exc), status_code=status.HTTP_404_NOT_FOUND)
        return Response({'success': True})


class CloseoutSurveysView(ClinicalView, APIView):
    def _survey(self, request, internship):
        survey_id = request.query_params.get('surveyId') or request.data.get('id')
        try:
            survey_id = int(survey_id)
        except (TypeError, ValueError):
            return None
        return CloseoutSurvey.objects.filter(pk=survey_id, internship=internship).first()

    def get(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        surveys = internship.closeout_surveys.all()
        return Response({'success': True, 'surveys': CloseoutSurveySerializer(surveys, many=True).data})

    def post(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        serializer = CloseoutSurveySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        survey = serializer.save(internship=internship, submitted_by=actor(request.user))
        return Response({'success': True, 'survey': CloseoutSurveySerializer(survey).data},
                        status=status.HTTP_201_CREATED)

    def put(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        survey = self._survey(request, internship)
        if survey is None:
            return error_response('Survey not found', status_code=status.HTTP_404_NOT_FOUND)
        serializer = CloseoutSurveySerializer(survey, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        survey = serializer.save()
        return Response({'success': True, 'survey': CloseoutSurveySerializer(survey).data})

    def delete(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        survey = self._survey(request, internship)
        if survey is None:
            return error_response('Survey not found', status_code=status.HTTP_404_NOT_FOUND)
        survey.delete()
        return Response({'success': True})


class EmploymentVerificationView(ClinicalView, APIView):
    min_role_by_method = {
        'POST': 'lead_instructor',
        'PUT': 'lead_instructor',
        'DELETE': 'admin',
    }

    def get(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        verification = EmploymentVerification.objects.filter(internship=internship).first()
        data = EmploymentVerificationSerializer(verification).data if verification else None
        return Response({'success': True, 'verification': data})

    def post(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        if EmploymentVerification.objects.filter(internship=internship).exists():
            return error_response('Employment verification already exists; use PUT to update')
        serializer = EmploymentVerificationSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        verification = serializer.save(internship=internship)
        return Response({'success': True, 'verification': EmploymentVerificationSerializer(verification).data},
                        status=status.HTTP_201_CREATED)

    def put(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        verification = EmploymentVerification.objects.filter(internship=internship).first()
        if verification is None:
            return error_response('Employment verification not found', status_code=status.HTTP_404_NOT_FOUND)
        serializer = EmploymentVerificationSerializer(
            verification, data=request.data, partial=True, context={'request': request},
        )
        serializer.is_valid(raise_exception=True)
        verification = serializer.save()
        return Response({'success': True, 'verification': EmploymentVerificationSerializer(verification).data})

    def delete(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        deleted, _ = EmploymentVerification.objects.filter(internship=internship).delete()
        if not deleted:
            return error_response('Employment verification not found', status_code=status.HTTP_404_NOT_FOUND)
        return Response({'success': True})
