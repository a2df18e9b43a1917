import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from clinical.models import Internship
from clinical.serializers import (
    InternshipCreateSerializer,
    InternshipMeetingSerializer,
    InternshipSerializer,
    InternshipUpdateSerializer,
    PreceptorAssignmentSerializer,
)
from clinical.services import alerts as alert_service
from clinical.services import checklists, milestones, preceptor_assignment, roster
from clinical.services import internships as internship_service
from clinical.services.milestones import to_date
from lab_management.models import Student
from lab_management.serializers import StudentSerializer
from notifications.services import daily_gate
from tracker.exceptions import error_response

from .common import ClinicalView, actor, int_param, today, truthy

logger = logging.getLogger(__name__)


def internship_queryset():
    return Internship.objects.select_related('student', 'preceptor', 'agency', 'cohort__program')


def internship_payload(internship, milestone_result=None, when=None) -> dict:
    data = InternshipSerializer(internship).data
    m = milestone_result or milestones.evaluate_internship(internship, when or today())
    data['milestones'] = m.as_dict()
    return data


class InternshipListView(ClinicalView, APIView):
    def get(self, request):
        qs = internship_queryset()
        cohort_id = int_param(request, 'cohortId')
        if cohort_id:
            qs = qs.filter(cohort_id=cohort_id)
        phase = request.query_params.get('phase')
        if phase:
            qs = qs.filter(current_phase=phase)
        status_filter = request.query_params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter)
        agency_id = int_param(request, 'agencyId')
        if agency_id:
            qs = qs.filter(agency_id=agency_id)

        now = today()
        rows = [internship_payload(i, when=now) for i in qs]
        return Response({'success': True, 'internships': rows})

    def post(self, request):
        serializer = InternshipCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        internship = serializer.save()
        return Response({'success': True, 'internship': internship_payload(internship)},
                        status=status.HTTP_201_CREATED)


class InternshipDetailView(ClinicalView, APIView):
    def get(self, request, pk: int):
        internship = get_object_or_404(internship_queryset(), pk=pk)
        meetings = internship.meetings.all()
        return Response({
            'success': True,
            'internship': InternshipSerializer(internship).data,
            'meetings': InternshipMeetingSerializer(meetings, many=True).data,
            'milestones': milestones.evaluate_internship(internship, today()).as_dict(),
            'checklist': checklists.nremt_clearance(internship).as_dict(),
        })

    def put(self, request, pk: int):
        internship = get_object_or_404(internship_queryset(), pk=pk)
        before = checklists.nremt_clearance(internship)
        serializer = InternshipUpdateSerializer(internship, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        internship = serializer.save()
        after = checklists.nremt_clearance(internship)
        logger.info('%s', {'event': 'internship_updated', 'internship_id': internship.pk,
                           'fields': sorted(serializer.validated_data.keys()), 'by': actor(request.user)})
        return Response({
            'success': True,
            'internship': internship_payload(internship),
            'checklist': after.as_dict(),
            'clearanceJustMet': checklists.crossed_into_complete(before, after),
            'canNotifyNremt': after.ready and not internship.nremt_notified,
        })


def _row_payload(row) -> dict:
    if isinstance(row, roster.PlacedRow):
        internship = InternshipSerializer(row.internship).data
        return {
            'hasRecord': True,
            'student': StudentSerializer(row.student).data,
            'internship': internship,
            'milestones': row.milestones.as_dict(),
        }
    return {
        'hasRecord': False,
        'student': StudentSerializer(row.student).data,
        'internship': None,
        'milestones': None,
    }


class RosterView(ClinicalView, APIView):
    """Every student in a cohort, placed or not."""

    def get(self, request):
        cohort_id = int_param(request, 'cohortId')
        if not cohort_id:
            return error_response('cohortId is required')

        students = list(Student.objects.filter(cohort_id=cohort_id))
        internships = list(internship_queryset().filter(cohort_id=cohort_id))
        params = request.query_params
        filters = roster.RosterFilters(
            search=params.get('search') or '',
            phase=params.get('phase') or '',
            status=params.get('status') or '',
            agency_id=int_param(request, 'agencyId'),
            with_records_only=truthy(params.get('withRecordsOnly')),
            overdue_only=truthy(params.get('overdueOnly')),
            due_this_week=truthy(params.get('dueThisWeek')),
            incomplete_only=truthy(params.get('incompleteOnly')),
        )
        rows = roster.build_rows(students, internships, today())
        rows = roster.sort_rows(r for r in rows if roster.matches(r, filters))
        return Response({
            'success': True,
            'rows': [_row_payload(r) for r in rows],
            'stats': roster.roster_stats(students, internships),
        })


def _alert_payload(alert) -> dict:
    internship = alert.record
    return {
        'id': internship.pk,
        'student': {'id': internship.student_id, 'name': internship.student.full_name},
        'agency_name': internship.agency_name or None,
        'current_phase': internship.current_phase,
        'status': internship.status,
        'reason': alert.reason,
        'milestones': alert.milestones.as_dict(),
    }


def alert_records(cohort_id=None):
    qs = internship_queryset().exclude(status__in=milestones.INACTIVE_STATUSES)
    if cohort_id:
        qs = qs.filter(cohort_id=cohort_id)
    return qs


class AlertsView(ClinicalView, APIView):
    def get(self, request):
        buckets = milestones.classify_alerts(alert_records(int_param(request, 'cohortId')), today())
        return Response({
            'success': True,
            'critical': [_alert_payload(a) for a in buckets.critical],
            'action': [_alert_payload(a) for a in buckets.action],
            'upcoming': [_alert_payload(a) for a in buckets.upcoming],
            'counts': buckets.counts(),
        })


class AlertsNotifyView(ClinicalView, APIView):
    """Send coordinators a digest of critical alerts, at most once a day per caller."""

    def post(self, request):
        cohort_id = int_param(request, 'cohortId')
        now = today()
        buckets = milestones.classify_alerts(alert_records(cohort_id), now)
        if not buckets.critical:
            return Response({'success': True, 'sent': False, 'critical': 0})

        key = f'internship-alerts:{request.user.pk}:{cohort_id or "all"}'
        sent = daily_gate.run_once_per_day(key, lambda: alert_service.send_critical_digest(buckets.critical), now)
        return Response({
            'success': True,
            'sent': sent,
            'critical': len(buckets.critical),
            'lastSent': daily_gate.last_sent(key),
        })


class NotifyNremtView(ClinicalView, APIView):
    def post(self, request, pk: int):
        internship = get_object_or_404(internship_queryset(), pk=pk)
        internship = internship_service.notify_nremt_clearance(internship, request.user, today())
        return Response({'success': True, 'internship': InternshipSerializer(internship).data})


class InternshipPreceptorsView(ClinicalView, APIView):
    def get(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        assignments = preceptor_assignment.list_assignments(internship)
        return Response({'success': True, 'assignments': PreceptorAssignmentSerializer(assignments, many=True).data})

    def post(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        data = request.data
        assignment = preceptor_assignment.assign_preceptor(
            internship,
            data.get('preceptor_id'),
            today(),
            role=data.get('role') or 'primary',
            start_date=to_date(data.get('start_date')),
            notes=data.get('notes'),
            assigned_by=actor(request.user),
        )
        return Response({'success': True, 'assignment': PreceptorAssignmentSerializer(assignment).data},
                        status=status.HTTP_201_CREATED)

    def patch(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        data = request.data
        changes = {}
        for key in ('role', 'is_active', 'notes'):
            if key in data:
                changes[key] = data.get(key)
        if 'end_date' in data:
            changes['end_date'] = to_date(data.get('end_date'))
        assignment = preceptor_assignment.update_assignment(
            internship, data.get('assignment_id') or data.get('assignmentId'), today(), **changes,
        )
        return Response({'success': True, 'assignment': PreceptorAssignmentSerializer(assignment).data})

    def delete(self, request, pk: int):
        internship = get_object_or_404(Internship, pk=pk)
        assignment = preceptor_assignment.end_assignment(internship, request.query_params.get('assignmentId'), today())
        return Response({'success': True, 'assignment': PreceptorAssignmentSerializer(assignment).data})
