from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from clinical.models import Agency, FieldPreceptor
from clinical.serializers import AgencySerializer, FieldPreceptorSerializer

from .common import ClinicalView, int_param, truthy


class AgencyListView(ClinicalView, APIView):
    def get(self, request):
        qs = Agency.objects.all()
        agency_type = request.query_params.get('type')
        if agency_type:
            qs = qs.filter(type=agency_type)
        if truthy(request.query_params.get('activeOnly')):
            qs = qs.filter(is_active=True)
        return Response({'success': True, 'agencies': AgencySerializer(qs, many=True).data})

    def post(self, request):
        serializer = AgencySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        agency = serializer.save()
        return Response({'success': True, 'agency': AgencySerializer(agency).data}, status=status.HTTP_201_CREATED)


class FieldPreceptorListView(ClinicalView, APIView):
    def get(self, request):
        qs = FieldPreceptor.objects.select_related('agency')
        if truthy(request.query_params.get('activeOnly')):
            qs = qs.filter(is_active=True)
        agency_id = int_param(request, 'agencyId')
        if agency_id:
            qs = qs.filter(agency_id=agency_id)
        return Response({'success': True, 'preceptors': FieldPreceptorSerializer(qs, many=True).data})

    def post(self, request):
        serializer = FieldPreceptorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        preceptor = serializer.save()
        return Response({'success': True, 'preceptor': FieldPreceptorSerializer(preceptor).data},
                        status=status.HTTP_201_CREATED)
