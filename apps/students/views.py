#apps/students/views.py:

import logging

from django.db.models import Q
from django_filters import rest_framework as filters
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.authentication.permissions import TienePermisoRol
from .models import Estudiante
from .serializers import EstudianteSerializer, EstudianteWriteSerializer

logger = logging.getLogger(__name__)

# Campos de la API aceptados en ``orderBy``
ORDENAMIENTOS = {
    'firstName': 'nombre',
    'lastName': 'apellido',
    'rut': 'rut',
    'grade': 'curso',
    'academicYear': 'anio_academico',
    'birthDate': 'fecha_nacimiento',
    'createdAt': 'created_at',
}


class EstudianteFilter(filters.FilterSet):
    search = filters.CharFilter(method='filtrar_busqueda')
    grade = filters.CharFilter(field_name='curso')
    studentType = filters.CharFilter(field_name='tipo_estudiante')
    isActive = filters.BooleanFilter(field_name='is_active')

    class Meta:
        model = Estudiante
        fields = ['search', 'grade', 'studentType', 'isActive']

    def filtrar_busqueda(self, queryset, name, value):
        """Busca por nombre, apellido o RUT (con o sin puntos)"""
        rut = value.replace('.', '').strip()
        return queryset.filter(
            Q(nombre__icontains=value) |
            Q(apellido__icontains=value) |
            Q(rut__icontains=rut)
        )


class EstudianteViewSet(viewsets.ModelViewSet):
    queryset = Estudiante.objects.all()
    serializer_class = EstudianteSerializer
    permission_classes = [IsAuthenticated, TienePermisoRol]
    filter_backends = [DjangoFilterBackend]
    filterset_class = EstudianteFilter
    permisos_por_accion = {
        'create': 'canCreateStudents',
        'update': 'canEditStudents',
        'partial_update': 'canEditStudents',
        'destroy': 'canDeleteStudents',
    }

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return EstudianteWriteSerializer
        return EstudianteSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        campo = ORDENAMIENTOS.get(self.request.query_params.get('orderBy'))
        if campo:
            if self.request.query_params.get('order', 'ASC').upper() == 'DESC':
                campo = f'-{campo}'
            return queryset.order_by(campo)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = EstudianteWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        estudiante = serializer.save()
        logger.info("Estudiante %s creado por %s", estudiante.pk, request.user.pk)
        return Response(EstudianteSerializer(estudiante).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        estudiante = self.get_object()
        serializer = EstudianteWriteSerializer(estudiante, data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)
        estudiante = serializer.save()
        return Response(EstudianteSerializer(estudiante).data)

    def perform_destroy(self, instance):
        logger.info("Estudiante %s eliminado por %s", instance.pk, self.request.user.pk)
        instance.delete()

    @action(detail=True, methods=['get'], url_path='with-interventions')
    def with_interventions(self, request, pk=None):
        """Estudiante con las intervenciones que el usuario puede ver"""
        from apps.interventions.services import ServicioIntervenciones

        estudiante = self.get_object()
        intervenciones = ServicioIntervenciones(request.user).listar({'studentId': estudiante.pk})
        return Response({
            **EstudianteSerializer(estudiante).data,
            'interventions': intervenciones,
        })
