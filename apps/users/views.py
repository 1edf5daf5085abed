#apps/users/views.py:

import logging

from django.contrib.auth.models import User
from django.db.models import Q
from django_filters import rest_framework as filters
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.authentication.models import ROL_PROFESOR, ROL_PROFESIONAL
from apps.authentication.permissions import TienePermisoRol
from .serializers import UsuarioSerializer, UsuarioWriteSerializer

logger = logging.getLogger(__name__)


class UsuarioFilter(filters.FilterSet):
    search = filters.CharFilter(method='filtrar_busqueda')
    role = filters.CharFilter(method='filtrar_rol')
    staffType = filters.CharFilter(field_name='funcionario__tipo_personal')
    department = filters.CharFilter(field_name='funcionario__departamento', lookup_expr='iexact')
    isActive = filters.BooleanFilter(field_name='is_active')

    class Meta:
        model = User
        fields = ['search', 'role', 'staffType', 'department', 'isActive']

    def filtrar_busqueda(self, queryset, name, value):
        return queryset.filter(
            Q(first_name__icontains=value) |
            Q(last_name__icontains=value) |
            Q(email__icontains=value) |
            Q(funcionario__rut__icontains=value)
        )

    def filtrar_rol(self, queryset, name, value):
        # Acepta uno o varios roles separados por coma
        roles = [rol.strip() for rol in value.split(',') if rol.strip()]
        return queryset.filter(groups__name__in=roles).distinct()


class UsuarioViewSet(viewsets.ModelViewSet):
    """
    Gestión de funcionarios.

    Cualquier usuario autenticado puede listar (para asignar responsables);
    solo quien tenga los permisos de usuarios puede crear, editar o eliminar.
    """
    queryset = User.objects.select_related('funcionario').prefetch_related('groups')
    serializer_class = UsuarioSerializer
    permission_classes = [IsAuthenticated, TienePermisoRol]
    filter_backends = [DjangoFilterBackend]
    filterset_class = UsuarioFilter
    permisos_por_accion = {
        'create': 'canCreateUsers',
        'update': 'canEditUsers',
        'partial_update': 'canEditUsers',
        'toggle_active': 'canEditUsers',
        'destroy': 'canDeleteUsers',
    }

    def get_queryset(self):
        return super().get_queryset().order_by('last_name', 'first_name')

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return UsuarioWriteSerializer
        return UsuarioSerializer

    def create(self, request, *args, **kwargs):
        serializer = UsuarioWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Usuario %s creado por %s", user.pk, request.user.pk)
        return Response(UsuarioSerializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        user = self.get_object()
        serializer = UsuarioWriteSerializer(user, data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UsuarioSerializer(user).data)

    @action(detail=False, methods=['get'])
    def professionals(self, request):
        """Profesionales y profesores activos, disponibles como responsables"""
        usuarios = self.get_queryset().filter(
            is_active=True,
            groups__name__in=[ROL_PROFESIONAL, ROL_PROFESOR]
        ).distinct()
        return Response(UsuarioSerializer(usuarios, many=True).data)

    @action(detail=True, methods=['post'])
    def toggle_active(self, request, pk=None):
        """Activar/desactivar usuario"""
        user = self.get_object()
        user.is_active = not user.is_active
        user.save()

        status_text = "activado" if user.is_active else "desactivado"
        return Response({
            'message': f'Usuario {user.email} {status_text}',
            'isActive': user.is_active
        })
