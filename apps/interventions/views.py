#apps/interventions/views.py:

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.authentication.permissions import TienePermisoRol
from .filters import IntervencionFilter
from .models import ComentarioIntervencion, Intervencion
from .serializers import (
    AccionesTomadasSerializer,
    CambioEstadoSerializer,
    ComentarioIntervencionSerializer,
    ComentarioWriteSerializer,
    DerivacionSerializer,
    IntervencionDetalleSerializer,
    IntervencionSerializer,
    SeguimientoSerializer,
    TextoSerializer,
)
from .services import EstadoIntervencion, ServicioIntervenciones


class IntervencionViewSet(viewsets.GenericViewSet):
    """
    Intervenciones visibles para el usuario de la sesión.

    Todas las operaciones pasan por ``ServicioIntervenciones``; las
    acciones de detalle que modifican un solo aspecto usan
    ``EstadoIntervencion`` y devuelven la intervención completa con sus
    valores calculados y permisos.
    """
    queryset = Intervencion.objects.all()
    serializer_class = IntervencionSerializer
    permission_classes = [IsAuthenticated, TienePermisoRol]
    filter_backends = [DjangoFilterBackend]
    filterset_class = IntervencionFilter
    permisos_por_accion = {
        'create': 'canCreateInterventions',
        'update': 'canEditInterventions',
        'partial_update': 'canEditInterventions',
        'change_status': 'canEditInterventions',
        'actions_taken': 'canEditInterventions',
        'outcome_evaluation': 'canEditInterventions',
        'external_referral': 'canEditInterventions',
        'follow_up': 'canEditInterventions',
        'parent_feedback': 'canEditInterventions',
        'destroy': 'canDeleteInterventions',
    }

    def get_serializer_class(self):
        if self.action == 'details':
            return IntervencionDetalleSerializer
        if self.action == 'change_status':
            return CambioEstadoSerializer
        if self.action == 'actions_taken':
            return AccionesTomadasSerializer
        if self.action in ['outcome_evaluation', 'parent_feedback']:
            return TextoSerializer
        if self.action == 'external_referral':
            return DerivacionSerializer
        if self.action == 'follow_up':
            return SeguimientoSerializer
        return IntervencionSerializer

    @property
    def servicio(self):
        return ServicioIntervenciones(self.request.user)

    def _estado(self, pk):
        estado = EstadoIntervencion(pk, self.request.user, servicio=self.servicio)
        estado.cargar()
        return estado

    def _respuesta_estado(self, estado):
        return Response({
            **estado.intervencion,
            'computed': estado.calculados,
            'permissions': estado.permisos,
        })

    def _validar(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def list(self, request):
        return Response(self.servicio.listar(request.query_params))

    def create(self, request):
        intervencion = self.servicio.crear(request.data)
        return Response(intervencion, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(self.servicio.obtener(pk))

    def update(self, request, pk=None):
        return Response(self.servicio.actualizar(pk, request.data))

    def partial_update(self, request, pk=None):
        return Response(self.servicio.actualizar(pk, request.data))

    def destroy(self, request, pk=None):
        self.servicio.eliminar(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def details(self, request, pk=None):
        """Intervención con estudiante, funcionarios y comentarios"""
        return self._respuesta_estado(self._estado(pk))

    @action(detail=True, methods=['get'], url_path='permissions')
    def permisos(self, request, pk=None):
        """Banderas de permiso del usuario actual sobre la intervención"""
        return Response(self.servicio.permisos(pk))

    @action(detail=True, methods=['post'], url_path='change-status')
    def change_status(self, request, pk=None):
        datos = self._validar(request)
        estado = self._estado(pk)
        estado.cambiar_estado(datos['status'], datos.get('resolution'))
        return self._respuesta_estado(estado)

    @action(detail=True, methods=['put'], url_path='actions-taken')
    def actions_taken(self, request, pk=None):
        datos = self._validar(request)
        estado = self._estado(pk)
        estado.actualizar_acciones(datos['actionsTaken'])
        return self._respuesta_estado(estado)

    @action(detail=True, methods=['put'], url_path='outcome-evaluation')
    def outcome_evaluation(self, request, pk=None):
        datos = self._validar(request)
        estado = self._estado(pk)
        estado.actualizar_evaluacion(datos['text'])
        return self._respuesta_estado(estado)

    @action(detail=True, methods=['put'], url_path='external-referral')
    def external_referral(self, request, pk=None):
        datos = self._validar(request)
        estado = self._estado(pk)
        estado.actualizar_derivacion(datos.get('details'))
        return self._respuesta_estado(estado)

    @action(detail=True, methods=['put'], url_path='follow-up')
    def follow_up(self, request, pk=None):
        datos = self._validar(request)
        estado = self._estado(pk)
        estado.programar_seguimiento(datos.get('followUpDate'))
        return self._respuesta_estado(estado)

    @action(detail=True, methods=['put'], url_path='parent-feedback')
    def parent_feedback(self, request, pk=None):
        datos = self._validar(request)
        estado = self._estado(pk)
        estado.actualizar_retroalimentacion(datos['text'])
        return self._respuesta_estado(estado)


class ComentarioIntervencionViewSet(viewsets.GenericViewSet):
    """Alta, edición y eliminación de comentarios de intervenciones"""
    queryset = ComentarioIntervencion.objects.all()
    serializer_class = ComentarioIntervencionSerializer
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return ComentarioWriteSerializer
        return ComentarioIntervencionSerializer

    @property
    def servicio(self):
        return ServicioIntervenciones(self.request.user)

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comentario = self.servicio.agregar_comentario(serializer.validated_data)
        return Response(comentario, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(self.servicio.actualizar_comentario(pk, serializer.validated_data))

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        self.servicio.eliminar_comentario(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
