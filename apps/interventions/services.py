"""
Servicio de intervenciones.

``ServicioIntervenciones`` es el único paso entre las vistas y el ORM para
intervenciones y comentarios: valida antes de tocar la base de datos,
normaliza los datos, aplica las reglas de ``workflow`` para el usuario de
la sesión y traduce las fallas de persistencia a ``ErrorAplicacion``.

``EstadoIntervencion`` mantiene la copia vigente de una intervención y
canaliza cada cambio por el servicio: mezcla el cambio en la copia, llama
a la actualización genérica y reemplaza la copia con la respuesta. Si el
servicio falla, la copia queda como estaba y el error se guarda en
``error``.
"""
import logging
from contextlib import contextmanager

from django.contrib.auth.models import User
from django.db import IntegrityError, OperationalError, transaction
from django.db.models import Q
from django.utils import timezone

from apps.authentication.models import ROL_ADMIN, obtener_rol
from apps.authentication.permissions import tiene_permiso
from apps.students.models import Estudiante
from core.exceptions import (
    ErrorAplicacion,
    ErrorAutorizacion,
    ErrorNoEncontrado,
    ErrorValidacion,
    traducir_excepcion,
)
from .constants import CHAR_LIMITS, ESTADOS_ACTIVOS, TIME_INTERVALS
from .filters import IntervencionFilter
from .formatters import (
    normalizar_intervencion,
    parsear_fecha,
    procesar_comentario,
    procesar_intervencion,
)
from .models import ComentarioIntervencion, Intervencion
from .serializers import (
    ComentarioIntervencionSerializer,
    IntervencionDetalleSerializer,
    IntervencionSerializer,
)
from .validators import validar_comentario, validar_intervencion
from .workflow import (
    efectos_cambio_estado,
    es_cambio_estado_valido,
    permisos_usuario,
    puede_comentar,
    puede_editar_comentario,
    puede_eliminar,
    puede_eliminar_comentario,
    puede_modificar,
)

logger = logging.getLogger(__name__)

# Nombre en la API -> campo del modelo
CAMPOS_MODELO = {
    'title': 'titulo',
    'description': 'descripcion',
    'type': 'tipo',
    'priority': 'prioridad',
    'status': 'estado',
    'scope': 'ambito',
    'dateReported': 'fecha_reporte',
    'dateResolved': 'fecha_resolucion',
    'followUpDate': 'fecha_seguimiento',
    'actionsTaken': 'acciones_tomadas',
    'outcomeEvaluation': 'evaluacion_resultado',
    'requiresExternalReferral': 'requiere_derivacion_externa',
    'externalReferralDetails': 'detalles_derivacion_externa',
    'parentFeedback': 'retroalimentacion_apoderado',
    'studentId': 'estudiante_id',
    'responsibleId': 'responsable_id',
    'informerId': 'informante_id',
}

# Campos que acompañan a un cambio de estado sin contar como edición
CAMPOS_CAMBIO_ESTADO = {'status', 'dateResolved', 'outcomeEvaluation'}


@contextmanager
def persistencia():
    """Traduce errores de base de datos a errores de la aplicación"""
    try:
        yield
    except (IntegrityError, OperationalError) as exc:
        logger.warning("Error de persistencia: %s", exc)
        raise traducir_excepcion(exc) from exc


def _existe(modelo, **filtros):
    try:
        return modelo.objects.filter(**filtros).exists()
    except (ValueError, TypeError):
        return False


def datos_de_modelo(intervencion):
    """Campos editables de una intervención con los nombres de la API"""
    return {
        campo: getattr(intervencion, atributo)
        for campo, atributo in CAMPOS_MODELO.items()
    }


class ServicioIntervenciones:
    """Operaciones sobre intervenciones en nombre de ``usuario``"""

    def __init__(self, usuario):
        self.usuario = usuario
        self.rol = obtener_rol(usuario)

    # Consultas

    def queryset(self):
        """Intervenciones visibles: todas para admin, propias o asignadas para el resto"""
        queryset = Intervencion.objects.select_related(
            'estudiante', 'responsable__funcionario', 'informante__funcionario'
        )
        if self.rol == ROL_ADMIN:
            return queryset
        if self.rol is None:
            return queryset.none()
        return queryset.filter(Q(responsable=self.usuario) | Q(informante=self.usuario))

    def _obtener_modelo(self, id):
        try:
            return self.queryset().get(pk=id)
        except (Intervencion.DoesNotExist, ValueError, TypeError):
            raise ErrorNoEncontrado('Intervención no encontrada')

    def listar(self, filtros=None):
        filtro = IntervencionFilter(data=filtros or {}, queryset=self.queryset())
        if not filtro.is_valid():
            raise ErrorValidacion({campo: str(errores[0]) for campo, errores in filtro.errors.items()})
        with persistencia():
            registros = IntervencionSerializer(filtro.qs, many=True).data
        return [procesar_intervencion(registro) for registro in registros]

    def obtener(self, id):
        with persistencia():
            return procesar_intervencion(IntervencionSerializer(self._obtener_modelo(id)).data)

    def obtener_con_detalles(self, id):
        with persistencia():
            intervencion = self._obtener_modelo(id)
            datos = IntervencionDetalleSerializer(intervencion).data
        return procesar_intervencion(datos)

    def permisos(self, id):
        return permisos_usuario(self._obtener_modelo(id), self.usuario)

    # Escritura

    def _resolver_relaciones(self, datos):
        """Comprueba que estudiante y funcionarios referenciados existan"""
        errores = {}
        if 'studentId' in datos and not _existe(Estudiante, pk=datos['studentId']):
            errores['studentId'] = 'El estudiante no existe'
        for campo in ('responsibleId', 'informerId'):
            if campo in datos and not _existe(User, pk=datos[campo], is_active=True):
                errores[campo] = 'El funcionario no existe o está inactivo'
        if errores:
            raise ErrorValidacion(errores)

    def _a_modelo(self, datos):
        return {CAMPOS_MODELO[campo]: valor for campo, valor in datos.items() if campo in CAMPOS_MODELO}

    def crear(self, datos):
        if not tiene_permiso(self.usuario, 'canCreateInterventions'):
            raise ErrorAutorizacion()

        datos = dict(datos or {})
        if datos.get('informerId') in (None, ''):
            datos['informerId'] = self.usuario.pk

        errores = validar_intervencion(datos)
        if errores:
            raise ErrorValidacion(errores)

        normalizados = normalizar_intervencion(datos)
        self._resolver_relaciones(normalizados)

        with persistencia(), transaction.atomic():
            intervencion = Intervencion.objects.create(**self._a_modelo(normalizados))

        logger.info("Intervención %s creada por %s", intervencion.pk, self.usuario.pk)
        return procesar_intervencion(IntervencionSerializer(intervencion).data)

    def _cambios(self, actual, normalizados):
        return {
            campo: valor for campo, valor in normalizados.items()
            if campo in CAMPOS_MODELO and actual.get(campo) != valor
        }

    def actualizar(self, id, datos):
        """
        Actualización genérica. Solo cuentan los campos cuyo valor cambia:
        un cambio de estado exige una transición válida para el rol y
        cualquier otro cambio exige poder modificar la intervención.
        """
        intervencion = self._obtener_modelo(id)
        actual = datos_de_modelo(intervencion)
        datos = dict(datos or {})
        resolucion = datos.pop('resolution', None)
        datos.pop('currentStatus', None)

        # Una fecha de seguimiento ya guardada no se vuelve a validar
        if 'followUpDate' in datos:
            try:
                sin_cambio = parsear_fecha(datos['followUpDate']) == actual['followUpDate']
            except (TypeError, ValueError):
                sin_cambio = False
            if sin_cambio:
                del datos['followUpDate']

        completos = {campo: valor for campo, valor in actual.items() if campo != 'followUpDate'}
        completos.update(datos)
        completos['currentStatus'] = intervencion.estado
        if resolucion is not None:
            resolucion = str(resolucion).strip()
            completos['outcomeEvaluation'] = resolucion

        # La derivación se normaliza como par: bandera y detalles juntos
        if 'requiresExternalReferral' in datos or 'externalReferralDetails' in datos:
            for campo in ('requiresExternalReferral', 'externalReferralDetails'):
                datos[campo] = completos.get(campo)

        errores = validar_intervencion(completos, es_actualizacion=True)
        if errores:
            raise ErrorValidacion(errores)

        normalizados = normalizar_intervencion(datos, parcial=True)
        cambios = self._cambios(actual, normalizados)

        estado_nuevo = cambios.get('status')
        if estado_nuevo is not None:
            if not es_cambio_estado_valido(intervencion.estado, estado_nuevo, self.usuario):
                raise ErrorAutorizacion()
            cambios.update(efectos_cambio_estado(estado_nuevo, timezone.now(), resolucion))

        ediciones = set(cambios) - CAMPOS_CAMBIO_ESTADO
        if estado_nuevo is None:
            ediciones = set(cambios)
        if ediciones and not puede_modificar(intervencion, self.usuario):
            raise ErrorAutorizacion()

        if not cambios:
            return procesar_intervencion(IntervencionSerializer(intervencion).data)

        self._resolver_relaciones({campo: cambios[campo] for campo in cambios
                                   if campo in ('studentId', 'responsibleId', 'informerId')})

        for atributo, valor in self._a_modelo(cambios).items():
            setattr(intervencion, atributo, valor)

        with persistencia(), transaction.atomic():
            intervencion.save()

        if estado_nuevo is not None:
            logger.info("Intervención %s: %s -> %s por %s",
                        intervencion.pk, actual['status'], estado_nuevo, self.usuario.pk)
        return procesar_intervencion(IntervencionSerializer(intervencion).data)

    def cambiar_estado(self, id, estado, resolucion=None):
        datos = {'status': estado}
        if resolucion is not None:
            datos['resolution'] = resolucion
        return self.actualizar(id, datos)

    def eliminar(self, id):
        intervencion = self._obtener_modelo(id)
        if not puede_eliminar(intervencion, self.usuario):
            raise ErrorAutorizacion()

        with persistencia(), transaction.atomic():
            intervencion.delete()
        logger.info("Intervención %s eliminada por %s", id, self.usuario.pk)

    # Comentarios

    def _obtener_comentario(self, id):
        try:
            return ComentarioIntervencion.objects.select_related('usuario__funcionario', 'intervencion').get(
                pk=id, intervencion__in=self.queryset().values('pk')
            )
        except (ComentarioIntervencion.DoesNotExist, ValueError, TypeError):
            raise ErrorNoEncontrado('Comentario no encontrado')

    def agregar_comentario(self, datos):
        datos = dict(datos or {})
        datos['userId'] = self.usuario.pk

        errores = validar_comentario(datos)
        if errores:
            raise ErrorValidacion(errores)

        intervencion = self._obtener_modelo(datos['interventionId'])
        if not puede_comentar(intervencion, self.usuario):
            raise ErrorAutorizacion()

        with persistencia():
            comentario = ComentarioIntervencion.objects.create(
                intervencion=intervencion,
                usuario=self.usuario,
                contenido=datos['content'].strip()[:CHAR_LIMITS['COMMENT']],
            )
        return procesar_comentario(ComentarioIntervencionSerializer(comentario).data)

    def actualizar_comentario(self, id, datos):
        errores = validar_comentario(datos or {}, es_actualizacion=True)
        if errores:
            raise ErrorValidacion(errores)

        comentario = self._obtener_comentario(id)
        if not puede_editar_comentario(comentario, comentario.intervencion, self.usuario):
            raise ErrorAutorizacion()

        comentario.contenido = datos['content'].strip()[:CHAR_LIMITS['COMMENT']]
        with persistencia():
            comentario.save()
        return procesar_comentario(ComentarioIntervencionSerializer(comentario).data)

    def eliminar_comentario(self, id):
        if not puede_eliminar_comentario(self.usuario):
            raise ErrorAutorizacion()

        comentario = self._obtener_comentario(id)
        with persistencia():
            comentario.delete()


class EstadoIntervencion:
    """Copia vigente de una intervención abierta por ``usuario``"""

    def __init__(self, id, usuario, servicio=None):
        self.id = id
        self.usuario = usuario
        self.servicio = servicio or ServicioIntervenciones(usuario)
        self.intervencion = None
        self.error = None

    def cargar(self):
        try:
            self.intervencion = self.servicio.obtener_con_detalles(self.id)
        except ErrorAplicacion as exc:
            self.error = exc
            raise
        self.error = None
        return self.intervencion

    def _copia(self):
        if self.intervencion is None:
            self.cargar()
        return self.intervencion

    def _confirmar(self, operacion):
        """Ejecuta ``operacion`` y recarga la copia; si falla, la copia no cambia"""
        try:
            resultado = operacion()
            self.intervencion = self.servicio.obtener_con_detalles(self.id)
        except ErrorAplicacion as exc:
            self.error = exc
            logger.info("Cambio rechazado en intervención %s: %s", self.id, exc.tipo)
            raise
        self.error = None
        return resultado

    def actualizar(self, datos):
        copia = self._copia()
        mezcla = {campo: copia.get(campo) for campo in CAMPOS_MODELO if campo in copia}
        mezcla.update(datos)
        self._confirmar(lambda: self.servicio.actualizar(self.id, mezcla))
        return self.intervencion

    def cambiar_estado(self, estado, resolucion=None):
        datos = {'status': estado}
        if resolucion is not None:
            datos['resolution'] = resolucion
        return self.actualizar(datos)

    def actualizar_acciones(self, acciones):
        return self.actualizar({'actionsTaken': acciones})

    def actualizar_evaluacion(self, texto):
        return self.actualizar({'outcomeEvaluation': texto})

    def actualizar_derivacion(self, detalles):
        return self.actualizar({
            'requiresExternalReferral': bool(detalles),
            'externalReferralDetails': detalles or None,
        })

    def programar_seguimiento(self, fecha=None):
        """Sin fecha, el seguimiento queda a FOLLOW_UP_DEFAULT de hoy"""
        if fecha is None:
            fecha = timezone.now() + TIME_INTERVALS['FOLLOW_UP_DEFAULT']
        return self.actualizar({'followUpDate': fecha})

    def actualizar_retroalimentacion(self, texto):
        return self.actualizar({'parentFeedback': texto})

    def agregar_comentario(self, contenido):
        self._copia()
        return self._confirmar(lambda: self.servicio.agregar_comentario(
            {'content': contenido, 'interventionId': self.id}
        ))

    def actualizar_comentario(self, id, contenido):
        self._copia()
        return self._confirmar(lambda: self.servicio.actualizar_comentario(id, {'content': contenido}))

    def eliminar_comentario(self, id):
        self._copia()
        return self._confirmar(lambda: self.servicio.eliminar_comentario(id))

    @property
    def calculados(self):
        intervencion = self.intervencion or {}
        ahora = timezone.now()
        seguimiento = intervencion.get('followUpDate')
        reportada = intervencion.get('dateReported')
        return {
            'isActive': intervencion.get('status') in ESTADOS_ACTIVOS,
            'requiresFollowUp': bool(seguimiento and seguimiento > ahora),
            'daysSinceCreation': (ahora - reportada).days if reportada else 0,
            'hasResolution': bool(intervencion.get('dateResolved')),
            'hasExternalReferral': bool(intervencion.get('requiresExternalReferral')),
            'isOverdue': bool(
                intervencion.get('status') in ESTADOS_ACTIVOS and reportada and
                ahora - reportada > TIME_INTERVALS['RESOLUTION_TARGET']
            ),
        }

    @property
    def permisos(self):
        if self.intervencion is None:
            return permisos_usuario(None, self.usuario)
        return permisos_usuario(self.intervencion, self.usuario)
