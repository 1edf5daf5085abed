"""
Errores de la API y manejador de excepciones de DRF.

Todas las respuestas de error salen con el mismo sobre:
``{"error": str, "type": str, "details": dict}``. Dentro del código las
fallas se propagan como subclases de ``ErrorAplicacion``, cada una con su
tipo fijo, de modo que quien las captura puede distinguirlas sin
inspeccionar campos opcionales.
"""
import logging
from typing import Any, Dict, Optional

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied as DjangoPermissionDenied
from django.db import IntegrityError, OperationalError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ErrorAplicacion(exceptions.APIException):
    """Excepción base de la aplicación"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Ha ocurrido un error'
    default_code = 'error'
    tipo = 'Error'

    def __init__(
        self,
        detail: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(detail=detail)
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code

    @property
    def message(self) -> str:
        return str(self.detail)

    def como_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'status': self.status_code,
            'type': self.tipo,
            'details': self.details,
        }


class ErrorValidacion(ErrorAplicacion):
    """Errores de campo; nunca llegan a la base de datos"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Error de validación'
    default_code = 'validation_error'
    tipo = 'ValidationError'

    def __init__(self, errores: Optional[Dict[str, Any]] = None, detail: Optional[str] = None):
        super().__init__(detail=detail, details=errores)

    @property
    def errores(self) -> Dict[str, Any]:
        return self.details


class ErrorRed(ErrorAplicacion):
    """No se obtuvo respuesta del almacenamiento"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Error de conexión con el servidor'
    default_code = 'network_error'
    tipo = 'NetworkError'


class ErrorTiempoEspera(ErrorAplicacion):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    default_detail = 'La conexión ha excedido el tiempo de espera'
    default_code = 'timeout'
    tipo = 'TimeoutError'


class ErrorAutenticacion(ErrorAplicacion):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Sesión no válida o expirada'
    default_code = 'not_authenticated'
    tipo = 'AuthError'


class ErrorAutorizacion(ErrorAplicacion):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'No tiene permisos para realizar esta acción'
    default_code = 'permission_denied'
    tipo = 'AuthorizationError'


class ErrorNoEncontrado(ErrorAplicacion):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Recurso no encontrado'
    default_code = 'not_found'
    tipo = 'NotFoundError'


class ErrorDuplicado(ErrorAplicacion):
    """Conflicto de unicidad informado por la base de datos (ej: RUT repetido)"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'El registro ya existe'
    default_code = 'duplicate'
    tipo = 'DuplicateError'


class ErrorServidor(ErrorAplicacion):
    default_code = 'server_error'
    tipo = 'ServerError'


def _errores_de_validacion(detalle):
    if isinstance(detalle, dict):
        return {campo: _primer_mensaje(mensajes) for campo, mensajes in detalle.items()}
    return {'non_field_errors': _primer_mensaje(detalle)}


def _primer_mensaje(mensajes):
    if isinstance(mensajes, (list, tuple)):
        return str(mensajes[0]) if mensajes else ''
    if isinstance(mensajes, dict):
        return _errores_de_validacion(mensajes)
    return str(mensajes)


def traducir_excepcion(exc):
    """Convierte cualquier falla conocida en una ErrorAplicacion"""
    if isinstance(exc, ErrorAplicacion):
        return exc

    if isinstance(exc, ProtectedError):
        return ErrorDuplicado('El registro está en uso y no puede eliminarse')

    if isinstance(exc, IntegrityError):
        return ErrorDuplicado()

    if isinstance(exc, OperationalError):
        texto = str(exc).lower()
        if 'timeout' in texto or 'canceling statement' in texto:
            return ErrorTiempoEspera()
        return ErrorRed()

    if isinstance(exc, (Http404, ObjectDoesNotExist, exceptions.NotFound)):
        return ErrorNoEncontrado()

    if isinstance(exc, (DjangoPermissionDenied, exceptions.PermissionDenied)):
        return ErrorAutorizacion()

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        traducida = ErrorAutenticacion(detail=_mensaje_de(exc.detail), status_code=exc.status_code)
        traducida.auth_header = getattr(exc, 'auth_header', None)
        return traducida

    if isinstance(exc, exceptions.ValidationError):
        return ErrorValidacion(errores=_errores_de_validacion(exc.detail))

    if isinstance(exc, exceptions.APIException):
        return ErrorServidor(detail=_mensaje_de(exc.detail), status_code=exc.status_code)

    return exc


def _mensaje_de(detalle):
    if isinstance(detalle, dict):
        detalle = detalle.get('detail', '')
    if isinstance(detalle, (list, tuple)):
        detalle = detalle[0] if detalle else ''
    return str(detalle) or None


def manejador_excepciones(exc, context):
    """EXCEPTION_HANDLER de DRF: responde siempre con {error, type, details}"""
    exc = traducir_excepcion(exc)
    response = exception_handler(exc, context)

    if response is None:
        vista = context.get('view')
        logger.exception("Error no controlado en %s", vista.__class__.__name__ if vista else 'vista desconocida')
        exc = ErrorServidor()
        response = exception_handler(exc, context)

    if exc.status_code >= 500:
        logger.error("Error %s (%s): %s", exc.status_code, exc.tipo, exc.message)

    response.data = {
        'error': exc.message,
        'type': exc.tipo,
        'details': exc.details,
    }
    return response
