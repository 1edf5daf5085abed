"""
Reglas de estado y permisos de las intervenciones.

Todo se decide con tablas fijas (``constants.VALID_STATUS_TRANSITIONS`` y
``constants.STATUS_PERMISSIONS``). Las funciones aceptan tanto una
instancia de ``Intervencion`` como un dict con los nombres de la API
(``status``, ``responsibleId``, ``informerId``), y tanto un ``User`` como
un dict ``{'id', 'role'}``.

Ninguna función lanza excepciones: ante datos faltantes o desconocidos
responden ``False`` o un conjunto vacío, y quien llama debe tratarlo
como una negación.
"""
from apps.authentication.models import ROL_ADMIN, ROLES, obtener_rol
from apps.authentication.permissions import PERMISOS_POR_ROL
from .constants import (
    ESTADO_RESUELTO,
    PERMISOS_ESTADO,
    ROLES_ELIMINAN_COMENTARIOS,
    STATUS_PERMISSIONS,
    VALID_STATUS_TRANSITIONS,
)

_ATRIBUTOS_MODELO = {
    'status': 'estado',
    'responsibleId': 'responsable_id',
    'informerId': 'informante_id',
    'userId': 'usuario_id',
}


def _campo(registro, clave):
    if registro is None:
        return None
    if isinstance(registro, dict):
        return registro.get(clave)
    return getattr(registro, _ATRIBUTOS_MODELO.get(clave, clave), None)


def _rol_de(usuario):
    if usuario is None:
        return None
    if isinstance(usuario, dict):
        return usuario.get('role')
    return obtener_rol(usuario)


def _id_de(usuario):
    if usuario is None:
        return None
    if isinstance(usuario, dict):
        return usuario.get('id')
    return getattr(usuario, 'pk', None)


def _mismo_id(a, b):
    return a is not None and b is not None and str(a) == str(b)


def _permite(valor, rol):
    """Un permiso de estado puede ser booleano o una lista de roles"""
    if isinstance(valor, (list, tuple, set, frozenset)):
        return rol in valor
    return valor is True


def transiciones_permitidas(estado):
    """Estados alcanzables desde ``estado``; vacío si es terminal o desconocido"""
    if not isinstance(estado, str):
        return frozenset()
    return VALID_STATUS_TRANSITIONS.get(estado, frozenset())


def permisos_estado(estado):
    """Copia de la fila de STATUS_PERMISSIONS; todo en False si el estado no existe"""
    fila = STATUS_PERMISSIONS.get(estado) if isinstance(estado, str) else None
    if fila is None:
        return {permiso: False for permiso in PERMISOS_ESTADO}
    return dict(fila)


def puede_modificar(intervencion, usuario):
    """
    Admin, responsable o informante pueden editar, siempre que el estado
    actual lo permita.
    """
    if intervencion is None or usuario is None:
        return False

    estado = _campo(intervencion, 'status')
    if not isinstance(estado, str) or estado not in STATUS_PERMISSIONS:
        return False

    rol = _rol_de(usuario)
    if not _permite(STATUS_PERMISSIONS[estado]['canEdit'], rol):
        return False

    id_usuario = _id_de(usuario)
    return (
        rol == ROL_ADMIN or
        _mismo_id(_campo(intervencion, 'responsibleId'), id_usuario) or
        _mismo_id(_campo(intervencion, 'informerId'), id_usuario)
    )


def es_cambio_estado_valido(estado_actual, estado_nuevo, usuario):
    if not isinstance(estado_actual, str) or not isinstance(estado_nuevo, str) or usuario is None:
        return False

    if estado_nuevo not in transiciones_permitidas(estado_actual):
        return False

    permisos = STATUS_PERMISSIONS.get(estado_actual)
    if not permisos:
        return False

    return _permite(permisos['canChangeStatus'], _rol_de(usuario))


def puede_comentar(intervencion, usuario):
    if intervencion is None or usuario is None:
        return False
    return _permite(permisos_estado(_campo(intervencion, 'status'))['canAddComments'], _rol_de(usuario))


def puede_eliminar(intervencion, usuario):
    """El estado debe admitir eliminación y el rol debe tener canDeleteInterventions"""
    if intervencion is None or usuario is None:
        return False

    rol = _rol_de(usuario)
    if not _permite(permisos_estado(_campo(intervencion, 'status'))['canDelete'], rol):
        return False
    return bool(PERMISOS_POR_ROL.get(rol, {}).get('canDeleteInterventions'))


def puede_editar_comentario(comentario, intervencion, usuario):
    """El autor o un admin, mientras la intervención admita comentarios"""
    if comentario is None or not puede_comentar(intervencion, usuario):
        return False
    return _rol_de(usuario) == ROL_ADMIN or _mismo_id(_campo(comentario, 'userId'), _id_de(usuario))


def puede_eliminar_comentario(usuario):
    return _rol_de(usuario) in ROLES_ELIMINAN_COMENTARIOS


def efectos_cambio_estado(estado_nuevo, ahora, resolucion=None):
    """
    Campos que acompañan a un cambio de estado. Solo pasar a Resuelto
    tiene efectos: fija dateResolved y registra la evaluación de resultado.
    Volver de Resuelto a En Proceso no limpia dateResolved.
    """
    if estado_nuevo != ESTADO_RESUELTO:
        return {}

    efectos = {'dateResolved': ahora}
    if resolucion is not None:
        efectos['outcomeEvaluation'] = resolucion
    return efectos


def permisos_usuario(intervencion, usuario):
    """Banderas de permiso del usuario actual sobre una intervención"""
    if usuario is not None and not isinstance(usuario, dict):
        usuario = {'id': _id_de(usuario), 'role': _rol_de(usuario)}

    estado = _campo(intervencion, 'status')
    rol = _rol_de(usuario)
    id_usuario = _id_de(usuario)
    tabla = permisos_estado(estado)

    destinos = sorted(
        destino for destino in transiciones_permitidas(estado)
        if es_cambio_estado_valido(estado, destino, usuario)
    )

    return {
        'canEdit': puede_modificar(intervencion, usuario),
        'canDelete': puede_eliminar(intervencion, usuario),
        'canAddComments': puede_comentar(intervencion, usuario),
        'canChangeStatus': rol in ROLES and bool(destinos),
        'canAddAttachments': intervencion is not None and _permite(tabla['canAddAttachments'], rol),
        'canDeleteComments': puede_eliminar_comentario(usuario),
        'isResponsible': _mismo_id(_campo(intervencion, 'responsibleId'), id_usuario),
        'isInformer': _mismo_id(_campo(intervencion, 'informerId'), id_usuario),
        'allowedTransitions': destinos,
    }
