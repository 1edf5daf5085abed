"""
Validación de intervenciones y comentarios.

Las funciones reciben los datos con los nombres de la API y devuelven un
dict ``campo -> mensaje``; un dict vacío significa que los datos son
válidos. No tocan la base de datos ni modifican ``data``.
"""
from django.utils import timezone

from .constants import (
    AMBITOS,
    CAMPOS_REQUERIDOS,
    CHAR_LIMITS,
    ESTADOS,
    PRIORIDADES,
    TIPOS,
)
from .formatters import es_solo_fecha, es_verdadero, parsear_fecha
from .workflow import transiciones_permitidas


def es_vacio(valor):
    return valor is None or (isinstance(valor, str) and not valor.strip())


def _excede(valor, limite):
    return isinstance(valor, str) and len(valor) > limite


def prioridad_valida(valor):
    """Solo 1, 2 o 3 exactos; 1.7 o True no son prioridades"""
    if isinstance(valor, bool):
        return False
    if isinstance(valor, float) and not valor.is_integer():
        return False
    try:
        return int(valor) in PRIORIDADES
    except (TypeError, ValueError):
        return False


def validar_intervencion(data, es_actualizacion=False, ahora=None):
    errores = {}
    data = data or {}
    ahora = ahora or timezone.now()

    # Campos requeridos
    requeridos = CAMPOS_REQUERIDOS['UPDATE' if es_actualizacion else 'CREATE']
    for campo in requeridos:
        if es_vacio(data.get(campo)):
            errores[campo] = f"El campo {campo} es requerido"

    # Longitud de campos de texto
    if _excede(data.get('title'), CHAR_LIMITS['TITLE']):
        errores['title'] = f"El título no puede exceder {CHAR_LIMITS['TITLE']} caracteres"

    if _excede(data.get('description'), CHAR_LIMITS['DESCRIPTION']):
        errores['description'] = f"La descripción no puede exceder {CHAR_LIMITS['DESCRIPTION']} caracteres"

    if _excede(data.get('outcomeEvaluation'), CHAR_LIMITS['OUTCOME_EVALUATION']):
        errores['outcomeEvaluation'] = (
            f"La evaluación de resultados no puede exceder {CHAR_LIMITS['OUTCOME_EVALUATION']} caracteres"
        )

    if _excede(data.get('parentFeedback'), CHAR_LIMITS['PARENT_FEEDBACK']):
        errores['parentFeedback'] = (
            f"La retroalimentación del apoderado no puede exceder {CHAR_LIMITS['PARENT_FEEDBACK']} caracteres"
        )

    # Enumeraciones
    tipo = data.get('type')
    if not es_vacio(tipo) and tipo not in TIPOS:
        errores['type'] = 'Tipo de intervención no válido'

    prioridad = data.get('priority')
    if not es_vacio(prioridad) and not prioridad_valida(prioridad):
        errores['priority'] = 'Prioridad no válida'

    ambito = data.get('scope')
    if not es_vacio(ambito) and ambito not in AMBITOS:
        errores['scope'] = 'Ámbito de intervención no válido'

    # Estado y transición
    estado = data.get('status')
    if not es_vacio(estado):
        if estado not in ESTADOS:
            errores['status'] = 'Estado no válido'
        elif es_actualizacion and data.get('currentStatus') and estado != data['currentStatus']:
            if estado not in transiciones_permitidas(data['currentStatus']):
                errores['status'] = 'Transición de estado no válida'

    # Fecha de seguimiento
    seguimiento = data.get('followUpDate')
    if not es_vacio(seguimiento):
        try:
            fecha = parsear_fecha(seguimiento)
        except (TypeError, ValueError):
            errores['followUpDate'] = 'La fecha de seguimiento no es válida'
        else:
            if es_solo_fecha(seguimiento):
                anterior = fecha.date() < timezone.localdate(ahora)
            else:
                anterior = fecha < ahora
            if anterior:
                errores['followUpDate'] = 'La fecha de seguimiento no puede ser anterior a hoy'

    # Derivación externa
    if es_verdadero(data.get('requiresExternalReferral')):
        detalles = data.get('externalReferralDetails')
        if es_vacio(detalles):
            errores['externalReferralDetails'] = 'Los detalles de la derivación son requeridos'
        elif _excede(detalles, CHAR_LIMITS['REFERRAL_DETAILS']):
            errores['externalReferralDetails'] = (
                f"Los detalles no pueden exceder {CHAR_LIMITS['REFERRAL_DETAILS']} caracteres"
            )

    # Acciones tomadas
    acciones = data.get('actionsTaken')
    if acciones is not None:
        if not isinstance(acciones, (list, tuple)):
            errores['actionsTaken'] = 'El formato de las acciones tomadas no es válido'
        elif any(not isinstance(accion, str) for accion in acciones):
            errores['actionsTaken'] = 'El formato de las acciones tomadas no es válido'
        elif any(len(accion) > CHAR_LIMITS['ACTION_TAKEN'] for accion in acciones):
            errores['actionsTaken'] = f"Cada acción no puede exceder {CHAR_LIMITS['ACTION_TAKEN']} caracteres"

    return errores


def validar_comentario(data, es_actualizacion=False):
    errores = {}
    data = data or {}

    contenido = data.get('content')
    if es_vacio(contenido):
        errores['content'] = 'El contenido es requerido'
    elif not isinstance(contenido, str):
        errores['content'] = 'El contenido no es válido'
    elif len(contenido) > CHAR_LIMITS['COMMENT']:
        errores['content'] = f"El comentario no puede exceder {CHAR_LIMITS['COMMENT']} caracteres"

    if not es_actualizacion:
        if es_vacio(data.get('interventionId')):
            errores['interventionId'] = 'El ID de la intervención es requerido'
        if es_vacio(data.get('userId')):
            errores['userId'] = 'El ID del usuario es requerido'

    return errores
