"""
Formateo de intervenciones: normalización antes de persistir y
enriquecimiento de los registros que se devuelven al cliente.
"""
from datetime import date, datetime, time

from django.utils import timezone
from django.utils.dateparse import date_re, parse_date, parse_datetime

from .constants import (
    AMBITO_INDIVIDUAL,
    AMBITOS,
    CHAR_LIMITS,
    ESTADO_PENDIENTE,
    ESTADOS_ACTIVOS,
    LABELS,
    PRIORITY_COLORS,
    STATUS_COLORS,
    TIPO_POR_DEFECTO,
    TIPOS,
)

FORMATO_FECHA = '%d-%m-%Y'
FORMATO_FECHA_HORA = '%d-%m-%Y %H:%M'

_CAMPOS_FECHA = ['dateReported', 'dateResolved', 'followUpDate', 'createdAt', 'updatedAt']

_TEXTOS = {
    'title': CHAR_LIMITS['TITLE'],
    'description': CHAR_LIMITS['DESCRIPTION'],
    'outcomeEvaluation': CHAR_LIMITS['OUTCOME_EVALUATION'],
    'parentFeedback': CHAR_LIMITS['PARENT_FEEDBACK'],
}


def es_verdadero(valor):
    if isinstance(valor, str):
        return valor.strip().lower() in ('true', '1', 'si', 'sí')
    return bool(valor)


def es_solo_fecha(valor):
    """True si el valor es una fecha sin hora (``date`` o ``'aaaa-mm-dd'``)"""
    if isinstance(valor, datetime):
        return False
    if isinstance(valor, date):
        return True
    if isinstance(valor, str):
        texto = valor.strip()
        return date_re.fullmatch(texto) is not None
    return False


def parsear_fecha(valor):
    """
    Convierte ``valor`` en un datetime con zona horaria.

    Acepta ``datetime``, ``date`` y cadenas ISO 8601. Devuelve None si el
    valor está vacío y lanza ValueError si no se puede interpretar.
    """
    if valor is None or (isinstance(valor, str) and not valor.strip()):
        return None

    if isinstance(valor, datetime):
        resultado = valor
    elif isinstance(valor, date):
        resultado = datetime.combine(valor, time.min)
    elif isinstance(valor, str):
        texto = valor.strip()
        if date_re.fullmatch(texto):
            resultado = datetime.combine(parse_date(texto), time.min)
        else:
            resultado = parse_datetime(texto)
        if resultado is None:
            raise ValueError(f"Fecha no válida: {valor}")
    else:
        raise TypeError(f"Tipo de fecha no soportado: {type(valor).__name__}")

    if timezone.is_naive(resultado):
        resultado = timezone.make_aware(resultado)
    return resultado


def formatear_fecha(valor, incluir_hora=False):
    """Fecha en formato chileno ``dd-mm-aaaa``; cadena vacía si no hay fecha válida"""
    try:
        fecha = parsear_fecha(valor)
    except (TypeError, ValueError):
        return ''
    if fecha is None:
        return ''
    fecha = timezone.localtime(fecha)
    return fecha.strftime(FORMATO_FECHA_HORA if incluir_hora else FORMATO_FECHA)


def _recortar(texto, limite):
    if not texto:
        return ''
    return str(texto).strip()[:limite]


def _fecha_o_none(valor):
    try:
        return parsear_fecha(valor)
    except (TypeError, ValueError):
        return None


def normalizar_intervencion(datos, parcial=False):
    """
    Deja los datos de una intervención listos para persistir.

    Con ``parcial=True`` solo se normalizan las claves presentes y no se
    aplican valores por defecto; se usa en las actualizaciones.
    """
    if datos is None:
        return None

    resultado = {}

    def presente(clave):
        return not parcial or clave in datos

    for clave, limite in _TEXTOS.items():
        if presente(clave):
            resultado[clave] = _recortar(datos.get(clave), limite)

    if presente('type'):
        resultado['type'] = datos.get('type') if datos.get('type') in TIPOS else TIPO_POR_DEFECTO

    if presente('status'):
        resultado['status'] = datos.get('status') or ESTADO_PENDIENTE

    if 'priority' in datos and datos['priority'] not in (None, ''):
        resultado['priority'] = int(datos['priority'])

    if presente('scope'):
        resultado['scope'] = datos.get('scope') if datos.get('scope') in AMBITOS else AMBITO_INDIVIDUAL

    if presente('dateReported'):
        resultado['dateReported'] = _fecha_o_none(datos.get('dateReported')) or timezone.now()

    for clave in ('dateResolved', 'followUpDate'):
        if presente(clave):
            resultado[clave] = _fecha_o_none(datos.get(clave))

    if presente('actionsTaken'):
        acciones = datos.get('actionsTaken')
        if isinstance(acciones, (list, tuple)):
            resultado['actionsTaken'] = [
                _recortar(accion, CHAR_LIMITS['ACTION_TAKEN']) for accion in acciones if accion
            ]
        else:
            resultado['actionsTaken'] = []

    if presente('requiresExternalReferral'):
        requiere = es_verdadero(datos.get('requiresExternalReferral'))
        resultado['requiresExternalReferral'] = requiere
        resultado['externalReferralDetails'] = (
            _recortar(datos.get('externalReferralDetails'), CHAR_LIMITS['REFERRAL_DETAILS'])
            if requiere else None
        )

    for clave in ('studentId', 'responsibleId', 'informerId'):
        if clave in datos:
            resultado[clave] = datos[clave]

    return resultado


def procesar_comentario(datos):
    if not datos:
        return None
    comentario = dict(datos)
    comentario['formattedDate'] = formatear_fecha(datos.get('createdAt'), incluir_hora=True)
    return comentario


def procesar_intervencion(datos):
    """
    Agrega a una intervención serializada las etiquetas de presentación y
    la bandera ``isActive``. Las fechas en texto se convierten a datetime.
    """
    if not datos:
        return None

    intervencion = dict(datos)
    for clave in _CAMPOS_FECHA:
        if isinstance(intervencion.get(clave), str):
            intervencion[clave] = _fecha_o_none(intervencion[clave])

    estado = intervencion.get('status')
    prioridad = intervencion.get('priority')
    intervencion['statusLabel'] = LABELS['status'].get(estado, estado)
    intervencion['priorityLabel'] = LABELS['priority'].get(prioridad, 'No definida')
    intervencion['typeLabel'] = LABELS['type'].get(intervencion.get('type'), intervencion.get('type'))
    intervencion['scopeLabel'] = LABELS['scope'].get(intervencion.get('scope'), intervencion.get('scope'))
    intervencion['statusColor'] = STATUS_COLORS.get(estado, 'default')
    intervencion['priorityColor'] = PRIORITY_COLORS.get(prioridad, 'default')
    intervencion['isActive'] = estado in ESTADOS_ACTIVOS

    if isinstance(intervencion.get('comments'), list):
        intervencion['comments'] = [procesar_comentario(c) for c in intervencion['comments']]

    return intervencion