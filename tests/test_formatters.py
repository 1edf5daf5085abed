from datetime import date, datetime

import pytest
from django.utils import timezone

from apps.interventions.formatters import (
    es_solo_fecha,
    es_verdadero,
    formatear_fecha,
    normalizar_intervencion,
    parsear_fecha,
    procesar_comentario,
    procesar_intervencion,
)


def test_formatear_fecha():
    assert formatear_fecha(date(2024, 3, 5)) == '05-03-2024'
    assert formatear_fecha('2024-03-05') == '05-03-2024'
    assert formatear_fecha(None) == ''
    assert formatear_fecha('no es fecha') == ''


def test_formatear_fecha_con_hora():
    fecha = timezone.make_aware(datetime(2024, 3, 5, 14, 30))
    assert formatear_fecha(fecha, incluir_hora=True) == '05-03-2024 14:30'


def test_parsear_fecha_invalida():
    with pytest.raises(ValueError):
        parsear_fecha('31-31-2024')
    assert parsear_fecha('') is None


def test_normalizar_aplica_valores_por_defecto():
    datos = normalizar_intervencion({
        'title': '  Conflicto en recreo  ',
        'description': 'x' * 2500,
        'type': 'Inventado',
        'priority': '1',
        'actionsTaken': ['Entrevista', '', None, ' Llamado '],
        'requiresExternalReferral': False,
        'externalReferralDetails': 'Psicólogo externo',
        'studentId': 4,
    })
    assert datos['title'] == 'Conflicto en recreo'
    assert len(datos['description']) == 2000
    assert datos['type'] == 'Otro'
    assert datos['status'] == 'Pendiente'
    assert datos['scope'] == 'Individual'
    assert datos['priority'] == 1
    assert datos['actionsTaken'] == ['Entrevista', 'Llamado']
    assert datos['externalReferralDetails'] is None
    assert datos['dateResolved'] is None
    assert timezone.is_aware(datos['dateReported'])
    assert datos['studentId'] == 4


def test_normalizar_parcial_solo_toca_lo_enviado():
    datos = normalizar_intervencion({'parentFeedback': ' Apoderado conforme '}, parcial=True)
    assert datos == {'parentFeedback': 'Apoderado conforme'}


def test_procesar_intervencion_agrega_etiquetas():
    datos = procesar_intervencion({
        'status': 'En Proceso',
        'priority': 1,
        'type': 'Salud',
        'scope': 'Grupal',
        'dateReported': '2024-01-15T10:00:00Z',
        'comments': [{'content': 'Hola', 'createdAt': '2024-01-16T10:00:00Z'}],
    })
    assert datos['statusLabel'] == 'En Proceso'
    assert datos['priorityLabel'] == 'Alta'
    assert datos['typeLabel'] == 'Salud'
    assert datos['scopeLabel'] == 'Grupal'
    assert datos['statusColor'] == 'info'
    assert datos['priorityColor'] == 'error'
    assert datos['isActive'] is True
    assert isinstance(datos['dateReported'], datetime)
    assert datos['comments'][0]['formattedDate']


def test_procesar_intervencion_cerrada_no_esta_activa():
    datos = procesar_intervencion({'status': 'Cerrado', 'priority': 9})
    assert datos['isActive'] is False
    assert datos['priorityLabel'] == 'No definida'
    assert datos['priorityColor'] == 'default'


def test_procesar_comentario():
    comentario = procesar_comentario({'content': 'Hola', 'createdAt': None})
    assert comentario['formattedDate'] == ''


@pytest.mark.parametrize('valor, esperado', [
    ('2024-01-20', True),
    (' 2024-01-20 ', True),
    (date(2024, 1, 20), True),
    ('2024-01-20T00:00:00', False),
    ('2024-01-20 10:30', False),
    (datetime(2024, 1, 20), False),
    ('no es fecha', False),
    (None, False),
])
def test_es_solo_fecha(valor, esperado):
    assert es_solo_fecha(valor) is esperado


def test_fecha_sin_hora_queda_a_medianoche_local():
    fecha = parsear_fecha('2024-01-20')
    assert timezone.is_aware(fecha)
    assert timezone.localtime(fecha).hour == 0
    assert timezone.localtime(fecha).date() == date(2024, 1, 20)


def test_es_verdadero():
    assert es_verdadero(' Sí ') is True
    assert es_verdadero('true') is True
    assert es_verdadero('no') is False
    assert es_verdadero(0) is False


def test_normalizar_derivacion_solo_con_la_bandera():
    datos = normalizar_intervencion({'externalReferralDetails': 'Derivar'}, parcial=True)
    assert datos == {}

    datos = normalizar_intervencion(
        {'requiresExternalReferral': 'si', 'externalReferralDetails': ' Neurólogo '}, parcial=True
    )
    assert datos == {'requiresExternalReferral': True, 'externalReferralDetails': 'Neurólogo'}
