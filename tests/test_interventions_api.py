from datetime import datetime

import pytest
from django.utils import timezone

from apps.interventions.models import Intervencion

pytestmark = pytest.mark.django_db

URL = '/api/interventions/'


def nueva(estudiante, responsable, **extra):
    datos = {
        'title': 'Bajo rendimiento en matemáticas',
        'description': 'Tres evaluaciones bajo 4.0',
        'type': 'Académico',
        'priority': 1,
        'studentId': estudiante.pk,
        'responsibleId': responsable.pk,
    }
    datos.update(extra)
    return datos


def test_requiere_autenticacion(cliente):
    respuesta = cliente.get(URL)
    assert respuesta.status_code == 401
    assert respuesta.json()['type'] == 'AuthError'


def test_crear_y_no_cerrar_desde_pendiente(cliente_de, profesor, profesional, estudiante):
    api = cliente_de(profesor)

    respuesta = api.post(URL, nueva(estudiante, profesional), format='json')
    assert respuesta.status_code == 201
    creada = respuesta.json()
    assert creada['status'] == 'Pendiente'
    assert creada['priorityLabel'] == 'Alta'

    respuesta = api.post(f"{URL}{creada['id']}/change-status/", {'status': 'Cerrado'}, format='json')
    assert respuesta.status_code == 400
    cuerpo = respuesta.json()
    assert cuerpo['type'] == 'ValidationError'
    assert cuerpo['details']['status'] == 'Transición de estado no válida'


def test_crear_con_errores_de_validacion(cliente_de, profesor, estudiante):
    respuesta = cliente_de(profesor).post(URL, {'title': 'x' * 101}, format='json')

    assert respuesta.status_code == 400
    cuerpo = respuesta.json()
    assert cuerpo['type'] == 'ValidationError'
    assert set(cuerpo) == {'error', 'type', 'details'}
    assert 'title' in cuerpo['details']
    assert 'studentId' in cuerpo['details']
    assert Intervencion.objects.count() == 0


def test_filtro_por_rango_de_fechas(cliente_de, admin, profesor, profesional, estudiante):
    for dia in (5, 15, 25):
        Intervencion.objects.create(
            titulo=f'Caso del día {dia}',
            descripcion='Detalle',
            tipo='Social',
            prioridad=2,
            estudiante=estudiante,
            responsable=profesional,
            informante=profesor,
            fecha_reporte=timezone.make_aware(datetime(2024, 1, dia, 10, 0)),
        )

    respuesta = cliente_de(admin).get(URL, {'dateFrom': '2024-01-10', 'dateTo': '2024-01-20'})

    assert respuesta.status_code == 200
    assert [i['title'] for i in respuesta.json()] == ['Caso del día 15']


def test_filtro_fecha_hasta_incluye_todo_el_dia(cliente_de, admin, profesor, profesional, estudiante):
    Intervencion.objects.create(
        titulo='Tarde', descripcion='Detalle', tipo='Social', prioridad=2,
        estudiante=estudiante, responsable=profesional, informante=profesor,
        fecha_reporte=timezone.make_aware(datetime(2024, 1, 20, 23, 59, 59)),
    )

    respuesta = cliente_de(admin).get(URL, {'dateTo': '2024-01-20'})
    assert len(respuesta.json()) == 1


def test_filtro_de_fecha_invalida(cliente_de, admin):
    respuesta = cliente_de(admin).get(URL, {'dateFrom': 'ayer'})
    assert respuesta.status_code == 400
    assert 'dateFrom' in respuesta.json()['details']


def test_filtro_por_estado_y_responsable(cliente_de, admin, intervencion, profesional, profesor):
    api = cliente_de(admin)
    assert len(api.get(URL, {'status': 'Pendiente', 'responsibleId': profesional.pk}).json()) == 1
    assert api.get(URL, {'status': 'Cerrado'}).json() == []
    assert api.get(URL, {'responsibleId': profesor.pk}).json() == []


def test_visibilidad_por_rol(cliente_de, intervencion, otro_profesor, profesional):
    assert cliente_de(otro_profesor).get(URL).json() == []
    assert cliente_de(otro_profesor).get(f'{URL}{intervencion.pk}/').status_code == 404
    assert len(cliente_de(profesional).get(URL).json()) == 1


def test_detalle_con_relaciones_y_permisos(cliente_de, intervencion, profesional):
    respuesta = cliente_de(profesional).get(f'{URL}{intervencion.pk}/details/')

    assert respuesta.status_code == 200
    cuerpo = respuesta.json()
    assert cuerpo['student']['fullName'] == 'Sofía Castro'
    assert cuerpo['responsible']['id'] == profesional.pk
    assert cuerpo['comments'] == []
    assert cuerpo['computed']['isActive'] is True
    assert cuerpo['permissions']['isResponsible'] is True
    assert cuerpo['permissions']['allowedTransitions'] == ['En Proceso', 'Resuelto']


def test_permisos_del_usuario(cliente_de, intervencion, admin):
    cuerpo = cliente_de(admin).get(f'{URL}{intervencion.pk}/permissions/').json()
    assert cuerpo['canDelete'] is True
    assert cuerpo['canDeleteComments'] is True


def test_flujo_de_resolucion(cliente_de, intervencion, profesional):
    api = cliente_de(profesional)
    base = f'{URL}{intervencion.pk}'

    respuesta = api.put(f'{base}/actions-taken/', {'actionsTaken': ['Entrevista', 'Llamado al apoderado']}, format='json')
    assert respuesta.status_code == 200
    assert respuesta.json()['actionsTaken'] == ['Entrevista', 'Llamado al apoderado']

    respuesta = api.post(f'{base}/change-status/', {'status': 'Resuelto', 'resolution': 'Mejoró la conducta'},
                         format='json')
    assert respuesta.status_code == 200
    cuerpo = respuesta.json()
    assert cuerpo['status'] == 'Resuelto'
    assert cuerpo['dateResolved'] is not None
    assert cuerpo['outcomeEvaluation'] == 'Mejoró la conducta'
    assert cuerpo['computed']['hasResolution'] is True

    respuesta = api.put(f'{base}/parent-feedback/', {'text': 'Conforme'}, format='json')
    assert respuesta.status_code == 403
    assert respuesta.json()['type'] == 'AuthorizationError'
    assert respuesta.json()['error'] == 'No tiene permisos para realizar esta acción'

    respuesta = api.post(f'{base}/change-status/', {'status': 'Cerrado'}, format='json')
    assert respuesta.status_code == 200
    assert respuesta.json()['permissions']['allowedTransitions'] == []


def test_seguimiento_en_el_pasado(cliente_de, intervencion, profesional):
    respuesta = cliente_de(profesional).put(
        f'{URL}{intervencion.pk}/follow-up/', {'followUpDate': '2020-01-01'}, format='json'
    )
    assert respuesta.status_code == 400
    assert respuesta.json()['details']['followUpDate'] == 'La fecha de seguimiento no puede ser anterior a hoy'


def test_derivacion_externa(cliente_de, intervencion, profesor):
    respuesta = cliente_de(profesor).put(
        f'{URL}{intervencion.pk}/external-referral/', {'details': 'Derivado a neurólogo'}, format='json'
    )
    assert respuesta.status_code == 200
    assert respuesta.json()['requiresExternalReferral'] is True
    assert respuesta.json()['computed']['hasExternalReferral'] is True


def test_actualizacion_parcial(cliente_de, intervencion, profesor):
    respuesta = cliente_de(profesor).patch(
        f'{URL}{intervencion.pk}/', {'priority': 3, 'title': 'Conflicto resuelto en diálogo'}, format='json'
    )
    assert respuesta.status_code == 200
    assert respuesta.json()['priority'] == 3
    assert respuesta.json()['priorityLabel'] == 'Baja'


def test_eliminar(cliente_de, intervencion, profesor, admin):
    assert cliente_de(profesor).delete(f'{URL}{intervencion.pk}/').status_code == 403
    assert cliente_de(admin).delete(f'{URL}{intervencion.pk}/').status_code == 204
    assert cliente_de(admin).get(f'{URL}{intervencion.pk}/').status_code == 404


def test_comentarios(cliente_de, intervencion, profesor, admin):
    api = cliente_de(profesor)

    respuesta = api.post('/api/intervention-comments/', {'content': 'Citación enviada',
                                                         'interventionId': intervencion.pk}, format='json')
    assert respuesta.status_code == 201
    comentario = respuesta.json()
    assert comentario['user']['id'] == profesor.pk

    respuesta = api.put(f"/api/intervention-comments/{comentario['id']}/", {'content': 'Citación confirmada'},
                        format='json')
    assert respuesta.status_code == 200
    assert respuesta.json()['content'] == 'Citación confirmada'

    assert api.delete(f"/api/intervention-comments/{comentario['id']}/").status_code == 403
    assert cliente_de(admin).delete(f"/api/intervention-comments/{comentario['id']}/").status_code == 204


def test_comentario_sin_contenido(cliente_de, intervencion, profesor):
    respuesta = cliente_de(profesor).post('/api/intervention-comments/', {'content': '',
                                                                          'interventionId': intervencion.pk},
                                          format='json')
    assert respuesta.status_code == 400
    assert respuesta.json()['details']['content'] == 'El contenido es requerido'
