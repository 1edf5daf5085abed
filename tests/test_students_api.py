from datetime import date

import pytest

from apps.students.models import Estudiante

pytestmark = pytest.mark.django_db

URL = '/api/students/'


def datos_estudiante(**extra):
    hoy = date.today()
    datos = {
        'rut': '12.345.678-5',
        'firstName': ' Tomás ',
        'lastName': 'Fuentes',
        'email': 'Tomas.Fuentes@Correo.cl',
        'birthDate': date(hoy.year - 10, 1, 1).isoformat(),
        'grade': '4° Básico',
        'academicYear': str(hoy.year),
        'guardian1Name': 'Paula Fuentes',
        'guardian1Contact': '+56 9 1234 5678',
    }
    datos.update(extra)
    return datos


def test_crear_normaliza_los_datos(cliente_de, profesor):
    respuesta = cliente_de(profesor).post(URL, datos_estudiante(), format='json')

    assert respuesta.status_code == 201
    cuerpo = respuesta.json()
    assert cuerpo['rut'] == '12345678-5'
    assert cuerpo['displayRut'] == '12.345.678-5'
    assert cuerpo['firstName'] == 'Tomás'
    assert cuerpo['email'] == 'tomas.fuentes@correo.cl'
    assert cuerpo['studentType'] == 'Regular'
    assert cuerpo['age'] == 10


def test_rut_duplicado(cliente_de, profesor, estudiante):
    respuesta = cliente_de(profesor).post(URL, datos_estudiante(rut='15.555.555-6'), format='json')

    assert respuesta.status_code == 409
    cuerpo = respuesta.json()
    assert cuerpo['type'] == 'DuplicateError'
    assert cuerpo['error'] == 'Ya existe un estudiante con ese RUT'


def test_errores_de_validacion(cliente_de, profesor):
    datos = datos_estudiante(rut='12345678-9', grade='Quinto', firstName='', guardian1Contact='abc')
    respuesta = cliente_de(profesor).post(URL, datos, format='json')

    assert respuesta.status_code == 400
    detalles = respuesta.json()['details']
    assert detalles['rut'] == 'RUT inválido (dígito verificador incorrecto)'
    assert detalles['grade'] == 'El curso no es válido'
    assert detalles['firstName'] == 'El nombre es requerido'
    assert 'guardian1Contact' in detalles
    assert Estudiante.objects.count() == 0


def test_profesional_no_crea_estudiantes(cliente_de, profesional):
    respuesta = cliente_de(profesional).post(URL, datos_estudiante(), format='json')
    assert respuesta.status_code == 403
    assert respuesta.json()['type'] == 'AuthorizationError'


def test_solo_admin_elimina(cliente_de, profesor, admin, estudiante):
    assert cliente_de(profesor).delete(f'{URL}{estudiante.pk}/').status_code == 403
    assert cliente_de(admin).delete(f'{URL}{estudiante.pk}/').status_code == 204


def test_eliminar_con_intervenciones_las_elimina(cliente_de, admin, estudiante, intervencion):
    assert cliente_de(admin).delete(f'{URL}{estudiante.pk}/').status_code == 204
    assert not type(intervencion).objects.exists()


def test_edicion_parcial(cliente_de, profesor, estudiante):
    respuesta = cliente_de(profesor).patch(
        f'{URL}{estudiante.pk}/', {'grade': '7° Básico', 'hasScholarship': True}, format='json'
    )

    assert respuesta.status_code == 200
    assert respuesta.json()['grade'] == '7° Básico'
    assert respuesta.json()['hasScholarship'] is True
    assert respuesta.json()['firstName'] == 'Sofía'


def test_busqueda_filtros_y_orden(cliente_de, profesor, estudiante):
    hoy = date.today()
    Estudiante.objects.create(
        rut='1000005-K', nombre='Andrés', apellido='Zúñiga', fecha_nacimiento=date(hoy.year - 8, 5, 5),
        curso='2° Básico', anio_academico=hoy.year, tipo_estudiante=Estudiante.TIPO_INTEGRACION,
    )
    api = cliente_de(profesor)

    assert [e['lastName'] for e in api.get(URL).json()] == ['Castro', 'Zúñiga']
    assert [e['lastName'] for e in api.get(URL, {'orderBy': 'lastName', 'order': 'DESC'}).json()] == [
        'Zúñiga', 'Castro'
    ]
    assert [e['lastName'] for e in api.get(URL, {'search': '15.555'}).json()] == ['Castro']
    assert [e['lastName'] for e in api.get(URL, {'studentType': 'Programa Integración'}).json()] == ['Zúñiga']
    assert [e['lastName'] for e in api.get(URL, {'grade': '6° Básico'}).json()] == ['Castro']


def test_estudiante_con_intervenciones(cliente_de, profesional, otro_profesor, estudiante, intervencion):
    cuerpo = cliente_de(profesional).get(f'{URL}{estudiante.pk}/with-interventions/').json()
    assert cuerpo['fullName'] == 'Sofía Castro'
    assert [i['id'] for i in cuerpo['interventions']] == [intervencion.pk]

    cuerpo = cliente_de(otro_profesor).get(f'{URL}{estudiante.pk}/with-interventions/').json()
    assert cuerpo['interventions'] == []


def test_estudiante_inexistente(cliente_de, profesor):
    respuesta = cliente_de(profesor).get(f'{URL}999/')
    assert respuesta.status_code == 404
    assert respuesta.json()['type'] == 'NotFoundError'
