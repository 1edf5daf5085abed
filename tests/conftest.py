from datetime import date

import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient

from apps.authentication.models import ROL_ADMIN, ROL_PROFESIONAL, ROL_PROFESOR, RoleManager
from apps.interventions.models import Intervencion
from apps.students.models import Estudiante
from apps.users.models import Funcionario


def crear_funcionario(email, rol, rut, nombre='Ana', apellido='Pérez', password='clave-segura-123'):
    user = User.objects.create_user(
        username=email, email=email, password=password, first_name=nombre, last_name=apellido
    )
    Funcionario.objects.create(usuario=user, rut=rut, cargo='Cargo de prueba')
    RoleManager.asignar_rol(user, rol)
    return user


@pytest.fixture
def admin(db):
    return crear_funcionario('admin@colegio.cl', ROL_ADMIN, '11111111-1', nombre='Marta', apellido='Rojas')


@pytest.fixture
def profesor(db):
    return crear_funcionario('profesor@colegio.cl', ROL_PROFESOR, '12345678-5', nombre='Luis', apellido='Soto')


@pytest.fixture
def profesional(db):
    return crear_funcionario('psicologa@colegio.cl', ROL_PROFESIONAL, '22222222-2', nombre='Carla', apellido='Muñoz')


@pytest.fixture
def otro_profesor(db):
    return crear_funcionario('otro@colegio.cl', ROL_PROFESOR, '33333333-3', nombre='Pedro', apellido='Lagos')


@pytest.fixture
def cliente():
    return APIClient()


@pytest.fixture
def cliente_de():
    """Cliente autenticado como el usuario indicado"""
    def _cliente(user):
        api = APIClient()
        api.force_authenticate(user=user)
        return api
    return _cliente


@pytest.fixture
def estudiante(db):
    hoy = date.today()
    return Estudiante.objects.create(
        rut='15555555-6',
        nombre='Sofía',
        apellido='Castro',
        fecha_nacimiento=date(hoy.year - 12, 3, 15),
        curso='6° Básico',
        anio_academico=hoy.year,
    )


@pytest.fixture
def intervencion(estudiante, profesor, profesional):
    return Intervencion.objects.create(
        titulo='Conflicto en recreo',
        descripcion='Discusión con compañeros durante el recreo',
        tipo='Comportamiento',
        prioridad=2,
        estudiante=estudiante,
        responsable=profesional,
        informante=profesor,
    )
