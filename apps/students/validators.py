"""Validación y normalización de datos de estudiantes"""
import re
from datetime import date

from django.utils.dateparse import parse_date

from apps.users.validators import email_valido
from core.rut import RUT_CON_GUION_REGEX, normalizar_rut, validar_rut
from .models import Estudiante

TELEFONO_REGEX = re.compile(r'^\+?[0-9]{9,15}$')

CAMPOS_REQUERIDOS = [
    ('firstName', 'El nombre es requerido'),
    ('lastName', 'El apellido es requerido'),
    ('rut', 'El RUT es requerido'),
    ('birthDate', 'La fecha de nacimiento es requerida'),
    ('grade', 'El curso es requerido'),
    ('academicYear', 'El año académico es requerido'),
]

LONGITUDES_MAXIMAS = {
    'firstName': 100,
    'lastName': 100,
    'email': 100,
    'guardian1Name': 100,
    'guardian2Name': 100,
    'guardian1Contact': 20,
    'guardian2Contact': 20,
    'address': 255,
    'healthInfo': 1000,
    'medicalConditions': 500,
    'allergies': 500,
    'scholarshipDetails': 500,
}

EDAD_MINIMA = 3
EDAD_MAXIMA = 20

_TEXTOS = [
    'firstName', 'lastName', 'guardian1Name', 'guardian2Name', 'guardian1Contact',
    'guardian2Contact', 'address', 'healthInfo', 'medicalConditions', 'allergies',
    'scholarshipDetails',
]


def _vacio(valor):
    return valor is None or not str(valor).strip()


def _a_fecha(valor):
    if isinstance(valor, date):
        return valor
    try:
        return parse_date(str(valor).strip()[:10])
    except ValueError:
        return None


def _edad(nacimiento, hoy):
    return hoy.year - nacimiento.year - ((hoy.month, hoy.day) < (nacimiento.month, nacimiento.day))


def validar_estudiante(data, es_edicion=False, hoy=None):
    """
    Devuelve un dict campo -> mensaje. En edición los campos requeridos
    solo se exigen si vienen en ``data``.
    """
    errores = {}
    hoy = hoy or date.today()

    for campo, mensaje in CAMPOS_REQUERIDOS:
        if campo in data or not es_edicion:
            if _vacio(data.get(campo)):
                errores[campo] = mensaje

    rut = data.get('rut')
    if not _vacio(rut):
        rut = str(rut).strip().replace('.', '')
        if not RUT_CON_GUION_REGEX.match(rut):
            errores['rut'] = 'Formato de RUT inválido (ej: 12345678-9)'
        elif not validar_rut(rut):
            errores['rut'] = 'RUT inválido (dígito verificador incorrecto)'

    nacimiento = data.get('birthDate')
    if not _vacio(nacimiento):
        fecha = _a_fecha(nacimiento)
        if fecha is None:
            errores['birthDate'] = 'La fecha de nacimiento no es válida'
        elif fecha > hoy:
            errores['birthDate'] = 'La fecha de nacimiento no puede ser futura'
        elif not EDAD_MINIMA <= _edad(fecha, hoy) <= EDAD_MAXIMA:
            errores['birthDate'] = f"La edad debe estar entre {EDAD_MINIMA} y {EDAD_MAXIMA} años"

    email = data.get('email')
    if not _vacio(email) and not email_valido(email):
        errores['email'] = 'El formato del email no es válido'

    anio = data.get('academicYear')
    if not _vacio(anio):
        try:
            anio = int(anio)
        except (TypeError, ValueError):
            anio = None
        if anio is None or not hoy.year - 1 <= anio <= hoy.year + 1:
            errores['academicYear'] = 'El año académico debe estar entre el año anterior y el próximo año'

    grado = data.get('grade')
    if not _vacio(grado) and grado not in Estudiante.CURSOS:
        errores['grade'] = 'El curso no es válido'

    tipo = data.get('studentType')
    if not _vacio(tipo) and tipo not in dict(Estudiante.TIPO_CHOICES):
        errores['studentType'] = 'El tipo de estudiante no es válido'

    for campo in ('guardian1Contact', 'guardian2Contact'):
        contacto = data.get(campo)
        if not _vacio(contacto) and not TELEFONO_REGEX.match(re.sub(r'\s', '', str(contacto))):
            errores[campo] = 'Formato de contacto inválido (solo números y + inicial)'

    for campo, maximo in LONGITUDES_MAXIMAS.items():
        valor = data.get(campo)
        if isinstance(valor, str) and len(valor) > maximo:
            errores[campo] = f"Este campo no puede exceder los {maximo} caracteres"

    return errores


def normalizar_estudiante(data):
    """RUT canónico, email en minúsculas, textos sin espacios y año entero"""
    resultado = dict(data)

    if 'rut' in data:
        resultado['rut'] = normalizar_rut(data['rut']) or None

    if 'email' in data:
        email = data.get('email')
        resultado['email'] = email.strip().lower() if email and email.strip() else None

    if not _vacio(data.get('academicYear')):
        resultado['academicYear'] = int(data['academicYear'])

    for campo in ('birthDate', 'enrollmentDate'):
        if campo in data:
            resultado[campo] = None if _vacio(data[campo]) else _a_fecha(data[campo])

    for campo in ('hasScholarship', 'isActive'):
        if campo in data:
            resultado[campo] = bool(data[campo])

    for campo in _TEXTOS:
        if isinstance(data.get(campo), str):
            resultado[campo] = data[campo].strip()

    return resultado
