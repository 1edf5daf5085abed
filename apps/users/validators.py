"""Validación de datos de funcionarios (usuarios del sistema)"""
from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from apps.authentication.models import ROLES
from core.rut import validar_rut

CAMPOS_REQUERIDOS = ['firstName', 'lastName', 'email', 'rut', 'role']

LONGITUD_MINIMA_PASSWORD = 8


def _vacio(valor):
    return valor is None or (isinstance(valor, str) and not valor.strip())


def email_valido(valor):
    try:
        validate_email(str(valor).strip())
    except ValidationError:
        return False
    return True


def validar_usuario(data, es_actualizacion=False):
    """
    Devuelve un dict campo -> mensaje. En creación los campos requeridos
    y la contraseña son obligatorios; en actualización solo se valida lo
    que viene en ``data``.
    """
    errores = {}

    requeridos = list(CAMPOS_REQUERIDOS)
    if not es_actualizacion:
        requeridos.append('password')

    for campo in requeridos:
        if campo in data:
            if _vacio(data[campo]):
                errores[campo] = f"El campo {campo} no puede estar vacío"
        elif not es_actualizacion:
            errores[campo] = f"El campo {campo} es requerido"

    email = data.get('email')
    if not _vacio(email) and not email_valido(email):
        errores['email'] = 'El formato del email no es válido'

    rut = data.get('rut')
    if not _vacio(rut) and not validar_rut(rut):
        errores['rut'] = 'El RUT no es válido'

    rol = data.get('role')
    if not _vacio(rol) and rol not in ROLES:
        errores['role'] = 'El rol especificado no es válido'

    password = data.get('password')
    if not _vacio(password) and len(password) < LONGITUD_MINIMA_PASSWORD:
        errores['password'] = f"La contraseña debe tener al menos {LONGITUD_MINIMA_PASSWORD} caracteres"

    return errores
