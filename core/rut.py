# core/rut.py

import re

RUT_REGEX = re.compile(r'^[0-9]{7,8}[0-9K]$')
RUT_CON_GUION_REGEX = re.compile(r'^\d{7,8}-[0-9kK]$')


def limpiar_rut(rut):
    """Quita puntos y guión y deja el dígito verificador en mayúscula"""
    if not rut:
        return ''
    return str(rut).strip().upper().replace('.', '').replace('-', '')


def calcular_digito_verificador(numero):
    """
    Calcula el dígito verificador de la parte numérica de un RUT.

    Recorre los dígitos de derecha a izquierda multiplicando por 2, 3, 4,
    5, 6, 7 y vuelve a 2. El dígito es 11 - (suma % 11), con 11 -> '0'
    y 10 -> 'K'.
    """
    suma = 0
    multiplicador = 2

    for digito in reversed(str(numero)):
        suma += int(digito) * multiplicador
        multiplicador = 2 if multiplicador == 7 else multiplicador + 1

    resultado = 11 - (suma % 11)
    if resultado == 11:
        return '0'
    if resultado == 10:
        return 'K'
    return str(resultado)


def validar_rut(rut):
    """Valida formato y dígito verificador de un RUT chileno"""
    rut_limpio = limpiar_rut(rut)

    if not RUT_REGEX.match(rut_limpio):
        return False

    numero, dv = rut_limpio[:-1], rut_limpio[-1]
    return dv == calcular_digito_verificador(numero)


def normalizar_rut(rut):
    """Forma canónica almacenada: sin puntos, con guión (12345678-5)"""
    rut_limpio = limpiar_rut(rut)
    if len(rut_limpio) < 2:
        return rut_limpio
    return f"{rut_limpio[:-1]}-{rut_limpio[-1]}"


def formatear_rut(rut):
    """Formato de presentación con puntos (12.345.678-5)"""
    rut_limpio = limpiar_rut(rut)
    if len(rut_limpio) < 2:
        return rut_limpio

    numero, dv = rut_limpio[:-1], rut_limpio[-1]
    grupos = []
    while numero:
        grupos.insert(0, numero[-3:])
        numero = numero[:-3]

    return f"{'.'.join(grupos)}-{dv}"
