from datetime import datetime, timedelta

from django.utils import timezone

from apps.interventions.validators import validar_comentario, validar_intervencion
from apps.students.validators import normalizar_estudiante, validar_estudiante
from apps.users.validators import validar_usuario


def datos_validos(**extra):
    datos = {
        'title': 'Conflicto en recreo',
        'description': 'Discusión con compañeros',
        'type': 'Comportamiento',
        'priority': 2,
        'studentId': 1,
        'responsibleId': 2,
    }
    datos.update(extra)
    return datos


def test_datos_validos_sin_errores():
    assert validar_intervencion(datos_validos()) == {}


def test_requeridos_en_creacion():
    errores = validar_intervencion({})
    assert set(errores) == {'title', 'description', 'type', 'priority', 'studentId', 'responsibleId'}
    assert errores['title'] == 'El campo title es requerido'


def test_requeridos_en_actualizacion_no_incluyen_relaciones():
    errores = validar_intervencion({}, es_actualizacion=True)
    assert set(errores) == {'title', 'description', 'type', 'priority'}


def test_texto_en_blanco_cuenta_como_vacio():
    assert 'title' in validar_intervencion(datos_validos(title='   '))


def test_limite_del_titulo():
    assert 'title' not in validar_intervencion(datos_validos(title='a' * 100))
    assert 'title' in validar_intervencion(datos_validos(title='a' * 101))


def test_validacion_idempotente():
    datos = datos_validos(title='a' * 150, priority=7, type='Inventado')
    assert validar_intervencion(datos) == validar_intervencion(datos)


def test_enumeraciones():
    errores = validar_intervencion(datos_validos(type='Inventado', priority=5, status='Archivado', scope='Mundial'))
    assert errores['type'] == 'Tipo de intervención no válido'
    assert errores['priority'] == 'Prioridad no válida'
    assert errores['status'] == 'Estado no válido'
    assert errores['scope'] == 'Ámbito de intervención no válido'


def test_prioridad_como_texto_numerico():
    assert 'priority' not in validar_intervencion(datos_validos(priority='1'))
    assert 'priority' in validar_intervencion(datos_validos(priority='alta'))


def test_derivacion_externa():
    errores = validar_intervencion(datos_validos(requiresExternalReferral=True, externalReferralDetails=''))
    assert errores['externalReferralDetails'] == 'Los detalles de la derivación son requeridos'

    errores = validar_intervencion(datos_validos(requiresExternalReferral=False, externalReferralDetails='x' * 900))
    assert 'externalReferralDetails' not in errores


def test_acciones_tomadas():
    assert 'actionsTaken' in validar_intervencion(datos_validos(actionsTaken='llamar apoderado'))
    assert 'actionsTaken' in validar_intervencion(datos_validos(actionsTaken=['a' * 501]))
    assert 'actionsTaken' not in validar_intervencion(datos_validos(actionsTaken=['Entrevista', 'Llamado']))


def test_fecha_de_seguimiento():
    ahora = timezone.now()
    pasada = (ahora - timedelta(days=2)).isoformat()
    futura = (ahora + timedelta(days=2)).isoformat()
    assert validar_intervencion(datos_validos(followUpDate=pasada), ahora=ahora)['followUpDate'] == (
        'La fecha de seguimiento no puede ser anterior a hoy'
    )
    assert 'followUpDate' not in validar_intervencion(datos_validos(followUpDate=futura), ahora=ahora)


def test_fecha_de_seguimiento_de_hoy_sin_hora_es_valida():
    ahora = timezone.now()
    hoy = timezone.localdate(ahora).isoformat()
    assert 'followUpDate' not in validar_intervencion(datos_validos(followUpDate=hoy), ahora=ahora)


def test_fecha_de_seguimiento_invalida():
    assert 'followUpDate' in validar_intervencion(datos_validos(followUpDate='mañana'))


def test_transicion_en_actualizacion():
    errores = validar_intervencion(
        datos_validos(status='Cerrado', currentStatus='Pendiente'), es_actualizacion=True
    )
    assert errores['status'] == 'Transición de estado no válida'

    errores = validar_intervencion(
        datos_validos(status='En Proceso', currentStatus='Pendiente'), es_actualizacion=True
    )
    assert 'status' not in errores


def test_comentario():
    assert validar_comentario({'content': 'Hola', 'interventionId': 1, 'userId': 2}) == {}
    errores = validar_comentario({'content': '  '})
    assert errores['content'] == 'El contenido es requerido'
    assert 'interventionId' in errores
    assert 'content' in validar_comentario({'content': 'x' * 1001}, es_actualizacion=True)


def test_estudiante_valido():
    hoy = timezone.localdate()
    datos = {
        'firstName': 'Sofía',
        'lastName': 'Castro',
        'rut': '12.345.678-5',
        'birthDate': f'{hoy.year - 10}-01-15',
        'grade': '4° Básico',
        'academicYear': str(hoy.year),
        'guardian1Contact': '+56 9 1234 5678',
    }
    assert validar_estudiante(datos, hoy=hoy) == {}


def test_estudiante_errores():
    hoy = timezone.localdate()
    errores = validar_estudiante({
        'firstName': '',
        'rut': '12345678-4',
        'birthDate': f'{hoy.year + 1}-01-01',
        'academicYear': hoy.year + 3,
        'email': 'sin-arroba',
        'guardian1Contact': '123',
    }, hoy=hoy)
    assert errores['firstName'] == 'El nombre es requerido'
    assert errores['rut'] == 'RUT inválido (dígito verificador incorrecto)'
    assert errores['birthDate'] == 'La fecha de nacimiento no puede ser futura'
    assert 'academicYear' in errores
    assert 'email' in errores
    assert 'guardian1Contact' in errores
    assert 'grade' in errores


def test_estudiante_edad_fuera_de_rango():
    hoy = timezone.localdate()
    errores = validar_estudiante({'birthDate': f'{hoy.year - 30}-01-01'}, es_edicion=True, hoy=hoy)
    assert errores == {'birthDate': 'La edad debe estar entre 3 y 20 años'}


def test_estudiante_edicion_solo_valida_lo_enviado():
    assert validar_estudiante({'address': 'Calle 123'}, es_edicion=True) == {}


def test_normalizar_estudiante():
    datos = normalizar_estudiante({'rut': '12.345.678-5', 'email': ' Sofia@Correo.CL ', 'academicYear': '2024'})
    assert datos['rut'] == '12345678-5'
    assert datos['email'] == 'sofia@correo.cl'
    assert datos['academicYear'] == 2024


def test_usuario():
    assert validar_usuario({
        'firstName': 'Ana', 'lastName': 'Pérez', 'email': 'ana@colegio.cl',
        'rut': '11111111-1', 'role': 'profesor', 'password': 'clave-segura',
    }) == {}
    errores = validar_usuario({'email': 'ana', 'role': 'director', 'password': 'corta'})
    assert errores['email'] == 'El formato del email no es válido'
    assert errores['role'] == 'El rol especificado no es válido'
    assert 'password' in errores
    assert errores['rut'] == 'El campo rut es requerido'


def test_prioridad_debe_ser_entera():
    assert validar_intervencion(datos_validos(priority=1.7))['priority'] == 'Prioridad no válida'
    assert validar_intervencion(datos_validos(priority='1.7'))['priority'] == 'Prioridad no válida'
    assert validar_intervencion(datos_validos(priority=True))['priority'] == 'Prioridad no válida'
    assert 'priority' not in validar_intervencion(datos_validos(priority=2.0))


def test_email_con_formato_de_django():
    for email in ('ana@colegio..cl', 'ana@', 'ana colegio@correo.cl'):
        assert validar_estudiante({'email': email}, es_edicion=True) == {
            'email': 'El formato del email no es válido'
        }
        assert validar_usuario({'email': email}, es_actualizacion=True) == {
            'email': 'El formato del email no es válido'
        }
    assert validar_estudiante({'email': 'sofia.castro@correo.cl'}, es_edicion=True) == {}
