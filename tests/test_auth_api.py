import pytest

pytestmark = pytest.mark.django_db

LOGIN = '/api/auth/login/'


def iniciar_sesion(cliente, email='profesor@colegio.cl', password='clave-segura-123'):
    return cliente.post(LOGIN, {'email': email, 'password': password}, format='json')


def test_login_entrega_tokens_y_perfil(cliente, profesor):
    respuesta = iniciar_sesion(cliente, email='PROFESOR@colegio.cl')

    assert respuesta.status_code == 200
    cuerpo = respuesta.json()
    assert cuerpo['token'] == cuerpo['access']
    assert cuerpo['refresh']
    assert cuerpo['user']['id'] == profesor.pk
    assert cuerpo['user']['role'] == 'profesor'
    assert cuerpo['user']['permissions']['canCreateInterventions'] is True
    assert 'canDeleteInterventions' not in cuerpo['user']['permissions']


def test_credenciales_invalidas(cliente, profesor):
    respuesta = iniciar_sesion(cliente, password='incorrecta')

    assert respuesta.status_code == 401
    assert respuesta.json() == {'error': 'Credenciales inválidas', 'type': 'AuthError', 'details': {}}


def test_usuario_inactivo(cliente, profesor):
    profesor.is_active = False
    profesor.save()

    respuesta = iniciar_sesion(cliente)
    assert respuesta.status_code == 401


def test_login_sin_password(cliente):
    respuesta = cliente.post(LOGIN, {'email': 'profesor@colegio.cl'}, format='json')
    assert respuesta.status_code == 400
    assert 'password' in respuesta.json()['details']


def test_token_de_acceso_autentica(cliente, profesional):
    tokens = iniciar_sesion(cliente, email='psicologa@colegio.cl').json()
    cliente.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

    perfil = cliente.get('/api/profile/')
    assert perfil.status_code == 200
    assert perfil.json()['fullName'] == 'Carla Muñoz'
    assert perfil.json()['displayRut'] == '22.222.222-2'


def test_logout_invalida_el_refresh(cliente, profesor):
    tokens = iniciar_sesion(cliente).json()
    cliente.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

    respuesta = cliente.post('/api/auth/logout/', {'refresh': tokens['refresh']}, format='json')
    assert respuesta.status_code == 200

    respuesta = cliente.post('/api/auth/refresh/', {'refresh': tokens['refresh']}, format='json')
    assert respuesta.status_code == 401
    assert respuesta.json()['type'] == 'AuthError'


def test_logout_con_token_invalido(cliente_de, profesor):
    respuesta = cliente_de(profesor).post('/api/auth/logout/', {'refresh': 'no-es-un-token'}, format='json')
    assert respuesta.status_code == 400
    assert respuesta.json()['details'] == {'refresh': 'Token inválido'}
