"""
Constantes del módulo de intervenciones
"""
from datetime import timedelta

from apps.authentication.models import ROL_ADMIN

# Estados posibles de una intervención
ESTADO_PENDIENTE = 'Pendiente'
ESTADO_EN_PROCESO = 'En Proceso'
ESTADO_RESUELTO = 'Resuelto'
ESTADO_CERRADO = 'Cerrado'

ESTADOS = [ESTADO_PENDIENTE, ESTADO_EN_PROCESO, ESTADO_RESUELTO, ESTADO_CERRADO]
ESTADOS_ACTIVOS = [ESTADO_PENDIENTE, ESTADO_EN_PROCESO]

# Niveles de prioridad
PRIORIDAD_ALTA = 1
PRIORIDAD_MEDIA = 2
PRIORIDAD_BAJA = 3

PRIORIDADES = [PRIORIDAD_ALTA, PRIORIDAD_MEDIA, PRIORIDAD_BAJA]

# Tipos de intervención
TIPOS = [
    'Comportamiento',
    'Académico',
    'Asistencia',
    'Salud',
    'Familiar',
    'Social',
    'Emocional',
    'Otro',
]
TIPO_POR_DEFECTO = 'Otro'

# Ámbitos de intervención
AMBITO_INDIVIDUAL = 'Individual'
AMBITO_GRUPAL = 'Grupal'
AMBITO_FAMILIAR = 'Familiar'

AMBITOS = [AMBITO_INDIVIDUAL, AMBITO_GRUPAL, AMBITO_FAMILIAR]

ESTADO_CHOICES = [(estado, estado) for estado in ESTADOS]
PRIORIDAD_CHOICES = [(PRIORIDAD_ALTA, 'Alta'), (PRIORIDAD_MEDIA, 'Media'), (PRIORIDAD_BAJA, 'Baja')]
TIPO_CHOICES = [(tipo, tipo) for tipo in TIPOS]
AMBITO_CHOICES = [(ambito, ambito) for ambito in AMBITOS]

# Etiquetas para mostrar
LABELS = {
    'status': {estado: estado for estado in ESTADOS},
    'priority': dict(PRIORIDAD_CHOICES),
    'type': {tipo: tipo for tipo in TIPOS},
    'scope': {ambito: ambito for ambito in AMBITOS},
}

STATUS_COLORS = {
    ESTADO_PENDIENTE: 'warning',
    ESTADO_EN_PROCESO: 'info',
    ESTADO_RESUELTO: 'success',
    ESTADO_CERRADO: 'default',
}

PRIORITY_COLORS = {
    PRIORIDAD_ALTA: 'error',
    PRIORIDAD_MEDIA: 'warning',
    PRIORIDAD_BAJA: 'info',
}

# Qué se puede hacer con una intervención según su estado. Un valor puede
# ser booleano o una lista de roles; si el estado dice False, ningún rol
# puede pasar por encima.
STATUS_PERMISSIONS = {
    ESTADO_PENDIENTE: {
        'canEdit': True,
        'canDelete': True,
        'canAddComments': True,
        'canChangeStatus': True,
        'canAddAttachments': True,
    },
    ESTADO_EN_PROCESO: {
        'canEdit': True,
        'canDelete': False,
        'canAddComments': True,
        'canChangeStatus': True,
        'canAddAttachments': True,
    },
    ESTADO_RESUELTO: {
        'canEdit': False,
        'canDelete': False,
        'canAddComments': True,
        'canChangeStatus': True,
        'canAddAttachments': False,
    },
    ESTADO_CERRADO: {
        'canEdit': False,
        'canDelete': False,
        'canAddComments': False,
        'canChangeStatus': False,
        'canAddAttachments': False,
    },
}

PERMISOS_ESTADO = ['canEdit', 'canDelete', 'canAddComments', 'canChangeStatus', 'canAddAttachments']

# Transiciones válidas de estado
VALID_STATUS_TRANSITIONS = {
    ESTADO_PENDIENTE: frozenset([ESTADO_EN_PROCESO, ESTADO_RESUELTO]),
    ESTADO_EN_PROCESO: frozenset([ESTADO_RESUELTO]),
    ESTADO_RESUELTO: frozenset([ESTADO_CERRADO, ESTADO_EN_PROCESO]),
    ESTADO_CERRADO: frozenset(),
}

# Límites de caracteres para campos
CHAR_LIMITS = {
    'TITLE': 100,
    'DESCRIPTION': 2000,
    'COMMENT': 1000,
    'REFERRAL_DETAILS': 500,
    'ACTION_TAKEN': 500,
    'OUTCOME_EVALUATION': 1000,
    'PARENT_FEEDBACK': 1000,
}

CAMPOS_REQUERIDOS = {
    'CREATE': ['title', 'description', 'type', 'priority', 'studentId', 'responsibleId'],
    'UPDATE': ['title', 'description', 'type', 'priority'],
}

TIME_INTERVALS = {
    'FOLLOW_UP_DEFAULT': timedelta(days=7),
    'RESOLUTION_TARGET': timedelta(days=30),
}

# Solo estos roles pueden eliminar comentarios ajenos
ROLES_ELIMINAN_COMENTARIOS = [ROL_ADMIN]
