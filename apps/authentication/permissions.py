#apps/authentication/permissions.py:

from rest_framework.permissions import BasePermission

from .models import ROL_ADMIN, ROL_PROFESOR, ROL_PROFESIONAL, obtener_rol

# Capacidades de cada rol. Es una tabla fija: el conjunto de permisos de
# un usuario depende solo de su rol.
PERMISOS_POR_ROL = {
    ROL_ADMIN: {
        # Usuarios
        'canCreateUsers': True,
        'canEditUsers': True,
        'canDeleteUsers': True,
        'canViewAllUsers': True,

        # Estudiantes
        'canCreateStudents': True,
        'canEditStudents': True,
        'canDeleteStudents': True,
        'canViewAllStudents': True,

        # Intervenciones
        'canCreateInterventions': True,
        'canEditInterventions': True,
        'canDeleteInterventions': True,
        'canViewAllInterventions': True,
    },
    ROL_PROFESOR: {
        'canCreateStudents': True,
        'canEditStudents': True,
        'canViewAllStudents': True,

        'canCreateInterventions': True,
        'canEditInterventions': True,
        'canViewOwnInterventions': True,
        'canViewAssignedInterventions': True,
    },
    ROL_PROFESIONAL: {
        'canViewAllStudents': True,

        'canCreateInterventions': True,
        'canEditInterventions': True,
        'canViewOwnInterventions': True,
        'canViewAssignedInterventions': True,
    },
}


def permisos_de_rol(rol):
    return dict(PERMISOS_POR_ROL.get(rol, {}))


def tiene_permiso(user, permiso):
    """Verifica si el rol del usuario tiene un permiso específico"""
    return bool(PERMISOS_POR_ROL.get(obtener_rol(user), {}).get(permiso))


class TienePermisoRol(BasePermission):
    """
    Revisa la tabla de permisos por rol según la acción de la vista.

    La vista declara ``permisos_por_accion = {'create': 'canCreateStudents', ...}``;
    las acciones que no aparecen solo exigen un usuario autenticado.
    """
    message = 'No tiene permisos para realizar esta acción'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        permiso = getattr(view, 'permisos_por_accion', {}).get(getattr(view, 'action', None))
        if permiso is None:
            return True
        return tiene_permiso(request.user, permiso)
