# apps/authentication/models.py:

from django.contrib.auth.models import Group
from django.db.models.signals import post_migrate
from django.dispatch import receiver

ROL_ADMIN = 'admin'
ROL_PROFESOR = 'profesor'
ROL_PROFESIONAL = 'profesional'

ROLES = [ROL_ADMIN, ROL_PROFESOR, ROL_PROFESIONAL]

ROLES_CHOICES = [
    (ROL_ADMIN, 'Administrador'),
    (ROL_PROFESOR, 'Profesor'),
    (ROL_PROFESIONAL, 'Profesional'),
]

ROL_LABELS = dict(ROLES_CHOICES)


class RoleManager:
    """Manager para crear los roles del sistema como grupos de Django"""

    @staticmethod
    def create_default_groups():
        """Crea los grupos por defecto del sistema"""
        return [Group.objects.get_or_create(name=rol)[0] for rol in ROLES]

    @staticmethod
    def asignar_rol(user, rol):
        """Deja al usuario con un único grupo de rol"""
        if rol not in ROLES:
            raise ValueError(f"Rol desconocido: {rol}")

        grupo, _ = Group.objects.get_or_create(name=rol)
        user.groups.remove(*user.groups.filter(name__in=ROLES))
        user.groups.add(grupo)
        return grupo


def obtener_rol(user):
    """Rol del usuario según sus grupos; los superusuarios son admin"""
    if user is None or not getattr(user, 'is_authenticated', False):
        return None

    if user.is_superuser:
        return ROL_ADMIN

    nombres = set(user.groups.values_list('name', flat=True))
    for rol in ROLES:
        if rol in nombres:
            return rol
    return None


@receiver(post_migrate)
def create_default_groups(sender, **kwargs):
    """Crear grupos automáticamente después de las migraciones"""
    if sender.name == 'apps.authentication':
        RoleManager.create_default_groups()
