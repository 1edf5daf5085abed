#apps/users/models.py:

from django.db import models
from django.contrib.auth.models import User

from apps.authentication.models import obtener_rol, ROL_LABELS
from core.rut import formatear_rut


class Funcionario(models.Model):
    TIPO_PERSONAL_CHOICES = [
        ('Docente', 'Docente'),
        ('Directivo', 'Directivo'),
        ('Profesional', 'Profesional de apoyo'),
        ('Asistente', 'Asistente de la educación'),
        ('Administrativo', 'Administrativo'),
    ]

    usuario = models.OneToOneField(User, on_delete=models.CASCADE, related_name='funcionario')
    rut = models.CharField(max_length=12, unique=True)
    tipo_personal = models.CharField(max_length=20, choices=TIPO_PERSONAL_CHOICES, null=True, blank=True)
    departamento = models.CharField(max_length=100, null=True, blank=True)
    cargo = models.CharField(max_length=100, null=True, blank=True)
    telefono = models.CharField(max_length=20, null=True, blank=True)
    fecha_nacimiento = models.DateField(null=True, blank=True)
    fecha_ingreso = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'funcionario'
        verbose_name = 'Funcionario'
        verbose_name_plural = 'Funcionarios'

    def __str__(self):
        return self.nombre_completo

    @property
    def nombre_completo(self):
        return f"{self.usuario.first_name} {self.usuario.last_name}"

    @property
    def rol(self):
        return obtener_rol(self.usuario)

    @property
    def rol_label(self):
        return ROL_LABELS.get(self.rol, self.rol)

    @property
    def rut_formateado(self):
        return formatear_rut(self.rut)
