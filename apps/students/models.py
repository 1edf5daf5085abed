#apps/students/models.py:

from datetime import date

from django.db import models

from core.rut import formatear_rut


class Estudiante(models.Model):
    CURSOS = [
        'Pre-Kinder', 'Kinder',
        '1° Básico', '2° Básico', '3° Básico', '4° Básico',
        '5° Básico', '6° Básico', '7° Básico', '8° Básico',
        'I Medio', 'II Medio', 'III Medio', 'IV Medio',
    ]
    CURSO_CHOICES = [(curso, curso) for curso in CURSOS]

    TIPO_REGULAR = 'Regular'
    TIPO_INTEGRACION = 'Programa Integración'
    TIPO_CHOICES = [
        (TIPO_REGULAR, 'Regular'),
        (TIPO_INTEGRACION, 'Programa Integración'),
    ]

    rut = models.CharField(max_length=12, unique=True)
    nombre = models.CharField(max_length=100)
    apellido = models.CharField(max_length=100)
    email = models.EmailField(max_length=100, null=True, blank=True)
    fecha_nacimiento = models.DateField()
    curso = models.CharField(max_length=20, choices=CURSO_CHOICES)
    tipo_estudiante = models.CharField(max_length=30, choices=TIPO_CHOICES, default=TIPO_REGULAR)
    anio_academico = models.PositiveIntegerField()
    nombre_apoderado1 = models.CharField(max_length=100, null=True, blank=True)
    contacto_apoderado1 = models.CharField(max_length=20, null=True, blank=True)
    nombre_apoderado2 = models.CharField(max_length=100, null=True, blank=True)
    contacto_apoderado2 = models.CharField(max_length=20, null=True, blank=True)
    direccion = models.CharField(max_length=255, null=True, blank=True)
    informacion_salud = models.TextField(null=True, blank=True)
    condiciones_medicas = models.TextField(null=True, blank=True)
    alergias = models.TextField(null=True, blank=True)
    fecha_matricula = models.DateField(null=True, blank=True)
    tiene_beca = models.BooleanField(default=False)
    detalles_beca = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'estudiante'
        verbose_name = 'Estudiante'
        verbose_name_plural = 'Estudiantes'
        ordering = ['apellido', 'nombre']

    def __str__(self):
        return f"{self.nombre} {self.apellido}"

    @property
    def nombre_completo(self):
        return f"{self.nombre} {self.apellido}"

    @property
    def rut_formateado(self):
        return formatear_rut(self.rut)

    @property
    def edad(self):
        today = date.today()
        return today.year - self.fecha_nacimiento.year - ((today.month, today.day) < (self.fecha_nacimiento.month, self.fecha_nacimiento.day))
