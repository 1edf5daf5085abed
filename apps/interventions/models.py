#apps/interventions/models.py:

from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone

from .constants import (
    AMBITO_CHOICES,
    AMBITO_INDIVIDUAL,
    CHAR_LIMITS,
    ESTADO_CHOICES,
    ESTADO_PENDIENTE,
    ESTADOS_ACTIVOS,
    PRIORIDAD_CHOICES,
    PRIORIDAD_MEDIA,
    TIPO_CHOICES,
    TIPO_POR_DEFECTO,
)


class Intervencion(models.Model):
    titulo = models.CharField(max_length=CHAR_LIMITS['TITLE'])
    descripcion = models.TextField(max_length=CHAR_LIMITS['DESCRIPTION'])
    tipo = models.CharField(max_length=30, choices=TIPO_CHOICES, default=TIPO_POR_DEFECTO)
    prioridad = models.PositiveSmallIntegerField(choices=PRIORIDAD_CHOICES, default=PRIORIDAD_MEDIA)
    estado = models.CharField(max_length=20, choices=ESTADO_CHOICES, default=ESTADO_PENDIENTE)
    ambito = models.CharField(max_length=20, choices=AMBITO_CHOICES, default=AMBITO_INDIVIDUAL)

    estudiante = models.ForeignKey(
        'students.Estudiante', on_delete=models.CASCADE, related_name='intervenciones'
    )
    responsable = models.ForeignKey(
        User, on_delete=models.PROTECT, related_name='intervenciones_asignadas'
    )
    informante = models.ForeignKey(
        User, on_delete=models.PROTECT, related_name='intervenciones_informadas'
    )

    fecha_reporte = models.DateTimeField(default=timezone.now)
    fecha_resolucion = models.DateTimeField(null=True, blank=True)
    fecha_seguimiento = models.DateTimeField(null=True, blank=True)

    acciones_tomadas = models.JSONField(default=list, blank=True)
    evaluacion_resultado = models.TextField(blank=True, default='')
    requiere_derivacion_externa = models.BooleanField(default=False)
    detalles_derivacion_externa = models.TextField(null=True, blank=True)
    retroalimentacion_apoderado = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'intervencion'
        verbose_name = 'Intervención'
        verbose_name_plural = 'Intervenciones'
        ordering = ['-fecha_reporte', '-id']

    def __str__(self):
        return f"{self.titulo} ({self.estado})"

    @property
    def esta_activa(self):
        return self.estado in ESTADOS_ACTIVOS


class ComentarioIntervencion(models.Model):
    intervencion = models.ForeignKey(Intervencion, on_delete=models.CASCADE, related_name='comentarios')
    usuario = models.ForeignKey(User, on_delete=models.PROTECT, related_name='comentarios_intervencion')
    contenido = models.TextField(max_length=CHAR_LIMITS['COMMENT'])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'comentario_intervencion'
        verbose_name = 'Comentario de intervención'
        verbose_name_plural = 'Comentarios de intervención'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Comentario de {self.usuario} en {self.intervencion_id}"
