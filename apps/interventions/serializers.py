from rest_framework import serializers

from apps.students.serializers import EstudianteResumenSerializer
from apps.users.serializers import UsuarioResumenSerializer
from .models import ComentarioIntervencion, Intervencion


class ComentarioIntervencionSerializer(serializers.ModelSerializer):
    content = serializers.CharField(source='contenido', read_only=True)
    interventionId = serializers.IntegerField(source='intervencion_id', read_only=True)
    userId = serializers.IntegerField(source='usuario_id', read_only=True)
    user = UsuarioResumenSerializer(source='usuario', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = ComentarioIntervencion
        fields = ['id', 'content', 'interventionId', 'userId', 'user', 'createdAt', 'updatedAt']


class IntervencionSerializer(serializers.ModelSerializer):
    """Intervención con los nombres de campo de la API y sus relaciones resumidas"""
    title = serializers.CharField(source='titulo', read_only=True)
    description = serializers.CharField(source='descripcion', read_only=True)
    type = serializers.CharField(source='tipo', read_only=True)
    priority = serializers.IntegerField(source='prioridad', read_only=True)
    status = serializers.CharField(source='estado', read_only=True)
    scope = serializers.CharField(source='ambito', read_only=True)
    studentId = serializers.IntegerField(source='estudiante_id', read_only=True)
    responsibleId = serializers.IntegerField(source='responsable_id', read_only=True)
    informerId = serializers.IntegerField(source='informante_id', read_only=True)
    student = EstudianteResumenSerializer(source='estudiante', read_only=True)
    responsible = UsuarioResumenSerializer(source='responsable', read_only=True)
    informer = UsuarioResumenSerializer(source='informante', read_only=True)
    dateReported = serializers.DateTimeField(source='fecha_reporte', read_only=True)
    dateResolved = serializers.DateTimeField(source='fecha_resolucion', read_only=True)
    followUpDate = serializers.DateTimeField(source='fecha_seguimiento', read_only=True)
    actionsTaken = serializers.JSONField(source='acciones_tomadas', read_only=True)
    outcomeEvaluation = serializers.CharField(source='evaluacion_resultado', read_only=True)
    requiresExternalReferral = serializers.BooleanField(source='requiere_derivacion_externa', read_only=True)
    externalReferralDetails = serializers.CharField(source='detalles_derivacion_externa', read_only=True)
    parentFeedback = serializers.CharField(source='retroalimentacion_apoderado', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Intervencion
        fields = [
            'id', 'title', 'description', 'type', 'priority', 'status', 'scope',
            'studentId', 'responsibleId', 'informerId', 'student', 'responsible', 'informer',
            'dateReported', 'dateResolved', 'followUpDate', 'actionsTaken', 'outcomeEvaluation',
            'requiresExternalReferral', 'externalReferralDetails', 'parentFeedback',
            'createdAt', 'updatedAt'
        ]


class IntervencionDetalleSerializer(IntervencionSerializer):
    comments = ComentarioIntervencionSerializer(source='comentarios', many=True, read_only=True)

    class Meta(IntervencionSerializer.Meta):
        fields = IntervencionSerializer.Meta.fields + ['comments']


class CambioEstadoSerializer(serializers.Serializer):
    status = serializers.CharField()
    resolution = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AccionesTomadasSerializer(serializers.Serializer):
    actionsTaken = serializers.JSONField()


class TextoSerializer(serializers.Serializer):
    """Cuerpo de las acciones que actualizan un único campo de texto"""
    text = serializers.CharField(allow_blank=True)


class DerivacionSerializer(serializers.Serializer):
    details = serializers.CharField(allow_blank=True, allow_null=True, required=False)


class SeguimientoSerializer(serializers.Serializer):
    followUpDate = serializers.CharField(required=False, allow_null=True)


class ComentarioWriteSerializer(serializers.Serializer):
    content = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    interventionId = serializers.IntegerField(required=False, allow_null=True)
