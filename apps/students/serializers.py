from django.db import IntegrityError, transaction
from rest_framework import serializers

from core.exceptions import ErrorDuplicado
from .models import Estudiante
from .validators import normalizar_estudiante, validar_estudiante


class EstudianteSerializer(serializers.ModelSerializer):
    """Estudiante con los nombres de campo de la API"""
    firstName = serializers.CharField(source='nombre', read_only=True)
    lastName = serializers.CharField(source='apellido', read_only=True)
    fullName = serializers.CharField(source='nombre_completo', read_only=True)
    displayRut = serializers.CharField(source='rut_formateado', read_only=True)
    birthDate = serializers.DateField(source='fecha_nacimiento', read_only=True)
    age = serializers.IntegerField(source='edad', read_only=True)
    grade = serializers.CharField(source='curso', read_only=True)
    studentType = serializers.CharField(source='tipo_estudiante', read_only=True)
    academicYear = serializers.IntegerField(source='anio_academico', read_only=True)
    guardian1Name = serializers.CharField(source='nombre_apoderado1', read_only=True)
    guardian1Contact = serializers.CharField(source='contacto_apoderado1', read_only=True)
    guardian2Name = serializers.CharField(source='nombre_apoderado2', read_only=True)
    guardian2Contact = serializers.CharField(source='contacto_apoderado2', read_only=True)
    address = serializers.CharField(source='direccion', read_only=True)
    healthInfo = serializers.CharField(source='informacion_salud', read_only=True)
    medicalConditions = serializers.CharField(source='condiciones_medicas', read_only=True)
    allergies = serializers.CharField(source='alergias', read_only=True)
    enrollmentDate = serializers.DateField(source='fecha_matricula', read_only=True)
    hasScholarship = serializers.BooleanField(source='tiene_beca', read_only=True)
    scholarshipDetails = serializers.CharField(source='detalles_beca', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Estudiante
        fields = [
            'id', 'rut', 'displayRut', 'firstName', 'lastName', 'fullName', 'email',
            'birthDate', 'age', 'grade', 'studentType', 'academicYear',
            'guardian1Name', 'guardian1Contact', 'guardian2Name', 'guardian2Contact',
            'address', 'healthInfo', 'medicalConditions', 'allergies', 'enrollmentDate',
            'hasScholarship', 'scholarshipDetails', 'isActive', 'createdAt', 'updatedAt'
        ]


class EstudianteResumenSerializer(serializers.ModelSerializer):
    """Resumen embebido en las intervenciones"""
    firstName = serializers.CharField(source='nombre', read_only=True)
    lastName = serializers.CharField(source='apellido', read_only=True)
    fullName = serializers.CharField(source='nombre_completo', read_only=True)
    grade = serializers.CharField(source='curso', read_only=True)
    studentType = serializers.CharField(source='tipo_estudiante', read_only=True)

    class Meta:
        model = Estudiante
        fields = ['id', 'rut', 'firstName', 'lastName', 'fullName', 'grade', 'studentType']


class EstudianteWriteSerializer(serializers.Serializer):
    """Alta y edición; las reglas de negocio viven en validators.py"""
    CAMPOS_MODELO = {
        'rut': 'rut',
        'firstName': 'nombre',
        'lastName': 'apellido',
        'email': 'email',
        'birthDate': 'fecha_nacimiento',
        'grade': 'curso',
        'studentType': 'tipo_estudiante',
        'academicYear': 'anio_academico',
        'guardian1Name': 'nombre_apoderado1',
        'guardian1Contact': 'contacto_apoderado1',
        'guardian2Name': 'nombre_apoderado2',
        'guardian2Contact': 'contacto_apoderado2',
        'address': 'direccion',
        'healthInfo': 'informacion_salud',
        'medicalConditions': 'condiciones_medicas',
        'allergies': 'alergias',
        'enrollmentDate': 'fecha_matricula',
        'hasScholarship': 'tiene_beca',
        'scholarshipDetails': 'detalles_beca',
        'isActive': 'is_active',
    }

    rut = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    firstName = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    lastName = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    birthDate = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    grade = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    studentType = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    academicYear = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    guardian1Name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    guardian1Contact = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    guardian2Name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    guardian2Contact = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    healthInfo = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    medicalConditions = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    allergies = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    enrollmentDate = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    hasScholarship = serializers.BooleanField(required=False)
    scholarshipDetails = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    isActive = serializers.BooleanField(required=False)

    def validate(self, attrs):
        errores = validar_estudiante(attrs, es_edicion=self.instance is not None)
        if errores:
            raise serializers.ValidationError(errores)
        return normalizar_estudiante(attrs)

    def _a_modelo(self, validated_data):
        datos = {
            self.CAMPOS_MODELO[campo]: valor
            for campo, valor in validated_data.items()
            if campo in self.CAMPOS_MODELO
        }
        # Columnas NOT NULL con valor por defecto
        if datos.get('tipo_estudiante') is None:
            datos.pop('tipo_estudiante', None)
        for campo in ('tiene_beca', 'is_active'):
            if datos.get(campo) is None:
                datos.pop(campo, None)
        return datos

    def create(self, validated_data):
        try:
            with transaction.atomic():
                return Estudiante.objects.create(**self._a_modelo(validated_data))
        except IntegrityError:
            raise ErrorDuplicado('Ya existe un estudiante con ese RUT')

    def update(self, instance, validated_data):
        for campo, valor in self._a_modelo(validated_data).items():
            setattr(instance, campo, valor)
        try:
            with transaction.atomic():
                instance.save()
        except IntegrityError:
            raise ErrorDuplicado('Ya existe un estudiante con ese RUT')
        return instance
