from django.contrib.auth.models import User
from django.db import IntegrityError, transaction
from rest_framework import serializers

from apps.authentication.models import RoleManager, obtener_rol, ROL_LABELS
from core.exceptions import ErrorDuplicado
from core.rut import normalizar_rut, formatear_rut
from .models import Funcionario
from .validators import validar_usuario


class UsuarioSerializer(serializers.ModelSerializer):
    """Representación de un funcionario con los nombres de campo de la API"""
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    fullName = serializers.SerializerMethodField()
    role = serializers.SerializerMethodField()
    roleLabel = serializers.SerializerMethodField()
    rut = serializers.CharField(source='funcionario.rut', read_only=True, default=None)
    displayRut = serializers.SerializerMethodField()
    staffType = serializers.CharField(source='funcionario.tipo_personal', read_only=True, default=None)
    department = serializers.CharField(source='funcionario.departamento', read_only=True, default=None)
    position = serializers.CharField(source='funcionario.cargo', read_only=True, default=None)
    phone = serializers.CharField(source='funcionario.telefono', read_only=True, default=None)
    birthDate = serializers.DateField(source='funcionario.fecha_nacimiento', read_only=True, default=None)
    hireDate = serializers.DateField(source='funcionario.fecha_ingreso', read_only=True, default=None)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'firstName', 'lastName', 'fullName', 'email', 'role', 'roleLabel',
            'rut', 'displayRut', 'staffType', 'department', 'position', 'phone',
            'birthDate', 'hireDate', 'isActive', 'createdAt'
        ]

    def get_fullName(self, obj):
        return f"{obj.first_name} {obj.last_name}".strip()

    def get_role(self, obj):
        return obtener_rol(obj)

    def get_roleLabel(self, obj):
        rol = obtener_rol(obj)
        return ROL_LABELS.get(rol, rol)

    def get_displayRut(self, obj):
        funcionario = getattr(obj, 'funcionario', None)
        return formatear_rut(funcionario.rut) if funcionario else ''


class UsuarioResumenSerializer(serializers.ModelSerializer):
    """Resumen embebido en intervenciones y comentarios"""
    fullName = serializers.SerializerMethodField()
    role = serializers.SerializerMethodField()
    position = serializers.CharField(source='funcionario.cargo', read_only=True, default=None)

    class Meta:
        model = User
        fields = ['id', 'fullName', 'role', 'email', 'position']

    def get_fullName(self, obj):
        return f"{obj.first_name} {obj.last_name}".strip()

    def get_role(self, obj):
        return obtener_rol(obj)


class UsuarioWriteSerializer(serializers.Serializer):
    """Alta y edición de funcionarios; las reglas viven en validators.py"""
    firstName = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    lastName = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    rut = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    role = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    password = serializers.CharField(required=False, allow_blank=True, allow_null=True, write_only=True)
    staffType = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    department = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    position = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    birthDate = serializers.DateField(required=False, allow_null=True)
    hireDate = serializers.DateField(required=False, allow_null=True)
    isActive = serializers.BooleanField(required=False)

    CAMPOS_FUNCIONARIO = {
        'staffType': 'tipo_personal',
        'department': 'departamento',
        'position': 'cargo',
        'phone': 'telefono',
        'birthDate': 'fecha_nacimiento',
        'hireDate': 'fecha_ingreso',
    }

    def validate(self, attrs):
        errores = validar_usuario(attrs, es_actualizacion=self.instance is not None)
        if errores:
            raise serializers.ValidationError(errores)
        return attrs

    def _datos_funcionario(self, validated_data):
        datos = {
            campo_modelo: validated_data[campo]
            for campo, campo_modelo in self.CAMPOS_FUNCIONARIO.items()
            if campo in validated_data
        }
        if validated_data.get('rut'):
            datos['rut'] = normalizar_rut(validated_data['rut'])
        return datos

    def create(self, validated_data):
        email = validated_data['email'].strip().lower()
        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=email,
                    email=email,
                    password=validated_data['password'],
                    first_name=validated_data['firstName'].strip(),
                    last_name=validated_data['lastName'].strip(),
                    is_active=validated_data.get('isActive', True),
                )
                Funcionario.objects.create(usuario=user, **self._datos_funcionario(validated_data))
                RoleManager.asignar_rol(user, validated_data['role'])
        except IntegrityError:
            raise ErrorDuplicado('Ya existe un usuario con ese email o RUT')
        return user

    def update(self, instance, validated_data):
        try:
            with transaction.atomic():
                if 'firstName' in validated_data:
                    instance.first_name = validated_data['firstName'].strip()
                if 'lastName' in validated_data:
                    instance.last_name = validated_data['lastName'].strip()
                if 'email' in validated_data:
                    instance.email = validated_data['email'].strip().lower()
                    instance.username = instance.email
                if 'isActive' in validated_data:
                    instance.is_active = validated_data['isActive']
                if validated_data.get('password'):
                    instance.set_password(validated_data['password'])
                instance.save()

                datos = self._datos_funcionario(validated_data)
                if datos:
                    Funcionario.objects.update_or_create(usuario=instance, defaults=datos)

                if validated_data.get('role'):
                    RoleManager.asignar_rol(instance, validated_data['role'])
        except IntegrityError:
            raise ErrorDuplicado('Ya existe un usuario con ese email o RUT')
        return instance
