from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from rest_framework import serializers

from apps.users.serializers import UsuarioSerializer
from core.exceptions import ErrorAutenticacion
from .models import obtener_rol
from .permissions import permisos_de_rol


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False)
    username = serializers.CharField(required=False)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identificador = (attrs.get('email') or attrs.get('username') or '').strip().lower()
        password = attrs.get('password')

        if identificador and password:
            user = authenticate(username=identificador, password=password)
            if not user:
                # Puede existir con un username distinto del email
                candidato = User.objects.filter(email__iexact=identificador).first()
                if candidato:
                    user = authenticate(username=candidato.username, password=password)
            if not user:
                raise ErrorAutenticacion('Credenciales inválidas')
            if not user.is_active:
                raise ErrorAutenticacion('Usuario inactivo')
            attrs['user'] = user
            return attrs
        else:
            raise serializers.ValidationError('Debe proporcionar email y password')


class PerfilSerializer(UsuarioSerializer):
    """Usuario de la sesión con su conjunto de permisos derivado del rol"""
    permissions = serializers.SerializerMethodField()

    class Meta(UsuarioSerializer.Meta):
        fields = UsuarioSerializer.Meta.fields + ['permissions']

    def get_permissions(self, obj):
        return permisos_de_rol(obtener_rol(obj))


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()
