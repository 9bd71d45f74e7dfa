# apps/account/serializers.py
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from apps.users.models import Usuario, celular_validator


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class RefreshTokenSerializer(serializers.Serializer):
    refreshToken = serializers.CharField()


class LogoutSerializer(serializers.Serializer):
    refreshToken = serializers.CharField(required=False, allow_blank=True)


class CambioPasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(trim_whitespace=False)
    newPassword = serializers.CharField(trim_whitespace=False)

    def validate_newPassword(self, value):
        validate_password(value, user=self.context.get("usuario"))
        return value


class RegistroSerializer(serializers.Serializer):
    nombres = serializers.CharField(max_length=150)
    apellidos = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=191)
    celular = serializers.CharField(max_length=20, required=False, allow_blank=True,
                                    validators=[celular_validator])
    password = serializers.CharField(trim_whitespace=False)
    rolCodigo = serializers.CharField(required=False, allow_blank=True)

    def validate_email(self, value):
        value = value.strip().lower()
        if Usuario.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("El email ya está registrado")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value


class UsuarioSesionSerializer(serializers.ModelSerializer):
    """Datos del usuario devueltos en login."""
    nombres = serializers.CharField(source="first_name")
    apellidos = serializers.CharField(source="last_name")
    roles = serializers.ListField(source="codigos_roles", child=serializers.CharField())

    class Meta:
        model = Usuario
        fields = ["id", "nombres", "apellidos", "email", "roles"]
