from django.core.exceptions import ValidationError
import re

class ComplexPasswordValidator:
    """
    La contraseña debe tener al menos una minúscula, una mayúscula y un número.
    Usado por register, change-password y usuarios vía AUTH_PASSWORD_VALIDATORS.
    """
    def validate(self, password, user=None):
        if not re.search(r'[a-z]', password or ""):
            raise ValidationError("La contraseña debe contener al menos una letra minúscula.", code='password_no_lower')
        if not re.search(r'[A-Z]', password or ""):
            raise ValidationError("La contraseña debe contener al menos una letra mayúscula.", code='password_no_upper')
        if not re.search(r'[0-9]', password or ""):
            raise ValidationError("La contraseña debe contener al menos un número.", code='password_no_number')

    def get_help_text(self):
        return "Su contraseña debe contener al menos una letra minúscula, una mayúscula y un número."
