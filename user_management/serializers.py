from rest_framework import serializers
from django.contrib.auth import authenticate
from .models import xx_User as User
import re


class RegisterSerializer(serializers.ModelSerializer):
    # Declared explicitly so uniqueness is checked case-insensitively below
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=255)

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'email', 'password']
        extra_kwargs = {
            'password': {'write_only': True},
            'name': {'required': True, 'allow_blank': False},
        }

    def validate_username(self, value):
        value = value.lower()
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("User already exists.")
        return value

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("User already exists.")
        return value

    def validate_password(self, value):
        """
        Enforce strong password:
        - At least 8 characters
        - Contains uppercase, lowercase, digit, and special character
        """
        array_of_errors = []
        if len(value) < 8:
            array_of_errors.append("Password must be at least 8 characters long.")
        if not re.search(r'[A-Z]', value):
            array_of_errors.append("Must contain at least one uppercase letter.")
        if not re.search(r'[a-z]', value):
            array_of_errors.append("Must contain at least one lowercase letter.")
        if not re.search(r'[0-9]', value):
            array_of_errors.append("Must contain at least one digit.")
        if not re.search(r'[!@_#$%^&*(),.?":{}|<>]', value):
            array_of_errors.append("Must contain at least one special character.")

        if array_of_errors:
            raise serializers.ValidationError(array_of_errors)

        return value

    def create(self, validated_data):
        return User.objects.create_user(**validated_data)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        data['username'] = data['username'].lower()
        user = authenticate(**data)
        if user and user.is_active:
            return user
        raise serializers.ValidationError("Invalid credentials")


class UserSummarySerializer(serializers.ModelSerializer):
    """Public view of a user, embedded in task payloads and the user directory"""

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'email']
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'email', 'createdAt']
        read_only_fields = ['id', 'username', 'createdAt']

    def validate_email(self, value):
        value = value.lower()
        clash = User.objects.filter(email=value)
        if self.instance is not None:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError("Email is already in use.")
        return value
