from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.utils import timezone


class xx_UserManager(BaseUserManager):
    def create_user(self, username, password=None, role='user', **extra_fields):
        if not username:
            raise ValueError('Username is required')

        email = extra_fields.pop('email', None)
        if email:
            email = self.normalize_email(email).lower()

        user = self.model(username=username.lower(), role=role, email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password, **extra_fields):
        user = self.create_user(username, password, role='admin', **extra_fields)
        user.is_superuser = True
        user.is_staff = True
        user.save(using=self._db)
        return user


class xx_User(AbstractBaseUser, PermissionsMixin):
    """Account that creates tasks, gets tasks assigned and receives notifications"""
    ROLE_CHOICES = (('admin', 'Admin'), ('user', 'User'))
    username = models.CharField(max_length=150, unique=True)
    name = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(max_length=255, unique=True, null=True, blank=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='user')
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = ['email']

    objects = xx_UserManager()

    def __str__(self):
        return self.username

    class Meta:
        db_table = 'XX_USER_XX'
        ordering = ['username']
