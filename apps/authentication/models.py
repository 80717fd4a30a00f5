"""
Authentication models.
Operator is the custom User: back-office staff who book, dispatch and bill.
"""

import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager


class OperatorManager(BaseUserManager):
    def create_user(self, email, password=None, **extra):
        if not email:
            raise ValueError("Email is required.")
        user = self.model(email=self.normalize_email(email), **extra)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password, **extra):
        extra.setdefault("is_staff", True)
        extra.setdefault("is_superuser", True)
        extra.setdefault("role", Operator.Role.ADMIN)
        return self.create_user(email, password, **extra)


class Operator(AbstractBaseUser, PermissionsMixin):
    """Back-office account, identified by email."""

    class Role(models.TextChoices):
        ADMIN = "ADMIN", "Administrator"
        STAFF = "STAFF", "Branch Staff"

    id         = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email      = models.EmailField(unique=True)
    full_name  = models.CharField(max_length=120)
    mobile     = models.CharField(max_length=15, blank=True)
    role       = models.CharField(max_length=8, choices=Role.choices, default=Role.STAFF)
    branch     = models.CharField(max_length=80, blank=True)
    is_active  = models.BooleanField(default=True)
    is_staff   = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD  = "email"
    REQUIRED_FIELDS = ["full_name"]

    objects = OperatorManager()

    class Meta:
        verbose_name = "Operator"
        indexes = [models.Index(fields=["role"], name="auth_operator_role_idx")]

    def __str__(self):
        return f"{self.full_name} ({self.role})"

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN or self.is_superuser
