from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_CHOICES = [
        ("customer", "Customer"),
        ("warehouse_admin", "Warehouse Admin"),
        ("admin", "Admin"),
        ("super_admin", "Super Admin"),
    ]

    STATUS_CHOICES = [
        ("active", "Active"),
        ("inactive", "Inactive"),
    ]

    STAFF_ROLES = ("warehouse_admin", "admin", "super_admin")

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="customer")
    suite_number = models.CharField(max_length=20, unique=True, null=True, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="active")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        if self.suite_number:
            return f"{self.username} [{self.suite_number}]"
        return f"{self.username} ({self.get_role_display()})"

    @property
    def full_name(self):
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username

    @property
    def is_customer(self):
        return self.role == "customer"

    @property
    def is_warehouse_staff(self):
        return self.role in self.STAFF_ROLES

    @property
    def is_active_account(self):
        return self.status == "active"
