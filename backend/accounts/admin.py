from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "first_name", "last_name",
                    "role", "is_active", "date_joined")
    search_fields = ("username", "email", "first_name", "last_name")
    list_filter = ("is_active", "is_staff", "role")
    ordering = ("date_joined",)
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Civic Profile", {"fields": ("role", "mobile", "address")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Civic Profile", {"fields": ("email", "first_name", "last_name",
                                      "role", "mobile", "address")}),
    )
