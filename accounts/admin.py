from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User, Notification


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    # show profile fields in admin
    fieldsets = DjangoUserAdmin.fieldsets + (
        ("Profile", {"fields": ("headline", "location", "phone", "phone_public")}),
    )
    list_display = ("username", "email", "headline", "is_active", "is_staff")


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "title", "is_read", "created_at")
    list_filter = ("is_read",)
